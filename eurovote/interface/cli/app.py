"""Command line client for guests.

    eurovote join ABC123 "Ada"      # send a join request, wait for the moderator
    eurovote watch ABC123           # follow the party until interrupted
    eurovote vote ABC123 12=act-1 10=act-7
    eurovote results ABC123
    eurovote leave ABC123           # forget the local guest record
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import click
from dishka import AsyncContainer

from eurovote.adapter.api import PartiesApi, VotesApi
from eurovote.adapter.error import AdapterError, NotFoundError
from eurovote.application.coordinator import (
    GuestLifecycleCoordinator,
    GuestState,
    PartySnapshot,
    PartySyncCoordinator,
)
from eurovote.application.usecase.party import GetResultsRequest, GetResultsUseCase
from eurovote.application.usecase.vote import SubmitVoteRequest, SubmitVoteUseCase
from eurovote.config import Settings
from eurovote.domain.error import DomainError, NotJoinedError, ValidationError
from eurovote.domain.repository import SessionStore
from eurovote.domain.service import POINT_VALUES
from eurovote.domain.value import JoinCode
from eurovote.util.di.container import create_container
from eurovote.util.error import UtilError
from eurovote.util.logging import setup_logging
from eurovote.util.observability import configure_logfire

Command = Callable[[AsyncContainer], Awaitable[Any]]


def parse_points(pairs: tuple[str, ...]) -> dict[int, str]:
    """Parse ``POINTS=ACT`` arguments into an assignment.

    Raises:
        click.BadParameter: On malformed pairs or a point value given twice
    """
    assignment: dict[int, str] = {}
    for pair in pairs:
        points_text, sep, act_id = pair.partition("=")
        if not sep or not act_id.strip():
            raise click.BadParameter(f"expected POINTS=ACT, got {pair!r}")
        try:
            points = int(points_text)
        except ValueError:
            raise click.BadParameter(f"{points_text!r} is not a number") from None
        if points not in POINT_VALUES:
            allowed = ", ".join(str(p) for p in POINT_VALUES)
            raise click.BadParameter(f"{points} is not one of {allowed}")
        if points in assignment:
            raise click.BadParameter(f"{points} points given twice")
        assignment[points] = act_id.strip()
    return assignment


def normalize_code(code: str) -> str:
    try:
        return str(JoinCode.parse(code))
    except ValidationError as e:
        raise click.BadParameter(f"{code!r} is not a party code") from e


def run(command: Command) -> Any:
    """Run ``command`` inside a fresh container and request scope.

    Domain, adapter and configuration errors become a one-line message and
    a non-zero exit status.
    """

    async def _main() -> Any:
        container = create_container()
        try:
            async with container() as request_container:
                return await command(request_container)
        finally:
            await container.close()

    try:
        return asyncio.run(_main())
    except NotJoinedError as e:
        raise click.ClickException(
            f"You have not joined party {e.code} from this device. "
            f"Run `eurovote join {e.code} NAME` first."
        ) from e
    except (DomainError, AdapterError, UtilError) as e:
        raise click.ClickException(str(e)) from e


def print_snapshot(snapshot: PartySnapshot) -> None:
    party = snapshot.party
    click.echo(f"\n{party.name} [{party.code}] {party.event_type.value}")
    click.echo("Voting open" if snapshot.voting_open else "Voting closed, see results")
    click.echo(f"Guests: {', '.join(g.username for g in snapshot.guests) or '-'}")

    click.echo("Acts:")
    for act in snapshot.acts:
        click.echo(f"  {act.running_order:>2}. {act.country} - {act.artist}, {act.song} ({act.id})")

    if snapshot.vote_entries:
        click.echo("Your vote:")
        for entry in snapshot.vote_entries:
            click.echo(f"  {entry.points:>2} -> {entry.label}")
    elif snapshot.voting_open:
        click.echo("You have not voted yet.")


@click.group(help="Join a Eurovision party and vote from the terminal.")
@click.option("--debug", is_flag=True, help="Verbose logging.")
def cli(debug: bool) -> None:
    settings = Settings()
    if debug:
        settings = settings.model_copy(update={"debug": True})
    setup_logging(settings)
    configure_logfire(settings)


@cli.command(help="Ask to join a party and wait for the moderator's decision.")
@click.argument("code")
@click.argument("name", required=False)
def join(code: str, name: str | None) -> None:
    """Without NAME, resume waiting on an earlier request from this device."""
    code = normalize_code(code)

    async def _join(container: AsyncContainer) -> GuestState:
        lifecycle = await container.get(GuestLifecycleCoordinator)

        def _announce(previous: GuestState, state: GuestState) -> None:
            if state == GuestState.PENDING:
                click.echo("Waiting for the party admin to let you in...")

        lifecycle.subscribe(_announce)

        if name is None:
            await lifecycle.resume(code)
        else:
            await lifecycle.submit(code, name)

        state = await lifecycle.wait_until_settled()
        if lifecycle.message:
            click.echo(lifecycle.message, err=state != GuestState.APPROVED)
        return state

    state = run(_join)
    if state != GuestState.APPROVED:
        raise SystemExit(1)
    click.echo(f"You're in! Run `eurovote watch {code}` to follow the party.")


@cli.command(help="Follow a party you have joined.")
@click.argument("code")
@click.option("--once", is_flag=True, help="Print one snapshot and exit.")
def watch(code: str, once: bool) -> None:
    code = normalize_code(code)

    async def _watch(container: AsyncContainer) -> None:
        sync = await container.get(PartySyncCoordinator)

        if once:
            await sync.load(code)
            print_snapshot(await sync.refresh())
            return

        shown: str | None = None
        sync.subscribe(print_snapshot)
        await sync.start(code)
        while True:
            snapshot = await sync.wait_for_snapshot()
            if snapshot.next_view != shown:
                shown = snapshot.next_view
                if shown == "results":
                    click.echo(f"Voting has ended. Run `eurovote results {code}`.")

    try:
        run(_watch)
    except KeyboardInterrupt:
        click.echo("Stopped.")


@cli.command(help="Save your vote, e.g. `vote ABC123 12=act-1 10=act-7`.")
@click.argument("code")
@click.argument("points", nargs=-1, required=True)
def vote(code: str, points: tuple[str, ...]) -> None:
    code = normalize_code(code)
    assignment = parse_points(points)

    async def _vote(container: AsyncContainer) -> None:
        session_store = await container.get(SessionStore)
        guest_id = await session_store.get(code)
        if guest_id is None:
            raise NotJoinedError(code)

        parties_api = await container.get(PartiesApi)
        votes_api = await container.get(VotesApi)
        submit_vote = await container.get(SubmitVoteUseCase)

        party = await parties_api.get_party_by_code(code)
        if not party.is_active:
            raise click.ClickException("Voting has ended for this party.")

        try:
            await votes_api.get_guest_vote(party.id, guest_id)
            update = True
        except NotFoundError:
            update = False

        response = await submit_vote.execute(
            SubmitVoteRequest(
                party_id=party.id,
                guest_id=guest_id,
                assignment=assignment,
                update=update,
            )
        )

        click.echo("Vote updated." if response.updated else "Vote saved.")
        if not response.complete:
            click.echo(f"{len(response.votes)} of {len(POINT_VALUES)} point values given.")

    run(_vote)


@cli.command(help="Show the scoreboard of a party.")
@click.argument("code")
def results(code: str) -> None:
    code = normalize_code(code)

    async def _results(container: AsyncContainer) -> None:
        get_results = await container.get(GetResultsUseCase)
        response = await get_results.execute(GetResultsRequest(code=code))

        board = response.results
        title = "Final results" if response.final else "Results so far"
        click.echo(f"{title} for {board.party_name} ({board.total_voters} voters)")
        for result in board.results:
            click.echo(
                f"  {result.rank:>2}. {result.country:<20} {result.total_points:>4}"
                f"  {result.artist}, {result.song}"
            )

    run(_results)


@cli.command(help="Forget this device's guest record for a party.")
@click.argument("code")
def leave(code: str) -> None:
    code = normalize_code(code)

    async def _leave(container: AsyncContainer) -> None:
        session_store = await container.get(SessionStore)
        await session_store.delete(code)

    run(_leave)
    click.echo(f"Left party {code}.")
