"""Party sync coordinator.

Once a guest is approved, keeps a read model of the party fresh by
re-fetching party, roster, acts and the guest's own vote on a fixed
interval. A closed party keeps refreshing, closing only changes which
view the guest should be sent to.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Literal

import logfire
from pydantic import Field

from eurovote.adapter.api import ActsApi, GuestsApi, PartiesApi, VotesApi
from eurovote.adapter.error import GatewayError, NotFoundError
from eurovote.application.scheduling import ScheduledTask, TaskScope
from eurovote.config import PollingSettings
from eurovote.domain.error import NotJoinedError
from eurovote.domain.model import Act, Guest, PublicParty, Vote
from eurovote.domain.repository import SessionStore
from eurovote.domain.service import (
    VoteEntry,
    decode_assignment,
    is_complete,
    project_vote_entries,
)
from eurovote.domain.value import ActId, GuestId, PartyId
from eurovote.domain.value.common import ValueObject


class PartySnapshot(ValueObject):
    """Consistent view of a party at one point in time."""

    party: PublicParty
    guest_id: GuestId
    guests: list[Guest]
    acts: list[Act]  # ascending running order
    vote: Vote | None = None
    vote_entries: list[VoteEntry] = Field(default_factory=list)  # 12 first
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def voting_open(self) -> bool:
        return self.party.is_active

    @property
    def next_view(self) -> Literal["vote", "results"]:
        """Where to send the guest: voting while open, results once closed."""
        return "vote" if self.voting_open else "results"

    @property
    def has_voted(self) -> bool:
        return self.vote is not None

    @property
    def vote_complete(self) -> bool:
        return self.vote is not None and is_complete(decode_assignment(self.vote.votes))

    @property
    def act_by_id(self) -> dict[ActId, Act]:
        return {act.id: act for act in self.acts}


def build_snapshot(
    party: PublicParty,
    guest_id: GuestId,
    guests: list[Guest],
    acts: list[Act],
    vote: Vote | None,
) -> PartySnapshot:
    """Assemble the read model from raw API data.

    Only approved guests are kept, acts are put in running order and the
    vote is projected from 12 points down, skipping unassigned values.
    """
    ordered_acts = sorted(acts, key=lambda act: act.running_order)
    entries = (
        project_vote_entries(decode_assignment(vote.votes), ordered_acts)
        if vote is not None
        else []
    )
    return PartySnapshot(
        party=party,
        guest_id=guest_id,
        guests=[guest for guest in guests if guest.is_approved],
        acts=ordered_acts,
        vote=vote,
        vote_entries=entries,
    )


async def _gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Like ``asyncio.gather``, but the first failure cancels the siblings.

    The first exception is raised as is, once every sibling has stopped.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


Listener = Callable[[PartySnapshot], None]


class PartySyncCoordinator:
    """Periodic refresh of the party read model for an approved guest.

    Reads the session record once on ``start``. Owns the snapshot and
    nothing else.
    """

    def __init__(
        self,
        parties_api: PartiesApi,
        guests_api: GuestsApi,
        acts_api: ActsApi,
        votes_api: VotesApi,
        session_store: SessionStore,
        settings: PollingSettings,
    ) -> None:
        self.parties_api = parties_api
        self.guests_api = guests_api
        self.acts_api = acts_api
        self.votes_api = votes_api
        self.session_store = session_store
        self.settings = settings

        self.code: str | None = None
        self.guest_id: GuestId | None = None
        self.snapshot: PartySnapshot | None = None
        self.last_error: Exception | None = None
        self.cycles = 0

        self._scope: TaskScope | None = None
        self._loop: ScheduledTask | None = None
        self._listeners: list[Listener] = []
        self._published = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._loop is not None and not self._loop.cancelled

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(snapshot)`` on every published snapshot.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def start(self, code: str) -> None:
        """Start syncing the party behind ``code``.

        The first cycle runs immediately.

        Raises:
            NotJoinedError: If this client never joined the party, the
                caller should send the guest to the join flow instead
        """
        await self.close()
        await self.load(code)

        self._scope = TaskScope(f"party-sync:{code}")
        self._loop = self._scope.every(
            self.settings.party_sync_interval, self._cycle, name="party-sync"
        )
        logfire.info("Party sync started", code=code, guest_id=self.guest_id)

    async def load(self, code: str) -> GuestId:
        """Bind to the guest session of ``code`` without scheduling anything.

        Lets callers run a single ``refresh`` instead of the loop.

        Raises:
            NotJoinedError: If this client never joined the party
        """
        guest_id = await self.session_store.get(code)
        if guest_id is None:
            raise NotJoinedError(code)

        self.code = code
        self.guest_id = guest_id
        return guest_id

    async def refresh(self) -> PartySnapshot:
        """Run one sync cycle and publish its snapshot.

        Raises:
            NotJoinedError: If ``start`` was never called
            GatewayError: Any failure except a missing own vote
        """
        if self.code is None or self.guest_id is None:
            raise NotJoinedError(self.code or "")

        code, guest_id = self.code, self.guest_id
        with logfire.span("party_sync_cycle", code=code):
            party = await self.parties_api.get_party_by_code(code)
            guests, acts = await _gather_or_cancel(
                self.guests_api.list_approved_guests(party.id, guest_id),
                self.acts_api.list_acts(party.event_type),
            )
            vote = await self._fetch_own_vote(party.id, guest_id)

        snapshot = build_snapshot(party, guest_id, guests, acts, vote)
        self._publish(snapshot)
        return snapshot

    async def wait_for_snapshot(self) -> PartySnapshot:
        """Wait for the next published snapshot."""
        published = self._published
        await published.wait()
        assert self.snapshot is not None
        return self.snapshot

    async def close(self) -> None:
        """Stop syncing and release the timer. Safe to call repeatedly."""
        scope, self._scope = self._scope, None
        if self._loop is not None:
            self._loop.cancel()
        if scope is not None:
            await scope.close()
            logfire.info("Party sync stopped", code=self.code)

    async def _fetch_own_vote(self, party_id: PartyId, guest_id: GuestId) -> Vote | None:
        try:
            return await self.votes_api.get_guest_vote(party_id, guest_id)
        except NotFoundError:
            return None

    async def _cycle(self) -> None:
        try:
            await self.refresh()
        except GatewayError as e:
            self.last_error = e
            logfire.warn(
                "Party sync cycle failed, keeping last snapshot",
                code=self.code,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _publish(self, snapshot: PartySnapshot) -> None:
        self.snapshot = snapshot
        self.last_error = None
        self.cycles += 1

        for listener in list(self._listeners):
            listener(snapshot)

        published, self._published = self._published, asyncio.Event()
        published.set()
