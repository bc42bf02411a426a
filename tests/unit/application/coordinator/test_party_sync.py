"""Unit tests for PartySyncCoordinator."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from eurovote.adapter.error import (
    NotFoundError,
    ServerFailureError,
    TransportFailureError,
)
from eurovote.application.coordinator import PartySyncCoordinator, build_snapshot
from eurovote.config import PollingSettings
from eurovote.domain.error import NotJoinedError
from eurovote.domain.value import GuestId, GuestStatus, PartyStatus
from eurovote.persistence.session import InMemorySessionStore
from tests.conftest import make_act, make_guest, make_party, make_vote

FAST = PollingSettings(party_sync_interval=0.01)


def build_coordinator(party=None, acts=None, vote=None, joined=True):
    """Coordinator over mocked APIs with guest-1 recorded for ABC123."""
    parties_api = AsyncMock()
    guests_api = AsyncMock()
    acts_api = AsyncMock()
    votes_api = AsyncMock()

    parties_api.get_party_by_code.return_value = party or make_party()
    guests_api.list_approved_guests.return_value = [
        make_guest("guest-1", GuestStatus.APPROVED, "Ada"),
        make_guest("guest-2", GuestStatus.PENDING, "Bob"),
    ]
    acts_api.list_acts.return_value = acts if acts is not None else [make_act(1)]
    if vote is None:
        votes_api.get_guest_vote.side_effect = NotFoundError(404, "Not Found", "no vote")
    else:
        votes_api.get_guest_vote.return_value = vote

    records = {"ABC123": GuestId("guest-1")} if joined else {}
    coordinator = PartySyncCoordinator(
        parties_api=parties_api,
        guests_api=guests_api,
        acts_api=acts_api,
        votes_api=votes_api,
        session_store=InMemorySessionStore(records),
        settings=FAST,
    )
    return coordinator, parties_api, guests_api, votes_api


class TestBuildSnapshot:
    """Tests for the read model assembly."""

    def test_acts_in_running_order(self):
        """Should sort acts by running order whatever the server order."""
        snapshot = build_snapshot(
            make_party(), GuestId("guest-1"), [], [make_act(2), make_act(1)], None
        )

        assert [a.running_order for a in snapshot.acts] == [1, 2]
        assert not snapshot.has_voted
        assert snapshot.vote_entries == []

    def test_closed_party_with_partial_vote(self):
        """Should flag voting closed and project the vote from 12 down."""
        snapshot = build_snapshot(
            make_party(status=PartyStatus.CLOSED),
            GuestId("guest-1"),
            [],
            [make_act(1, "Sweden"), make_act(2, "Finland")],
            make_vote({"10": "act-2", "12": "act-1"}),
        )

        assert not snapshot.voting_open
        assert snapshot.next_view == "results"
        assert snapshot.has_voted
        assert not snapshot.vote_complete
        assert [(e.points, e.label) for e in snapshot.vote_entries] == [
            (12, "Sweden"),
            (10, "Finland"),
        ]

    def test_only_approved_guests(self):
        """Should keep approved guests only."""
        snapshot = build_snapshot(
            make_party(),
            GuestId("guest-1"),
            [
                make_guest("guest-1", GuestStatus.APPROVED),
                make_guest("guest-2", GuestStatus.REJECTED),
            ],
            [],
            None,
        )

        assert [g.id for g in snapshot.guests] == ["guest-1"]
        assert snapshot.voting_open
        assert snapshot.next_view == "vote"


class TestPartySync:
    """Tests for the sync loop."""

    @pytest.mark.asyncio
    async def test_refresh_fetches_everything(self):
        """Should combine party, roster, acts and the own vote."""
        coordinator, parties_api, guests_api, votes_api = build_coordinator(
            acts=[make_act(2), make_act(1)],
            vote=make_vote({"12": "act-2"}),
        )

        await coordinator.load("ABC123")
        snapshot = await coordinator.refresh()

        parties_api.get_party_by_code.assert_awaited_once_with("ABC123")
        guests_api.list_approved_guests.assert_awaited_once_with("party-1", "guest-1")
        votes_api.get_guest_vote.assert_awaited_once_with("party-1", "guest-1")
        assert [g.username for g in snapshot.guests] == ["Ada"]
        assert [a.id for a in snapshot.acts] == ["act-1", "act-2"]
        assert snapshot.act_by_id["act-2"].running_order == 2
        assert snapshot.vote_entries[0].act_id == "act-2"
        assert coordinator.snapshot is snapshot

    @pytest.mark.asyncio
    async def test_missing_vote_is_none(self):
        """Should treat a 404 on the own vote as not voted yet."""
        coordinator, *_ = build_coordinator()

        await coordinator.load("ABC123")
        snapshot = await coordinator.refresh()

        assert snapshot.vote is None
        assert not snapshot.has_voted

    @pytest.mark.asyncio
    async def test_vote_lookup_failure_propagates(self):
        """Should raise anything but a 404 on the own vote and publish nothing."""
        coordinator, _, _, votes_api = build_coordinator()
        votes_api.get_guest_vote.side_effect = ServerFailureError(
            500, "Internal Server Error", "boom"
        )

        await coordinator.load("ABC123")
        with pytest.raises(ServerFailureError):
            await coordinator.refresh()

        assert coordinator.snapshot is None
        assert coordinator.cycles == 0

    @pytest.mark.asyncio
    async def test_vote_lookup_failure_in_loop_keeps_snapshot(self):
        """Should record a failed vote lookup and keep the previous snapshot."""
        # Arrange
        coordinator, _, _, votes_api = build_coordinator()
        release = asyncio.Event()
        calls = 0

        async def get_guest_vote(party_id, guest_id):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise ServerFailureError(500, "Internal Server Error", "boom")
            if calls == 3:
                await release.wait()
            raise NotFoundError(404, "Not Found", "no vote")

        votes_api.get_guest_vote.side_effect = get_guest_vote

        # Act
        await coordinator.start("ABC123")
        first = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        await asyncio.wait_for(_until(lambda: calls >= 3), timeout=1)
        error = coordinator.last_error
        kept = coordinator.snapshot
        release.set()
        await coordinator.close()

        # Assert
        assert isinstance(error, ServerFailureError)
        assert error.status == 500
        assert kept is first

    @pytest.mark.asyncio
    async def test_failed_roster_cancels_acts_fetch(self):
        """Should stop the acts request when the roster request fails."""
        coordinator, _, guests_api, _ = build_coordinator()
        acts_started = asyncio.Event()
        acts_cancelled = False

        async def list_acts(event_type):
            nonlocal acts_cancelled
            acts_started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                acts_cancelled = True
                raise

        async def list_approved_guests(party_id, guest_id):
            await acts_started.wait()
            raise ServerFailureError(500, "Internal Server Error", "boom")

        coordinator.acts_api.list_acts.side_effect = list_acts
        guests_api.list_approved_guests.side_effect = list_approved_guests

        await coordinator.load("ABC123")
        with pytest.raises(ServerFailureError):
            await asyncio.wait_for(coordinator.refresh(), timeout=1)

        assert acts_cancelled

    @pytest.mark.asyncio
    async def test_not_joined(self):
        """Should refuse to sync a party without a session record."""
        coordinator, parties_api, *_ = build_coordinator(joined=False)

        with pytest.raises(NotJoinedError):
            await coordinator.start("ABC123")

        assert not coordinator.running
        parties_api.get_party_by_code.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_publishes_snapshots(self):
        """Should publish immediately and keep refreshing."""
        coordinator, parties_api, *_ = build_coordinator()
        published = []
        coordinator.subscribe(published.append)

        await coordinator.start("ABC123")
        first = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        second = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        await coordinator.close()

        assert first.party.code == "ABC123"
        assert second is not first
        assert len(published) >= 2
        assert parties_api.get_party_by_code.await_count >= 2

    @pytest.mark.asyncio
    async def test_failed_cycle_keeps_last_snapshot(self):
        """Should record the error, keep the snapshot and recover next cycle."""
        # Arrange
        coordinator, parties_api, *_ = build_coordinator()
        party = make_party()
        release = asyncio.Event()
        calls = 0

        async def get_party_by_code(code):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise TransportFailureError(f"GET /api/parties/{code} failed")
            if calls == 3:
                await release.wait()
            return party

        parties_api.get_party_by_code.side_effect = get_party_by_code

        # Act
        await coordinator.start("ABC123")
        first = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        await asyncio.wait_for(_until(lambda: calls >= 3), timeout=1)
        error = coordinator.last_error
        kept = coordinator.snapshot
        release.set()
        recovered = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        await coordinator.close()

        # Assert
        assert isinstance(error, TransportFailureError)
        assert kept is first
        assert recovered is not first
        assert coordinator.last_error is None
        assert coordinator.cycles >= 2

    @pytest.mark.asyncio
    async def test_closed_party_keeps_syncing(self):
        """Should keep polling after voting ends."""
        coordinator, parties_api, *_ = build_coordinator(
            party=make_party(status=PartyStatus.CLOSED)
        )

        await coordinator.start("ABC123")
        await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)
        snapshot = await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)

        assert snapshot.next_view == "results"
        assert coordinator.running
        await coordinator.close()

    @pytest.mark.asyncio
    async def test_close_stops_loop(self):
        """Should release the timer and make no more requests."""
        coordinator, parties_api, *_ = build_coordinator()
        await coordinator.start("ABC123")
        await asyncio.wait_for(coordinator.wait_for_snapshot(), timeout=1)

        await coordinator.close()
        calls = parties_api.get_party_by_code.await_count
        await asyncio.sleep(0.05)

        assert not coordinator.running
        assert parties_api.get_party_by_code.await_count == calls


async def _until(condition) -> None:
    """Yield to the loop until ``condition()`` holds."""
    while not condition():
        await asyncio.sleep(0.001)
