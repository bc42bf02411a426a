"""Unit tests for SubmitVoteUseCase."""

import pytest

from eurovote.adapter.error import ConflictError
from eurovote.adapter.gateway.inmemory import InMemoryPartyBackend
from eurovote.application.usecase.vote import SubmitVoteRequest, SubmitVoteUseCase
from eurovote.domain.error import ValidationError
from eurovote.domain.service import POINT_VALUES
from eurovote.domain.value import GuestStatus
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def approved_guest(backend: InMemoryPartyBackend) -> tuple[str, str]:
    party = backend.create_party(code="ABC123")
    guest = backend.add_guest(party["id"], "Ada", GuestStatus.APPROVED)
    return party["id"], guest["id"]


def full_assignment() -> dict[int, str]:
    return {
        points: f"act-grandfinal-{i}" for i, points in enumerate(POINT_VALUES, start=1)
    }


class TestSubmitVoteUseCase:
    """Tests for SubmitVoteUseCase."""

    @pytest.mark.asyncio
    async def test_first_submission_posts(self, unit_env):
        """Should create the vote with a POST."""
        # Arrange
        backend = await unit_env.get(InMemoryPartyBackend)
        submit_vote = await unit_env.get(SubmitVoteUseCase)
        party_id, guest_id = await approved_guest(backend)

        # Act
        response = await submit_vote.execute(
            SubmitVoteRequest(
                party_id=party_id, guest_id=guest_id, assignment=full_assignment()
            )
        )

        # Assert
        assert response.complete
        assert not response.updated
        assert response.votes["12"] == "act-grandfinal-1"
        assert backend.calls("submit_vote") == 1
        assert backend.calls("update_vote") == 0

    @pytest.mark.asyncio
    async def test_update_puts(self, unit_env):
        """Should replace an existing vote with a PUT."""
        backend = await unit_env.get(InMemoryPartyBackend)
        submit_vote = await unit_env.get(SubmitVoteUseCase)
        party_id, guest_id = await approved_guest(backend)
        backend.set_vote(party_id, guest_id, {"12": "act-grandfinal-2"})
        assignment = full_assignment()
        assignment[12], assignment[10] = assignment[10], assignment[12]

        response = await submit_vote.execute(
            SubmitVoteRequest(
                party_id=party_id,
                guest_id=guest_id,
                assignment=assignment,
                update=True,
            )
        )

        assert response.updated
        assert response.votes["12"] == "act-grandfinal-2"
        assert backend.calls("update_vote") == 1

    @pytest.mark.asyncio
    async def test_partial_vote_reported_incomplete(self, unit_env):
        """Should send partial votes and report them incomplete."""
        backend = await unit_env.get(InMemoryPartyBackend)
        backend.require_complete_votes = False
        submit_vote = await unit_env.get(SubmitVoteUseCase)
        party_id, guest_id = await approved_guest(backend)

        response = await submit_vote.execute(
            SubmitVoteRequest(
                party_id=party_id,
                guest_id=guest_id,
                assignment={12: "act-grandfinal-1", 1: "act-grandfinal-2"},
            )
        )

        assert not response.complete
        assert response.votes == {"12": "act-grandfinal-1", "1": "act-grandfinal-2"}

    @pytest.mark.asyncio
    async def test_duplicate_act_never_sent(self, unit_env):
        """Should reject an act given two values before any request."""
        backend = await unit_env.get(InMemoryPartyBackend)
        submit_vote = await unit_env.get(SubmitVoteUseCase)
        party_id, guest_id = await approved_guest(backend)

        with pytest.raises(ValidationError):
            await submit_vote.execute(
                SubmitVoteRequest(
                    party_id=party_id,
                    guest_id=guest_id,
                    assignment={12: "act-grandfinal-1", 10: "act-grandfinal-1"},
                )
            )

        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_second_post_conflicts(self, unit_env):
        """Should surface the server refusing a second POST."""
        backend = await unit_env.get(InMemoryPartyBackend)
        submit_vote = await unit_env.get(SubmitVoteUseCase)
        party_id, guest_id = await approved_guest(backend)
        request = SubmitVoteRequest(
            party_id=party_id, guest_id=guest_id, assignment=full_assignment()
        )
        await submit_vote.execute(request)

        with pytest.raises(ConflictError, match="vote already submitted"):
            await submit_vote.execute(request)
