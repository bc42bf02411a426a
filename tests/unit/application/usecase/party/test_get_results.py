"""Unit tests for GetResultsUseCase."""

import pytest

from eurovote.adapter.error import NotFoundError
from eurovote.adapter.gateway.inmemory import InMemoryPartyBackend
from eurovote.application.usecase.party import GetResultsRequest, GetResultsUseCase
from eurovote.domain.value import GuestStatus, PartyStatus
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetResultsUseCase:
    """Tests for GetResultsUseCase."""

    @pytest.mark.asyncio
    async def test_results_by_code(self, unit_env):
        """Should resolve the code and return the tally with the party state."""
        backend = await unit_env.get(InMemoryPartyBackend)
        get_results = await unit_env.get(GetResultsUseCase)
        party = backend.create_party("Final Night", code="ABC123")
        guest = backend.add_guest(party["id"], "Ada", GuestStatus.APPROVED)
        backend.set_vote(party["id"], guest["id"], {"12": "act-grandfinal-4"})

        response = await get_results.execute(GetResultsRequest(code="ABC123"))

        assert response.status == PartyStatus.ACTIVE
        assert not response.final
        assert response.results.party_name == "Final Night"
        assert response.results.results[0].country == "Italy"
        assert response.results.results[0].total_points == 12

    @pytest.mark.asyncio
    async def test_final_after_close(self, unit_env):
        """Should flag results final once voting ended."""
        backend = await unit_env.get(InMemoryPartyBackend)
        get_results = await unit_env.get(GetResultsUseCase)
        party = backend.create_party(code="ABC123")
        backend.close_party(party["id"])

        response = await get_results.execute(GetResultsRequest(code="ABC123"))

        assert response.final

    @pytest.mark.asyncio
    async def test_unknown_code(self, unit_env):
        """Should raise NotFoundError for an unknown code."""
        get_results = await unit_env.get(GetResultsUseCase)

        with pytest.raises(NotFoundError):
            await get_results.execute(GetResultsRequest(code="ZZZ999"))
