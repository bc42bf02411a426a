"""Get results use case."""

from pydantic import BaseModel

from eurovote.adapter.api import PartiesApi, VotesApi
from eurovote.domain.model import PartyResults
from eurovote.domain.value import PartyStatus


class GetResultsRequest(BaseModel):
    """Get results request."""

    code: str


class GetResultsResponse(BaseModel):
    """Get results response."""

    status: PartyStatus
    results: PartyResults

    @property
    def final(self) -> bool:
        """Whether voting is closed and the scoreboard can no longer change."""
        return self.status == PartyStatus.CLOSED


class GetResultsUseCase:
    """Use case for reading a party scoreboard by join code."""

    def __init__(self, parties_api: PartiesApi, votes_api: VotesApi) -> None:
        self.parties_api = parties_api
        self.votes_api = votes_api

    async def execute(self, request: GetResultsRequest) -> GetResultsResponse:
        """Resolve the code, then fetch the server-side tally.

        Raises:
            NotFoundError: If no party uses the code
        """
        party = await self.parties_api.get_party_by_code(request.code)
        results = await self.votes_api.get_results(party.id)
        return GetResultsResponse(status=party.status, results=results)
