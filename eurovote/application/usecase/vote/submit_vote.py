"""Submit vote use case."""

import logfire
from pydantic import BaseModel, Field

from eurovote.adapter.api import VotesApi
from eurovote.domain.service import (
    encode_assignment,
    is_complete,
    validate_assignment,
)
from eurovote.domain.value import ActId, GuestId, PartyId, VoteId


class SubmitVoteRequest(BaseModel):
    """Submit vote request."""

    party_id: str
    guest_id: str
    assignment: dict[int, str] = Field(default_factory=dict)  # points -> act id
    update: bool = False  # PUT over an existing vote instead of POST


class SubmitVoteResponse(BaseModel):
    """Submit vote response."""

    vote_id: str
    votes: dict[str, str]
    complete: bool
    updated: bool


class SubmitVoteUseCase:
    """Use case for saving a guest's (possibly partial) vote."""

    def __init__(self, votes_api: VotesApi) -> None:
        """Initialize submit vote use case.

        Args:
            votes_api: Vote endpoints
        """
        self.votes_api = votes_api

    async def execute(self, request: SubmitVoteRequest) -> SubmitVoteResponse:
        """Execute submit vote flow.

        Args:
            request: Submit vote request

        Returns:
            Stored vote, with whether all ten point values were given

        Raises:
            ValidationError: If an act got two point values or a point value
                is unknown (nothing is sent)
            GatewayError: If the server refused the vote or was unreachable
        """
        assignment = {
            points: ActId(act_id) for points, act_id in request.assignment.items()
        }
        validate_assignment(assignment)
        wire = encode_assignment(assignment)

        party_id = PartyId(request.party_id)
        guest_id = GuestId(request.guest_id)

        with logfire.span(
            "submit_vote",
            party_id=party_id,
            guest_id=guest_id,
            update=request.update,
            points_given=len(wire),
        ):
            if request.update:
                vote = await self.votes_api.update_vote(party_id, guest_id, wire)
            else:
                vote = await self.votes_api.submit_vote(party_id, guest_id, wire)

        return SubmitVoteResponse(
            vote_id=VoteId(vote.id),
            votes=dict(vote.votes),
            complete=is_complete(assignment),
            updated=request.update,
        )
