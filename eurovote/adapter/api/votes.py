"""Votes resource."""

from eurovote.adapter.gateway.client import GatewayClient
from eurovote.domain.model import PartyResults, Vote
from eurovote.domain.value import GuestId, PartyId, PartyStatus
from eurovote.domain.value.common import ValueObject


class EndVotingResponse(ValueObject):
    """Party state after the moderator closed voting."""

    id: PartyId
    status: PartyStatus


class VotesApi:
    """Vote submission, lookup and results."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def submit_vote(
        self, party_id: PartyId, guest_id: GuestId, votes: dict[str, str]
    ) -> Vote:
        """Create the guest's vote.

        Args:
            party_id: Party id
            guest_id: Voting guest
            votes: Wire mapping, see ``encode_assignment``
        """
        data = await self.gateway.request(
            f"/api/parties/{party_id}/votes",
            method="POST",
            body={"guestId": guest_id, "votes": votes},
        )
        return Vote.model_validate(data)

    async def update_vote(
        self, party_id: PartyId, guest_id: GuestId, votes: dict[str, str]
    ) -> Vote:
        """Replace the guest's existing vote."""
        data = await self.gateway.request(
            f"/api/parties/{party_id}/votes",
            method="PUT",
            body={"guestId": guest_id, "votes": votes},
        )
        return Vote.model_validate(data)

    async def get_guest_vote(self, party_id: PartyId, guest_id: GuestId) -> Vote:
        """Fetch a guest's vote.

        Raises:
            NotFoundError: If the guest has not voted yet
        """
        data = await self.gateway.request(f"/api/parties/{party_id}/votes/{guest_id}")
        return Vote.model_validate(data)

    async def end_voting(self, party_id: PartyId) -> EndVotingResponse:
        """Close voting. Moderator only, cannot be undone."""
        data = await self.gateway.request(
            f"/api/parties/{party_id}/end-voting",
            method="POST",
            requires_credential=True,
        )
        return EndVotingResponse.model_validate(data)

    async def get_results(self, party_id: PartyId) -> PartyResults:
        data = await self.gateway.request(f"/api/parties/{party_id}/results")
        return PartyResults.model_validate(data)
