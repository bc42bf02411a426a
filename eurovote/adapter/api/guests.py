"""Guests resource."""

from pydantic import ValidationError

from eurovote.adapter.error import ServerFailureError
from eurovote.adapter.gateway.client import GatewayClient
from eurovote.domain.model import Guest
from eurovote.domain.value import GuestId, PartyId


class GuestsApi:
    """Join requests, approval status and moderation of guests."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def join_party(self, code: str, username: str) -> Guest:
        """Ask to join the party behind ``code``.

        Returns:
            The created guest, normally ``pending``

        Raises:
            NotFoundError: If the code does not resolve to a party
            ServerFailureError: If the server accepted the request but
                answered with something that is not a guest
        """
        data = await self.gateway.request(
            f"/api/parties/{code}/join",
            method="POST",
            body={"username": username},
        )
        try:
            return Guest.model_validate(data)
        except ValidationError as e:
            raise ServerFailureError(
                502, "Bad Gateway", f"Malformed join response for party {code}"
            ) from e

    async def get_guest_status(self, code: str, guest_id: GuestId) -> Guest:
        """Current state of a join request. Anonymous."""
        data = await self.gateway.request(
            f"/api/parties/{code}/guest-status", query={"guestId": guest_id}
        )
        return Guest.model_validate(data)

    async def list_guests(self, party_id: PartyId) -> list[Guest]:
        """Every guest of a party, any status. Moderator only."""
        data = await self.gateway.request(
            f"/api/parties/{party_id}/guests", requires_credential=True
        )
        return [Guest.model_validate(guest) for guest in data]

    async def list_approved_guests(
        self, party_id: PartyId, guest_id: GuestId | None = None
    ) -> list[Guest]:
        """Guest roster as seen by a guest.

        Args:
            party_id: Party id
            guest_id: Calling guest, sent so the server can authorize the read

        Returns:
            Guests as returned by the server, callers filter by status
        """
        data = await self.gateway.request(
            f"/api/parties/{party_id}/guests",
            query={"guestId": guest_id} if guest_id else None,
        )
        return [Guest.model_validate(guest) for guest in data]

    async def list_join_requests(self, party_id: PartyId) -> list[Guest]:
        """Pending join requests. Moderator only."""
        data = await self.gateway.request(
            f"/api/parties/{party_id}/join-requests", requires_credential=True
        )
        return [Guest.model_validate(guest) for guest in data]

    async def approve_guest(self, party_id: PartyId, guest_id: GuestId) -> dict:
        return await self.gateway.request(
            f"/api/parties/{party_id}/guests/{guest_id}/approve",
            method="PUT",
            requires_credential=True,
        )

    async def reject_guest(self, party_id: PartyId, guest_id: GuestId) -> dict:
        return await self.gateway.request(
            f"/api/parties/{party_id}/guests/{guest_id}/reject",
            method="PUT",
            requires_credential=True,
        )

    async def remove_guest(self, party_id: PartyId, guest_id: GuestId) -> None:
        await self.gateway.request(
            f"/api/parties/{party_id}/guests/{guest_id}",
            method="DELETE",
            requires_credential=True,
        )
