"""Parties resource."""

from eurovote.adapter.gateway.client import GatewayClient
from eurovote.domain.model import Party, PublicParty
from eurovote.domain.value import EventType, PartyId


class PartiesApi:
    """Party lookup for guests and party management for moderators."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def create_party(self, name: str, event_type: EventType) -> Party:
        """Create a party owned by the signed-in moderator."""
        data = await self.gateway.request(
            "/api/parties",
            method="POST",
            body={"name": name, "eventType": EventType(event_type).value},
            requires_credential=True,
        )
        return Party.model_validate(data)

    async def list_parties(self) -> list[Party]:
        """List parties owned by the signed-in moderator."""
        data = await self.gateway.request("/api/parties", requires_credential=True)
        return [Party.model_validate(party) for party in data]

    async def get_party_by_code(self, code: str) -> PublicParty:
        """Resolve a join code. Anonymous."""
        data = await self.gateway.request(f"/api/parties/{code}")
        return PublicParty.model_validate(data)

    async def get_party_by_id(self, party_id: PartyId) -> Party:
        """Fetch a party with its moderator-only fields."""
        data = await self.gateway.request(
            f"/api/parties/{party_id}", requires_credential=True
        )
        return Party.model_validate(data)

    async def delete_party(self, party_id: PartyId) -> None:
        await self.gateway.request(
            f"/api/parties/{party_id}", method="DELETE", requires_credential=True
        )
