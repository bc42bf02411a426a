"""Acts resource."""

from eurovote.adapter.gateway.client import GatewayClient
from eurovote.domain.model import Act
from eurovote.domain.value import EventType


class ActsApi:
    """Read-only act listings."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def list_acts(self, event_type: EventType) -> list[Act]:
        """List the acts competing in an event.

        Args:
            event_type: Event whose acts to list

        Returns:
            Acts in server order (not sorted by running order)
        """
        data = await self.gateway.request(
            "/api/acts", query={"event": EventType(event_type).value}
        )
        return [Act.model_validate(act) for act in data["acts"]]
