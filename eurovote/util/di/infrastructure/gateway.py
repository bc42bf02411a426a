"""Gateway infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from eurovote.adapter.auth.credentials import CredentialProvider
from eurovote.adapter.gateway.client import GatewayClient
from eurovote.config import Settings
from eurovote.util.di.base import ProviderBase
from eurovote.util.error import ConfigurationError
from eurovote.util.observability import instrument_httpx


class GatewayProvider(ProviderBase):
    """Gateway component base."""

    __mock_component__ = "gateway"


class ProdGatewayProvider(GatewayProvider):
    """Production gateway talking to the party API over the network."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_gateway(
        self, settings: Settings, credentials: CredentialProvider
    ) -> AsyncIterator[GatewayClient]:
        """Provide gateway client, closed with the container."""
        if not settings.api.base_url and settings.environment == "production":
            raise ConfigurationError("No gateway URL in production", setting="API__BASE_URL")

        instrument_httpx()
        gateway = GatewayClient(
            base_url=settings.api.base_url,
            credentials=credentials,
            timeout=settings.api.timeout,
        )
        yield gateway
        await gateway.aclose()
