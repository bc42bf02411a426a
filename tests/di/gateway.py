"""Mock gateway providers for testing."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from eurovote.adapter.auth.credentials import CredentialProvider
from eurovote.adapter.gateway.client import GatewayClient
from eurovote.adapter.gateway.inmemory import InMemoryPartyBackend
from eurovote.util.di.infrastructure.gateway import GatewayProvider
from tests.conftest import TEST_BASE_URL


class MockGatewayProvider(GatewayProvider):
    """Mock gateway provider answering from an in-memory backend.

    Each container gets its own backend, so tests are isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_backend(self) -> InMemoryPartyBackend:
        """Provide in-memory party backend."""
        return InMemoryPartyBackend()

    @provide(scope=Scope.APP)
    async def get_gateway(
        self, backend: InMemoryPartyBackend, credentials: CredentialProvider
    ) -> AsyncIterator[GatewayClient]:
        """Provide gateway routed to the in-memory backend."""
        gateway = GatewayClient(
            base_url=TEST_BASE_URL,
            credentials=credentials,
            transport=backend.transport,
        )
        yield gateway
        await gateway.aclose()
