"""Dependency injection wiring.

``PROVIDERS`` lists one entry per concern. Concrete providers are used as
they are. Mockable components list their base class, and the
implementation is picked at container build time: production code always
takes the real one, test containers take the mocks from ``tests/di``
unless a component is unmocked.
"""

from eurovote.util.di.adapter import ProdAdapterProvider
from eurovote.util.di.application import ProdApplicationProvider
from eurovote.util.di.base import Component, ProviderBase
from eurovote.util.di.core import ProdConfigProvider
from eurovote.util.di.infrastructure import (
    CredentialsProvider,
    GatewayProvider,
    ProdCredentialsProvider,
    ProdGatewayProvider,
    ProdSessionProvider,
    SessionProvider,
)
from eurovote.util.error import DependencyInjectionError

PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdAdapterProvider,
    ProdApplicationProvider,
    # Mockable
    CredentialsProvider,
    GatewayProvider,
    SessionProvider,
]


def get_provider(base: type[ProviderBase], use_mock: bool = False) -> type[ProviderBase]:
    """Resolve a ``PROVIDERS`` entry to the class to instantiate.

    Raises:
        DependencyInjectionError: If a mockable component lacks the
            requested implementation (mocks are only defined once
            ``tests.di`` is imported)
    """
    if not base.is_mockable():
        return base

    for impl in base.__subclasses__():
        if impl.__is_mock__ == use_mock:
            return impl
    raise DependencyInjectionError(base.component_name(), use_mock)


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdAdapterProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "CredentialsProvider",
    "GatewayProvider",
    "SessionProvider",
    # Infrastructure implementations
    "ProdCredentialsProvider",
    "ProdGatewayProvider",
    "ProdSessionProvider",
]
