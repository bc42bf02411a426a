"""Mock providers for testing."""

from .credentials import MockCredentialsProvider
from .gateway import MockGatewayProvider
from .session import MockSessionProvider
from .container import build_test_container

__all__ = [
    "MockCredentialsProvider",
    "MockGatewayProvider",
    "MockSessionProvider",
    "build_test_container",
]
