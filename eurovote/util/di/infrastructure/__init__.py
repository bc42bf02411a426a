"""Infrastructure providers."""

# Import bases
from .credentials import CredentialsProvider
from .gateway import GatewayProvider
from .session import SessionProvider

# Import implementations (needed for __subclasses__())
from .credentials import ProdCredentialsProvider  # noqa: F401
from .gateway import ProdGatewayProvider  # noqa: F401
from .session import ProdSessionProvider  # noqa: F401

__all__ = [
    "CredentialsProvider",
    "GatewayProvider",
    "ProdCredentialsProvider",
    "ProdGatewayProvider",
    "ProdSessionProvider",
    "SessionProvider",
]
