"""Session store infrastructure providers."""

from dishka import Scope, provide

from eurovote.config import SessionSettings
from eurovote.domain.repository import SessionStore
from eurovote.persistence.session import JsonFileSessionStore
from eurovote.util.di.base import ProviderBase


class SessionProvider(ProviderBase):
    """Session component base."""

    __mock_component__ = "session"


class ProdSessionProvider(SessionProvider):
    """Production session store backed by a JSON file."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_session_store(self, settings: SessionSettings) -> SessionStore:
        """Provide session store."""
        return JsonFileSessionStore(settings.path)
