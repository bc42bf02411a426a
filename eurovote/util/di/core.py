"""Settings providers.

Settings are read once per container from the environment (and ``.env``).
Each section is exposed on its own so components depend only on the part
they use.
"""

from dishka import Scope, provide

from eurovote.config import (
    AuthSettings,
    PollingSettings,
    SessionSettings,
    Settings,
)
from eurovote.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Concrete provider, tests configure it through environment variables."""

    @provide(scope=Scope.APP)
    def settings(self) -> Settings:
        return Settings()

    @provide(scope=Scope.APP)
    def auth(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide(scope=Scope.APP)
    def polling(self, settings: Settings) -> PollingSettings:
        return settings.polling

    @provide(scope=Scope.APP)
    def session(self, settings: Settings) -> SessionSettings:
        return settings.session
