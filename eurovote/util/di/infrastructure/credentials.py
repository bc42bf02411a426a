"""Credential infrastructure providers."""

from dishka import Scope, provide

from eurovote.adapter.auth.credentials import (
    AnonymousCredentialProvider,
    CredentialProvider,
    SignedTokenCredentialProvider,
)
from eurovote.config import AuthSettings
from eurovote.util.di.base import ProviderBase


class CredentialsProvider(ProviderBase):
    """Credentials component base."""

    __mock_component__ = "credentials"


class ProdCredentialsProvider(CredentialsProvider):
    """Production credentials.

    Guests run anonymous. Setting AUTH__SUBJECT signs in a moderator.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_credentials(self, auth_settings: AuthSettings) -> CredentialProvider:
        """Provide credential provider."""
        if auth_settings.subject is None:
            return AnonymousCredentialProvider()
        return SignedTokenCredentialProvider(
            auth_settings, subject=auth_settings.subject
        )
