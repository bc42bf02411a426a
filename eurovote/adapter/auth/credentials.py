"""Bearer credentials for moderator-only API calls.

Guests never sign in, so the default provider is anonymous. Moderator
tooling signs in a subject and every credentialed request gets a token
minted for that request alone.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

import jwt
import logfire

from eurovote.config import AuthSettings
from eurovote.util.error import ConfigurationError


class CredentialProvider(ABC):
    """Source of bearer tokens for the gateway."""

    @property
    @abstractmethod
    def current_subject(self) -> str | None:
        """Signed-in subject, None when nobody is signed in."""
        pass

    @abstractmethod
    async def get_token(self) -> str:
        """Fetch a fresh token for the current subject.

        Called once per credentialed request, implementations must not
        hand back a cached token.
        """
        pass


class AnonymousCredentialProvider(CredentialProvider):
    """Provider for guest clients, nobody is ever signed in."""

    @property
    def current_subject(self) -> str | None:
        return None

    async def get_token(self) -> str:
        raise ConfigurationError(
            "Anonymous clients cannot issue credentials", setting="AUTH__SUBJECT"
        )


class SignedTokenCredentialProvider(CredentialProvider):
    """Mints a short-lived HS256 token per call for the signed-in subject."""

    def __init__(self, settings: AuthSettings, subject: str | None = None) -> None:
        """Initialize provider.

        Args:
            settings: Authentication settings (secret, algorithm, lifetime)
            subject: Subject to sign in immediately, if any
        """
        self._settings = settings
        self._subject = subject

    @property
    def current_subject(self) -> str | None:
        return self._subject

    def sign_in(self, subject: str) -> None:
        self._subject = subject
        logfire.info("Moderator signed in", subject=subject)

    def sign_out(self) -> None:
        logfire.info("Moderator signed out", subject=self._subject)
        self._subject = None

    async def get_token(self) -> str:
        """Mint a token for the signed-in subject.

        Raises:
            ConfigurationError: If nobody is signed in
        """
        if self._subject is None:
            raise ConfigurationError("No subject signed in", setting="AUTH__SUBJECT")

        now = datetime.now(timezone.utc)
        payload = {
            "sub": self._subject,
            "iat": now,
            "exp": now + timedelta(seconds=self._settings.token_ttl_seconds),
        }

        return jwt.encode(
            payload,
            self._settings.token_secret,
            algorithm=self._settings.token_algorithm,
        )
