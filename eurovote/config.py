"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseModel):
    """Party API configuration."""

    # Prefix for every request path. Empty means relative paths, which only
    # makes sense when the transport already knows the host (tests, proxies).
    base_url: str = ""

    # Per-request timeout in seconds. None keeps the transport default.
    timeout: float | None = None


class PollingSettings(BaseModel):
    """Polling cadence for the guest flows."""

    # Approval status check interval while waiting for the moderator
    guest_status_interval: float = 3.0

    # How long a rejection stays visible before returning to the entry point
    rejection_exit_delay: float = 3.0

    # Party data refresh interval once approved
    party_sync_interval: float = 10.0


class SessionSettings(BaseModel):
    """Local session record configuration."""

    # JSON file mapping party code -> guest id
    path: Path = Path.home() / ".eurovote" / "sessions.json"


class AuthSettings(BaseModel):
    """Moderator credential configuration."""

    # Shared secret used to sign short-lived bearer tokens
    token_secret: str = "CHANGE_ME_IN_PRODUCTION"  # Must be overridden in production
    token_algorithm: str = "HS256"
    token_ttl_seconds: int = 300

    # Signed-in moderator. None means the client acts as an anonymous guest.
    subject: str | None = None


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Client settings.

    Set environment variables to override, nested values use ``__``:

        API__BASE_URL=https://vote.example.com
        POLLING__GUEST_STATUS_INTERVAL=5
        SESSION__PATH=/tmp/eurovote-sessions.json
        AUTH__SUBJECT=moderator-uid
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows API__BASE_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    api: APISettings = APISettings()
    polling: PollingSettings = PollingSettings()
    session: SessionSettings = SessionSettings()
    auth: AuthSettings = AuthSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
