"""Long-lived guest flows driven by polling."""

from .guest_lifecycle import (
    REJECTION_MESSAGE,
    GuestLifecycleCoordinator,
    GuestState,
    JoinFailure,
)
from .party_sync import PartySnapshot, PartySyncCoordinator, build_snapshot

__all__ = [
    "REJECTION_MESSAGE",
    "GuestLifecycleCoordinator",
    "GuestState",
    "JoinFailure",
    "PartySnapshot",
    "PartySyncCoordinator",
    "build_snapshot",
]
