"""Domain value objects for vote parties."""

from eurovote.domain.value.identifiers import (
    ActId,
    GuestId,
    PartyId,
    UserId,
    VoteId,
)
from eurovote.domain.value.types import (
    DISPLAY_NAME_MAX_LENGTH,
    JOIN_CODE_LENGTH,
    DisplayName,
    EventType,
    GuestStatus,
    JoinCode,
    PartyStatus,
)

__all__ = [
    # Identifiers
    "PartyId",
    "GuestId",
    "ActId",
    "VoteId",
    "UserId",
    # Types
    "EventType",
    "PartyStatus",
    "GuestStatus",
    "JoinCode",
    "DisplayName",
    "JOIN_CODE_LENGTH",
    "DISPLAY_NAME_MAX_LENGTH",
]
