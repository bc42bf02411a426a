"""Domain value objects for vote parties.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and the client-side input normalization.
"""

import re
from enum import Enum

from pydantic import field_validator

from eurovote.domain.value.common import RootValueObject

JOIN_CODE_LENGTH = 6
DISPLAY_NAME_MAX_LENGTH = 30


class EventType(str, Enum):
    """Show a party is watching. Acts are listed per event."""

    SEMIFINAL_1 = "semifinal1"
    SEMIFINAL_2 = "semifinal2"
    GRAND_FINAL = "grandfinal"


class PartyStatus(str, Enum):
    """Party lifecycle. Moves from active to closed exactly once."""

    ACTIVE = "active"
    CLOSED = "closed"


class GuestStatus(str, Enum):
    """Moderator decision on a join request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JoinCode(RootValueObject[str]):
    """Short code guests type to join a party.

    Input is upper-cased and stripped of anything that is not a letter or
    digit. Examples: 'abc-def' -> 'ABCDEF', ' x1y2z3 ' -> 'X1Y2Z3'.
    This is a typing aid for guests, the server stays authoritative.
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize_code(cls, v: object) -> object:
        """Upper-case and drop non-alphanumeric characters."""
        if isinstance(v, str):
            return re.sub(r"[^A-Z0-9]", "", v.upper())
        return v

    @field_validator("root")
    @classmethod
    def validate_code_length(cls, v: str) -> str:
        """Validate the normalized code length."""
        if len(v) != JOIN_CODE_LENGTH:
            raise ValueError(
                f"Party code must be {JOIN_CODE_LENGTH} letters or digits"
            )
        return v


class DisplayName(RootValueObject[str]):
    """Name a guest shows to the moderator and other guests.

    Surrounding whitespace is trimmed and overlong names are cut to
    30 characters.
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize_name(cls, v: object) -> object:
        """Trim and truncate."""
        if isinstance(v, str):
            return v.strip()[:DISPLAY_NAME_MAX_LENGTH].rstrip()
        return v

    @field_validator("root")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate name is not empty."""
        if not v:
            raise ValueError("Name must not be empty")
        return v
