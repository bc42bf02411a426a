"""Test configuration and fixtures."""

import os
from datetime import datetime, timezone

# Settings are read from the environment, shrink polling before anything
# builds them.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POLLING__GUEST_STATUS_INTERVAL", "0.01")
os.environ.setdefault("POLLING__REJECTION_EXIT_DELAY", "0.02")
os.environ.setdefault("POLLING__PARTY_SYNC_INTERVAL", "0.01")
os.environ.setdefault("OBSERVABILITY__SEND_TO_LOGFIRE", "false")

from eurovote.domain.model import Act, Guest, PublicParty, Vote  # noqa: E402
from eurovote.domain.value import (  # noqa: E402
    ActId,
    EventType,
    GuestId,
    GuestStatus,
    PartyId,
    PartyStatus,
    VoteId,
)

TEST_BASE_URL = "http://testserver"
TEST_TOKEN_SECRET = "test-secret-0123456789abcdef0123456789"


def make_party(
    status: PartyStatus = PartyStatus.ACTIVE,
    event_type: EventType = EventType.GRAND_FINAL,
    code: str = "ABC123",
) -> PublicParty:
    """Helper to build the public view of a party."""
    return PublicParty(
        id=PartyId("party-1"),
        name="Eurovision Night",
        code=code,
        event_type=event_type,
        status=status,
    )


def make_guest(
    guest_id: str = "guest-1",
    status: GuestStatus = GuestStatus.PENDING,
    username: str = "Ada",
) -> Guest:
    """Helper to build a guest of party-1."""
    return Guest(
        id=GuestId(guest_id),
        party_id=PartyId("party-1"),
        username=username,
        status=status,
        created_at=datetime.now(timezone.utc),
    )


def make_act(number: int, country: str | None = None) -> Act:
    """Helper to build act ``act-{number}`` with running order ``number``."""
    return Act(
        id=ActId(f"act-{number}"),
        country=country or f"Country {number}",
        artist=f"Artist {number}",
        song=f"Song {number}",
        running_order=number,
        event_type=EventType.GRAND_FINAL,
    )


def make_vote(votes: dict[str, str], guest_id: str = "guest-1") -> Vote:
    """Helper to build a stored vote of party-1."""
    return Vote(
        id=VoteId("vote-1"),
        guest_id=GuestId(guest_id),
        party_id=PartyId("party-1"),
        votes={points: ActId(act_id) for points, act_id in votes.items()},
    )
