"""Vote entities.

A vote is a guest's allocation of the fixed point values to acts. On the
wire the allocation is a JSON object keyed by the decimal point value.
"""

from datetime import datetime

from pydantic import Field

from eurovote.domain.model.common import DomainModel
from eurovote.domain.value import ActId, GuestId, PartyId, VoteId


class Vote(DomainModel):
    """Stored vote of one guest in one party."""

    id: VoteId
    guest_id: GuestId
    party_id: PartyId
    votes: dict[str, ActId] = Field(default_factory=dict)
    created_at: datetime | None = None


class VoteResult(DomainModel):
    """Aggregated points of one act."""

    act_id: ActId
    country: str
    artist: str
    song: str
    total_points: int = Field(ge=0)
    rank: int = Field(ge=0)


class PartyResults(DomainModel):
    """Scoreboard of a party, computed server-side."""

    party_id: PartyId
    party_name: str
    total_voters: int = Field(ge=0)
    results: list[VoteResult] = Field(default_factory=list)
