"""Party entities.

A party is one voting session run by a moderator and joined by guests
through its short code.
"""

from datetime import datetime

from eurovote.domain.model.common import DomainModel
from eurovote.domain.value import EventType, PartyId, PartyStatus, UserId


class PublicParty(DomainModel):
    """Party as seen by anyone holding the code."""

    id: PartyId
    name: str
    code: str
    event_type: EventType
    status: PartyStatus

    @property
    def is_active(self) -> bool:
        return self.status == PartyStatus.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.status == PartyStatus.CLOSED


class Party(PublicParty):
    """Party as seen by its moderator."""

    admin_id: UserId
    created_at: datetime | None = None
