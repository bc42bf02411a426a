"""Guest entity."""

from datetime import datetime

from eurovote.domain.model.common import DomainModel
from eurovote.domain.value import GuestId, GuestStatus, PartyId


class Guest(DomainModel):
    """Guest of a party.

    Created by a join request and only changed by the moderator
    (approve, reject or remove).
    """

    id: GuestId
    party_id: PartyId
    username: str
    status: GuestStatus
    created_at: datetime | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == GuestStatus.APPROVED
