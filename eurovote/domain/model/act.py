"""Act entity."""

from eurovote.domain.model.common import DomainModel
from eurovote.domain.value import ActId, EventType


class Act(DomainModel):
    """Competing act. Read-only for guests.

    ``running_order`` is unique within an event and drives display order.
    """

    id: ActId
    country: str
    artist: str
    song: str
    running_order: int
    event_type: EventType
