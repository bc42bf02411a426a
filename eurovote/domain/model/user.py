"""Moderator account profile."""

from eurovote.domain.model.common import DomainModel
from eurovote.domain.value import UserId


class User(DomainModel):
    """Signed-in moderator."""

    id: UserId
    username: str
    email: str | None = None
