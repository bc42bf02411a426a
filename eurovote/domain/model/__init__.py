"""Domain model entities for vote parties."""

from eurovote.domain.model.act import Act
from eurovote.domain.model.guest import Guest
from eurovote.domain.model.party import Party, PublicParty
from eurovote.domain.model.user import User
from eurovote.domain.model.vote import PartyResults, Vote, VoteResult

__all__ = [
    "Party",
    "PublicParty",
    "Guest",
    "Act",
    "Vote",
    "VoteResult",
    "PartyResults",
    "User",
]
