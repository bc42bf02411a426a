"""Typed resources of the party API."""

from .acts import ActsApi
from .guests import GuestsApi
from .parties import PartiesApi
from .users import UsersApi
from .votes import EndVotingResponse, VotesApi

__all__ = [
    "ActsApi",
    "EndVotingResponse",
    "GuestsApi",
    "PartiesApi",
    "UsersApi",
    "VotesApi",
]
