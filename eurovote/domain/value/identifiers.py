"""Strongly typed identifiers for party entities.

The API hands out opaque string ids, so every identifier wraps ``str``.
"""

from typing import NewType

PartyId = NewType("PartyId", str)
GuestId = NewType("GuestId", str)
ActId = NewType("ActId", str)
VoteId = NewType("VoteId", str)
UserId = NewType("UserId", str)
