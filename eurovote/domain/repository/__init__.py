"""Store interfaces for the party domain.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from eurovote.domain.repository.session import SessionStore

__all__ = [
    "SessionStore",
]
