"""Session store implementations."""

from .file import JsonFileSessionStore
from .inmemory import InMemorySessionStore

__all__ = [
    "InMemorySessionStore",
    "JsonFileSessionStore",
]
