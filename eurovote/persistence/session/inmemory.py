"""In-memory session store for testing."""

from eurovote.domain.repository.session import SessionStore
from eurovote.domain.value import GuestId


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore.

    Records live as long as the store instance, which is what tests and
    single-run CLI commands want.
    """

    def __init__(self, records: dict[str, GuestId] | None = None) -> None:
        self._records: dict[str, GuestId] = dict(records or {})

    async def get(self, code: str) -> GuestId | None:
        return self._records.get(code)

    async def save(self, code: str, guest_id: GuestId) -> None:
        self._records[code] = guest_id

    async def delete(self, code: str) -> None:
        self._records.pop(code, None)

    def snapshot(self) -> dict[str, GuestId]:
        """Copy of every record, for assertions."""
        return dict(self._records)
