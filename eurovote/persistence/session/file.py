"""JSON file session store."""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from eurovote.domain.repository.session import SessionStore
from eurovote.domain.value import GuestId

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(dict[str, str])


class JsonFileSessionStore(SessionStore):
    """Session records persisted as one JSON object ``{code: guest_id}``.

    Records survive restarts of the same client install. The file is read
    on every lookup and replaced atomically on every write, so two commands
    run one after the other always see each other's changes.
    """

    def __init__(self, path: Path) -> None:
        """Initialize store.

        Args:
            path: JSON file location, created on first write
        """
        self.path = Path(path)

    def _load(self) -> dict[str, GuestId]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning(f"Ignoring unreadable session file {self.path}")
            return {}

        try:
            records = _records_adapter.validate_json(raw)
        except ValidationError:
            logger.warning(f"Ignoring unreadable session file {self.path}")
            return {}
        return {code: GuestId(guest_id) for code, guest_id in records.items()}

    def _write(self, records: dict[str, GuestId]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(records, tmp, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def get(self, code: str) -> GuestId | None:
        return self._load().get(code)

    async def save(self, code: str, guest_id: GuestId) -> None:
        records = self._load()
        records[code] = guest_id
        self._write(records)

    async def delete(self, code: str) -> None:
        records = self._load()
        if records.pop(code, None) is not None:
            self._write(records)
