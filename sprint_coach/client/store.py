"""
The athlete's session log.

Sessions are kept newest-first and the whole list is written back to
local storage on every change, under one fixed key. A log that cannot be
read starts over empty, and the reason is kept on the store so the caller
can tell the athlete.
"""

import json
import logging
from typing import Optional

from ..core.coaching.models import SessionRecord
from ..core.coaching.prompts import MAX_PROMPT_SESSIONS
from ..infrastructure.storage.client import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

SESSIONS_KEY = "sessions"


class SessionStore:
    """
    Ordered list of SessionRecord, mirrored to storage.

    Only the client's single thread mutates it, so there is no locking.
    A failed write leaves the in-memory list as it was before the call.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self.load_warning: Optional[str] = None
        self._sessions: list[SessionRecord] = self._load()

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def sessions(self) -> list[SessionRecord]:
        """Snapshot of the log, newest first."""
        return list(self._sessions)

    def recent(self, limit: int = MAX_PROMPT_SESSIONS) -> list[SessionRecord]:
        return self._sessions[:limit]

    def add(self, record: SessionRecord) -> SessionRecord:
        """Put a new session at the front of the log and persist."""
        self._commit([record] + self._sessions)
        logger.info("Logged session", extra={"session_id": record.id, "count": len(self)})
        return record

    def remove_at(self, index: int) -> SessionRecord:
        """Delete the session at a position in the displayed list."""
        if not 0 <= index < len(self._sessions):
            raise IndexError(f"No session at position {index}")

        removed = self._sessions[index]
        self._commit(self._sessions[:index] + self._sessions[index + 1:])
        logger.info("Deleted session", extra={"session_id": removed.id, "index": index})
        return removed

    def remove(self, record_id: str) -> SessionRecord:
        """Delete the session with the given id."""
        for index, record in enumerate(self._sessions):
            if record.id == record_id:
                return self.remove_at(index)
        raise KeyError(record_id)

    def reload(self) -> None:
        """Re-read the log from storage, discarding the in-memory copy."""
        self._sessions = self._load()

    def _commit(self, sessions: list[SessionRecord]) -> None:
        payload = json.dumps([s.to_dict() for s in sessions], ensure_ascii=False)
        try:
            self._storage.set_item(SESSIONS_KEY, payload)
        except StorageError as e:
            logger.error("Failed to persist sessions", extra={"error": str(e)})
            raise
        self._sessions = sessions

    def _load(self) -> list[SessionRecord]:
        self.load_warning = None

        try:
            raw = self._storage.get_item(SESSIONS_KEY)
        except StorageError as e:
            return self._fall_back_to_empty(f"Session log unavailable: {e}")

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            return self._fall_back_to_empty(f"Session log is not valid JSON: {e}")

        if not isinstance(data, list):
            return self._fall_back_to_empty("Session log is not a list")

        try:
            return [SessionRecord.from_dict(item) for item in data]
        except (AttributeError, TypeError, ValueError) as e:
            return self._fall_back_to_empty(f"Session log has an invalid record: {e}")

    def _fall_back_to_empty(self, reason: str) -> list[SessionRecord]:
        logger.warning("Starting with an empty session log", extra={"reason": reason})
        self.load_warning = reason
        return []
