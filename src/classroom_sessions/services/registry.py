"""In-memory registry that owns every classroom session."""

import copy
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from classroom_sessions.domain.sessions import (
    ContentKind,
    SessionRecord,
    SessionSnapshot,
    build_access_url,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_RETENTION = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class SessionRegistry:
    """Process-wide session store guarded by a single lock.

    Unknown ids are an expected outcome: lookups return ``None`` and
    mutations return ``False`` instead of raising. Records never leave the
    registry; callers receive frozen snapshots with the access URL derived
    from the configured base address at read time.
    """

    def __init__(
        self,
        base_url: str,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Clock = utc_now,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._retention = retention
        self._clock = clock
        self._records: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._base_url

    def access_url(self, session_id: str, content_kind: ContentKind) -> str:
        """Return the student link for a session id and content kind."""
        return build_access_url(self._base_url, session_id, content_kind)

    def create(
        self,
        session_id: str,
        content_kind: ContentKind,
        payload: list[object],
        source_deck_name: str | None = None,
        source_deck_session_id: str | None = None,
    ) -> SessionSnapshot:
        """Create a session, replacing any existing record with the same id."""
        record = self._new_record(
            session_id,
            content_kind,
            payload,
            source_deck_name,
            source_deck_session_id,
        )
        with self._lock:
            replaced = session_id in self._records
            # Re-inserting moves the id to the end of the listing order.
            self._records.pop(session_id, None)
            self._records[session_id] = record
            snapshot = self._snapshot(record)
        if replaced:
            logger.warning("Overwrote existing session %s", session_id)
        return snapshot

    def create_if_absent(
        self,
        session_id: str,
        content_kind: ContentKind,
        payload: list[object],
        source_deck_name: str | None = None,
        source_deck_session_id: str | None = None,
    ) -> SessionSnapshot | None:
        """Create a session unless the id is taken; return None on collision."""
        record = self._new_record(
            session_id,
            content_kind,
            payload,
            source_deck_name,
            source_deck_session_id,
        )
        with self._lock:
            if session_id in self._records:
                return None
            self._records[session_id] = record
            return self._snapshot(record)

    def get(self, session_id: str) -> SessionSnapshot | None:
        """Return a session by id, if present."""
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return None
            return self._snapshot(record)

    def add_participant(self, session_id: str, participant_id: str) -> bool:
        """Register a participant once; inactive sessions accept joins too."""
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return False
            record.participants.setdefault(participant_id, None)
            return True

    def join_participant(self, session_id: str, participant_id: str) -> int | None:
        """Register a participant and return the roster size, or None if unknown."""
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return None
            record.participants.setdefault(participant_id, None)
            return len(record.participants)

    def list_participants(self, session_id: str) -> list[str]:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return []
            return list(record.participants)

    def activate(self, session_id: str) -> bool:
        return self._set_active(session_id, True)

    def deactivate(self, session_id: str) -> bool:
        return self._set_active(session_id, False)

    def delete(self, session_id: str) -> bool:
        """Remove a session permanently."""
        with self._lock:
            removed = self._records.pop(session_id, None)
        if removed is None:
            return False
        logger.info("Deleted session %s", session_id)
        return True

    def list_all(self) -> list[SessionSnapshot]:
        with self._lock:
            return [self._snapshot(record) for record in self._records.values()]

    def list_active(self) -> list[SessionSnapshot]:
        with self._lock:
            return [
                self._snapshot(record)
                for record in self._records.values()
                if record.is_active
            ]

    def sweep_expired(self) -> int:
        """Drop sessions created before the retention window and return the count."""
        cutoff = self._clock() - self._retention
        with self._lock:
            expired = [
                session_id
                for session_id, record in self._records.items()
                if record.created_at < cutoff
            ]
            for session_id in expired:
                del self._records[session_id]
        if expired:
            logger.info("Swept %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _set_active(self, session_id: str, is_active: bool) -> bool:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return False
            record.is_active = is_active
            return True

    def _new_record(
        self,
        session_id: str,
        content_kind: ContentKind,
        payload: list[object],
        source_deck_name: str | None,
        source_deck_session_id: str | None,
    ) -> SessionRecord:
        return SessionRecord(
            session_id=session_id,
            content_kind=ContentKind(content_kind),
            payload=copy.deepcopy(payload),
            created_at=self._clock(),
            source_deck_name=source_deck_name,
            source_deck_session_id=source_deck_session_id,
        )

    def _snapshot(self, record: SessionRecord) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=record.session_id,
            content_kind=record.content_kind,
            payload=copy.deepcopy(record.payload),
            created_at=record.created_at,
            access_url=self.access_url(record.session_id, record.content_kind),
            is_active=record.is_active,
            participants=tuple(record.participants),
            source_deck_name=record.source_deck_name,
            source_deck_session_id=record.source_deck_session_id,
        )
