"""Session creation and student join rules."""

import time
from dataclasses import dataclass
from enum import StrEnum
from uuid import uuid4

from classroom_sessions.domain.sessions import ContentKind, SessionSnapshot
from classroom_sessions.services.registry import SessionRegistry


class JoinStatus(StrEnum):
    """Outcome of a student trying to open a session."""

    JOINED = "joined"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    KIND_MISMATCH = "kind_mismatch"


@dataclass(frozen=True)
class JoinResult:
    """Result of a join attempt; session data is set only when joined."""

    status: JoinStatus
    session: SessionSnapshot | None = None
    participant_id: str | None = None
    participant_count: int = 0


@dataclass
class SessionService:
    """Application service used by the presenter and student endpoints."""

    registry: SessionRegistry

    def create_session(  # noqa: PLR0913
        self,
        session_id: str,
        content_kind: ContentKind,
        payload: list[object],
        source_deck_name: str | None = None,
        source_deck_session_id: str | None = None,
        if_absent: bool = False,
    ) -> SessionSnapshot | None:
        """Create a session; with ``if_absent`` return None when the id is taken."""
        create = self.registry.create_if_absent if if_absent else self.registry.create
        return create(
            session_id,
            content_kind,
            payload,
            source_deck_name=source_deck_name,
            source_deck_session_id=source_deck_session_id,
        )

    def join(self, session_id: str, content_kind: ContentKind) -> JoinResult:
        """Admit a new participant if the session is live and of the right kind."""
        session = self.registry.get(session_id)
        if session is None:
            return JoinResult(status=JoinStatus.NOT_FOUND)
        if not session.is_active:
            return JoinResult(status=JoinStatus.INACTIVE, session=session)
        if session.content_kind != content_kind:
            return JoinResult(status=JoinStatus.KIND_MISMATCH, session=session)

        participant_id = new_participant_id()
        participant_count = self.registry.join_participant(session_id, participant_id)
        if participant_count is None:
            # Deleted or swept between the lookup and the join.
            return JoinResult(status=JoinStatus.NOT_FOUND)
        return JoinResult(
            status=JoinStatus.JOINED,
            session=session,
            participant_id=participant_id,
            participant_count=participant_count,
        )

    def access_url(self, session_id: str, content_kind: ContentKind) -> str:
        """Preview the student link without creating a session."""
        return self.registry.access_url(session_id, content_kind)


def new_participant_id() -> str:
    """Generate an opaque participant id."""
    millis = int(time.time() * 1000)
    return f"participant_{millis}_{uuid4().hex[:9]}"
