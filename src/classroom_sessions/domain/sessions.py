"""Domain models for shareable classroom sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class ContentKind(StrEnum):
    """Study activity formats a session can serve."""

    FLASHCARDS = "flashcards"
    QUIZ = "quiz"


@dataclass
class SessionRecord:
    """Mutable registry-owned state for a single session."""

    session_id: str
    content_kind: ContentKind
    payload: list[object]
    created_at: datetime
    is_active: bool = True
    # Insertion-ordered set of participant ids.
    participants: dict[str, None] = field(default_factory=dict)
    source_deck_name: str | None = None
    source_deck_session_id: str | None = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session handed out by the registry."""

    session_id: str
    content_kind: ContentKind
    payload: list[object]
    created_at: datetime
    access_url: str
    is_active: bool
    participants: tuple[str, ...]
    source_deck_name: str | None = None
    source_deck_session_id: str | None = None

    @property
    def participant_count(self) -> int:
        return len(self.participants)


def build_access_url(base_url: str, session_id: str, content_kind: ContentKind) -> str:
    """Build the student-facing link for a session."""
    return f"{base_url.rstrip('/')}/student/{session_id}/{content_kind.value}"
