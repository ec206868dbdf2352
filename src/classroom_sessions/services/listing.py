"""Dashboard listing helpers: filtering and grouping sessions by deck."""

from dataclasses import dataclass, field
from enum import StrEnum

from classroom_sessions.domain.sessions import ContentKind, SessionSnapshot

UNKNOWN_DECK_ID = "unknown"
UNKNOWN_DECK_NAME = "Unknown Presentation"


class StatusFilter(StrEnum):
    """Activity filter used by the dashboard."""

    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class DeckGroup:
    """Sessions minted from the same uploaded deck."""

    source_deck_session_id: str
    source_deck_name: str
    sessions: list[SessionSnapshot] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        return sum(1 for session in self.sessions if session.is_active)


def filter_sessions(
    sessions: list[SessionSnapshot],
    search: str | None = None,
    content_kind: ContentKind | None = None,
    status: StatusFilter = StatusFilter.ALL,
) -> list[SessionSnapshot]:
    """Filter sessions by deck name or id substring, kind and activity."""
    needle = search.strip().lower() if search else ""
    results = []
    for session in sessions:
        if needle and not _matches_search(session, needle):
            continue
        if content_kind is not None and session.content_kind != content_kind:
            continue
        if status == StatusFilter.ACTIVE and not session.is_active:
            continue
        if status == StatusFilter.INACTIVE and session.is_active:
            continue
        results.append(session)
    return results


def group_by_deck(sessions: list[SessionSnapshot]) -> list[DeckGroup]:
    """Group sessions by source deck, keeping first-seen order."""
    groups: dict[str, DeckGroup] = {}
    for session in sessions:
        key = session.source_deck_session_id or UNKNOWN_DECK_ID
        group = groups.get(key)
        if group is None:
            group = DeckGroup(
                source_deck_session_id=key,
                source_deck_name=session.source_deck_name or UNKNOWN_DECK_NAME,
            )
            groups[key] = group
        group.sessions.append(session)
    return list(groups.values())


def _matches_search(session: SessionSnapshot, needle: str) -> bool:
    if session.source_deck_name and needle in session.source_deck_name.lower():
        return True
    return needle in session.session_id.lower()
