"""Pydantic models for the session HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from classroom_sessions.domain.sessions import ContentKind, SessionSnapshot
from classroom_sessions.services.listing import DeckGroup


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSessionRequest(CamelModel):
    """Presenter request to mint a session.

    Id and kind are optional here so a missing value maps to 400, not 422.
    """

    session_id: str | None = None
    content_kind: str | None = None
    payload: list[Any] = []
    source_deck_name: str | None = None
    source_deck_session_id: str | None = None


class SessionSummary(CamelModel):
    """Short session view returned after creation."""

    session_id: str
    content_kind: ContentKind
    created_at: datetime
    is_active: bool
    participant_count: int
    source_deck_name: str | None = None
    source_deck_session_id: str | None = None

    @classmethod
    def from_snapshot(cls, session: SessionSnapshot) -> "SessionSummary":
        return cls(
            session_id=session.session_id,
            content_kind=session.content_kind,
            created_at=session.created_at,
            is_active=session.is_active,
            participant_count=session.participant_count,
            source_deck_name=session.source_deck_name,
            source_deck_session_id=session.source_deck_session_id,
        )


class CreateSessionResponse(CamelModel):
    access_url: str
    session: SessionSummary


class SessionDetail(SessionSummary):
    """Full session view used by the dashboard."""

    payload: list[Any]
    access_url: str
    participants: list[str]

    @classmethod
    def from_snapshot(cls, session: SessionSnapshot) -> "SessionDetail":
        return cls(
            session_id=session.session_id,
            content_kind=session.content_kind,
            created_at=session.created_at,
            is_active=session.is_active,
            participant_count=session.participant_count,
            source_deck_name=session.source_deck_name,
            source_deck_session_id=session.source_deck_session_id,
            payload=session.payload,
            access_url=session.access_url,
            participants=list(session.participants),
        )


class SessionListResponse(CamelModel):
    sessions: list[SessionDetail]


class DeckGroupResponse(CamelModel):
    source_deck_session_id: str
    source_deck_name: str
    active_count: int
    sessions: list[SessionDetail]

    @classmethod
    def from_group(cls, group: DeckGroup) -> "DeckGroupResponse":
        return cls(
            source_deck_session_id=group.source_deck_session_id,
            source_deck_name=group.source_deck_name,
            active_count=group.active_count,
            sessions=[SessionDetail.from_snapshot(s) for s in group.sessions],
        )


class GroupedSessionsResponse(CamelModel):
    groups: list[DeckGroupResponse]


class JoinSessionResponse(CamelModel):
    """Content served to a student who opened a session link."""

    session_id: str
    content_kind: ContentKind
    payload: list[Any]
    participant_id: str
    participant_count: int


class ParticipantsResponse(CamelModel):
    session_id: str
    participants: list[str]


class AccessUrlResponse(CamelModel):
    access_url: str


class SuccessResponse(CamelModel):
    success: bool = True
