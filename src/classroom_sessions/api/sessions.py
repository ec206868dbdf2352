"""Session endpoints for presenters, students and the teacher dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, status

from classroom_sessions.api.models import (
    AccessUrlResponse,
    CreateSessionRequest,
    CreateSessionResponse,
    DeckGroupResponse,
    GroupedSessionsResponse,
    JoinSessionResponse,
    ParticipantsResponse,
    SessionDetail,
    SessionListResponse,
    SessionSummary,
    SuccessResponse,
)
from classroom_sessions.domain.sessions import ContentKind
from classroom_sessions.services.listing import (
    StatusFilter,
    filter_sessions,
    group_by_deck,
)
from classroom_sessions.services.sessions import JoinStatus

if TYPE_CHECKING:
    from classroom_sessions.containers import AppContainer

router = APIRouter(prefix="/api", tags=["sessions"])

_JOIN_ERRORS = {
    JoinStatus.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Session not found"),
    JoinStatus.INACTIVE: (status.HTTP_410_GONE, "Session is no longer active"),
    JoinStatus.KIND_MISMATCH: (
        status.HTTP_400_BAD_REQUEST,
        "Session type mismatch",
    ),
}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _require_kind(session_id: str | None, content_kind: str | None) -> ContentKind:
    if not session_id or not content_kind:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing sessionId or contentKind",
        )
    return _parse_kind(content_kind)


def _parse_kind(content_kind: str) -> ContentKind:
    try:
        return ContentKind(content_kind)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported contentKind: {content_kind}",
        ) from None


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
    )


@router.post("/sessions")
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    if_absent: bool = Query(default=False, alias="ifAbsent"),
) -> CreateSessionResponse:
    """Mint a session for generated flashcards or a quiz."""
    content_kind = _require_kind(body.session_id, body.content_kind)
    container = _container(request)
    session = container.session_service.create_session(
        session_id=body.session_id,
        content_kind=content_kind,
        payload=body.payload,
        source_deck_name=body.source_deck_name,
        source_deck_session_id=body.source_deck_session_id,
        if_absent=if_absent,
    )
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Session already exists",
        )
    return CreateSessionResponse(
        access_url=session.access_url,
        session=SessionSummary.from_snapshot(session),
    )


@router.get("/session")
async def join_session(
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
    content_kind: str | None = Query(default=None, alias="contentKind"),
) -> JoinSessionResponse:
    """Serve session content to a student and record the join."""
    kind = _require_kind(session_id, content_kind)
    result = _container(request).session_service.join(session_id, kind)
    if result.status in _JOIN_ERRORS:
        code, detail = _JOIN_ERRORS[result.status]
        raise HTTPException(status_code=code, detail=detail)
    return JoinSessionResponse(
        session_id=result.session.session_id,
        content_kind=result.session.content_kind,
        payload=result.session.payload,
        participant_id=result.participant_id,
        participant_count=result.participant_count,
    )


@router.get("/sessions")
async def list_sessions(
    request: Request,
    search: str | None = None,
    content_kind: str | None = Query(default=None, alias="contentKind"),
    status_filter: StatusFilter = Query(default=StatusFilter.ALL, alias="status"),
) -> SessionListResponse:
    """Return every session, optionally filtered."""
    kind = _parse_kind(content_kind) if content_kind else None
    sessions = filter_sessions(
        _container(request).registry.list_all(), search, kind, status_filter
    )
    return SessionListResponse(
        sessions=[SessionDetail.from_snapshot(s) for s in sessions]
    )


@router.get("/sessions/active")
async def list_active_sessions(request: Request) -> SessionListResponse:
    """Return sessions currently open to students."""
    sessions = _container(request).registry.list_active()
    return SessionListResponse(
        sessions=[SessionDetail.from_snapshot(s) for s in sessions]
    )


@router.get("/sessions/grouped")
async def list_grouped_sessions(
    request: Request,
    search: str | None = None,
    content_kind: str | None = Query(default=None, alias="contentKind"),
    status_filter: StatusFilter = Query(default=StatusFilter.ALL, alias="status"),
) -> GroupedSessionsResponse:
    """Return sessions grouped by the deck they were generated from."""
    kind = _parse_kind(content_kind) if content_kind else None
    sessions = filter_sessions(
        _container(request).registry.list_all(), search, kind, status_filter
    )
    return GroupedSessionsResponse(
        groups=[DeckGroupResponse.from_group(g) for g in group_by_deck(sessions)]
    )


@router.get("/sessions/{session_id}/participants")
async def list_participants(session_id: str, request: Request) -> ParticipantsResponse:
    participants = _container(request).registry.list_participants(session_id)
    return ParticipantsResponse(session_id=session_id, participants=participants)


@router.post("/sessions/{session_id}")
async def reactivate_session(session_id: str, request: Request) -> SuccessResponse:
    """Reopen a paused session."""
    if not _container(request).registry.activate(session_id):
        raise _not_found()
    return SuccessResponse()


@router.delete("/sessions/{session_id}")
async def deactivate_or_delete_session(
    session_id: str,
    request: Request,
    permanent: bool = False,
) -> SuccessResponse:
    """Pause a session, or remove it entirely with ``permanent=true``."""
    registry = _container(request).registry
    if permanent:
        found = registry.delete(session_id)
    else:
        found = registry.deactivate(session_id)
    if not found:
        raise _not_found()
    return SuccessResponse()


@router.get("/access-url")
async def preview_access_url(
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
    content_kind: str | None = Query(default=None, alias="contentKind"),
) -> AccessUrlResponse:
    """Return the student link for a session without creating it."""
    kind = _require_kind(session_id, content_kind)
    url = _container(request).session_service.access_url(session_id, kind)
    return AccessUrlResponse(access_url=url)
