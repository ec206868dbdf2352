"""Tests for session creation and join rules."""

import re
from concurrent.futures import ThreadPoolExecutor

from classroom_sessions.domain.sessions import ContentKind
from classroom_sessions.services.registry import SessionRegistry
from classroom_sessions.services.sessions import (
    JoinStatus,
    SessionService,
    new_participant_id,
)


def test_join_registers_new_participant(
    session_service: SessionService, registry: SessionRegistry, quiz_payload
) -> None:
    session_service.create_session("s1", ContentKind.QUIZ, quiz_payload)

    first = session_service.join("s1", ContentKind.QUIZ)
    second = session_service.join("s1", ContentKind.QUIZ)

    assert first.status == JoinStatus.JOINED
    assert first.session.payload == quiz_payload
    assert first.participant_count == 1
    assert second.participant_count == 2
    assert first.participant_id != second.participant_id
    assert registry.list_participants("s1") == [
        first.participant_id,
        second.participant_id,
    ]


def test_join_unknown_session(session_service: SessionService) -> None:
    result = session_service.join("missing", ContentKind.QUIZ)

    assert result.status == JoinStatus.NOT_FOUND
    assert result.participant_id is None


def test_join_inactive_session_is_rejected(
    session_service: SessionService, registry: SessionRegistry
) -> None:
    session_service.create_session("s1", ContentKind.FLASHCARDS, [])
    registry.deactivate("s1")

    result = session_service.join("s1", ContentKind.FLASHCARDS)

    assert result.status == JoinStatus.INACTIVE
    assert registry.list_participants("s1") == []


def test_join_with_wrong_kind_is_rejected(
    session_service: SessionService, registry: SessionRegistry
) -> None:
    session_service.create_session("s1", ContentKind.FLASHCARDS, [])

    result = session_service.join("s1", ContentKind.QUIZ)

    assert result.status == JoinStatus.KIND_MISMATCH
    assert registry.list_participants("s1") == []


def test_create_session_if_absent_reports_collision(
    session_service: SessionService,
) -> None:
    assert session_service.create_session("s1", ContentKind.QUIZ, []) is not None

    collided = session_service.create_session(
        "s1", ContentKind.FLASHCARDS, [], if_absent=True
    )
    overwritten = session_service.create_session("s1", ContentKind.FLASHCARDS, [])

    assert collided is None
    assert overwritten.content_kind == ContentKind.FLASHCARDS


def test_access_url_preview_does_not_create_session(
    session_service: SessionService, registry: SessionRegistry
) -> None:
    url = session_service.access_url("s9", ContentKind.FLASHCARDS)

    assert url == "https://class.example.com/student/s9/flashcards"
    assert registry.get("s9") is None


def test_new_participant_id_format() -> None:
    participant_id = new_participant_id()

    assert re.fullmatch(r"participant_\d+_[0-9a-f]{9}", participant_id)


def test_join_session_deleted_before_registration(clock) -> None:
    class DeletingRegistry(SessionRegistry):
        def get(self, session_id: str):
            session = super().get(session_id)
            self.delete(session_id)
            return session

    registry = DeletingRegistry(base_url="http://localhost:3000", clock=clock)
    registry.create("s1", ContentKind.QUIZ, [])

    result = SessionService(registry).join("s1", ContentKind.QUIZ)

    assert result.status == JoinStatus.NOT_FOUND
    assert result.participant_count == 0
    assert registry.get("s1") is None


def test_concurrent_joins_report_distinct_counts(
    session_service: SessionService, registry: SessionRegistry
) -> None:
    session_service.create_session("s1", ContentKind.FLASHCARDS, [])

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(
                lambda _: session_service.join("s1", ContentKind.FLASHCARDS),
                range(40),
            )
        )

    assert all(r.status == JoinStatus.JOINED for r in results)
    assert sorted(r.participant_count for r in results) == list(range(1, 41))
    assert len(registry.list_participants("s1")) == 40
