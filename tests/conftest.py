"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from classroom_sessions.config import Settings
from classroom_sessions.containers import AppContainer, build_container
from classroom_sessions.services.registry import SessionRegistry
from classroom_sessions.services.sessions import SessionService


@dataclass
class FakeClock:
    """Controllable clock for expiry tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees package records in every test."""
    logger = logging.getLogger("classroom_sessions")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url="https://class.example.com/")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> SessionRegistry:
    return SessionRegistry(base_url="https://class.example.com", clock=clock)


@pytest.fixture
def session_service(registry: SessionRegistry) -> SessionService:
    return SessionService(registry)


@pytest.fixture
def container(settings: Settings, clock: FakeClock) -> AppContainer:
    return build_container(settings, clock=clock)


@pytest.fixture
def quiz_payload() -> list[dict[str, object]]:
    return [{"question": "Q", "options": ["A", "B"], "correctIndex": 1}]
