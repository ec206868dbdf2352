"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from classroom_sessions.config import Settings
from classroom_sessions.services.registry import Clock, SessionRegistry, utc_now
from classroom_sessions.services.sessions import SessionService
from classroom_sessions.services.sweeper import SessionSweeper


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registry: SessionRegistry
    session_service: SessionService
    sweeper: SessionSweeper
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, clock: Clock = utc_now
) -> AppContainer:
    """Create the default dependency container with one registry per process."""
    resolved_settings = settings or Settings()
    registry = SessionRegistry(
        base_url=resolved_settings.base_url,
        retention=timedelta(hours=resolved_settings.session_retention_hours),
        clock=clock,
    )
    session_service = SessionService(registry)
    sweeper = SessionSweeper(
        registry, interval_seconds=resolved_settings.sweep_interval_seconds
    )

    async def close_resources() -> None:
        await sweeper.stop()

    return AppContainer(
        settings=resolved_settings,
        registry=registry,
        session_service=session_service,
        sweeper=sweeper,
        close_resources=close_resources,
    )
