"""Background task that expires old sessions."""

import asyncio
import contextlib
import logging

from classroom_sessions.services.registry import SessionRegistry

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60


class SessionSweeper:
    """Periodically runs the registry's expiry sweep on the event loop.

    ``start()`` is idempotent and ``stop()`` cancels the task and waits for it,
    so the application lifespan owns the sweep like any other resource.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._registry = registry
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="session-sweeper")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        task = self._task
        if task is None:
            return
        self._task = None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def run_once(self) -> int:
        """Run a single sweep immediately and return the number removed."""
        return self._registry.sweep_expired()

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.run_once()
            except Exception:
                logger.exception("Session sweep failed")
