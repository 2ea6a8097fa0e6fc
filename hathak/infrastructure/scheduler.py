"""Background loop running the delivery sweep and the expiry purge."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from anyio import to_thread
from sqlalchemy.orm import Session

from hathak.application.use_cases.notifications import (
    deliver_scheduled_notifications,
    purge_expired_notifications,
)
from hathak.infrastructure.database import SessionLocal

logger = logging.getLogger(__name__)


class MaintenanceScheduler:
    """Periodically deliver due notifications and purge expired ones.

    Each tick runs in a worker thread with its own session so the event loop
    keeps serving requests while the sweep talks to the database.
    """

    def __init__(
        self,
        interval_seconds: float,
        *,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._session_factory = session_factory
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> tuple[int, int]:
        """Run one sweep followed by one purge; returns ``(processed, deleted)``."""

        session = self._session_factory()
        try:
            processed = deliver_scheduled_notifications(session)
            deleted = purge_expired_notifications(session)
        finally:
            session.close()
        return processed, deleted

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info(
            "Notification maintenance loop started (every %s seconds)",
            self.interval_seconds,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Notification maintenance loop stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await to_thread.run_sync(self.run_once)
            except Exception:
                logger.exception("Notification maintenance tick failed")
            await asyncio.sleep(self.interval_seconds)


__all__ = ["MaintenanceScheduler"]
