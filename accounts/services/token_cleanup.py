"""Scheduler that periodically removes expired bearer tokens."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from accounts.services.token import TokenService, utcnow

logger = logging.getLogger(__name__)


class TokenCleanupScheduler:
    """Runs a token sweep every ``interval`` until stopped."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval: timedelta,
        expire_after: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.interval = interval
        self.expire_after = expire_after
        self.clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop as an asyncio background task."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Token cleanup started (every %s)", self.interval)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Token cleanup stopped")

    def run_once(self) -> int:
        """Sweep expired tokens in a fresh session. Returns how many were deleted."""
        db = self.session_factory()
        try:
            service = TokenService(db, expire_after=self.expire_after, clock=self.clock)
            count = service.sweep_expired()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        if count:
            logger.info("Removed %d expired tokens", count)
        return count

    async def _loop(self) -> None:
        interval = self.interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            try:
                await asyncio.to_thread(self.run_once)
            except Exception:
                # Retried on the next tick
                logger.exception("Token cleanup failed")
