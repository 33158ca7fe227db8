# leettrack/jobs/sync_scheduler.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from leettrack.Core.config import get_settings
from leettrack.features.sync.service import SyncService, sync_service

logger = logging.getLogger("sync_scheduler")


class SyncScheduler:
    """Recurring "sync all" task with an explicit start/stop handle.

    Nothing runs on import: the application startup hook calls ``start`` and
    the shutdown hook calls ``stop``.
    """

    def __init__(self, service: SyncService = sync_service, interval_seconds: Optional[float] = None):
        self.service = service
        self.interval_seconds = interval_seconds or get_settings().sync_interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> bool:
        """One tick. Returns False when auto sync is switched off."""
        if not self.service.get_app_settings().is_auto_sync_enabled:
            logger.info("Auto sync disabled, skipping tick")
            return False
        summary = await self.service.sync_all()
        logger.info("Scheduled sync done: success=%d failed=%d", summary.success, summary.failed)
        return True

    async def _loop(self) -> None:
        logger.info("Sync scheduler started interval=%ss", self.interval_seconds)
        while True:
            try:
                await self.run_once()
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                logger.info("Sync scheduler cancelled")
                break
            except Exception as e:
                logger.exception("Sync scheduler error: %s, retrying next interval", e)
                await asyncio.sleep(self.interval_seconds)

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.create_task(self._loop(), name="leettrack-sync-scheduler")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Sync scheduler stopped")


# Optional: helper to run scheduler standalone
if __name__ == "__main__":
    from leettrack.DB.session import init_db

    logging.basicConfig(level=logging.INFO)
    init_db()
    asyncio.run(SyncScheduler().run_once())
