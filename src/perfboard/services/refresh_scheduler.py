"""Periodic background refresh."""

import asyncio
import logging
from typing import Optional

from perfboard.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Runs DashboardService.refresh on a fixed interval inside the event loop."""

    def __init__(self, dashboard_service: DashboardService, interval_seconds: float = 300):
        self._dashboard_service = dashboard_service
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        while True:
            try:
                await self._dashboard_service.refresh()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled refresh failed")
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Refresh scheduler started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
