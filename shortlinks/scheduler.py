"""Periodic cleanup of expired mappings."""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .errors import StorageUnavailable
from .service import URLMappingService

CLEANUP_JOB_ID = "cleanup_expired_urls"


class CleanupScheduler:
    """Run URLMappingService.cleanup_expired on an interval."""

    def __init__(
        self,
        service: URLMappingService,
        interval_minutes: int = 60,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_minutes <= 0:
            raise ValueError(f"Interval minutes must be positive (given value: {interval_minutes})")

        self.service = service
        self.interval_minutes = interval_minutes
        self.logger = logger or logging.getLogger(__name__)
        self.scheduler = AsyncIOScheduler(timezone="UTC")

    def start(self) -> None:
        """Register the cleanup job and start the scheduler (needs a running loop)."""
        self.scheduler.add_job(
            self.run_cleanup,
            "interval",
            minutes=self.interval_minutes,
            id=CLEANUP_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=60,
        )
        self.scheduler.start()
        self.logger.info(f"Expired URL cleanup scheduled every {self.interval_minutes} minutes")

    async def run_cleanup(self) -> int:
        """Run one cleanup pass; storage outages are logged and retried next tick."""
        try:
            return await self.service.cleanup_expired()
        except StorageUnavailable as e:
            self.logger.error(f"Scheduled cleanup failed: {e}")
            return 0

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            self.logger.info("Expired URL cleanup scheduler stopped")
