"""
Daily reset of user quotas, scheduled with APScheduler.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

RESET_JOB_ID = "daily_quota_reset"


class DailyResetScheduler:
    """
    Minimal wrapper around BackgroundScheduler calling ``reset`` once a day.

    This is the only caller of ``UserPermissions.reset`` outside of the admin route.
    """

    def __init__(self, reset: Callable[[], None], reset_hour: int = 0):
        """
        Args:
            reset: Function to call at each reset
            reset_hour: UTC hour of the daily reset

        Raises:
            ValueError: If reset_hour is not between 0 and 23
        """
        if not 0 <= reset_hour <= 23:
            raise ValueError(f"reset_hour must be between 0 and 23, got {reset_hour}")
        self._reset = reset
        self.reset_hour = reset_hour
        self.trigger = CronTrigger(hour=reset_hour, minute=0, second=0, timezone="UTC")
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def next_reset_time(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Next time the reset fires after ``now`` (UTC now by default)."""
        return self.trigger.get_next_fire_time(None, now or datetime.now(timezone.utc))

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = BackgroundScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._run_reset,
            trigger=self.trigger,
            id=RESET_JOB_ID,
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=3600,
        )
        self._scheduler.start()
        logger.info(f"Quota reset scheduler started (daily at {self.reset_hour:02d}:00 UTC)")

    def stop(self) -> None:
        """Shut the scheduler down, waiting for a running reset to finish."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=True)
        self._scheduler = None
        logger.info("Quota reset scheduler stopped")

    def get_job(self):
        """The scheduled reset job, or None when the scheduler is not running."""
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(RESET_JOB_ID)

    def _run_reset(self) -> None:
        logger.info("Running daily quota reset")
        self._reset()
