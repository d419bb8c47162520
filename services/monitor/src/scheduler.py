"""
Polling and daily triggers for the monitor.

Wraps an APScheduler ``BackgroundScheduler`` with two jobs: an interval job
that refreshes observations at the configured poll frequency and a cron job
that runs the daily threshold check. Both call into the monitor, whose lock
keeps them from touching the record store at the same time.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from .config import MonitorConfig

logger = logging.getLogger(__name__)


class MonitorScheduler:
    """Runs ``monitor.refresh`` and ``monitor.daily`` on a schedule."""

    REFRESH_JOB_ID = "precip_monitor_refresh"
    DAILY_JOB_ID = "precip_monitor_daily"

    def __init__(self, monitor, config: MonitorConfig, scheduler: Optional[BackgroundScheduler] = None):
        self.monitor = monitor
        self.config = config
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler()
        self._run_counts: Dict[str, int] = {"refresh": 0, "daily": 0}
        self._last_run: Dict[str, datetime] = {}

    def _run(self, name: str, func) -> None:
        self._run_counts[name] += 1
        self._last_run[name] = datetime.now()
        try:
            func()
        except Exception:
            logger.exception(f"Scheduled {name} failed")

    def _refresh(self) -> None:
        self._run("refresh", self.monitor.refresh)

    def _daily(self) -> None:
        self._run("daily", self.monitor.daily)

    def configure(self) -> None:
        """Register jobs for the configured poll frequency and check hour."""
        minutes = self.config.poll_frequency.minutes
        if minutes is None:
            logger.info("Polling has been disabled.")
        else:
            self._scheduler.add_job(
                self._refresh,
                "interval",
                minutes=minutes,
                id=self.REFRESH_JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                next_run_time=datetime.now(),
            )
            logger.info(f"Polling interval set to once every {minutes} minutes.")

        check_hour = self.config.threshold_check_hour
        if check_hour == 0:
            logger.info("Watering threshold checking has been disabled.")
        else:
            self._scheduler.add_job(
                self._daily,
                "cron",
                hour=check_hour,
                minute=0,
                id=self.DAILY_JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            logger.info(f"Watering threshold checking will occur every day at {check_hour}:00 AM.")

    def start(self) -> None:
        self.configure()
        self._scheduler.start()
        logger.info("Monitor scheduler started")

    def stop(self) -> None:
        """Stop the scheduler, waiting for a running job to finish."""
        if self._scheduler.running:
            self._scheduler.shutdown(wait=True)
            logger.info("Monitor scheduler stopped")

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def health(self) -> Dict[str, Any]:
        running = self.running
        return {
            "running": running,
            "jobs": [job.id for job in self._scheduler.get_jobs()] if running else [],
            "run_counts": dict(self._run_counts),
            "last_run": {name: ts.isoformat() for name, ts in self._last_run.items()},
        }
