"""Shared monitor and scheduler instances for the API."""

import logging
from typing import Optional

from precip_monitor.config import get_config as get_monitor_config
from precip_monitor.monitor import PrecipitationMonitor
from precip_monitor.scheduler import MonitorScheduler

logger = logging.getLogger(__name__)

_monitor: Optional[PrecipitationMonitor] = None
_scheduler: Optional[MonitorScheduler] = None


def get_monitor() -> PrecipitationMonitor:
    """
    Dependency for FastAPI endpoints to get the monitor.

    One process monitors one location, so the instance is shared.
    """
    global _monitor
    if _monitor is None:
        _monitor = PrecipitationMonitor(get_monitor_config())
    return _monitor


def get_scheduler() -> Optional[MonitorScheduler]:
    return _scheduler


def start_scheduler() -> MonitorScheduler:
    """Start the polling and daily jobs for the shared monitor."""
    global _scheduler
    if _scheduler is None:
        _scheduler = MonitorScheduler(get_monitor(), get_monitor_config())
        _scheduler.start()
    return _scheduler


def stop_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.stop()
        _scheduler = None
