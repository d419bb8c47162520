"""Unit tests for the monitor scheduler."""
from unittest.mock import MagicMock, Mock

from precip_monitor.config import MonitorConfig, PollFrequency
from precip_monitor.scheduler import MonitorScheduler


def make_scheduler(**config_values):
    backend = MagicMock()
    backend.running = False
    monitor = Mock()
    config = MonitorConfig(airport_code="KORD", **config_values)
    return MonitorScheduler(monitor, config, scheduler=backend), backend, monitor


class TestConfigure:
    """Test job registration."""

    def test_registers_refresh_and_daily_jobs(self):
        scheduler, backend, _ = make_scheduler(
            poll_frequency=PollFrequency.HALF_HOUR, threshold_check_hour=5
        )

        scheduler.configure()

        assert backend.add_job.call_count == 2
        refresh_call, daily_call = backend.add_job.call_args_list
        assert refresh_call.args[1] == "interval"
        assert refresh_call.kwargs["minutes"] == 30
        assert refresh_call.kwargs["id"] == MonitorScheduler.REFRESH_JOB_ID
        assert daily_call.args[1] == "cron"
        assert daily_call.kwargs["hour"] == 5
        assert daily_call.kwargs["minute"] == 0

    def test_disabled_jobs_are_not_registered(self):
        scheduler, backend, _ = make_scheduler(
            poll_frequency=PollFrequency.NEVER, threshold_check_hour=0
        )

        scheduler.configure()

        backend.add_job.assert_not_called()

    def test_start_configures_and_starts(self):
        scheduler, backend, _ = make_scheduler()

        scheduler.start()

        backend.start.assert_called_once()
        assert backend.add_job.call_count == 2


class TestJobs:
    """Test job execution."""

    def test_refresh_job_calls_monitor(self):
        scheduler, _, monitor = make_scheduler()

        scheduler._refresh()
        scheduler._refresh()

        assert monitor.refresh.call_count == 2
        assert scheduler.health()["run_counts"]["refresh"] == 2

    def test_job_failure_is_logged_not_raised(self, caplog):
        scheduler, _, monitor = make_scheduler()
        monitor.daily.side_effect = RuntimeError("boom")

        scheduler._daily()

        assert scheduler.health()["run_counts"]["daily"] == 1
        assert "Scheduled daily failed" in caplog.text


class TestLifecycle:
    def test_stop_when_running(self):
        scheduler, backend, _ = make_scheduler()
        backend.running = True

        scheduler.stop()

        backend.shutdown.assert_called_once_with(wait=True)

    def test_stop_when_not_running(self):
        scheduler, backend, _ = make_scheduler()

        scheduler.stop()

        backend.shutdown.assert_not_called()

    def test_health_lists_jobs_when_running(self):
        scheduler, backend, _ = make_scheduler()
        backend.running = True
        job = Mock()
        job.id = MonitorScheduler.REFRESH_JOB_ID
        backend.get_jobs.return_value = [job]

        health = scheduler.health()

        assert health["running"] is True
        assert health["jobs"] == [MonitorScheduler.REFRESH_JOB_ID]
        assert health["last_run"] == {}
