"""Test configuration and fixtures."""

import os
from datetime import datetime
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

# Jobs are triggered explicitly in tests
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from precip_api.dependencies import get_monitor  # noqa: E402
from precip_api.main import app  # noqa: E402
from precip_monitor.config import MonitorConfig  # noqa: E402
from precip_monitor.monitor import PrecipitationMonitor  # noqa: E402


def nws_row(day, hour, precip=""):
    """Cells of one obhistory table row."""
    return [f"{day:02d}", f"{hour:02d}:53", "S 9", "10.00", "Rain", "OVC028", "60", "54",
            "", "", "80%", "NA", "NA", "29.92", "1013.2", precip, "", ""]


@pytest.fixture
def sample_rows():
    """Newest-first rows for 2 March 05:00 back to 1 March 00:00."""
    precip = {(2, 5): "0.01", (2, 4): "0.02", (2, 3): "0.005"}
    rows = []
    for day, last_hour in ((2, 5), (1, 23)):
        for hour in range(last_hour, -1, -1):
            rows.append(nws_row(day, hour, precip=precip.get((day, hour), "")))
    return rows


@pytest.fixture
def fake_client(sample_rows):
    client = Mock()
    client.fetch_rows.return_value = sample_rows
    return client


@pytest.fixture
def monitor(fake_client):
    """Monitor for KORD at Saturday 2 March 2024, 05:10."""
    config = MonitorConfig(airport_code="KORD", retention_period=72, watering_threshold=0.15)
    return PrecipitationMonitor(
        config,
        client=fake_client,
        clock=lambda: datetime(2024, 3, 2, 5, 10),
    )


@pytest.fixture(scope="function")
def client(monitor):
    """Create a test client bound to the test monitor."""
    app.dependency_overrides[get_monitor] = lambda: monitor

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
