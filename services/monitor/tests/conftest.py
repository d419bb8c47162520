"""
Pytest configuration and fixtures for monitor service tests.
"""
from datetime import datetime
from unittest.mock import Mock

import pytest

from precip_monitor.config import MonitorConfig
from precip_monitor.monitor import PrecipitationMonitor
from precip_monitor.observations import ObservationRecord
from precip_monitor.store import RecordStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires network access)"
    )


def nws_row(day, hour, precip="", temp="60", humidity="80%", minute=53):
    """Build the cells of one obhistory table row, as split by the client."""
    return [
        f"{day:02d}",           # Date
        f"{hour:02d}:{minute:02d}",  # Time
        "S 9",                  # Wind
        "10.00",                # Visibility
        "Light Rain",           # Weather
        "OVC028",               # Sky conditions
        str(temp),              # Air temperature
        "54",                   # Dewpoint
        "",                     # 6 hour max
        "",                     # 6 hour min
        humidity,               # Relative humidity
        "NA",                   # Wind chill
        "NA",                   # Heat index
        "29.92",                # Altimeter
        "1013.2",               # Sea level pressure
        str(precip),            # Precipitation 1 hr
        "",                     # Precipitation 3 hr
        "",                     # Precipitation 6 hr
    ]


@pytest.fixture
def make_row():
    return nws_row


@pytest.fixture
def make_record():
    """Factory for observation records."""
    def _make(day, hour, precip=0.0, humidity=80.0, temp=60.0):
        return ObservationRecord(
            day_of_month=day,
            hour_of_day=hour,
            precipitation_in=precip,
            humidity_pct=humidity,
            temperature_f=temp,
        )
    return _make


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def monitor_config():
    """Monitor configuration for testing."""
    return MonitorConfig(airport_code="KORD", retention_period=72, watering_threshold=0.15)


@pytest.fixture
def now():
    """Saturday 2 March 2024, 05:10 local; hour of month 29."""
    return datetime(2024, 3, 2, 5, 10)


@pytest.fixture
def fake_client():
    client = Mock()
    client.fetch_rows.return_value = []
    return client


@pytest.fixture
def publisher():
    return Mock()


@pytest.fixture
def monitor(monitor_config, fake_client, now, publisher):
    """Monitor wired to a fake NWS client and a fixed clock."""
    return PrecipitationMonitor(
        monitor_config,
        client=fake_client,
        clock=lambda: now,
        publisher=publisher,
    )


@pytest.fixture
def sample_rows():
    """Newest-first rows for 2 March 05:00 back to 1 March 00:00."""
    precip = {(2, 5): "0.01", (2, 4): "0.02", (2, 3): "0.005"}
    rows = []
    for day, last_hour in ((2, 5), (1, 23)):
        for hour in range(last_hour, -1, -1):
            rows.append(nws_row(day, hour, precip=precip.get((day, hour), "")))
    return rows
