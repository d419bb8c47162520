"""Unit tests for rolling and per-day statistics."""
import pytest

from precip_monitor.aggregator import (
    HUMIDITY_24HR_AVG,
    PRECIP_1HR,
    PRECIP_24HR,
    TEMPERATURE_24HR_AVG,
    Field,
    compute_rolling_totals,
    day_total,
    rolling_average,
    rolling_sum,
    weekday_attribute,
)


class TestRollingSum:
    """Test windowed sums."""

    def test_empty_store_sums_to_zero(self, store):
        for window in (1, 3, 6, 12, 24):
            assert rolling_sum(store, 10, window) == 0.0
        assert rolling_sum(store, None, 24) == 0.0

    def test_three_hour_precipitation(self, store, make_record):
        store.insert_if_absent(24, make_record(2, 0, precip=0.010))
        store.insert_if_absent(25, make_record(2, 1, precip=0.020))
        store.insert_if_absent(26, make_record(2, 2, precip=0.005))

        assert rolling_sum(store, 26, 3) == 0.035

    def test_missing_hours_contribute_nothing(self, store, make_record):
        store.insert_if_absent(24, make_record(2, 0, precip=0.010))
        store.insert_if_absent(26, make_record(2, 2, precip=0.005))

        assert rolling_sum(store, 26, 3) == 0.015

    def test_window_excludes_older_hours(self, store, make_record):
        store.insert_if_absent(23, make_record(1, 23, precip=1.0))
        store.insert_if_absent(26, make_record(2, 2, precip=0.005))

        assert rolling_sum(store, 26, 3) == 0.005

    def test_wraps_into_previous_month(self, store, make_record):
        store.insert_if_absent(743, make_record(31, 23, precip=0.1))
        store.insert_if_absent(0, make_record(1, 0, precip=0.2))

        assert rolling_sum(store, 0, 3, wrap_hours=744) == 0.3
        assert rolling_sum(store, 0, 3) == 0.2

    def test_rounds_each_step(self, store, make_record):
        for address in range(3):
            store.insert_if_absent(address, make_record(1, address, precip=0.1))

        assert rolling_sum(store, 2, 3) == 0.3


class TestRollingAverage:
    """Test truncated 24 hour averages."""

    def test_average_is_truncated(self, store, make_record):
        for hour in range(24):
            store.insert_if_absent(hour, make_record(1, hour, temp=71.0 if hour == 0 else 70.0))

        assert rolling_average(store, 23, 24, Field.TEMPERATURE) == 70

    def test_negative_average_truncates_toward_zero(self, store, make_record):
        for hour in range(24):
            store.insert_if_absent(hour, make_record(1, hour, temp=-1.5))

        assert rolling_average(store, 23, 24, Field.TEMPERATURE) == -1

    def test_divides_by_full_window(self, store, make_record):
        for hour in range(12):
            store.insert_if_absent(hour, make_record(1, hour, humidity=80.0))

        assert rolling_average(store, 11, 24, Field.HUMIDITY) == 40


class TestDayTotal:
    """Test per-day precipitation."""

    def test_only_live_addresses_count(self, store, make_record):
        for hour in range(4):
            store.insert_if_absent(96 + hour, make_record(5, hour, precip=0.1))
        store.insert_if_absent(100, make_record(5, 4, precip=0.1))

        assert day_total(store, {96, 97, 98, 99}, 5) == 0.4

    def test_other_days_are_ignored(self, store, make_record):
        store.insert_if_absent(95, make_record(4, 23, precip=0.3))
        store.insert_if_absent(96, make_record(5, 0, precip=0.1))

        assert day_total(store, {95, 96}, 5) == 0.1
        assert day_total(store, {95, 96}, 4) == 0.3

    def test_no_records(self, store):
        assert day_total(store, range(0, 50), 1) == 0.0


class TestRollingTotals:
    """Test the published attribute bundle."""

    def test_attributes(self, store, make_record):
        for hour in range(24):
            store.insert_if_absent(hour, make_record(1, hour, precip=0.01, humidity=90.0, temp=50.0))

        attributes = compute_rolling_totals(store, 23).as_attributes()

        assert attributes[PRECIP_1HR] == 0.01
        assert attributes[PRECIP_24HR] == pytest.approx(0.24)
        assert attributes[TEMPERATURE_24HR_AVG] == 50
        assert attributes[HUMIDITY_24HR_AVG] == 90
        assert set(attributes) == {
            "Precip1Hr", "Precip3Hr", "Precip6Hr", "Precip12Hr", "Precip24Hr",
            "Temperature24HrAvg", "Humidity24HrAvg",
        }

    def test_no_newest_record(self, store):
        attributes = compute_rolling_totals(store, None).as_attributes()

        assert all(value == 0 for value in attributes.values())

    def test_weekday_attribute(self):
        assert weekday_attribute("Monday") == "Precip-Monday"
