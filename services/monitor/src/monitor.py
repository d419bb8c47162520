"""
Precipitation monitor

Runs the fetch -> ingest -> purge -> aggregate cycle for one location and
keeps the published attributes. Also the command line entry point.
"""
import argparse
import logging
import sys
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import requests

from .addressing import (
    DayInfo,
    MonthTag,
    RelativeDay,
    max_hours,
    max_hours_last_month,
    month_for_day,
    record_key,
    relative_day,
)
from .aggregator import (
    PRECIP_1HR,
    PRECIP_24HR,
    PRECIP_TODAY,
    PRECIP_YESTERDAY,
    compute_rolling_totals,
    day_total,
    weekday_attribute,
)
from .config import MonitorConfig, get_config
from .nws_client import NWSClient
from .observations import DetailLevel, MalformedRowError, ObservationRecord, decode_row
from .retention import RetainedWindow, expired_counterpart, purge, window_for
from .scheduler import MonitorScheduler
from .store import RecordStore

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Any], None]

NEWEST_RECORD = "NewestRecord"
WATER = "water"


class WaterState(str, Enum):
    WET = "wet"
    DRY = "dry"


@dataclass
class IngestStats:
    received: int = 0
    inserted: int = 0
    existing: int = 0
    malformed: int = 0
    evicted: int = 0


@dataclass(frozen=True)
class MonitorState:
    """Snapshot of what the monitor currently publishes."""

    newest_address: Optional[int]
    record_count: int
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0

    @property
    def newest_record(self) -> Optional[str]:
        if self.newest_address is None:
            return None
        return record_key(self.newest_address)


class PrecipitationMonitor:
    """Keeps the observation history of one airport and its statistics."""

    def __init__(
        self,
        config: MonitorConfig,
        client: Optional[NWSClient] = None,
        store: Optional[RecordStore] = None,
        clock: Callable[[], datetime] = datetime.now,
        publisher: Optional[Publisher] = None,
    ):
        """
        Initialize monitor

        Args:
            config: Monitor configuration
            client: Source of observation rows (defaults to an NWSClient)
            store: Record store (defaults to an empty in-memory store)
            clock: Returns the current local time
            publisher: Called with (name, value) for every published attribute
        """
        self.config = config
        self.client = client if client is not None else NWSClient(config)
        self.store = store if store is not None else RecordStore()
        self.clock = clock
        self.publisher = publisher
        self.newest_address: Optional[int] = None
        self._attributes: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    def _publish(self, name: str, value: Any) -> None:
        self._attributes[name] = value
        if self.publisher is not None:
            self.publisher(name, value)

    def _publish_current_conditions(self, address: int, record: ObservationRecord) -> None:
        self._publish(NEWEST_RECORD, record_key(address))
        self._publish("Day", record.day_of_month)
        self._publish("Time", record.time)
        self._publish("Temperature", record.temperature_f)
        self._publish("Humidity", record.humidity_pct)
        self._publish(PRECIP_1HR, record.precipitation_in)

        if self.config.detail >= DetailLevel.NORMAL:
            self._publish("Dewpoint", record.dewpoint_f)
            self._publish("Pressure", record.pressure_mb)
            self._publish("Wind", record.wind)

        if self.config.detail >= DetailLevel.VERBOSE:
            self._publish("Visibility", record.visibility_mi)
            self._publish("Weather", record.weather)
            self._publish("SkyConditions", record.sky)

    @property
    def attributes(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._attributes)

    def state(self) -> MonitorState:
        with self._lock:
            return MonitorState(
                newest_address=self.newest_address,
                record_count=len(self.store),
                attributes=dict(self._attributes),
            )

    def stored_records(self) -> List[Tuple[int, Optional[MonthTag], ObservationRecord]]:
        with self._lock:
            return [(address, stored.month, stored.record) for address, stored in self.store.items()]

    def retention_window(self, now: Optional[datetime] = None) -> RetainedWindow:
        return window_for(self._now(now), self.config.retention_period)

    def ingest(self, rows: Iterable[Sequence[str]], now: Optional[datetime] = None) -> IngestStats:
        """
        Store new observations

        Rows are expected newest first; the first row that decodes becomes
        the newest record. Rows that do not decode are skipped.

        Args:
            rows: Table rows as lists of cell texts
            now: Current local time

        Returns:
            IngestStats for this batch
        """
        with self._lock:
            now = self._now(now)
            stats = IngestStats()
            newest_seen = False
            last_month_hours = max_hours(now).last_month

            for position, cells in enumerate(rows):
                stats.received += 1
                try:
                    record = decode_row(cells, self.config.detail).to_record()
                except MalformedRowError as e:
                    stats.malformed += 1
                    logger.debug(f"Skipping row {position}: {e}")
                    continue

                address = record.address
                month = month_for_day(record.day_of_month, now)

                # Same address from an older month; it is stale, not a duplicate
                stored_month = self.store.month_of(address)
                if stored_month is not None and stored_month != month:
                    stats.evicted += self.store.delete_all([address])
                    logger.info(f"Evicted stale record {record_key(address)} from {stored_month}")

                if self.store.insert_if_absent(address, record, month):
                    stats.inserted += 1
                    if self.config.incremental_eviction:
                        expired = expired_counterpart(
                            address, self.config.retention_period, last_month_hours
                        )
                        stats.evicted += self.store.delete_all([expired])
                else:
                    stats.existing += 1

                if not newest_seen:
                    newest_seen = True
                    self.newest_address = address
                    self._publish_current_conditions(address, record)

            logger.info(
                f"Ingested {stats.inserted} new records "
                f"({stats.existing} existing, {stats.malformed} malformed, {stats.evicted} evicted)"
            )
            return stats

    def remove_expired(self, now: Optional[datetime] = None) -> List[int]:
        """Purge records outside the retention window."""
        with self._lock:
            logger.info("The removal of expired records has been initiated.")
            return purge(self.store, self.retention_window(now))

    def precip_total(self, day: DayInfo, window: RetainedWindow) -> float:
        """Total for one day, published under its weekday name."""
        with self._lock:
            total = day_total(self.store, window, day.day_of_month)
            self._publish(weekday_attribute(day.weekday_name), total)
            logger.debug(f"Total precip for day {day.day_of_month} is: {total}")
            return total

    def update_totals(self, now: Optional[datetime] = None) -> MonitorState:
        """Recompute rolling totals and today's and yesterday's precipitation."""
        with self._lock:
            now = self._now(now)
            window = self.retention_window(now)

            totals = compute_rolling_totals(self.store, self.newest_address, max_hours_last_month(now))
            for name, value in totals.as_attributes().items():
                self._publish(name, value)

            self._publish(PRECIP_YESTERDAY, self.precip_total(relative_day(RelativeDay.YESTERDAY, now), window))
            self._publish(PRECIP_TODAY, self.precip_total(relative_day(RelativeDay.TODAY, now), window))

            logger.debug(f"Rolling totals: {asdict(totals)}")
            return self.state()

    def refresh(self, now: Optional[datetime] = None) -> MonitorState:
        """
        Run one polling cycle

        A failed fetch is logged and the cycle carries on with the records
        already stored.
        """
        with self._lock:
            now = self._now(now)
            logger.info("A data refresh has been initiated.")

            rows: List[Sequence[str]] = []
            try:
                rows = self.client.fetch_rows()
            except requests.RequestException as e:
                logger.error(f"Fetch failed, aggregating stored records only: {e}")

            self.ingest(rows, now)
            self.remove_expired(now)
            return self.update_totals(now)

    def check_threshold(self, threshold: Optional[float] = None, now: Optional[datetime] = None) -> WaterState:
        """
        Compare the last 24 hours of precipitation to the watering threshold

        Only precipitation strictly above the threshold counts as wet.
        """
        with self._lock:
            if threshold is None:
                threshold = self.config.watering_threshold

            self.update_totals(now)
            precip_24hr = self._attributes.get(PRECIP_24HR, 0.0)

            if precip_24hr > threshold:
                result = WaterState.WET
                logger.info(
                    f"The watering threshold of {threshold} has been exceeded with "
                    f"{precip_24hr} inches in the past 24 hours. Water sensor set to 'wet'."
                )
            else:
                result = WaterState.DRY
                logger.info(
                    f"The watering threshold of {threshold} has NOT been exceeded with "
                    f"{precip_24hr} inches in the past 24 hours. Water sensor set to 'dry'."
                )

            self._publish(WATER, result.value)
            return result

    def daily(self, now: Optional[datetime] = None) -> WaterState:
        """Once-a-day task: threshold check, final total for yesterday, purge."""
        with self._lock:
            now = self._now(now)
            logger.info("The daily task has been run.")
            result = self.check_threshold(now=now)
            self.precip_total(relative_day(RelativeDay.YESTERDAY, now), self.retention_window(now))
            self.remove_expired(now)
            return result

    def reset(self) -> None:
        """Clear all records and published attributes."""
        with self._lock:
            self.store.clear()
            self.newest_address = None
            names = list(self._attributes)
            self._attributes.clear()
            if self.publisher is not None:
                for name in names:
                    self.publisher(name, None)
            logger.info("All records and published attributes have been cleared.")

    def close(self):
        """Close the observation client."""
        self.client.close()


def _print_summary(monitor: PrecipitationMonitor, state: MonitorState) -> None:
    print("\n" + "=" * 60)
    print("PRECIPITATION MONITOR SUMMARY")
    print("=" * 60)
    print(f"Airport:           {monitor.config.airport_code}")
    print(f"Retention:         {monitor.config.retention_period}h")
    print(f"Records Stored:    {state.record_count}")
    print(f"Newest Record:     {state.newest_record or 'N/A'}")
    for name in sorted(state.attributes):
        if name.startswith("Precip") or name.endswith("Avg") or name == WATER:
            print(f"{name + ':':<19}{state.attributes[name]}")
    print("=" * 60 + "\n")


def main():
    """CLI entry point for the monitor."""
    parser = argparse.ArgumentParser(
        description="PrecipMonitor - NWS precipitation and weather monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch once and print the rolling totals
  MONITOR_AIRPORT_CODE=KORD precip-monitor refresh

  # Poll on the configured schedule until interrupted
  precip-monitor run --airport KDFW

  # Fetch once and evaluate the watering threshold
  precip-monitor check-threshold --threshold 0.2
        """
    )
    parser.add_argument(
        "command",
        choices=["refresh", "run", "check-threshold"],
        help="Operation to run"
    )
    parser.add_argument(
        "--airport",
        help="ICAO airport code (overrides MONITOR_AIRPORT_CODE)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Watering threshold in inches (check-threshold only)"
    )
    args = parser.parse_args()

    config = get_config()
    if args.airport:
        config = config.model_copy(update={"airport_code": args.airport.strip().upper()})

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    monitor = PrecipitationMonitor(config)

    try:
        if args.command == "run":
            scheduler = MonitorScheduler(monitor, config)
            scheduler.start()
            try:
                while True:
                    time.sleep(1)
            except KeyboardInterrupt:
                logger.info("Interrupted, shutting down")
            finally:
                scheduler.stop()
            sys.exit(0)

        state = monitor.refresh()
        if args.command == "check-threshold":
            result = monitor.check_threshold(args.threshold)
            state = monitor.state()
            logger.info(f"Water sensor: {result.value}")

        _print_summary(monitor, state)
        sys.exit(0)

    except Exception as e:
        logger.error(f"Monitor failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        monitor.close()


if __name__ == "__main__":
    main()
