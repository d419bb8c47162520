"""
Rolling and per-day statistics over the stored hours.

Precipitation totals are rounded to 3 decimals after every accumulation
step, so results match totals computed hour by hour. The 24 hour
temperature and humidity averages are truncated to whole numbers.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from .store import RecordStore

PRECISION = 3
ROLLING_WINDOWS = (3, 6, 12, 24)
AVERAGE_WINDOW = 24

# Published attribute names
PRECIP_1HR = "Precip1Hr"
PRECIP_3HR = "Precip3Hr"
PRECIP_6HR = "Precip6Hr"
PRECIP_12HR = "Precip12Hr"
PRECIP_24HR = "Precip24Hr"
PRECIP_TODAY = "Precip-Today"
PRECIP_YESTERDAY = "Precip-Yesterday"
TEMPERATURE_24HR_AVG = "Temperature24HrAvg"
HUMIDITY_24HR_AVG = "Humidity24HrAvg"


def weekday_attribute(weekday_name: str) -> str:
    return f"Precip-{weekday_name}"


class Field(str, Enum):
    PRECIPITATION = "precipitation"
    HUMIDITY = "humidity"
    TEMPERATURE = "temperature"

    @property
    def record_attribute(self) -> str:
        return {
            Field.PRECIPITATION: "precipitation_in",
            Field.HUMIDITY: "humidity_pct",
            Field.TEMPERATURE: "temperature_f",
        }[self]


def _address_back(newest_address: int, offset: int, wrap_hours: Optional[int]) -> int:
    address = newest_address - offset
    if address < 0 and wrap_hours:
        # Continue counting down from the last hour of the previous month
        address += wrap_hours
    return address


def rolling_sum(
    store: RecordStore,
    newest_address: Optional[int],
    window_hours: int,
    field: Field = Field.PRECIPITATION,
    wrap_hours: Optional[int] = None,
) -> float:
    """
    Sum a field over the most recent hours

    Args:
        store: Record store to read
        newest_address: Address of the newest hour, counted inclusively
        window_hours: Number of hours to cover
        field: Which value to sum
        wrap_hours: Hours in the previous month; when given the window
            continues past address 0 into the end of that month

    Returns:
        The sum; hours without a record contribute nothing
    """
    if newest_address is None:
        return 0.0

    field = Field(field)
    total = 0.0
    for offset in range(window_hours):
        address = _address_back(newest_address, offset, wrap_hours)
        record = store.get(address) if address >= 0 else None
        if record is None:
            continue
        total += getattr(record, field.record_attribute)
        if field is Field.PRECIPITATION:
            total = round(total, PRECISION)
    return total


def rolling_average(
    store: RecordStore,
    newest_address: Optional[int],
    window_hours: int,
    field: Field,
    wrap_hours: Optional[int] = None,
) -> int:
    """Window sum divided by the window length, truncated toward zero."""
    return int(rolling_sum(store, newest_address, window_hours, field, wrap_hours) / window_hours)


def day_total(store: RecordStore, live_addresses: Iterable[int], day_of_month: int) -> float:
    """
    Precipitation for one calendar day

    Only addresses in ``live_addresses`` are considered, so a day total never
    includes a record the retention period has already given up.
    """
    total = 0.0
    for address in sorted(live_addresses):
        record = store.get(address)
        if record is None or record.day_of_month != day_of_month:
            continue
        total = round(total + record.precipitation_in, PRECISION)
    return total


@dataclass(frozen=True)
class RollingTotals:
    precip_1hr: float = 0.0
    precip_3hr: float = 0.0
    precip_6hr: float = 0.0
    precip_12hr: float = 0.0
    precip_24hr: float = 0.0
    temperature_24hr_avg: int = 0
    humidity_24hr_avg: int = 0

    def as_attributes(self) -> Dict[str, float]:
        names = {
            "precip_1hr": PRECIP_1HR,
            "precip_3hr": PRECIP_3HR,
            "precip_6hr": PRECIP_6HR,
            "precip_12hr": PRECIP_12HR,
            "precip_24hr": PRECIP_24HR,
            "temperature_24hr_avg": TEMPERATURE_24HR_AVG,
            "humidity_24hr_avg": HUMIDITY_24HR_AVG,
        }
        return {names[key]: value for key, value in asdict(self).items()}


def compute_rolling_totals(
    store: RecordStore,
    newest_address: Optional[int],
    wrap_hours: Optional[int] = None,
) -> RollingTotals:
    """All rolling sums and 24 hour averages ending at ``newest_address``."""
    precip = {
        window: rolling_sum(store, newest_address, window, Field.PRECIPITATION, wrap_hours)
        for window in (1,) + ROLLING_WINDOWS
    }
    return RollingTotals(
        precip_1hr=precip[1],
        precip_3hr=precip[3],
        precip_6hr=precip[6],
        precip_12hr=precip[12],
        precip_24hr=precip[24],
        temperature_24hr_avg=rolling_average(
            store, newest_address, AVERAGE_WINDOW, Field.TEMPERATURE, wrap_hours
        ),
        humidity_24hr_avg=rolling_average(
            store, newest_address, AVERAGE_WINDOW, Field.HUMIDITY, wrap_hours
        ),
    )
