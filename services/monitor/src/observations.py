"""
Observation records and row decoding

Turns one row of the NWS observation history table (already split into
cell strings) into a typed record. Each field is decoded independently so
a bad cell is reported by name instead of failing the whole table.
"""
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Sequence

from .addressing import address_for

logger = logging.getLogger(__name__)


class DetailLevel(IntEnum):
    """How much of each observation row is kept."""

    BRIEF = 0  # day, time, precipitation, temperature, humidity
    NORMAL = 1  # adds dewpoint, pressure and wind
    VERBOSE = 2  # adds visibility, weather and sky conditions


class MalformedRowError(ValueError):
    """Raised when a row lacks one of the fields every record needs."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        detail = ", ".join(f"{name}: {reason}" for name, reason in sorted(errors.items()))
        super().__init__(f"Row is missing required fields ({detail})")


# Column positions in the obhistory table
COLUMN_DAY = 0
COLUMN_TIME = 1
COLUMN_WIND = 2
COLUMN_VISIBILITY = 3
COLUMN_WEATHER = 4
COLUMN_SKY = 5
COLUMN_TEMPERATURE = 6
COLUMN_DEWPOINT = 7
COLUMN_HUMIDITY = 10
COLUMN_PRESSURE = 14
COLUMN_PRECIP_1HR = 15

REQUIRED_FIELDS = (
    "day_of_month",
    "hour_of_day",
    "precipitation_in",
    "humidity_pct",
    "temperature_f",
)


@dataclass(frozen=True)
class ObservationRecord:
    """One hour of observations for the monitored location.

    Temperatures are in Fahrenheit, precipitation in inches, pressure in
    millibars and visibility in miles, as reported by the NWS for US stations.
    """

    day_of_month: int
    hour_of_day: int
    precipitation_in: float
    humidity_pct: float
    temperature_f: float
    dewpoint_f: Optional[float] = None
    pressure_mb: Optional[float] = None
    wind: Optional[str] = None
    visibility_mi: Optional[float] = None
    weather: Optional[str] = None
    sky: Optional[str] = None

    @property
    def address(self) -> int:
        return address_for(self.day_of_month, self.hour_of_day)

    @property
    def time(self) -> str:
        return f"{self.hour_of_day:02d}:00"


@dataclass
class PartialRecord:
    """Result of decoding a single row, field by field."""

    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return all(name in self.values for name in REQUIRED_FIELDS)

    def missing_fields(self) -> Dict[str, str]:
        return {
            name: self.errors.get(name, "absent")
            for name in REQUIRED_FIELDS
            if name not in self.values
        }

    def to_record(self) -> ObservationRecord:
        """
        Build the immutable record

        Raises:
            MalformedRowError: If any required field failed to decode
        """
        if not self.is_complete:
            raise MalformedRowError(self.missing_fields())
        return ObservationRecord(**self.values)


def _cell(cells: Sequence[str], index: int) -> str:
    if index >= len(cells):
        raise IndexError(f"row has {len(cells)} cells, no column {index}")
    return cells[index].strip()


def _decode(partial: PartialRecord, name: str, decoder, cells: Sequence[str], index: int) -> None:
    try:
        partial.values[name] = decoder(_cell(cells, index))
    except (ValueError, IndexError) as e:
        partial.errors[name] = str(e)


def _to_hour(text: str) -> int:
    hour = int(text.split(":")[0])
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    return hour


def _to_day(text: str) -> int:
    day = int(text)
    if not 1 <= day <= 31:
        raise ValueError(f"day out of range: {day}")
    return day


def _to_precip(text: str) -> float:
    # A blank precipitation cell means no measurable precipitation
    if text == "":
        return 0.0
    value = float(text)
    if value < 0:
        raise ValueError(f"negative precipitation: {value}")
    return value


def _to_humidity(text: str) -> float:
    return float(text.replace("%", ""))


def _to_optional_float(text: str) -> Optional[float]:
    if text == "":
        return None
    return float(text)


def _to_optional_text(text: str) -> Optional[str]:
    return text or None


def decode_row(cells: Sequence[str], detail: DetailLevel = DetailLevel.BRIEF) -> PartialRecord:
    """
    Decode one table row into a partial record

    Args:
        cells: Cell texts with HTML already stripped
        detail: Which optional fields to keep

    Returns:
        PartialRecord holding every field that decoded plus per-field errors
    """
    partial = PartialRecord()

    _decode(partial, "day_of_month", _to_day, cells, COLUMN_DAY)
    _decode(partial, "hour_of_day", _to_hour, cells, COLUMN_TIME)
    _decode(partial, "temperature_f", float, cells, COLUMN_TEMPERATURE)
    _decode(partial, "humidity_pct", _to_humidity, cells, COLUMN_HUMIDITY)
    _decode(partial, "precipitation_in", _to_precip, cells, COLUMN_PRECIP_1HR)

    if detail >= DetailLevel.NORMAL:
        _decode(partial, "dewpoint_f", _to_optional_float, cells, COLUMN_DEWPOINT)
        _decode(partial, "pressure_mb", _to_optional_float, cells, COLUMN_PRESSURE)
        _decode(partial, "wind", _to_optional_text, cells, COLUMN_WIND)

    if detail >= DetailLevel.VERBOSE:
        _decode(partial, "visibility_mi", _to_optional_float, cells, COLUMN_VISIBILITY)
        _decode(partial, "weather", _to_optional_text, cells, COLUMN_WEATHER)
        _decode(partial, "sky", _to_optional_text, cells, COLUMN_SKY)

    if partial.errors:
        logger.debug(f"Row decoded with field errors: {partial.errors}")

    return partial
