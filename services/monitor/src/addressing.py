"""
Calendar addressing

Maps wall-clock time onto the hour-of-month address used to key records
(``day * 24 + hour - 24``) and resolves calendar metadata such as weekday
names and month lengths. Addresses repeat every month, so the month an
address belongs to is carried separately as a MonthTag.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import NamedTuple

HOURS_PER_DAY = 24

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


class MonthTag(NamedTuple):
    """Calendar month an address belongs to."""

    year: int
    month: int

    def previous(self) -> "MonthTag":
        if self.month == 1:
            return MonthTag(self.year - 1, 12)
        return MonthTag(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


class MonthHours(NamedTuple):
    """Number of hours in the current and the previous calendar month."""

    this_month: int
    last_month: int


@dataclass(frozen=True)
class DayInfo:
    year: int
    month: int
    day_of_month: int
    weekday_name: str


class RelativeDay(str, Enum):
    TODAY = "Today"
    YESTERDAY = "Yesterday"


def address_for(day_of_month: int, hour_of_day: int) -> int:
    """Hour-of-month address for a reported day and hour."""
    return day_of_month * HOURS_PER_DAY + hour_of_day - HOURS_PER_DAY


def hour_of_month(now: datetime) -> int:
    """Address of the hour containing ``now``; 0 is midnight to 1am on the 1st."""
    return address_for(now.day, now.hour)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_tag(now: date) -> MonthTag:
    return MonthTag(now.year, now.month)


def max_hours_in_month(reference: date) -> int:
    """Hours in the calendar month containing ``reference``."""
    return days_in_month(reference.year, reference.month) * HOURS_PER_DAY


def max_hours_last_month(reference: date) -> int:
    """Hours in the calendar month before the one containing ``reference``."""
    previous = month_tag(reference).previous()
    return days_in_month(previous.year, previous.month) * HOURS_PER_DAY


def max_hours(now: date) -> MonthHours:
    return MonthHours(
        this_month=max_hours_in_month(now),
        last_month=max_hours_last_month(now),
    )


def month_for_day(day_of_month: int, now: date) -> MonthTag:
    """
    Month a reported day of month belongs to

    The observation table only spans a few days, so a day number ahead of
    today can only come from the end of the previous month.
    """
    current = month_tag(now)
    if day_of_month > now.day:
        return current.previous()
    return current


def weekday_name(day: date) -> str:
    # date.weekday() counts from Monday, the names count from Sunday
    return WEEKDAY_NAMES[(day.weekday() + 1) % 7]


def day_info(day_of_year: int, year: int) -> DayInfo:
    """
    Resolve a day-of-year ordinal to calendar fields

    Args:
        day_of_year: 1-based ordinal (1..365, or 366 in leap years)
        year: Calendar year the ordinal refers to

    Returns:
        DayInfo with month, day of month and weekday name

    Raises:
        ValueError: If the ordinal does not exist in that year
    """
    days_in_year = 366 if calendar.isleap(year) else 365
    if not 1 <= day_of_year <= days_in_year:
        raise ValueError(f"Day {day_of_year} does not exist in {year}")

    day = date(year, 1, 1) + timedelta(days=day_of_year - 1)
    return DayInfo(
        year=day.year,
        month=day.month,
        day_of_month=day.day,
        weekday_name=weekday_name(day),
    )


def relative_day(kind: RelativeDay, now: datetime) -> DayInfo:
    """
    Calendar details for today or yesterday

    Yesterday is computed by date arithmetic, so on January 1st it is
    December 31st of the previous year, weekday included.
    """
    target = now.date() if isinstance(now, datetime) else now
    if RelativeDay(kind) is RelativeDay.YESTERDAY:
        target = target - timedelta(days=1)
    return day_info(target.timetuple().tm_yday, target.year)


def record_key(address: int) -> str:
    """Zero-padded identifier for an address, e.g. ``R-007``."""
    return f"R-{address:03d}"


def parse_record_key(key: str) -> int:
    prefix, _, number = key.partition("-")
    if prefix != "R" or not number.isdigit():
        raise ValueError(f"Not a record key: {key!r}")
    return int(number)
