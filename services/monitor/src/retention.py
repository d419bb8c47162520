"""
Retention planning

Works out which hour-of-month addresses may stay in the store for a given
retention period. Near the start of a month the window reaches back into
the previous month, whose addresses share the same numbering, so the
retained set is the union of two ranges: this month so far and the tail
of last month.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Set, Union

from .addressing import MonthTag, hour_of_month, max_hours, month_tag, record_key
from .store import RecordStore

logger = logging.getLogger(__name__)

EMPTY = range(0)


def _inclusive(lower: int, upper: int) -> range:
    if upper < 0 or lower > upper:
        return EMPTY
    return range(max(lower, 0), upper + 1)


@dataclass(frozen=True)
class RetainedWindow:
    """Addresses allowed to remain, split by the month they belong to."""

    current: range
    previous: range = EMPTY
    month: Optional[MonthTag] = None
    previous_month: Optional[MonthTag] = None

    @property
    def straddles_months(self) -> bool:
        return len(self.previous) > 0

    @property
    def addresses(self) -> Set[int]:
        return set(self.current) | set(self.previous)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.addresses))

    def __contains__(self, address: int) -> bool:
        return address in self.current or address in self.previous

    def __len__(self) -> int:
        return len(self.addresses)

    def keys(self) -> List[str]:
        return [record_key(address) for address in self]

    def admits(self, address: int, month: Optional[MonthTag] = None) -> bool:
        """True if ``address`` is retained, checking its month when both are known."""
        if address in self.current:
            if month is None or self.month is None or month == self.month:
                return True
        if address in self.previous:
            if month is None or self.previous_month is None or month == self.previous_month:
                return True
        return False


def retained_window(
    current_address: int,
    retention_hours: int,
    max_hours_this_month: int,
    max_hours_last_month: int,
    month: Optional[MonthTag] = None,
) -> RetainedWindow:
    """
    Compute the retained address ranges

    Args:
        current_address: Hour-of-month address of the newest hour
        retention_hours: Configured retention period
        max_hours_this_month: Hours in the current month
        max_hours_last_month: Hours in the previous month
        month: Current month, used to tag the two ranges

    Returns:
        RetainedWindow; both bounds of each range are inclusive
    """
    if current_address < 0 or current_address > max_hours_this_month:
        logger.warning(
            f"Address {current_address} outside 0..{max_hours_this_month}, "
            f"nothing is retained"
        )
        return RetainedWindow(current=EMPTY, month=month)

    previous_month = month.previous() if month is not None else None

    if current_address - retention_hours > 0:
        return RetainedWindow(
            current=_inclusive(current_address - retention_hours - 1, current_address),
            month=month,
            previous_month=previous_month,
        )

    # Window reaches back into the previous month
    return RetainedWindow(
        current=_inclusive(0, current_address),
        previous=_inclusive(
            max_hours_last_month - retention_hours + current_address - 1,
            max_hours_last_month,
        ),
        month=month,
        previous_month=previous_month,
    )


def live_addresses(
    current_address: int,
    retention_hours: int,
    max_hours_this_month: int,
    max_hours_last_month: int,
) -> Set[int]:
    """Set of addresses the retention period keeps."""
    return retained_window(
        current_address,
        retention_hours,
        max_hours_this_month,
        max_hours_last_month,
    ).addresses


def window_for(now: datetime, retention_hours: int) -> RetainedWindow:
    """Retained window for the hour containing ``now``."""
    hours = max_hours(now)
    window = retained_window(
        hour_of_month(now),
        retention_hours,
        hours.this_month,
        hours.last_month,
        month=month_tag(now),
    )
    logger.debug(f"Retained window for {now:%Y-%m-%d %H}h: {window.keys()}")
    return window


def expired_counterpart(
    current_address: int,
    retention_hours: int,
    max_hours_last_month: int,
) -> int:
    """Address that dropped out of the window when ``current_address`` arrived."""
    if current_address - retention_hours > 0:
        return current_address - retention_hours
    return max_hours_last_month - retention_hours + current_address


def purge(store: RecordStore, live: Union[RetainedWindow, Iterable[int]]) -> List[int]:
    """
    Delete every stored address outside the live set

    Args:
        store: Record store to prune
        live: Retained window or plain set of addresses. A window also
            evicts records whose month tag does not match their range.

    Returns:
        Sorted list of deleted addresses
    """
    if isinstance(live, RetainedWindow):
        expired = [
            address for address in store.all_addresses()
            if not live.admits(address, store.month_of(address))
        ]
    else:
        keep = set(live)
        expired = [address for address in store.all_addresses() if address not in keep]

    expired.sort()
    store.delete_all(expired)

    if expired:
        logger.info(f"Purged {len(expired)} expired records: {[record_key(a) for a in expired]}")
    return expired
