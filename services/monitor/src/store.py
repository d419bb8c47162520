"""In-memory record store keyed by hour-of-month address."""
import logging
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

from .addressing import MonthTag, record_key
from .observations import ObservationRecord

logger = logging.getLogger(__name__)


class StoredRecord(NamedTuple):
    record: ObservationRecord
    month: Optional[MonthTag]


class RecordStore:
    """Holds at most one observation per address; the first write wins."""

    def __init__(self):
        self._records: Dict[int, StoredRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: int) -> bool:
        return address in self._records

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._records))

    def exists(self, address: int) -> bool:
        return address in self._records

    def insert_if_absent(
        self,
        address: int,
        record: ObservationRecord,
        month: Optional[MonthTag] = None,
    ) -> bool:
        """
        Store a record unless the address is already taken

        Args:
            address: Hour-of-month address
            record: Observation to store
            month: Month the address belongs to, if known

        Returns:
            True if the record was stored, False if the address existed
        """
        if address in self._records:
            return False

        self._records[address] = StoredRecord(record=record, month=month)
        logger.debug(f"Created record {record_key(address)} ({month})")
        return True

    def get(self, address: int) -> Optional[ObservationRecord]:
        stored = self._records.get(address)
        if stored is None:
            return None
        return stored.record

    def month_of(self, address: int) -> Optional[MonthTag]:
        stored = self._records.get(address)
        if stored is None:
            return None
        return stored.month

    def items(self) -> List[Tuple[int, StoredRecord]]:
        """Stored entries ordered by address."""
        return sorted(self._records.items())

    def all_addresses(self) -> Set[int]:
        """Snapshot of stored addresses; safe to iterate while deleting."""
        return set(self._records)

    def delete_all(self, addresses: Iterable[int]) -> int:
        deleted = 0
        for address in list(addresses):
            if self._records.pop(address, None) is not None:
                deleted += 1
                logger.debug(f"Purged record {record_key(address)}")
        return deleted

    def clear(self) -> None:
        count = len(self._records)
        self._records.clear()
        logger.info(f"Cleared {count} records")
