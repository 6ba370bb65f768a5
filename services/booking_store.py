"""
Booking Store
Version: 1.0.0

Thread-safe in-memory storage of Booking records.
Keeps insertion order for pagination; updates never move a record.

NO business logic - existence is reported as bool/None,
interpretation belongs to BookingService.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from schemas import Booking

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Reader-writer lock.

    - Any number of readers may hold the lock together
    - A writer holds it exclusively
    - Once a writer is waiting, new readers queue behind it
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class BookingStore:
    """Insertion-ordered booking container. Callers only ever get copies."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._data: Dict[str, Booking] = {}
        self._order: List[str] = []

    def add(self, booking: Booking) -> None:
        """Insert a new record. The id is assumed unique."""
        record = booking.model_copy()
        with self._lock.write():
            self._data[record.id] = record
            self._order.append(record.id)

    def update(self, booking: Booking) -> bool:
        """Replace the record with the same id in place. False if absent."""
        record = booking.model_copy()
        with self._lock.write():
            if record.id not in self._data:
                return False
            self._data[record.id] = record
            return True

    def get(self, booking_id: str) -> Optional[Booking]:
        with self._lock.read():
            record = self._data.get(booking_id)
            return record.model_copy() if record is not None else None

    def delete(self, booking_id: str) -> bool:
        """Remove record and its order entry. False if absent."""
        with self._lock.write():
            if booking_id not in self._data:
                return False
            del self._data[booking_id]
            self._order.remove(booking_id)
            return True

    def list(self, offset: int, limit: int) -> List[Booking]:
        """
        Return the insertion-order window [offset, offset + limit).

        Clipped to the stored length; empty when offset is past the end.
        Negative arguments are treated as zero.
        """
        offset = max(offset, 0)
        limit = max(limit, 0)
        with self._lock.read():
            window = self._order[offset:offset + limit]
            return [self._data[booking_id].model_copy() for booking_id in window]

    def count(self) -> int:
        with self._lock.read():
            return len(self._order)

    def __len__(self) -> int:
        return self.count()
