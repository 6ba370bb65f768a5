"""
Booking Service
Version: 1.0.0

Validation, state transitions and pagination layered above BookingStore.
DEPENDS ON: booking_store, errors, metrics

Concurrency note:
    replace/patch/cancel read the current record, then write the new one.
    The two steps are not atomic as a pair. Concurrent writers on the same
    id resolve last-writer-wins; a record deleted between the read and the
    write is reported as not found.
"""

import re
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Tuple

from schemas import Booking, BookingCreate, BookingStatus, BookingUpdate
from services.booking_store import BookingStore
from services.errors import BookingError, GenerationError, NotFoundError, ValidationError
from services.logging_config import get_logger
from services.metrics import record_booking_operation, set_bookings_stored

logger = get_logger(__name__)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

SAMPLE_BOOKINGS = [
    {
        "check_in_date": "2025-12-20",
        "check_out_date": "2025-12-25",
        "guests": 2,
        "price": 450.00,
        "status": BookingStatus.CONFIRMED.value,
    },
    {
        "check_in_date": "2025-11-10",
        "check_out_date": "2025-11-12",
        "guests": 1,
        "price": 199.99,
        "status": BookingStatus.PENDING.value,
    },
]


def new_booking_id() -> str:
    """Random variant-4 UUID in canonical hyphenated form."""
    try:
        return str(uuid.uuid4())
    except (OSError, NotImplementedError) as e:
        raise GenerationError(f"could not generate booking id: {e}") from e


def validate_booking_input(payload: BookingCreate) -> None:
    """Field checks shared by create and full replace."""
    if not payload.check_in_date or not payload.check_out_date:
        raise ValidationError("checkInDate and checkOutDate are required")
    if payload.guests < 1:
        raise ValidationError("guests must be at least 1")
    if not payload.price >= 0:
        raise ValidationError("price must be non-negative")


def _parse_int(raw: Any) -> Optional[int]:
    """Plain optionally signed ASCII integers only, else None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not INTEGER_PATTERN.fullmatch(raw):
        return None
    return int(raw)


class BookingService:
    """
    Booking operations over a BookingStore.

    Every failure is raised as a BookingError subclass carrying
    both a machine code and a readable message.
    """

    def __init__(
        self,
        store: BookingStore,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
        id_factory: Callable[[], str] = new_booking_id
    ):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit
        self._new_id = id_factory

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    def create(self, payload: BookingCreate) -> Booking:
        with self._track("create"):
            validate_booking_input(payload)
            try:
                booking_id = self._new_id()
            except GenerationError as e:
                logger.critical("Booking id generation failed", error=e.message)
                raise

            booking = Booking(
                id=booking_id,
                check_in_date=payload.check_in_date,
                check_out_date=payload.check_out_date,
                guests=payload.guests,
                price=payload.price,
                status=BookingStatus.CONFIRMED.value,
            )
            self.store.add(booking)
            self._sync_gauge()

            logger.info("Booking created", booking_id=booking.id, guests=booking.guests)
            return booking

    def get(self, booking_id: str) -> Booking:
        with self._track("get"):
            return self._require(booking_id)

    def replace(self, booking_id: str, payload: BookingCreate) -> Booking:
        """Overwrite every field except id and status."""
        with self._track("replace"):
            existing = self._require(booking_id)
            validate_booking_input(payload)

            updated = Booking(
                id=booking_id,
                check_in_date=payload.check_in_date,
                check_out_date=payload.check_out_date,
                guests=payload.guests,
                price=payload.price,
                status=existing.status,
            )
            self._write(updated)

            logger.info("Booking replaced", booking_id=booking_id)
            return updated

    def patch(self, booking_id: str, partial: BookingUpdate) -> Booking:
        """
        Apply only the supplied fields.

        Status is accepted as any string; there is no transition table.
        Nothing is written unless every supplied field is valid.
        """
        with self._track("patch"):
            current = self._require(booking_id)

            changes = partial.supplied_fields()
            if not changes:
                raise ValidationError("no fields provided for update")
            if "guests" in changes and changes["guests"] < 1:
                raise ValidationError("guests must be at least 1")
            if "price" in changes and not changes["price"] >= 0:
                raise ValidationError("price must be non-negative")

            updated = current.model_copy(update=changes)
            self._write(updated)

            logger.info("Booking patched", booking_id=booking_id, fields=sorted(changes))
            return updated

    def cancel(self, booking_id: str) -> Booking:
        """Set status to cancelled. Cancelling twice is not an error."""
        with self._track("cancel"):
            booking = self._require(booking_id)
            booking.status = BookingStatus.CANCELLED.value
            self._write(booking)

            logger.info("Booking cancelled", booking_id=booking_id)
            return booking

    def delete(self, booking_id: str) -> None:
        with self._track("delete"):
            if not self.store.delete(booking_id):
                raise NotFoundError("booking not found")
            self._sync_gauge()

            logger.info("Booking deleted", booking_id=booking_id)

    def list(self, limit: Any = None, offset: Any = None) -> List[Booking]:
        with self._track("list"):
            window_limit, window_offset = self.normalize_pagination(limit, offset)
            return self.store.list(window_offset, window_limit)

    def ensure_exists(self, booking_id: str, operation: str) -> None:
        """Raise NotFoundError for a missing id before any payload is looked at."""
        try:
            self._require(booking_id)
        except NotFoundError as e:
            record_booking_operation(operation, e.code.lower())
            raise

    def seed(self) -> int:
        """Load the fixed sample bookings. Returns how many were added."""
        for sample in SAMPLE_BOOKINGS:
            self.store.add(Booking(id=self._new_id(), **sample))
        self._sync_gauge()

        logger.info("Sample bookings seeded", count=len(SAMPLE_BOOKINGS))
        return len(SAMPLE_BOOKINGS)

    # ========================================================================
    # PAGINATION
    # ========================================================================

    def normalize_pagination(self, raw_limit: Any, raw_offset: Any) -> Tuple[int, int]:
        """
        Turn raw query values into a (limit, offset) window.

        Unparseable or non-positive limits use the default, limits above
        the maximum are clamped. Unparseable or negative offsets become 0.
        """
        limit = _parse_int(raw_limit)
        if limit is None or limit < 1:
            limit = self.default_limit
        limit = min(limit, self.max_limit)

        offset = _parse_int(raw_offset)
        if offset is None or offset < 0:
            offset = 0

        return limit, offset

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _require(self, booking_id: str) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            logger.debug("Booking not found", booking_id=booking_id)
            raise NotFoundError("booking not found")
        return booking

    def _write(self, booking: Booking) -> None:
        if not self.store.update(booking):
            raise NotFoundError("booking not found")

    def _sync_gauge(self) -> None:
        set_bookings_stored(self.store.count())

    @contextmanager
    def _track(self, operation: str) -> Iterator[None]:
        try:
            yield
        except BookingError as e:
            if isinstance(e, ValidationError):
                logger.info("Booking request rejected", operation=operation, reason=e.message)
            record_booking_operation(operation, e.code.lower())
            raise
        record_booking_operation(operation, "success")
