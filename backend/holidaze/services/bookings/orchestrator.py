"""
Booking mutations with optimistic local state: create, cancel and change dates.

Holds the customer's displayed booking list. Gateway failures never escape:
every operation returns a MutationResult the caller can render.

Change dates is delete-then-create (the API has no move). Between the two
calls the customer holds no booking; if create fails there the old booking is
gone for good and the result carries PartialFailure, not a plain rejection.
"""
import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Iterable, Iterator, TypeVar

from holidaze.core.constants import (
    MSG_BOOKING_CANCELLED,
    MSG_BOOKING_CONFIRMED,
    MSG_BOOKING_UPDATED,
    MSG_CAPACITY,
    MSG_INVALID_RANGE,
    MSG_PICK_DATES,
    MSG_TIMEOUT,
)
from holidaze.core.errors import (
    BookingError,
    MutationInProgress,
    PartialFailure,
    RemoteRejected,
    ValidationError,
)
from holidaze.models import Booking, BookingInput, Venue
from holidaze.services.api.base import BookingGateway
from holidaze.services.availability.evaluator import AvailabilityReason, evaluate
from holidaze.services.bookings.transaction import MutationKind, MutationTransaction, TransactionStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SUCCESS_MESSAGES = {
    MutationKind.CREATE: MSG_BOOKING_CONFIRMED,
    MutationKind.CANCEL: MSG_BOOKING_CANCELLED,
    MutationKind.CHANGE_DATES: MSG_BOOKING_UPDATED,
}


@dataclass(frozen=True)
class MutationResult:
    kind: MutationKind
    status: TransactionStatus
    booking_id: str | None = None
    booking: Booking | None = None
    error: BookingError | None = None

    @property
    def ok(self) -> bool:
        return self.status is TransactionStatus.COMMITTED

    @property
    def error_kind(self) -> str | None:
        return self.error.kind if self.error else None

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.user_message
        return _SUCCESS_MESSAGES[self.kind]


def check_booking_input(
    data: BookingInput,
    *,
    venue: Venue | None = None,
    exclude_booking_id: str | None = None,
    today: date | None = None,
) -> None:
    """
    Pre-submission validation. With a venue (and its bookings) the full
    availability check runs; without one only dates and guest count are checked.
    Raises ValidationError.
    """
    if venue is not None:
        availability = evaluate(
            venue,
            data.date_from,
            data.date_to,
            data.guests,
            exclude_booking_id=exclude_booking_id,
            today=today,
        )
        if not availability:
            raise ValidationError(availability.message or MSG_PICK_DATES, reason=availability.reason)
        return
    if data.date_from is None or data.date_to is None:
        raise ValidationError(MSG_PICK_DATES, reason=AvailabilityReason.NO_DATES)
    if data.guests < 1:
        raise ValidationError(MSG_CAPACITY.format(max_guests="the venue limit"), reason=AvailabilityReason.CAPACITY)
    if data.date_from >= data.date_to:
        raise ValidationError(MSG_INVALID_RANGE, reason=AvailabilityReason.INVALID_RANGE)


class BookingOrchestrator:
    """Create / cancel / change-dates against a gateway, one in-flight mutation per booking id."""

    def __init__(
        self,
        gateway: BookingGateway,
        *,
        bookings: Iterable[Booking] = (),
        customer_name: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._gateway = gateway
        self._bookings: list[Booking] = list(bookings)
        self.customer_name = customer_name
        self._timeout = timeout
        self._busy: set[str] = set()
        # Bumped on every local write; rollback restores the snapshot only if nothing else wrote since
        self._version = 0

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def busy_ids(self) -> frozenset[str]:
        return frozenset(self._busy)

    def is_busy(self, booking_id: str) -> bool:
        return booking_id in self._busy

    def _replace(self, bookings: Iterable[Booking]) -> None:
        self._bookings = list(bookings)
        self._version += 1

    def _index_of(self, booking_id: str) -> int | None:
        for i, b in enumerate(self._bookings):
            if b.id == booking_id:
                return i
        return None

    @contextmanager
    def _claim(self, booking_id: str) -> Iterator[None]:
        """Mark booking_id busy for the duration; a second claim fails with MutationInProgress."""
        if booking_id in self._busy:
            raise MutationInProgress(booking_id)
        self._busy.add(booking_id)
        try:
            yield
        finally:
            self._busy.discard(booking_id)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a gateway call, bounded by the orchestrator timeout when set."""
        if self._timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, self._timeout)
        except asyncio.TimeoutError as e:
            raise RemoteRejected(MSG_TIMEOUT, timed_out=True) from e

    def _remove_optimistically(self, tx: MutationTransaction, booking_id: str) -> None:
        index = self._index_of(booking_id)
        if index is None:
            return
        booking = self._bookings[index]
        self._replace(self._bookings[:index] + self._bookings[index + 1:])
        tx.record_removal(index, booking, self._version)

    def _restore(self, tx: MutationTransaction, error: BookingError) -> None:
        snapshot = tx.roll_back(error)
        if tx.removed is None:
            return
        if self._version == tx.applied_version:
            self._replace(snapshot)
            return
        # Another mutation wrote in the meantime: put back only what this one removed,
        # ahead of the first booking that followed it and is still listed
        _, booking = tx.removed
        if self._index_of(booking.id) is not None:
            return
        current = list(self._bookings)
        position = len(current)
        snapshot_ids = [b.id for b in snapshot]
        start = snapshot_ids.index(booking.id) + 1 if booking.id in snapshot_ids else len(snapshot)
        for follower in snapshot[start:]:
            found = self._index_of(follower.id)
            if found is not None:
                position = found
                break
        current.insert(position, booking)
        self._replace(current)

    # --- reads ---

    async def load(self, customer_name: str | None = None) -> list[Booking]:
        """Replace the local list with the customer's bookings (venue expanded). Raises on failure."""
        if customer_name:
            self.customer_name = customer_name
        if not self.customer_name:
            raise ValueError("customer_name is required to load bookings")
        data = await self._call(self._gateway.list_bookings_for_customer(self.customer_name, True))
        self._replace(data)
        return self.bookings

    async def refresh(self) -> bool:
        """Reconcile with the API after a write. Failure keeps the local state and returns False."""
        if not self.customer_name:
            return False
        try:
            await self.load()
        except BookingError as e:
            logger.warning("Refresh after booking change failed for %s: %s", self.customer_name, e)
            return False
        return True

    # --- mutations ---

    async def create(
        self,
        booking: BookingInput,
        *,
        venue: Venue | None = None,
        today: date | None = None,
    ) -> MutationResult:
        """
        Create a booking. Nothing is applied before the API confirms, so a
        failure leaves the local list untouched.
        """
        tx = MutationTransaction(MutationKind.CREATE, None, tuple(self._bookings))
        try:
            check_booking_input(booking, venue=venue, today=today)
            created = await self._call(self._gateway.create_booking(booking))
        except BookingError as e:
            tx.roll_back(e)
            logger.warning("Create booking for venue %s failed: %s", booking.venue_id, e)
            return MutationResult(MutationKind.CREATE, tx.status, error=e)

        self._replace([*self._bookings, created])
        if venue is not None:
            venue.bookings = [*venue.booking_list(), created]
        tx.commit()
        logger.info("Created booking %s at venue %s", created.id, booking.venue_id)
        return MutationResult(MutationKind.CREATE, tx.status, booking_id=created.id, booking=created)

    async def cancel(self, booking_id: str) -> MutationResult:
        """
        Cancel with optimistic removal. On failure the pre-removal list is
        restored; cancelling an already-cancelled booking surfaces the API error.
        """
        try:
            with self._claim(booking_id):
                return await self._cancel(booking_id)
        except MutationInProgress as e:
            logger.info("Cancel %s rejected: mutation already in flight", booking_id)
            return MutationResult(MutationKind.CANCEL, TransactionStatus.ROLLED_BACK, booking_id=booking_id, error=e)

    async def _cancel(self, booking_id: str) -> MutationResult:
        tx = MutationTransaction(MutationKind.CANCEL, booking_id, tuple(self._bookings))
        self._remove_optimistically(tx, booking_id)
        try:
            await self._call(self._gateway.delete_booking(booking_id))
        except BookingError as e:
            self._restore(tx, e)
            logger.warning("Cancel %s failed, rolled back: %s", booking_id, e)
            return MutationResult(MutationKind.CANCEL, tx.status, booking_id=booking_id, error=e)
        tx.commit()
        logger.info("Cancelled booking %s", booking_id)
        await self.refresh()
        return MutationResult(MutationKind.CANCEL, tx.status, booking_id=booking_id)

    async def change_dates(
        self,
        booking_id: str,
        date_from: Any,
        date_to: Any,
        guests: int,
        *,
        venue: Venue | None = None,
        venue_id: str | None = None,
        today: date | None = None,
    ) -> MutationResult:
        """
        Move a booking to new dates / guest count: delete the old one, then create the new one.

        The booking's own current nights are excluded from the conflict check.
        When no venue is passed it is fetched with its bookings first.
        """
        try:
            with self._claim(booking_id):
                return await self._change_dates(
                    booking_id, date_from, date_to, guests, venue=venue, venue_id=venue_id, today=today
                )
        except MutationInProgress as e:
            logger.info("Change dates %s rejected: mutation already in flight", booking_id)
            return MutationResult(
                MutationKind.CHANGE_DATES, TransactionStatus.ROLLED_BACK, booking_id=booking_id, error=e
            )

    async def _change_dates(
        self,
        booking_id: str,
        date_from: Any,
        date_to: Any,
        guests: int,
        *,
        venue: Venue | None,
        venue_id: str | None,
        today: date | None,
    ) -> MutationResult:
        tx = MutationTransaction(MutationKind.CHANGE_DATES, booking_id, tuple(self._bookings))

        def rejected(error: BookingError) -> MutationResult:
            tx.roll_back(error)
            return MutationResult(MutationKind.CHANGE_DATES, tx.status, booking_id=booking_id, error=error)

        index = self._index_of(booking_id)
        current = self._bookings[index] if index is not None else None
        venue_id = venue_id or (venue.id if venue else None) or (current.venue_id if current else None)
        if not venue_id:
            return rejected(ValidationError(f"Unknown venue for booking {booking_id}"))
        try:
            replacement = BookingInput(venue_id=venue_id, date_from=date_from, date_to=date_to, guests=guests)
        except ValueError:
            return rejected(ValidationError(f"Invalid dates: {date_from!r} - {date_to!r}"))

        try:
            if venue is None:
                venue = await self._call(self._gateway.get_venue(venue_id, expand_bookings=True))
            check_booking_input(replacement, venue=venue, exclude_booking_id=booking_id, today=today)
        except BookingError as e:
            logger.info("Change dates %s not attempted: %s", booking_id, e)
            return rejected(e)

        # Phase 1: delete. Failure aborts with the old booking untouched.
        try:
            await self._call(self._gateway.delete_booking(booking_id))
        except BookingError as e:
            logger.warning("Change dates %s: delete failed, nothing changed: %s", booking_id, e)
            return rejected(e)

        self._remove_optimistically(tx, booking_id)
        logger.info("Change dates %s: old booking deleted, creating %s..%s", booking_id, date_from, date_to)

        # Phase 2: create. From here the old booking cannot come back.
        try:
            created = await self._call(self._gateway.create_booking(replacement))
        except BookingError as e:
            failure = PartialFailure(booking_id, e)
            tx.mark_unrecoverable(failure)
            logger.error(
                "Change dates %s: old booking deleted but new booking failed (%s); customer must rebook",
                booking_id,
                e,
            )
            await self.refresh()
            return MutationResult(MutationKind.CHANGE_DATES, tx.status, booking_id=booking_id, error=failure)

        position = tx.removed[0] if tx.removed else len(self._bookings)
        updated = list(self._bookings)
        updated.insert(min(position, len(updated)), created)
        self._replace(updated)
        if venue.bookings is not None:
            venue.bookings = [b for b in venue.bookings if b.id != booking_id] + [created]
        tx.commit()
        logger.info("Change dates %s: replaced by booking %s", booking_id, created.id)
        await self.refresh()
        return MutationResult(MutationKind.CHANGE_DATES, tx.status, booking_id=booking_id, booking=created)
