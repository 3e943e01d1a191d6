"""
Availability check for a venue: can this date range and guest count be booked?

Pure decision function; the caller supplies the venue (with its bookings) and
gets back a verdict plus the reason, so calendar and booking flows can show
distinct messages.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from holidaze.core.constants import (
    MSG_CAPACITY,
    MSG_CONFLICT,
    MSG_INVALID_RANGE,
    MSG_PAST_DATES,
    MSG_PICK_DATES,
)
from holidaze.services.availability.intervals import (
    intervals_overlap,
    stay_interval,
    to_day,
    to_disabled_interval,
)


class AvailabilityReason(str, Enum):
    NO_DATES = "no_dates_selected"
    INVALID_RANGE = "invalid_range"
    PAST_DATES = "past_dates"
    CAPACITY = "guest_count_exceeds_capacity"
    CONFLICT = "conflicts_with_existing_booking"


@dataclass(frozen=True)
class Availability:
    bookable: bool
    reason: AvailabilityReason | None = None
    conflicts: tuple[str, ...] = field(default_factory=tuple)
    max_guests: int | None = None

    def __bool__(self) -> bool:
        return self.bookable

    @property
    def message(self) -> str | None:
        """User-facing explanation; None when bookable."""
        if self.bookable or self.reason is None:
            return None
        if self.reason is AvailabilityReason.CAPACITY:
            return MSG_CAPACITY.format(max_guests=self.max_guests)
        return _REASON_MESSAGES[self.reason]


_REASON_MESSAGES = {
    AvailabilityReason.NO_DATES: MSG_PICK_DATES,
    AvailabilityReason.INVALID_RANGE: MSG_INVALID_RANGE,
    AvailabilityReason.PAST_DATES: MSG_PAST_DATES,
    AvailabilityReason.CONFLICT: MSG_CONFLICT,
}


def _max_guests(venue: Any) -> int:
    if isinstance(venue, dict):
        return int(venue.get("maxGuests") or 0)
    return int(venue.max_guests)


def _venue_bookings(venue: Any) -> list[Any]:
    if isinstance(venue, dict):
        return list(venue.get("bookings") or [])
    return list(venue.bookings or [])


def _booking_id(booking: Any) -> str | None:
    return booking.get("id") if isinstance(booking, dict) else getattr(booking, "id", None)


def evaluate(
    venue: Any,
    date_from: Any,
    date_to: Any,
    guests: int,
    *,
    exclude_booking_id: str | None = None,
    today: date | None = None,
) -> Availability:
    """
    Decide whether [date_from, date_to) can be booked for `guests` at `venue`.

    date_to is the checkout day, so a stay may start on an existing booking's
    checkout day. Pass exclude_booking_id when re-checking a booking's own new
    dates (change dates) and today to reject stays that start in the past.
    Malformed dates raise ValueError.
    """
    max_guests = _max_guests(venue)
    start = to_day(date_from)
    end = to_day(date_to)
    if start is None or end is None:
        return Availability(False, AvailabilityReason.NO_DATES, max_guests=max_guests)
    if guests < 1 or guests > max_guests:
        return Availability(False, AvailabilityReason.CAPACITY, max_guests=max_guests)
    if start >= end:
        return Availability(False, AvailabilityReason.INVALID_RANGE, max_guests=max_guests)
    if today is not None and start < today:
        return Availability(False, AvailabilityReason.PAST_DATES, max_guests=max_guests)

    candidate = stay_interval(start, end)
    conflicts = tuple(
        str(_booking_id(b))
        for b in _venue_bookings(venue)
        if not (exclude_booking_id is not None and _booking_id(b) == exclude_booking_id)
        and intervals_overlap(candidate, to_disabled_interval(b), inclusive=True)
    )
    if conflicts:
        return Availability(False, AvailabilityReason.CONFLICT, conflicts=conflicts, max_guests=max_guests)
    return Availability(True, max_guests=max_guests)


def is_available(
    venue: Any,
    date_from: Any,
    date_to: Any,
    guests: int,
    *,
    exclude_booking_id: str | None = None,
    today: date | None = None,
) -> bool:
    """Boolean shorthand for evaluate()."""
    return evaluate(
        venue,
        date_from,
        date_to,
        guests,
        exclude_booking_id=exclude_booking_id,
        today=today,
    ).bookable
