"""Booking listings: the customer's upcoming stays and the manager's upcoming-bookings panel."""
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from holidaze.models import Booking, Venue


@dataclass(frozen=True)
class ManagerUpcomingRow:
    venue_id: str
    venue_name: str
    booking: Booking


def is_booking_active(booking: Booking, *, today: date) -> bool:
    """Checked in and not yet checked out: check_in <= today < check_out."""
    return booking.check_in <= today < booking.check_out


def upcoming_bookings(bookings: Iterable[Booking], *, today: date) -> list[Booking]:
    """Bookings whose checkout is after today (current stays included), soonest check-in first."""
    return sorted((b for b in bookings if b.check_out > today), key=lambda b: b.check_in)


def manager_upcoming_rows(venues: Iterable[Venue], *, today: date, limit: int | None = None) -> list[ManagerUpcomingRow]:
    """
    Flatten bookings across a manager's venues into rows for the upcoming panel.

    A booking is kept when it ends or starts on or after today, so stays in
    progress still show. Sorted by check-in; `limit` truncates after sorting.
    """
    rows = [
        ManagerUpcomingRow(venue.id, venue.name, b)
        for venue in venues
        for b in venue.booking_list()
        if b.check_out >= today or b.check_in >= today
    ]
    rows.sort(key=lambda r: r.booking.check_in)
    return rows[:limit] if limit is not None else rows
