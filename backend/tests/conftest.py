"""Test fixtures: sample venue and bookings, and an in-memory booking gateway."""
from __future__ import annotations

import asyncio
import itertools
from collections.abc import Iterable

import pytest

from holidaze.core.errors import BookingError, RemoteRejected
from holidaze.models import Booking, BookingInput, Venue

VENUE_ID = "venue-1"


def make_venue(venue_id: str = VENUE_ID, *, max_guests: int = 4, bookings: list[Booking] | None = None) -> Venue:
    return Venue(id=venue_id, name="Fjord Cabin", price=120, max_guests=max_guests, bookings=bookings)


def make_booking(booking_id: str, date_from: str, date_to: str, *, guests: int = 2, venue_id: str = VENUE_ID) -> Booking:
    return Booking(
        id=booking_id,
        date_from=f"{date_from}T00:00:00.000Z",
        date_to=f"{date_to}T00:00:00.000Z",
        guests=guests,
        venue=make_venue(venue_id),
    )


class FakeGateway:
    """
    BookingGateway backed by a list. `fail[method]` raises instead of answering;
    `gates[method]` holds the call until the event is set.
    """

    def __init__(self, venues: Iterable[Venue] = (), bookings: Iterable[Booking] = ()) -> None:
        self.venues = {v.id: v for v in venues}
        self.bookings: list[Booking] = list(bookings)
        self.calls: list[tuple[str, str]] = []
        self.fail: dict[str, BookingError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self._ids = itertools.count(1)

    async def _enter(self, method: str, arg: str) -> None:
        self.calls.append((method, arg))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        error = self.fail.get(method)
        if error is not None:
            raise error

    def called(self, method: str) -> list[str]:
        return [arg for name, arg in self.calls if name == method]

    async def list_bookings_for_customer(self, customer_name: str, expand_venue: bool = True) -> list[Booking]:
        await self._enter("list_bookings_for_customer", customer_name)
        return list(self.bookings)

    async def get_venue(self, venue_id: str, *, expand_bookings: bool = False, expand_owner: bool = False) -> Venue:
        await self._enter("get_venue", venue_id)
        if venue_id not in self.venues:
            raise RemoteRejected("No venue with such ID", status_code=404)
        venue = self.venues[venue_id].model_copy()
        venue.bookings = [b for b in self.bookings if b.venue_id == venue_id] if expand_bookings else None
        return venue

    async def create_booking(self, booking: BookingInput) -> Booking:
        await self._enter("create_booking", booking.venue_id)
        created = make_booking(
            f"new-{next(self._ids)}",
            booking.date_from.isoformat(),
            booking.date_to.isoformat(),
            guests=booking.guests,
            venue_id=booking.venue_id,
        )
        self.bookings.append(created)
        return created

    async def delete_booking(self, booking_id: str) -> None:
        await self._enter("delete_booking", booking_id)
        if not any(b.id == booking_id for b in self.bookings):
            raise RemoteRejected("No booking with such ID", status_code=404)
        self.bookings = [b for b in self.bookings if b.id != booking_id]


@pytest.fixture()
def bookings() -> list[Booking]:
    """Three bookings at the same venue: A [06-01, 06-05), B [06-10, 06-12), C [06-20, 06-25)."""
    return [
        make_booking("a", "2024-06-01", "2024-06-05"),
        make_booking("b", "2024-06-10", "2024-06-12"),
        make_booking("c", "2024-06-20", "2024-06-25"),
    ]


@pytest.fixture()
def venue(bookings: list[Booking]) -> Venue:
    return make_venue(bookings=list(bookings))


@pytest.fixture()
def gateway(bookings: list[Booking]) -> FakeGateway:
    return FakeGateway(venues=[make_venue()], bookings=bookings)
