"""Upcoming-booking listings for customers and managers."""
from datetime import date

from conftest import make_booking, make_venue

from holidaze.services.bookings import is_booking_active, manager_upcoming_rows, upcoming_bookings

TODAY = date(2024, 6, 11)


def test_upcoming_bookings_sorted_by_checkin(bookings) -> None:
    shuffled = [bookings[2], bookings[0], bookings[1]]
    assert [b.id for b in upcoming_bookings(shuffled, today=TODAY)] == ["b", "c"]


def test_stay_ending_today_is_not_upcoming() -> None:
    ending = make_booking("x", "2024-06-08", "2024-06-11")
    assert upcoming_bookings([ending], today=TODAY) == []


def test_is_booking_active(bookings) -> None:
    assert is_booking_active(bookings[1], today=TODAY)
    assert not is_booking_active(bookings[1], today=date(2024, 6, 12))
    assert not is_booking_active(bookings[2], today=TODAY)


def test_manager_rows_across_venues() -> None:
    cabin = make_venue(
        "venue-1",
        bookings=[make_booking("old", "2024-05-01", "2024-05-03"), make_booking("late", "2024-07-01", "2024-07-04")],
    )
    loft = make_venue("venue-2", bookings=[make_booking("soon", "2024-06-12", "2024-06-14", venue_id="venue-2")])
    loft.name = "City Loft"
    empty = make_venue("venue-3")

    rows = manager_upcoming_rows([cabin, loft, empty], today=TODAY)

    assert [(r.venue_name, r.booking.id) for r in rows] == [("City Loft", "soon"), ("Fjord Cabin", "late")]
    assert manager_upcoming_rows([cabin, loft], today=TODAY, limit=1)[0].booking.id == "soon"
