"""Availability verdicts for date ranges and guest counts."""
from datetime import date

import pytest

from holidaze.core.constants import MSG_CONFLICT, MSG_INVALID_RANGE, MSG_PICK_DATES
from holidaze.services.availability import AvailabilityReason, evaluate, is_available


def test_free_range_is_available(venue) -> None:
    verdict = evaluate(venue, "2024-06-05", "2024-06-10", 2)
    assert verdict.bookable
    assert verdict.reason is None
    assert verdict.message is None


def test_too_many_guests_is_unavailable_for_any_dates(venue) -> None:
    for date_from, date_to in (("2024-07-01", "2024-07-05"), ("2024-06-05", "2024-06-10")):
        verdict = evaluate(venue, date_from, date_to, venue.max_guests + 1)
        assert not verdict
        assert verdict.reason is AvailabilityReason.CAPACITY
        assert "4" in verdict.message


def test_zero_guests_is_unavailable(venue) -> None:
    assert evaluate(venue, "2024-07-01", "2024-07-05", 0).reason is AvailabilityReason.CAPACITY


def test_checkout_day_is_free_for_next_checkin(venue) -> None:
    assert is_available(venue, "2024-06-05", "2024-06-10", 2)
    verdict = evaluate(venue, "2024-06-04", "2024-06-10", 2)
    assert verdict.reason is AvailabilityReason.CONFLICT
    assert verdict.conflicts == ("a",)
    assert verdict.message == MSG_CONFLICT


def test_stay_may_end_on_existing_checkin(venue) -> None:
    assert is_available(venue, "2024-06-06", "2024-06-10", 2)


def test_range_spanning_a_booking_conflicts(venue) -> None:
    verdict = evaluate(venue, "2024-06-08", "2024-06-22", 2)
    assert verdict.conflicts == ("b", "c")


@pytest.mark.parametrize("date_to", ["2024-07-01", "2024-06-28"])
def test_zero_length_or_reversed_range_is_unavailable(venue, date_to) -> None:
    verdict = evaluate(venue, "2024-07-01", date_to, 1)
    assert verdict.reason is AvailabilityReason.INVALID_RANGE
    assert verdict.message == MSG_INVALID_RANGE


def test_missing_dates_is_neutral(venue) -> None:
    verdict = evaluate(venue, "2024-07-01", None, 1)
    assert verdict.reason is AvailabilityReason.NO_DATES
    assert verdict.message == MSG_PICK_DATES


def test_past_dates_rejected_only_with_today(venue) -> None:
    assert is_available(venue, "2024-07-01", "2024-07-03", 1)
    verdict = evaluate(venue, "2024-07-01", "2024-07-03", 1, today=date(2024, 7, 2))
    assert verdict.reason is AvailabilityReason.PAST_DATES


def test_excluded_booking_does_not_block_itself(venue) -> None:
    assert not is_available(venue, "2024-06-03", "2024-06-08", 2)
    assert is_available(venue, "2024-06-03", "2024-06-08", 2, exclude_booking_id="a")


def test_accepts_raw_api_dicts() -> None:
    venue = {
        "id": "v",
        "maxGuests": 2,
        "bookings": [{"id": "x", "dateFrom": "2024-06-01T00:00:00.000Z", "dateTo": "2024-06-05T00:00:00.000Z"}],
    }
    assert is_available(venue, "2024-06-05", "2024-06-06", 2)
    assert not is_available(venue, "2024-06-02", "2024-06-03", 2)


def test_malformed_dates_raise(venue) -> None:
    with pytest.raises(ValueError):
        evaluate(venue, "06/01/2024", "2024-06-05", 1)
