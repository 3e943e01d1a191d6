"""
Availability: booked-night intervals, the bookable/not-bookable verdict and the
range-picker calendar built on both.
"""
from holidaze.services.availability.calendar import BookingCalendar, CalendarDay, DateRange, SelectionState
from holidaze.services.availability.evaluator import Availability, AvailabilityReason, evaluate, is_available
from holidaze.services.availability.intervals import (
    BeforeDay,
    DateInterval,
    bookings_to_disabled_intervals,
    intervals_overlap,
    nights,
    parse_day,
    stay_interval,
    to_disabled_interval,
)

__all__ = [
    "Availability",
    "AvailabilityReason",
    "BeforeDay",
    "BookingCalendar",
    "CalendarDay",
    "DateInterval",
    "DateRange",
    "SelectionState",
    "bookings_to_disabled_intervals",
    "evaluate",
    "intervals_overlap",
    "is_available",
    "nights",
    "parse_day",
    "stay_interval",
    "to_disabled_interval",
]
