"""
Calendar-day interval helpers for bookings.

Bookings arrive as [dateFrom, dateTo) with dateTo the checkout day. The picker
and the overlap checks work on closed intervals, so a booking becomes
[dateFrom, dateTo - 1 day]: the checkout day stays free for the next check-in.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DateInterval:
    """Closed interval of calendar days: start and end are both occupied."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def is_empty(self) -> bool:
        return self.end < self.start


@dataclass(frozen=True)
class BeforeDay:
    """Open-ended interval of every day before `day` (past days in the picker)."""

    day: date

    def contains(self, day: date) -> bool:
        return day < self.day


def parse_day(value: Any) -> date:
    """
    Calendar day of an ISO date / date-time string, a date or a datetime; time of day is dropped.
    Raises ValueError for malformed input.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value or "").strip()
    if len(s) < 10:
        raise ValueError(f"Invalid date {value!r}. Use YYYY-MM-DD.")
    # 2024-06-01, 2024-06-01T00:00:00.000Z, 2024-06-01 12:00:00
    day = date.fromisoformat(s[:10])
    rest = s[10:]
    if not rest:
        return day
    time_part = rest[1:]
    if time_part.endswith("Z"):
        time_part = time_part[:-1] + "+00:00"
    if rest[0] not in "T ":
        raise ValueError(f"Invalid date {value!r}. Use YYYY-MM-DD.")
    try:
        datetime.fromisoformat(f"{s[:10]}T{time_part}")
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}. Use YYYY-MM-DD.") from e
    return day


def to_day(value: Any) -> date | None:
    """parse_day, but None/empty stays None (an unpicked end of a range)."""
    if value is None or value == "":
        return None
    return parse_day(value)


def to_disabled_interval(booking: Any) -> DateInterval:
    """Closed interval a booking occupies: [dateFrom, dateTo - 1 day]. Accepts models or API dicts."""
    if isinstance(booking, dict):
        date_from, date_to = booking.get("dateFrom"), booking.get("dateTo")
    else:
        date_from, date_to = booking.date_from, booking.date_to
    return DateInterval(parse_day(date_from), parse_day(date_to) - ONE_DAY)


def bookings_to_disabled_intervals(
    bookings: Iterable[Any],
    *,
    exclude_booking_id: str | None = None,
) -> list[DateInterval]:
    """Closed intervals for every booking, skipping exclude_booking_id (the booking being changed)."""
    out: list[DateInterval] = []
    for b in bookings:
        bid = b.get("id") if isinstance(b, dict) else getattr(b, "id", None)
        if exclude_booking_id is not None and bid == exclude_booking_id:
            continue
        out.append(to_disabled_interval(b))
    return out


def stay_interval(date_from: date, date_to: date) -> DateInterval:
    """Nights a candidate stay occupies: [from, to - 1 day]. Empty when to <= from."""
    return DateInterval(date_from, date_to - ONE_DAY)


def intervals_overlap(a: DateInterval, b: DateInterval, inclusive: bool = True) -> bool:
    """
    Standard interval overlap. With inclusive=True, intervals that only share a
    boundary day overlap (closed-interval semantics).
    """
    if a.is_empty or b.is_empty:
        return False
    if inclusive:
        return a.start <= b.end and b.start <= a.end
    return a.start < b.end and b.start < a.end


def nights(date_from: date | None, date_to: date | None) -> int:
    """Number of nights between check-in and checkout; 0 while the range is incomplete or reversed."""
    if date_from is None or date_to is None:
        return 0
    return max(0, (date_to - date_from).days)
