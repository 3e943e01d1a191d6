"""
Booking calendar: a range picker over a venue's bookings.

Blocks past days and booked nights, and rejects selections that would span a
booked night. Controlled view: it receives the booking list and the current
selection, and hands back the new selection (None when a pick is rejected).
No network access.
"""
import calendar as _calendar
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from holidaze.core.constants import CALENDAR_FIRST_WEEKDAY, MSG_CONFLICT, MSG_PICK_DATES
from holidaze.services.availability.intervals import (
    BeforeDay,
    DateInterval,
    bookings_to_disabled_intervals,
    intervals_overlap,
    nights,
    stay_interval,
)

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"
    VALID = "valid"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class DateRange:
    """In-progress selection. date_to is the checkout day."""

    date_from: date | None = None
    date_to: date | None = None

    @property
    def is_complete(self) -> bool:
        return self.date_from is not None and self.date_to is not None

    def normalized(self) -> "DateRange":
        """Swap reversed clicks so date_from <= date_to."""
        if self.is_complete and self.date_to < self.date_from:
            return DateRange(self.date_to, self.date_from)
        return self


@dataclass(frozen=True)
class CalendarDay:
    day: date
    in_month: bool
    disabled: bool
    selected: bool
    today: bool


class BookingCalendar:
    """Range picker state machine: EMPTY -> PARTIAL -> COMPLETE -> VALID | CONFLICT."""

    def __init__(
        self,
        bookings: Iterable[Any] = (),
        *,
        selected: DateRange | None = None,
        today: date | None = None,
        exclude_booking_id: str | None = None,
    ) -> None:
        self.today = today or date.today()
        self.booked: list[DateInterval] = bookings_to_disabled_intervals(
            bookings, exclude_booking_id=exclude_booking_id
        )
        # Permanent "before today" rule first, then one interval per booking
        self.disabled: list[BeforeDay | DateInterval] = [BeforeDay(self.today), *self.booked]
        self._selection: DateRange | None = None
        self._state = SelectionState.EMPTY
        self._conflict = False
        if selected is not None:
            self._set(selected.normalized())

    @property
    def selection(self) -> DateRange | None:
        return self._selection

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def conflict(self) -> bool:
        return self._conflict

    @property
    def conflict_message(self) -> str | None:
        return MSG_CONFLICT if self._conflict else None

    @property
    def status_message(self) -> str:
        """Line under the calendar: nights selected, or a prompt to pick dates."""
        if self._selection is not None and self._selection.is_complete:
            n = nights(self._selection.date_from, self._selection.date_to)
            return f"{n} night{'s' if n != 1 else ''} selected"
        return MSG_PICK_DATES

    def is_disabled(self, day: date) -> bool:
        """True for past days and booked nights (checkout days stay free)."""
        return any(rule.contains(day) for rule in self.disabled)

    def overlaps_booked(self, selection: DateRange) -> bool:
        """Whether a complete range spans any booked night (closed-interval, inclusive)."""
        if not selection.is_complete:
            return False
        stay = stay_interval(selection.date_from, selection.date_to)
        return any(intervals_overlap(stay, b, inclusive=True) for b in self.booked)

    def spans_disabled(self, selection: DateRange) -> bool:
        """Whether a selection starts on a disabled day (past or booked) or spans a booked night."""
        first = selection.date_from or selection.date_to
        if first is not None and self.is_disabled(first):
            return True
        return self.overlaps_booked(selection)

    def select(self, selection: DateRange | None) -> DateRange | None:
        """
        Whole-range input, as a picker widget emits it. Returns the accepted
        selection, or None when it starts on a disabled day or spans a booked
        night (state CONFLICT). A zero-night range keeps only its check-in day.
        """
        self._conflict = False
        if selection is None or (selection.date_from is None and selection.date_to is None):
            return self.clear()
        selection = selection.normalized()
        self._set(selection)
        return self._settle()

    def pick(self, day: date) -> DateRange | None:
        """Single-day click. Disabled days are ignored; returns the current selection."""
        if self.is_disabled(day):
            logger.debug("Ignoring pick on disabled day %s", day)
            return self._selection
        current = self._selection
        if current is None or current.date_from is None or current.is_complete:
            self._conflict = False
            self._set(DateRange(day, None))
            return self._selection
        if day == current.date_from:
            return self.clear()
        return self.select(DateRange(current.date_from, day))

    def clear(self) -> None:
        self._selection = None
        self._conflict = False
        self._state = SelectionState.EMPTY
        return None

    def _set(self, selection: DateRange) -> None:
        self._selection = selection
        if selection.is_complete:
            self._state = SelectionState.COMPLETE
        elif selection.date_from is not None or selection.date_to is not None:
            self._state = SelectionState.PARTIAL
        else:
            self._state = SelectionState.EMPTY

    def _settle(self) -> DateRange | None:
        sel = self._selection
        if sel is None:
            return None
        if sel.is_complete and sel.date_from == sel.date_to:
            # zero nights is not a stay
            sel = DateRange(sel.date_from, None)
            self._set(sel)
        if self.spans_disabled(sel):
            logger.debug(
                "Rejected selection %s..%s: includes unavailable days",
                self._selection.date_from,
                self._selection.date_to,
            )
            self._conflict = True
            self._selection = None
            self._state = SelectionState.CONFLICT
            return None
        if self._state is SelectionState.COMPLETE:
            self._state = SelectionState.VALID
        return self._selection

    def _is_selected(self, day: date) -> bool:
        sel = self._selection
        if sel is None or sel.date_from is None:
            return False
        if sel.date_to is None:
            return day == sel.date_from
        return sel.date_from <= day <= sel.date_to

    def month_grid(self, year: int, month: int) -> list[list[CalendarDay]]:
        """Weeks (Monday first) for one month, outside days included."""
        weeks = _calendar.Calendar(firstweekday=CALENDAR_FIRST_WEEKDAY).monthdatescalendar(year, month)
        return [
            [
                CalendarDay(
                    day=d,
                    in_month=d.month == month,
                    disabled=self.is_disabled(d),
                    selected=self._is_selected(d),
                    today=d == self.today,
                )
                for d in week
            ]
            for week in weeks
        ]

    def render_month(self, year: int, month: int) -> str:
        """
        Text rendering: *dd selected, xx disabled (past or booked), dd free.
        Outside days are blank.
        """
        lines = [f"{_calendar.month_name[month]} {year}".center(27).rstrip()]
        lines.append(" ".join(f"{name[:2]:>3}" for name in _week_header()))
        for week in self.month_grid(year, month):
            cells = []
            for cell in week:
                if not cell.in_month:
                    cells.append("   ")
                elif cell.selected:
                    cells.append(f"*{cell.day.day:2d}")
                elif cell.disabled:
                    cells.append(" xx")
                else:
                    cells.append(f"{cell.day.day:3d}")
            lines.append(" ".join(cells).rstrip())
        return "\n".join(lines)

    def render(self, first_month: date | None = None, months: int = 2) -> str:
        """Render `months` consecutive months starting at first_month (default: this month)."""
        start = first_month or self.today
        year, month = start.year, start.month
        blocks = []
        for _ in range(months):
            blocks.append(self.render_month(year, month))
            month += 1
            if month > 12:
                year, month = year + 1, 1
        legend = "xx = unavailable (past or booked)"
        if self.conflict_message:
            legend = f"{self.conflict_message}\n{legend}"
        return "\n\n".join(blocks) + "\n\n" + legend + "\n" + self.status_message


def _week_header() -> list[str]:
    return [_calendar.day_abbr[(CALENDAR_FIRST_WEEKDAY + i) % 7] for i in range(7)]
