"""
holidaze command line: venue calendars, availability checks and booking changes.

Run: holidaze venue <venue-id>
     holidaze book <venue-id> 2026-06-01 2026-06-05 --guests 2
Credentials come from backend/.env (HOLIDAZE_API_KEY, HOLIDAZE_ACCESS_TOKEN, HOLIDAZE_PROFILE_NAME);
`holidaze login` prints the token lines to add there.
"""
import argparse
import asyncio
import getpass
import logging
import sys
from datetime import date

from holidaze.config import Settings, settings as default_settings
from holidaze.core.constants import (
    CALENDAR_MONTHS_DEFAULT,
    MANAGER_PANEL_LIMIT,
    MSG_BOOKING_FAILED,
    MSG_CANCEL_FAILED,
    MSG_NOT_LOGGED_IN,
    MSG_UPDATE_FAILED,
    MY_BOOKINGS_PREVIEW_LIMIT,
)
from holidaze.core.errors import BookingError
from holidaze.models import Booking, BookingInput, Venue
from holidaze.services.api import HolidazeClient, build_client
from holidaze.services.availability import BookingCalendar, DateRange, evaluate, nights, parse_day
from holidaze.services.bookings import (
    BookingOrchestrator,
    MutationKind,
    MutationResult,
    manager_upcoming_rows,
    upcoming_bookings,
)

logger = logging.getLogger(__name__)

_FAILURE_TITLES = {
    MutationKind.CREATE: MSG_BOOKING_FAILED,
    MutationKind.CANCEL: MSG_CANCEL_FAILED,
    MutationKind.CHANGE_DATES: MSG_UPDATE_FAILED,
}


def _booking_line(b: Booking) -> str:
    venue = b.venue.name if b.venue else "?"
    n = nights(b.check_in, b.check_out)
    return f"{b.id}  {b.check_in} -> {b.check_out}  ({n} night{'s' if n != 1 else ''}, {b.guests} guests)  {venue}"


def _venue_summary(v: Venue) -> str:
    lines = [v.name, f"  id: {v.id}", f"  price: {v.price:g} per night, up to {v.max_guests} guests"]
    if v.rating is not None:
        lines.append(f"  rating: {v.rating:g}")
    if v.location and v.location.label():
        lines.append(f"  location: {v.location.label()}")
    amenities = v.meta.enabled()
    if amenities:
        lines.append(f"  amenities: {', '.join(amenities)}")
    if v.owner:
        lines.append(f"  host: {v.owner.name}")
    if v.description:
        lines.append(f"  {v.description.strip()}")
    return "\n".join(lines)


def _print_result(result: MutationResult) -> int:
    print(result.message if result.ok else f"{_FAILURE_TITLES[result.kind]}: {result.message}")
    if result.booking is not None:
        print(_booking_line(result.booking))
    if result.error is not None:
        logger.debug("%s failed: kind=%s detail=%s", result.kind.value, result.error_kind, result.error.message)
    return 0 if result.ok else 1


def _require_login(client: HolidazeClient) -> bool:
    if not client.session.is_logged_in or not client.session.name:
        print(MSG_NOT_LOGGED_IN + " Run `holidaze login` and set HOLIDAZE_ACCESS_TOKEN / HOLIDAZE_PROFILE_NAME.")
        return False
    return True


async def _login(client: HolidazeClient, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    session = await client.login(args.email, password)
    print(f"Logged in as {session.name} ({session.role.value}). Add to backend/.env:")
    print(f"HOLIDAZE_ACCESS_TOKEN={session.access_token}")
    print(f"HOLIDAZE_PROFILE_NAME={session.name}")
    if session.venue_manager:
        print("HOLIDAZE_VENUE_MANAGER=true")
    return 0


async def _venue(client: HolidazeClient, args: argparse.Namespace) -> int:
    venue = await client.get_venue(args.venue_id, expand_bookings=True, expand_owner=True)
    print(_venue_summary(venue))
    print()
    cal = BookingCalendar(venue.booking_list(), today=args.today)
    if args.date_from and args.date_to:
        cal.select(DateRange(args.date_from, args.date_to))
    first = args.month or None
    print(cal.render(first_month=first, months=args.months))
    return 0


async def _check(client: HolidazeClient, args: argparse.Namespace) -> int:
    venue = await client.get_venue(args.venue_id, expand_bookings=True)
    verdict = evaluate(venue, args.date_from, args.date_to, args.guests, today=args.today)
    if verdict:
        n = nights(args.date_from, args.date_to)
        print(f"Available: {n} night{'s' if n != 1 else ''} at {venue.name}, {n * venue.price:g} total")
        return 0
    print(verdict.message)
    if verdict.conflicts:
        logger.debug("Conflicting bookings: %s", ", ".join(verdict.conflicts))
    return 1


async def _book(client: HolidazeClient, args: argparse.Namespace, timeout: float) -> int:
    if not _require_login(client):
        return 1
    venue = await client.get_venue(args.venue_id, expand_bookings=True)
    orchestrator = BookingOrchestrator(client, customer_name=client.session.name, timeout=timeout)
    data = BookingInput(venue_id=venue.id, date_from=args.date_from, date_to=args.date_to, guests=args.guests)
    return _print_result(await orchestrator.create(data, venue=venue, today=args.today))


async def _bookings(client: HolidazeClient, args: argparse.Namespace, timeout: float) -> int:
    if not _require_login(client):
        return 1
    orchestrator = BookingOrchestrator(client, timeout=timeout)
    bookings = await orchestrator.load(client.session.name)
    shown = bookings if args.all else upcoming_bookings(bookings, today=args.today)[: args.limit]
    if not shown:
        print("No upcoming bookings." if not args.all else "No bookings.")
        return 0
    for b in shown:
        print(_booking_line(b))
    return 0


async def _cancel(client: HolidazeClient, args: argparse.Namespace, timeout: float) -> int:
    if not _require_login(client):
        return 1
    orchestrator = BookingOrchestrator(client, timeout=timeout)
    await orchestrator.load(client.session.name)
    return _print_result(await orchestrator.cancel(args.booking_id))


async def _change(client: HolidazeClient, args: argparse.Namespace, timeout: float) -> int:
    if not _require_login(client):
        return 1
    orchestrator = BookingOrchestrator(client, timeout=timeout)
    bookings = await orchestrator.load(client.session.name)
    current = next((b for b in bookings if b.id == args.booking_id), None)
    venue_id = args.venue_id
    if current is None and venue_id is None:
        # Not in the customer's list: ask the API which venue it belongs to
        current = await client.get_booking(args.booking_id, expand_venue=True)
        venue_id = current.venue_id
    guests = args.guests if args.guests is not None else current.guests if current else 1
    result = await orchestrator.change_dates(
        args.booking_id,
        args.date_from,
        args.date_to,
        guests,
        venue_id=venue_id,
        today=args.today,
    )
    return _print_result(result)


async def _upcoming(client: HolidazeClient, args: argparse.Namespace) -> int:
    if not _require_login(client):
        return 1
    if not client.session.is_manager:
        print("Only venue managers have an upcoming-bookings panel.")
        return 1
    venues = await client.list_profile_venues(client.session.name, expand_bookings=True)
    rows = manager_upcoming_rows(venues, today=args.today, limit=args.limit)
    if not rows:
        print("No upcoming bookings across your venues.")
        return 0
    for row in rows:
        b = row.booking
        who = b.customer.name if b.customer else "guest"
        print(f"{row.venue_name}: {b.check_in} -> {b.check_out}  {b.guests} guests  {who}")
    return 0


async def run(args: argparse.Namespace, client: HolidazeClient, settings: Settings = default_settings) -> int:
    """Dispatch one parsed command. Booking failures print their user message and return 1."""
    timeout = settings.mutation_timeout_seconds
    try:
        if args.command == "login":
            return await _login(client, args)
        if args.command == "venue":
            return await _venue(client, args)
        if args.command == "check":
            return await _check(client, args)
        if args.command == "book":
            return await _book(client, args, timeout)
        if args.command == "bookings":
            return await _bookings(client, args, timeout)
        if args.command == "cancel":
            return await _cancel(client, args, timeout)
        if args.command == "change":
            return await _change(client, args, timeout)
        if args.command == "upcoming":
            return await _upcoming(client, args)
    except BookingError as e:
        print(e.user_message)
        logger.debug("%s failed: %s", args.command, e.message)
        return 1
    raise ValueError(f"Unknown command {args.command!r}")


def _day(value: str) -> date:
    try:
        return parse_day(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="holidaze", description="Browse Holidaze venues and manage bookings")
    parser.add_argument(
        "--today",
        type=_day,
        default=None,
        help="Treat this day as today (YYYY-MM-DD); defaults to the local date",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Log in and print the session env lines")
    p.add_argument("email")
    p.add_argument("--password", default=None, help="Prompted when omitted")

    p = sub.add_parser("venue", help="Venue details and availability calendar")
    p.add_argument("venue_id")
    p.add_argument("--months", type=int, default=CALENDAR_MONTHS_DEFAULT)
    p.add_argument("--month", type=_day, default=None, help="First month to show (any day in it)")
    p.add_argument("--from", dest="date_from", type=_day, default=None, help="Highlight a selection")
    p.add_argument("--to", dest="date_to", type=_day, default=None)

    for name, help_text in (("check", "Check whether dates can be booked"), ("book", "Book a venue")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("venue_id")
        p.add_argument("date_from", type=_day, help="Check-in day")
        p.add_argument("date_to", type=_day, help="Checkout day")
        p.add_argument("--guests", type=int, default=1)

    p = sub.add_parser("bookings", help="Your upcoming bookings")
    p.add_argument("--all", action="store_true", help="Include past bookings")
    p.add_argument("--limit", type=int, default=MY_BOOKINGS_PREVIEW_LIMIT, help="Upcoming bookings to show")

    p = sub.add_parser("cancel", help="Cancel a booking")
    p.add_argument("booking_id")

    p = sub.add_parser("change", help="Move a booking to new dates (cancels and rebooks)")
    p.add_argument("booking_id")
    p.add_argument("date_from", type=_day)
    p.add_argument("date_to", type=_day)
    p.add_argument("--guests", type=int, default=None, help="Defaults to the current guest count")
    p.add_argument("--venue-id", default=None, help="Venue of the booking; looked up from the booking when omitted")

    p = sub.add_parser("upcoming", help="Upcoming bookings across your venues (managers)")
    p.add_argument("--limit", type=int, default=MANAGER_PANEL_LIMIT)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.today is None:
        args.today = date.today()
    client = build_client(default_settings)
    return asyncio.run(run(args, client))


if __name__ == "__main__":
    sys.exit(main())
