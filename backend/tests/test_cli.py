"""Command-line dispatch against a mocked API."""
from __future__ import annotations

import json

import httpx
import pytest

from holidaze.cli import build_parser, run
from holidaze.core.constants import (
    MSG_BOOKING_CANCELLED,
    MSG_BOOKING_CONFIRMED,
    MSG_BOOKING_UPDATED,
    MSG_CANCEL_FAILED,
    MSG_CONFLICT,
    MSG_NOT_LOGGED_IN,
    MSG_PARTIAL_FAILURE,
    MSG_UPDATE_FAILED,
)
from holidaze.services.api import ApiConfig, AuthSession, HolidazeClient

pytestmark = pytest.mark.asyncio

VENUE = {
    "id": "venue-1",
    "name": "Fjord Cabin",
    "price": 100,
    "maxGuests": 4,
    "location": {"city": "Bergen", "country": "Norway"},
    "bookings": [
        {"id": "a", "dateFrom": "2024-06-01T00:00:00.000Z", "dateTo": "2024-06-05T00:00:00.000Z", "guests": 2},
    ],
}


def _client(handler, *, logged_in: bool = True, manager: bool = False) -> HolidazeClient:
    session = AuthSession()
    if logged_in:
        session.start(name="kari", email=None, access_token="tok", venue_manager=manager)
    return HolidazeClient(ApiConfig(api_key="k", base_url="https://api.test"), session, transport=httpx.MockTransport(handler))


def _venue_only(request: httpx.Request) -> httpx.Response:
    assert request.url.path == "/holidaze/venues/venue-1"
    return httpx.Response(200, json={"data": VENUE})


async def test_check_available(capsys) -> None:
    args = build_parser().parse_args(["--today", "2024-05-01", "check", "venue-1", "2024-06-05", "2024-06-08"])

    code = await run(args, _client(_venue_only))

    assert code == 0
    assert "Available: 3 nights at Fjord Cabin, 300 total" in capsys.readouterr().out


async def test_check_conflict(capsys) -> None:
    args = build_parser().parse_args(["--today", "2024-05-01", "check", "venue-1", "2024-06-04", "2024-06-08"])

    code = await run(args, _client(_venue_only))

    assert code == 1
    assert MSG_CONFLICT in capsys.readouterr().out


async def test_venue_renders_calendar(capsys) -> None:
    args = build_parser().parse_args(["--today", "2024-05-01", "venue", "venue-1", "--month", "2024-06-01", "--months", "1"])

    code = await run(args, _client(_venue_only, logged_in=False))

    out = capsys.readouterr().out
    assert code == 0
    assert "Fjord Cabin" in out
    assert "location: Bergen, Norway" in out
    assert "June 2024" in out
    assert " xx" in out


async def test_book_creates_booking(capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"data": VENUE})
        body = json.loads(request.content)
        return httpx.Response(
            201,
            json={"data": {"id": "new", "dateFrom": body["dateFrom"], "dateTo": body["dateTo"], "guests": body["guests"]}},
        )

    args = build_parser().parse_args(
        ["--today", "2024-05-01", "book", "venue-1", "2024-06-05", "2024-06-08", "--guests", "2"]
    )

    code = await run(args, _client(handler))

    out = capsys.readouterr().out
    assert code == 0
    assert MSG_BOOKING_CONFIRMED in out
    assert "new  2024-06-05 -> 2024-06-08" in out


async def test_book_requires_login(capsys) -> None:
    args = build_parser().parse_args(["book", "venue-1", "2024-06-05", "2024-06-08"])

    code = await run(args, _client(_venue_only, logged_in=False))

    assert code == 1
    assert MSG_NOT_LOGGED_IN in capsys.readouterr().out


async def test_api_failure_prints_user_message(capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"errors": [{"message": "No venue with such ID"}]})

    args = build_parser().parse_args(["check", "nope", "2024-06-05", "2024-06-08"])

    code = await run(args, _client(handler))

    assert code == 1
    assert "No venue with such ID" in capsys.readouterr().out


VENUE_LITE = {k: v for k, v in VENUE.items() if k != "bookings"}


class FakeApi:
    """Routes requests like the Holidaze API over in-memory bookings. `fail[(method, path)]` answers with that status."""

    def __init__(self) -> None:
        self.bookings = [dict(VENUE["bookings"][0], venue=VENUE_LITE)]
        self.others: list[dict] = []
        self.fail: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []

    def paths(self, method: str) -> list[str]:
        return [r.url.path for r in self.requests if r.method == method]

    def _find(self, booking_id: str) -> dict | None:
        return next((b for b in self.bookings + self.others if b["id"] == booking_id), None)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        status = self.fail.get((method, path))
        if status:
            return httpx.Response(status, json={"errors": [{"message": "Internal Server Error"}]})
        if method == "GET" and path == "/holidaze/profiles/kari/bookings":
            return httpx.Response(200, json={"data": self.bookings})
        if method == "GET" and path == "/holidaze/profiles/kari/venues":
            booked = [dict(b, customer={"name": "ola"}) for b in VENUE["bookings"]]
            return httpx.Response(200, json={"data": [dict(VENUE_LITE, bookings=booked)]})
        if method == "GET" and path == "/holidaze/venues/venue-1":
            booked = [{k: v for k, v in b.items() if k != "venue"} for b in self.bookings + self.others]
            return httpx.Response(200, json={"data": dict(VENUE_LITE, bookings=booked)})
        if path.startswith("/holidaze/bookings/"):
            booking = self._find(path.rsplit("/", 1)[1])
            if booking is None:
                return httpx.Response(404, json={"errors": [{"message": "No booking with such ID"}]})
            if method == "GET":
                return httpx.Response(200, json={"data": booking})
            self.bookings = [b for b in self.bookings if b is not booking]
            self.others = [b for b in self.others if b is not booking]
            return httpx.Response(204)
        if method == "POST" and path == "/holidaze/bookings":
            body = json.loads(request.content)
            created = {
                "id": "new",
                "dateFrom": body["dateFrom"],
                "dateTo": body["dateTo"],
                "guests": body["guests"],
                "venue": VENUE_LITE,
            }
            self.bookings.append(created)
            return httpx.Response(201, json={"data": created})
        return httpx.Response(404, json={"errors": [{"message": "Not found"}]})


async def test_cancel_booking(capsys) -> None:
    api = FakeApi()
    args = build_parser().parse_args(["cancel", "a"])

    code = await run(args, _client(api))

    assert code == 0
    assert MSG_BOOKING_CANCELLED in capsys.readouterr().out
    assert api.bookings == []


async def test_cancel_failure_exits_nonzero(capsys) -> None:
    api = FakeApi()
    api.fail[("DELETE", "/holidaze/bookings/a")] = 500
    args = build_parser().parse_args(["cancel", "a"])

    code = await run(args, _client(api))

    assert code == 1
    assert f"{MSG_CANCEL_FAILED}: Internal Server Error" in capsys.readouterr().out
    assert [b["id"] for b in api.bookings] == ["a"]


async def test_change_moves_booking(capsys) -> None:
    api = FakeApi()
    args = build_parser().parse_args(["--today", "2024-05-01", "change", "a", "2024-06-10", "2024-06-12"])

    code = await run(args, _client(api))

    out = capsys.readouterr().out
    assert code == 0
    assert MSG_BOOKING_UPDATED in out
    assert "new  2024-06-10 -> 2024-06-12  (2 nights, 2 guests)" in out
    assert api.paths("DELETE") == ["/holidaze/bookings/a"]


async def test_change_partial_failure_tells_customer_to_rebook(capsys) -> None:
    api = FakeApi()
    api.fail[("POST", "/holidaze/bookings")] = 500
    args = build_parser().parse_args(["--today", "2024-05-01", "change", "a", "2024-06-10", "2024-06-12"])

    code = await run(args, _client(api))

    out = capsys.readouterr().out
    assert code == 1
    assert f"{MSG_UPDATE_FAILED}: {MSG_PARTIAL_FAILURE}" in out
    assert api.bookings == []


async def test_change_looks_up_booking_missing_from_list(capsys) -> None:
    api = FakeApi()
    api.others = [
        {"id": "z", "dateFrom": "2024-07-01T00:00:00.000Z", "dateTo": "2024-07-03T00:00:00.000Z", "guests": 3, "venue": VENUE_LITE}
    ]
    args = build_parser().parse_args(["--today", "2024-05-01", "change", "z", "2024-07-10", "2024-07-12"])

    code = await run(args, _client(api))

    assert code == 0
    lookup = next(r for r in api.requests if r.method == "GET" and r.url.path == "/holidaze/bookings/z")
    assert lookup.url.params["_venue"] == "true"
    assert "(2 nights, 3 guests)" in capsys.readouterr().out


async def test_upcoming_for_manager(capsys) -> None:
    args = build_parser().parse_args(["--today", "2024-05-01", "upcoming"])

    code = await run(args, _client(FakeApi(), manager=True))

    assert code == 0
    assert "Fjord Cabin: 2024-06-01 -> 2024-06-05  2 guests  ola" in capsys.readouterr().out


async def test_upcoming_needs_manager(capsys) -> None:
    args = build_parser().parse_args(["--today", "2024-05-01", "upcoming"])

    code = await run(args, _client(FakeApi()))

    assert code == 1
    assert "Only venue managers" in capsys.readouterr().out
