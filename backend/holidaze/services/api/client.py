"""Holidaze API client: lowest level, sends requests and unwraps {"data": ...}. No booking rules."""
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from holidaze.core.constants import (
    AUTH_LOGIN_PATH,
    BOOKINGS_PATH,
    EXPAND_BOOKINGS,
    EXPAND_CUSTOMER,
    EXPAND_OWNER,
    EXPAND_VENUE,
    PROFILES_PATH,
    VENUES_PATH,
)
from holidaze.core.errors import NotAuthenticated, RemoteRejected, remote_error_message
from holidaze.models import Booking, BookingInput, ProfileLite, Venue
from holidaze.services.api.config import ApiConfig
from holidaze.services.api.session import AuthSession
from holidaze.services.api.types import ApiEnvelope, LoginData

logger = logging.getLogger(__name__)


def _flags(**flags: bool) -> dict[str, str]:
    """Expansion flags as query params: only true ones are sent (e.g. _venue=true)."""
    return {name: "true" for name, on in flags.items() if on}


class HolidazeClient:
    """Holidaze bookings, venues and auth client. Implements BookingGateway."""

    def __init__(
        self,
        config: ApiConfig | None = None,
        session: AuthSession | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ApiConfig()
        self.session = session or AuthSession()
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        auth: bool = True,
        access_token: str | None = None,
    ) -> ApiEnvelope:
        token = access_token or (self.session.access_token if auth else None)
        if auth and not token:
            raise NotAuthenticated()
        url = f"{self._config.base_url}{path}"
        logger.debug("%s %s params=%s", method, path, params)
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as c:
                r = await c.request(
                    method,
                    url,
                    params=params or None,
                    json=json_body,
                    headers=self._config.headers(token),
                )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, path, e)
            raise RemoteRejected(f"Request timed out: {e}", timed_out=True) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise RemoteRejected(str(e) or e.__class__.__name__) from e
        if not r.is_success:
            try:
                payload = r.json() if r.content else None
            except ValueError:
                payload = None
            message = remote_error_message(payload, r.status_code)
            logger.warning("%s %s rejected: %s %s", method, path, r.status_code, message)
            raise RemoteRejected(message, status_code=r.status_code, payload=payload)
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise RemoteRejected(
                f"Invalid JSON from API: {r.text[:200]}", status_code=r.status_code
            ) from e

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise RemoteRejected(f"Unexpected {model.__name__} payload: {e.error_count()} invalid fields") from e

    # --- bookings ---

    async def list_bookings_for_customer(self, customer_name: str, expand_venue: bool = True) -> list[Booking]:
        """GET /holidaze/profiles/{name}/bookings."""
        raw = await self._request(
            "GET",
            f"{PROFILES_PATH}/{quote(customer_name, safe='')}/bookings",
            params=_flags(**{EXPAND_VENUE: expand_venue}),
        )
        return [self._parse(Booking, b) for b in raw.get("data") or []]

    async def get_booking(
        self,
        booking_id: str,
        *,
        expand_venue: bool = False,
        expand_customer: bool = False,
    ) -> Booking:
        raw = await self._request(
            "GET",
            f"{BOOKINGS_PATH}/{quote(booking_id, safe='')}",
            params=_flags(**{EXPAND_VENUE: expand_venue, EXPAND_CUSTOMER: expand_customer}),
        )
        return self._parse(Booking, raw.get("data"))

    async def create_booking(self, booking: BookingInput) -> Booking:
        """POST /holidaze/bookings. Overlapping dates come back as RemoteRejected with the API's message."""
        raw = await self._request("POST", BOOKINGS_PATH, json_body=booking.to_payload())
        return self._parse(Booking, raw.get("data"))

    async def delete_booking(self, booking_id: str) -> None:
        """DELETE /holidaze/bookings/{id} (204 on success)."""
        await self._request("DELETE", f"{BOOKINGS_PATH}/{quote(booking_id, safe='')}")

    # --- venues ---

    async def get_venue(
        self,
        venue_id: str,
        *,
        expand_bookings: bool = False,
        expand_owner: bool = False,
    ) -> Venue:
        """GET /holidaze/venues/{id}; public, works without a session."""
        raw = await self._request(
            "GET",
            f"{VENUES_PATH}/{quote(venue_id, safe='')}",
            params=_flags(**{EXPAND_BOOKINGS: expand_bookings, EXPAND_OWNER: expand_owner}),
            auth=self.session.is_logged_in,
        )
        return self._parse(Venue, raw.get("data"))

    async def list_venues(
        self,
        *,
        q: str | None = None,
        sort: str | None = None,
        sort_order: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        expand_owner: bool = False,
        expand_bookings: bool = False,
    ) -> list[Venue]:
        """List venues; search text goes to /venues/search."""
        params: dict[str, Any] = _flags(**{EXPAND_OWNER: expand_owner, EXPAND_BOOKINGS: expand_bookings})
        if sort:
            params["sort"] = sort
        if sort_order:
            params["sortOrder"] = sort_order
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        path = VENUES_PATH
        if q and q.strip():
            path = f"{VENUES_PATH}/search"
            params["q"] = q.strip()
        raw = await self._request("GET", path, params=params, auth=self.session.is_logged_in)
        return [self._parse(Venue, v) for v in raw.get("data") or []]

    async def list_profile_venues(self, profile_name: str, expand_bookings: bool = True) -> list[Venue]:
        """Venues owned by a manager profile, with their bookings by default."""
        raw = await self._request(
            "GET",
            f"{PROFILES_PATH}/{quote(profile_name, safe='')}/venues",
            params=_flags(**{EXPAND_BOOKINGS: expand_bookings}),
        )
        return [self._parse(Venue, v) for v in raw.get("data") or []]

    # --- auth ---

    async def login(self, email: str, password: str) -> AuthSession:
        """
        POST /auth/login, then load the profile for the venue-manager flag.
        Starts this client's session on success; leaves it untouched on failure.
        """
        raw = await self._request(
            "POST",
            AUTH_LOGIN_PATH,
            json_body={"email": (email or "").strip(), "password": password},
            auth=False,
        )
        data: LoginData = raw.get("data") or {}
        if not data.get("accessToken") or not data.get("name"):
            raise RemoteRejected("Invalid login response")

        profile_raw = await self._request(
            "GET",
            f"{PROFILES_PATH}/{quote(data['name'], safe='')}",
            access_token=data["accessToken"],
        )
        profile = self._parse(ProfileLite, profile_raw.get("data"))

        self.session.start(
            name=profile.name,
            email=profile.email or data.get("email"),
            access_token=data["accessToken"],
            venue_manager=bool(profile.venue_manager),
            avatar_url=profile.avatar.url if profile.avatar else None,
        )
        return self.session

    def logout(self) -> None:
        self.session.end()
