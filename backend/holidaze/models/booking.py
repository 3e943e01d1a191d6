"""Booking models: API records and the create payload."""
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import Field, field_validator

from holidaze.models.venue import ApiModel, ProfileLite, Venue


class Booking(ApiModel):
    """
    A reservation. date_from is the check-in day (inclusive); date_to is the
    checkout day (exclusive), free for the next guest's check-in.
    Dates stay as the API's ISO strings; use check_in/check_out for calendar days.
    """

    id: str
    date_from: str = Field(alias="dateFrom")
    date_to: str = Field(alias="dateTo")
    guests: int = 1
    created: str | None = None
    updated: str | None = None
    venue: Venue | None = None
    customer: ProfileLite | None = None

    @property
    def check_in(self) -> date:
        from holidaze.services.availability.intervals import parse_day

        return parse_day(self.date_from)

    @property
    def check_out(self) -> date:
        from holidaze.services.availability.intervals import parse_day

        return parse_day(self.date_to)

    @property
    def venue_id(self) -> str | None:
        return self.venue.id if self.venue else None


class BookingInput(ApiModel):
    """Payload for POST /holidaze/bookings. Dates may be missing while the customer is still picking."""

    venue_id: str = Field(alias="venueId")
    date_from: date | None = Field(default=None, alias="dateFrom")
    date_to: date | None = Field(default=None, alias="dateTo")
    guests: int = 1

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def to_day(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        from holidaze.services.availability.intervals import parse_day

        return parse_day(v)

    def to_payload(self) -> dict[str, Any]:
        """Wire body. Some API variants want venueId, others venue.id; send both."""
        return {
            "dateFrom": self.date_from.isoformat() if self.date_from else None,
            "dateTo": self.date_to.isoformat() if self.date_to else None,
            "guests": self.guests,
            "venueId": self.venue_id,
            "venue": {"id": self.venue_id},
        }
