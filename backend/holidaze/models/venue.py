"""Venue, media, location and profile models as returned by the Holidaze API."""
from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from holidaze.models.booking import Booking


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Media(ApiModel):
    url: str
    alt: str | None = None


class VenueMeta(ApiModel):
    """Amenity flags."""

    wifi: bool = False
    parking: bool = False
    breakfast: bool = False
    pets: bool = False

    def enabled(self) -> list[str]:
        return [name for name in ("wifi", "parking", "breakfast", "pets") if getattr(self, name)]


class VenueLocation(ApiModel):
    address: str | None = None
    city: str | None = None
    zip: str | None = None
    country: str | None = None
    continent: str | None = None
    lat: float | None = None
    lng: float | None = None

    def label(self) -> str:
        """'City, Country' style label; empty when nothing is known."""
        parts = [p.strip() for p in (self.address, self.city, self.country) if p and p.strip()]
        return ", ".join(parts)


class ProfileLite(ApiModel):
    name: str
    email: str | None = None
    bio: str | None = None
    avatar: Media | None = None
    banner: Media | None = None
    venue_manager: bool | None = Field(default=None, alias="venueManager")


class Venue(ApiModel):
    """Venue entity. bookings is only present when requested with _bookings=true."""

    id: str
    name: str
    description: str | None = None
    media: list[Media] = Field(default_factory=list)
    price: float = Field(default=0, ge=0)
    max_guests: int = Field(alias="maxGuests", ge=1)
    rating: float | None = None
    meta: VenueMeta = Field(default_factory=VenueMeta)
    location: VenueLocation | None = None
    owner: ProfileLite | None = None
    bookings: list[Booking] | None = None
    created: str | None = None
    updated: str | None = None

    def booking_list(self) -> list[Booking]:
        return list(self.bookings or [])
