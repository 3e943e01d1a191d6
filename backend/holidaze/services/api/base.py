"""Protocol for the booking gateway. The orchestrator only talks to the API through this."""
from typing import Protocol

from holidaze.models import Booking, BookingInput, Venue


class BookingGateway(Protocol):
    """
    Remote bookings and venues. Implementations raise RemoteRejected on any
    non-success response; the orchestrator converts that into a result.
    """

    async def list_bookings_for_customer(self, customer_name: str, expand_venue: bool = True) -> list[Booking]:
        """Bookings made by a profile, optionally with the venue expanded."""
        ...

    async def get_venue(
        self,
        venue_id: str,
        *,
        expand_bookings: bool = False,
        expand_owner: bool = False,
    ) -> Venue:
        ...

    async def create_booking(self, booking: BookingInput) -> Booking:
        """Persist a new booking. The API rejects overlaps server-side."""
        ...

    async def delete_booking(self, booking_id: str) -> None:
        """Cancel a booking. Fails when it is already gone or owned by someone else."""
        ...
