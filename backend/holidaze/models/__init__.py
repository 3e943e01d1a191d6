from holidaze.models.booking import Booking, BookingInput
from holidaze.models.venue import Media, ProfileLite, Venue, VenueLocation, VenueMeta

# Venue <-> Booking reference each other; resolve the forward refs once both exist.
Venue.model_rebuild(_types_namespace={"Booking": Booking})
Booking.model_rebuild()

__all__ = [
    "Booking",
    "BookingInput",
    "Media",
    "ProfileLite",
    "Venue",
    "VenueLocation",
    "VenueMeta",
]
