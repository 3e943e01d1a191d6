"""
Centralized constants for the Holidaze API and booking flows.

Change API paths or user-facing copy here instead of scattering literals across
the client, the orchestrator and the CLI.
"""

# Holidaze API paths (relative to Settings.api_base_url)
AUTH_LOGIN_PATH = "/auth/login"
VENUES_PATH = "/holidaze/venues"
BOOKINGS_PATH = "/holidaze/bookings"
PROFILES_PATH = "/holidaze/profiles"

API_KEY_HEADER = "X-Noroff-API-Key"

# Query flags for expanded relations
EXPAND_VENUE = "_venue"
EXPAND_CUSTOMER = "_customer"
EXPAND_BOOKINGS = "_bookings"
EXPAND_OWNER = "_owner"

# Calendar: weeks start on Monday (calendar.MONDAY)
CALENDAR_FIRST_WEEKDAY = 0
CALENDAR_MONTHS_DEFAULT = 2

# Listings
MY_BOOKINGS_PREVIEW_LIMIT = 4
MANAGER_PANEL_LIMIT = 6

# User-facing messages
MSG_PICK_DATES = "Pick check-in and check-out"
MSG_INVALID_RANGE = "Check-out must be after check-in."
MSG_PAST_DATES = "Those dates are in the past. Please choose another range."
MSG_CAPACITY = "Guests must be between 1 and {max_guests}."
MSG_CONFLICT = "Those dates include unavailable days. Please choose another range."
MSG_BOOKING_CONFIRMED = "Booking confirmed!"
MSG_BOOKING_CANCELLED = "Booking cancelled"
MSG_BOOKING_UPDATED = "Booking updated"
MSG_BOOKING_FAILED = "Booking failed"
MSG_CANCEL_FAILED = "Could not cancel booking"
MSG_UPDATE_FAILED = "Could not update booking"
MSG_PARTIAL_FAILURE = (
    "Your previous booking was cancelled but the new dates could not be saved. "
    "Please rebook."
)
MSG_MUTATION_IN_PROGRESS = "This booking is already being updated. Please wait."
MSG_NOT_LOGGED_IN = "You need to log in first."
MSG_SESSION_EXPIRED = "Your session has expired. Log in again."
MSG_NETWORK = "Could not reach the booking service. Check your connection and try again."
MSG_TIMEOUT = "The booking service did not answer in time."
