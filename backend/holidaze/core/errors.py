"""
Centralized error handling for booking and gateway failures.

Error types raised by the gateway and the local validators, plus a rule table
that maps known failures to user-facing messages so callers stay thin.
"""
from __future__ import annotations

from typing import Any, Callable

from holidaze.core.constants import (
    MSG_MUTATION_IN_PROGRESS,
    MSG_NETWORK,
    MSG_NOT_LOGGED_IN,
    MSG_PARTIAL_FAILURE,
    MSG_SESSION_EXPIRED,
    MSG_TIMEOUT,
)

# ---------------------------------------------------------------------------
# Error kinds (stable identifiers for callers that branch on the failure)
# ---------------------------------------------------------------------------

KIND_VALIDATION = "validation"
KIND_REMOTE_REJECTED = "remote_rejected"
KIND_PARTIAL_FAILURE = "partial_failure"
KIND_IN_PROGRESS = "mutation_in_progress"
KIND_NOT_AUTHENTICATED = "not_authenticated"

STATUS_UNAUTHORIZED = 401


class BookingError(Exception):
    """Base class for every failure the booking core reports to its callers."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def user_message(self) -> str:
        return user_message(self)


class ValidationError(BookingError):
    """Local pre-submission failure: incomplete range, guest count, date conflict. Never sent."""

    kind = KIND_VALIDATION

    def __init__(self, message: str, *, reason: Any = None) -> None:
        super().__init__(message)
        self.reason = reason


class RemoteRejected(BookingError):
    """The API answered with a non-success status, or the request never completed."""

    kind = KIND_REMOTE_REJECTED

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
        self.timed_out = timed_out


class PartialFailure(BookingError):
    """
    Change-dates lost the original booking: delete succeeded, create failed.
    Cannot be rolled back; the customer must rebook.
    """

    kind = KIND_PARTIAL_FAILURE

    def __init__(self, deleted_booking_id: str, cause: BookingError) -> None:
        super().__init__(f"{MSG_PARTIAL_FAILURE} ({cause.message})")
        self.deleted_booking_id = deleted_booking_id
        self.cause = cause


class MutationInProgress(BookingError):
    """A second mutation was requested for a booking id that is still in flight."""

    kind = KIND_IN_PROGRESS

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} already has a pending change")
        self.booking_id = booking_id


class NotAuthenticated(BookingError):
    kind = KIND_NOT_AUTHENTICATED

    def __init__(self, message: str = MSG_NOT_LOGGED_IN) -> None:
        super().__init__(message)


def remote_error_message(payload: Any, status_code: int) -> str:
    """Message from an API error body: errors[0].message, then message, then 'HTTP <status>'."""
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])
        if payload.get("message"):
            return str(payload["message"])
    return f"HTTP {status_code}"


# ---------------------------------------------------------------------------
# Message rules: (predicate, user-facing message). First match wins.
# Add new rules here instead of scattering checks in callers.
# ---------------------------------------------------------------------------

def _is_status(status_code: int) -> Callable[[BookingError], bool]:
    def predicate(exc: BookingError) -> bool:
        return isinstance(exc, RemoteRejected) and exc.status_code == status_code

    return predicate


def _is_timeout(exc: BookingError) -> bool:
    return isinstance(exc, RemoteRejected) and exc.timed_out


def _is_transport_error(exc: BookingError) -> bool:
    return isinstance(exc, RemoteRejected) and exc.status_code is None and not exc.timed_out


USER_MESSAGE_RULES: list[tuple[Callable[[BookingError], bool], str]] = [
    (lambda exc: isinstance(exc, PartialFailure), MSG_PARTIAL_FAILURE),
    (lambda exc: isinstance(exc, MutationInProgress), MSG_MUTATION_IN_PROGRESS),
    (lambda exc: isinstance(exc, NotAuthenticated), MSG_NOT_LOGGED_IN),
    (_is_status(STATUS_UNAUTHORIZED), MSG_SESSION_EXPIRED),
    (_is_timeout, MSG_TIMEOUT),
    (_is_transport_error, MSG_NETWORK),
]


def user_message(exc: BookingError) -> str:
    """
    Map a booking failure to the text shown to the customer.
    Uses USER_MESSAGE_RULES for known failures; otherwise the error's own message.
    """
    for predicate, message in USER_MESSAGE_RULES:
        if predicate(exc):
            return message
    return exc.message
