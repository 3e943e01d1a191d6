from holidaze.services.bookings.listing import (
    ManagerUpcomingRow,
    is_booking_active,
    manager_upcoming_rows,
    upcoming_bookings,
)
from holidaze.services.bookings.orchestrator import BookingOrchestrator, MutationResult, check_booking_input
from holidaze.services.bookings.transaction import MutationKind, MutationTransaction, TransactionStatus

__all__ = [
    "BookingOrchestrator",
    "ManagerUpcomingRow",
    "MutationKind",
    "MutationResult",
    "MutationTransaction",
    "TransactionStatus",
    "check_booking_input",
    "is_booking_active",
    "manager_upcoming_rows",
    "upcoming_bookings",
]
