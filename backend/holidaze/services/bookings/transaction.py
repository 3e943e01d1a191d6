"""
Optimistic-update transaction: PENDING -> COMMITTED | ROLLED_BACK | UNRECOVERABLE.

The snapshot of the local booking list is taken before anything is applied,
so rollback is a data restore rather than something inferred from control flow.
"""
from dataclasses import dataclass
from enum import Enum

from holidaze.core.errors import BookingError
from holidaze.models import Booking


class MutationKind(str, Enum):
    CREATE = "create"
    CANCEL = "cancel"
    CHANGE_DATES = "change_dates"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    # change dates: old booking deleted, new one not created; nothing to roll back to
    UNRECOVERABLE = "unrecoverable"


@dataclass
class MutationTransaction:
    kind: MutationKind
    booking_id: str | None
    snapshot: tuple[Booking, ...]
    status: TransactionStatus = TransactionStatus.PENDING
    error: BookingError | None = None
    # Local write applied optimistically: (index, booking) removed from the list
    removed: tuple[int, Booking] | None = None
    # List version right after the optimistic write (see BookingOrchestrator._version)
    applied_version: int | None = None

    def _finish(self, status: TransactionStatus, error: BookingError | None = None) -> None:
        if self.status is not TransactionStatus.PENDING:
            raise RuntimeError(f"{self.kind.value} transaction already {self.status.value}")
        self.status = status
        self.error = error

    def record_removal(self, index: int, booking: Booking, version: int) -> None:
        self.removed = (index, booking)
        self.applied_version = version

    def commit(self) -> None:
        self._finish(TransactionStatus.COMMITTED)

    def roll_back(self, error: BookingError) -> list[Booking]:
        """Mark rolled back and return the pre-mutation list."""
        self._finish(TransactionStatus.ROLLED_BACK, error)
        return list(self.snapshot)

    def mark_unrecoverable(self, error: BookingError) -> None:
        self._finish(TransactionStatus.UNRECOVERABLE, error)
