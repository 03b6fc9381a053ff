"""Booking status registry.

Statuses are stored as small integers. Each status carries the label shown to
viewers and the badge class used when rendering it.
"""

from decimal import Decimal
from enum import IntEnum
from typing import Any

from bookingdesk.core.exceptions import UnknownStatus, ValidationError


class BookingStatus(IntEnum):
    """Booking status codes."""

    PENDING = 1
    IN_PROGRESS = 2
    COMPLETE_REQUESTED = 3
    ACCEPTED = 4  # Reserved: no transition leads here
    REJECTED_BY_USER = 5
    COMPLETED_ACCEPTED = 6
    CANCELLED_BY_PROVIDER = 7

    @classmethod
    def from_code(cls, code: Any) -> "BookingStatus":
        """Resolve a status from an int or numeric string."""
        if isinstance(code, cls):
            return code
        if isinstance(code, bool):
            raise UnknownStatus(code)
        # int() would truncate 4.5 to a valid code
        if isinstance(code, float) and not code.is_integer():
            raise UnknownStatus(code)
        if isinstance(code, Decimal) and (not code.is_finite() or code != code.to_integral_value()):
            raise UnknownStatus(code)
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            raise UnknownStatus(code) from None

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def presentation_class(self) -> str:
        return STATUS_CLASSES[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def requires_reason(self) -> bool:
        return self in REASON_STATUSES


STATUS_LABELS: dict[BookingStatus, str] = {
    BookingStatus.PENDING: "Pending",
    BookingStatus.IN_PROGRESS: "Inprogress",
    BookingStatus.COMPLETE_REQUESTED: "Complete Request sent to User",
    BookingStatus.ACCEPTED: "Accepted",
    BookingStatus.REJECTED_BY_USER: "Rejected by User",
    BookingStatus.COMPLETED_ACCEPTED: "Completed Accepted",
    BookingStatus.CANCELLED_BY_PROVIDER: "Cancelled by Provider",
}

STATUS_CLASSES: dict[BookingStatus, str] = {
    BookingStatus.PENDING: "bg-warning",
    BookingStatus.IN_PROGRESS: "bg-primary",
    BookingStatus.COMPLETE_REQUESTED: "bg-success",
    BookingStatus.ACCEPTED: "bg-success",
    BookingStatus.REJECTED_BY_USER: "bg-danger",
    BookingStatus.COMPLETED_ACCEPTED: "bg-success",
    BookingStatus.CANCELLED_BY_PROVIDER: "bg-danger",
}

TERMINAL_STATUSES = frozenset(
    {
        BookingStatus.REJECTED_BY_USER,
        BookingStatus.COMPLETED_ACCEPTED,
        BookingStatus.CANCELLED_BY_PROVIDER,
    }
)

# A booking carries a reason exactly when it is in one of these
REASON_STATUSES = frozenset(
    {BookingStatus.REJECTED_BY_USER, BookingStatus.CANCELLED_BY_PROVIDER}
)

# Filter values offered to callers, in dropdown order. ACCEPTED is never offered.
SELECTABLE_STATUS_FILTERS: tuple[BookingStatus, ...] = (
    BookingStatus.PENDING,
    BookingStatus.IN_PROGRESS,
    BookingStatus.COMPLETE_REQUESTED,
    BookingStatus.REJECTED_BY_USER,
    BookingStatus.CANCELLED_BY_PROVIDER,
    BookingStatus.COMPLETED_ACCEPTED,
)


def status_label(code: Any) -> str:
    """Label shown to viewers for a status code."""
    return BookingStatus.from_code(code).label


def presentation_class(code: Any) -> str:
    """Badge class for a status code."""
    return BookingStatus.from_code(code).presentation_class


def status_filter_options() -> list[tuple[int, str]]:
    """(code, label) pairs for the booking list status filter."""
    return [(int(s), s.label) for s in SELECTABLE_STATUS_FILTERS]


def parse_status_filter(value: Any) -> BookingStatus | None:
    """Parse a caller-supplied status filter.

    Empty values mean "all statuses". Codes outside the registry raise
    UnknownStatus; registered but unselectable codes raise ValidationError.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, str):
        value = value.strip()
    booking_status = BookingStatus.from_code(value)
    if booking_status not in SELECTABLE_STATUS_FILTERS:
        raise ValidationError(f"Status {int(booking_status)} is not a selectable filter")
    return booking_status
