"""Pydantic schemas for request/response validation."""

from bookingdesk.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    BookingView,
    CounterpartProfile,
    StatusChangedEvent,
    StatusFilterOption,
    TransitionRequest,
    TransitionResponse,
)
from bookingdesk.schemas.currency import CurrencyResponse

__all__ = [
    # Booking
    "BookingListResponse",
    "BookingResponse",
    "BookingView",
    "CounterpartProfile",
    "StatusChangedEvent",
    "StatusFilterOption",
    "TransitionRequest",
    "TransitionResponse",
    # Currency
    "CurrencyResponse",
]
