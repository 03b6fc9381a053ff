"""Database models."""

from bookingdesk.models.booking import Booking, BookingStatusEvent
from bookingdesk.models.currency import Currency
from bookingdesk.models.user import Provider, User

__all__ = [
    # Parties
    "User",
    "Provider",
    # Reference data
    "Currency",
    # Booking
    "Booking",
    "BookingStatusEvent",
]
