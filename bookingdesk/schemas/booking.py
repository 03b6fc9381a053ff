"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from bookingdesk.domain.booking_state import ActorRole, BookingAction, BookingStatusChanged
from bookingdesk.domain.booking_status import BookingStatus


class TransitionRequest(BaseModel):
    """Schema for moving a booking to its next status."""

    action: BookingAction
    actor_role: ActorRole
    actor_id: int | None = Field(None, description="Account performing the action, checked against the booking")
    reason: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    service_id: int
    service_title: str
    provider_id: int
    user_id: int | None

    # Status
    status: int
    reason: str | None

    # Pricing, in the currency the booking was made in
    amount: Decimal
    currency_code: str

    # Schedule
    service_date: date
    from_time: str
    to_time: str
    location: str | None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def status_label(self) -> str:
        return BookingStatus.from_code(self.status).label


class StatusChangedEvent(BaseModel):
    """Schema for an emitted status change."""

    booking_id: int
    from_status: int
    to_status: int
    actor_role: ActorRole
    reason: str | None
    occurred_at: datetime

    @classmethod
    def from_event(cls, event: BookingStatusChanged) -> "StatusChangedEvent":
        return cls(
            booking_id=event.booking_id,
            from_status=int(event.from_status),
            to_status=int(event.to_status),
            actor_role=event.actor_role,
            reason=event.reason,
            occurred_at=event.occurred_at,
        )


class TransitionResponse(BaseModel):
    """Schema for a successful transition."""

    booking: BookingResponse
    event: StatusChangedEvent


class CounterpartProfile(BaseModel):
    """Customer shown on a provider's booking entry."""

    name: str
    phone: str
    avatar_path: str


class BookingView(BaseModel):
    """Display payload for one entry of a provider's booking list."""

    id: int
    service_id: int
    service_title: str
    provider_id: int
    user_id: int | None

    # Status
    status: int
    status_label: str
    status_class: str
    reason: str | None
    show_reason: bool

    # Stored amount
    amount: Decimal
    currency_code: str

    # Amount in the viewer's currency
    displayed_amount: Decimal
    display_currency_code: str
    currency_symbol: str
    formatted_amount: str

    # Schedule
    service_date: date
    from_time: str
    to_time: str
    location: str | None

    counterpart: CounterpartProfile

    # What the viewer can do next
    available_actions: list[BookingAction]
    chat_enabled: bool


class BookingListResponse(BaseModel):
    """Schema for a provider's booking list."""

    bookings: list[BookingView]
    total: int
    display_currency_code: str


class StatusFilterOption(BaseModel):
    """One selectable status filter value."""

    value: int
    label: str
