"""Booking-related database models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from bookingdesk.database import Base
from bookingdesk.domain.booking_status import BookingStatus

if TYPE_CHECKING:
    from bookingdesk.models.user import Provider, User


class Booking(Base):
    """Booking of a provider's service by a user."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Service being booked
    service_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    service_title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Parties
    provider_id: Mapped[int] = mapped_column(
        ForeignKey("providers.id"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), index=True)

    # Status (see BookingStatus); only the lifecycle engine changes it
    status: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=int(BookingStatus.PENDING), index=True
    )
    reason: Mapped[str | None] = mapped_column(Text)  # Set for rejected/cancelled only

    # Pricing, fixed at creation
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)

    # Schedule
    service_date: Mapped[date] = mapped_column(Date, nullable=False)
    from_time: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g. "10:00 AM"
    to_time: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    provider: Mapped["Provider"] = relationship("Provider", back_populates="bookings")
    user: Mapped["User | None"] = relationship("User", back_populates="bookings")
    status_events: Mapped[list["BookingStatusEvent"]] = relationship(
        "BookingStatusEvent", back_populates="booking", order_by="BookingStatusEvent.id"
    )

    @property
    def booking_status(self) -> BookingStatus:
        """Status as a registry member."""
        return BookingStatus.from_code(self.status)


class BookingStatusEvent(Base):
    """Append-only record of applied status transitions (event outbox)."""

    __tablename__ = "booking_status_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    booking_id: Mapped[int] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_status: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    to_status: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    actor_role: Mapped[str] = mapped_column(String(10), nullable=False)  # provider, user
    reason: Mapped[str | None] = mapped_column(Text)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    dispatched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True)

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="status_events")
