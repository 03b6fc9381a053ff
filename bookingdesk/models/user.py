"""Profile models for the two parties of a booking."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from bookingdesk.database import Base

if TYPE_CHECKING:
    from bookingdesk.models.booking import Booking


class User(Base):
    """Customer account (the party hiring a provider)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String(150))
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    mobileno: Mapped[str | None] = mapped_column(String(20))
    profile_img: Mapped[str | None] = mapped_column(Text)  # Relative path
    currency_code: Mapped[str | None] = mapped_column(String(3))  # Preferred display currency

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="user")


class Provider(Base):
    """Service provider account."""

    __tablename__ = "providers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String(150))
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    mobileno: Mapped[str | None] = mapped_column(String(20))
    profile_img: Mapped[str | None] = mapped_column(Text)
    currency_code: Mapped[str | None] = mapped_column(String(3))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="provider")
