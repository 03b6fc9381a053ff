"""Currency reference data."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from bookingdesk.database import Base


class Currency(Base):
    """Currency with its rate against the base currency.

    Maintained by an administrative process; the service only reads it.
    """

    __tablename__ = "currencies"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False, index=True)
    rate_to_base: Mapped[Decimal] = mapped_column(
        Numeric(18, 8), nullable=False
    )  # Units of this currency per one base unit
    symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    minor_units: Mapped[int] = mapped_column(Integer, default=2, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
