"""API dependencies for viewer resolution and services."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.core.exceptions import ValidationError
from bookingdesk.database import get_db
from bookingdesk.domain.viewer import ViewerContext, ViewerRole
from bookingdesk.services.booking_service import BookingService, booking_service
from bookingdesk.services.currency_service import CurrencyService, currency_service


def get_booking_service() -> BookingService:
    """Booking service instance (overridable in tests)."""
    return booking_service


def get_currency_service() -> CurrencyService:
    """Currency service instance (overridable in tests)."""
    return currency_service


async def get_viewer_context(
    db: Annotated[AsyncSession, Depends(get_db)],
    currencies: Annotated[CurrencyService, Depends(get_currency_service)],
    x_viewer_role: Annotated[str | None, Header()] = None,
    x_viewer_id: Annotated[int | None, Header()] = None,
) -> ViewerContext:
    """Resolve who is viewing and which currency they see amounts in.

    Session handling lives in front of this service; it forwards the viewer
    as ``X-Viewer-Role`` / ``X-Viewer-Id``. No role means anonymous.
    """
    if not x_viewer_role:
        role = ViewerRole.ANONYMOUS
    else:
        try:
            role = ViewerRole(x_viewer_role.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown viewer role: {x_viewer_role!r}") from None

    return await currencies.resolve_viewer_context(db, role, x_viewer_id)
