"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.api.deps import get_booking_service, get_db, get_viewer_context
from bookingdesk.domain.booking_status import status_filter_options
from bookingdesk.domain.viewer import ViewerContext
from bookingdesk.models.booking import Booking
from bookingdesk.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    StatusChangedEvent,
    StatusFilterOption,
    TransitionRequest,
    TransitionResponse,
)
from bookingdesk.services.booking_service import BookingService

router = APIRouter()


@router.get("/", response_model=BookingListResponse)
async def list_provider_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    viewer: Annotated[ViewerContext, Depends(get_viewer_context)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    provider_id: int = Query(..., ge=1),
    status_filter: str | None = Query(default=None, alias="status"),
) -> BookingListResponse:
    """List a provider's bookings, amounts shown in the viewer's currency."""
    listing = service.list_provider_bookings(db, provider_id, status_filter, viewer)
    bookings = await listing.to_list()

    return BookingListResponse(
        bookings=bookings,
        total=len(bookings),
        display_currency_code=viewer.preferred_currency_code,
    )


@router.get("/statuses", response_model=list[StatusFilterOption])
async def get_status_filters() -> list[StatusFilterOption]:
    """Status values the booking list can be filtered by."""
    return [StatusFilterOption(value=code, label=label) for code, label in status_filter_options()]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Get a booking by ID."""
    return await service.get_booking(db, booking_id)


@router.post("/{booking_id}/transition", response_model=TransitionResponse)
async def transition_booking(
    booking_id: int,
    request: TransitionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> TransitionResponse:
    """Move a booking to its next status (accept, cancel, request completion, confirm, reject)."""
    result = await service.transition(
        db,
        booking_id,
        action=request.action,
        actor_role=request.actor_role,
        reason=request.reason,
        actor_id=request.actor_id,
    )
    return TransitionResponse(
        booking=BookingResponse.model_validate(result.booking),
        event=StatusChangedEvent.from_event(result.event),
    )
