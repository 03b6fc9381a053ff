"""Booking lifecycle and provider booking list.

Transitions are decided by ``bookingdesk.domain.booking_state`` and applied
here under the storage compare-and-swap contract: the row is locked when the
database supports it, and the status update only lands if the booking is
still in the status the decision was made from. Of two concurrent
transitions on one booking exactly one succeeds.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.core.exceptions import IllegalTransition, NotFoundError, Unauthorized
from bookingdesk.domain.booking_state import (
    ActorRole,
    BookingAction,
    BookingStatusChanged,
    available_actions,
    plan_transition,
)
from bookingdesk.domain.booking_status import BookingStatus, parse_status_filter
from bookingdesk.domain.currency import CurrencyCatalog, normalize_amount
from bookingdesk.domain.viewer import ViewerContext
from bookingdesk.models.booking import Booking
from bookingdesk.schemas.booking import BookingView, CounterpartProfile
from bookingdesk.services.booking_store import BookingStore, booking_store
from bookingdesk.services.currency_service import CurrencyService, currency_service
from bookingdesk.services.notification_service import NotificationService, notification_service
from bookingdesk.services.profile_service import Profile, ProfileService, profile_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    """Booking after the transition and the event it produced."""

    booking: Booking
    event: BookingStatusChanged


class BookingListing:
    """Lazy, restartable sequence of ``BookingView`` for one provider.

    Nothing is queried until iteration starts, and every new ``async for``
    runs the query again.
    """

    def __init__(
        self,
        service: "BookingService",
        db: AsyncSession,
        provider_id: int,
        status_filter: BookingStatus | None,
        viewer: ViewerContext,
    ) -> None:
        self._service = service
        self._db = db
        self.provider_id = provider_id
        self.status_filter = status_filter
        self.viewer = viewer

    def __aiter__(self) -> AsyncIterator[BookingView]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[BookingView]:
        catalog = await self._service.currencies.get_catalog(self._db)
        profiles: dict[int | None, Profile] = {}
        async for booking in self._service.store.list_bookings_by_provider(
            self._db, self.provider_id, self.status_filter
        ):
            if booking.user_id not in profiles:
                profiles[booking.user_id] = await self._service.counterpart_profile(
                    self._db, booking
                )
            yield self._service.build_view(
                booking, catalog, self.viewer, profiles[booking.user_id]
            )

    async def to_list(self) -> list[BookingView]:
        return [view async for view in self]


class BookingService:
    """Applies lifecycle transitions and assembles provider booking lists."""

    def __init__(
        self,
        store: BookingStore | None = None,
        profiles: ProfileService | None = None,
        currencies: CurrencyService | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self.store = store or booking_store
        self.profiles = profiles or profile_service
        self.currencies = currencies or currency_service
        self.notifications = notifications or notification_service

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Booking:
        return await self.store.load_booking(db, booking_id)

    # ==================== LIFECYCLE ====================

    @staticmethod
    def _check_actor_identity(booking: Booking, actor_role: ActorRole, actor_id: int | None) -> None:
        if actor_id is None:
            return
        party_id = booking.provider_id if actor_role is ActorRole.PROVIDER else booking.user_id
        if party_id != actor_id:
            raise Unauthorized(
                f"{actor_role.value.capitalize()} {actor_id} is not a party to booking {booking.id}"
            )

    async def transition(
        self,
        db: AsyncSession,
        booking_id: int,
        action: str | BookingAction,
        actor_role: str | ActorRole,
        reason: str | None = None,
        actor_id: int | None = None,
    ) -> TransitionResult:
        """Apply ``action`` to a booking and commit it.

        Raises:
            NotFoundError: No such booking
            IllegalTransition: Not allowed from the current status, including
                when a concurrent request moved the booking first
            Unauthorized: Wrong actor role, or actor is not on the booking
            MissingReason: Reason required but blank
            Contention: Booking locked by another request; retry
        """
        booking = await self.store.load_booking(db, booking_id, for_update=True)

        try:
            plan = plan_transition(booking.status, action, actor_role, reason)
            self._check_actor_identity(booking, plan.actor_role, actor_id)
        except (IllegalTransition, Unauthorized) as e:
            logger.info(
                f"Rejected {getattr(action, 'value', action)} on booking {booking_id} "
                f"by {getattr(actor_role, 'value', actor_role)}: {e.detail}"
            )
            raise

        updated = await self.store.save_booking_status(
            db,
            booking_id,
            expected_current_status=plan.from_status,
            new_status=plan.to_status,
            reason=plan.reason,
            action=plan.action.value,
        )
        event = plan.event_for(booking_id)
        outbox_row = await self.store.record_event(db, event)
        await db.commit()

        logger.info(
            f"Booking {booking_id}: {plan.from_status.name} -> {plan.to_status.name} "
            f"({plan.action.value} by {plan.actor_role.value})"
        )

        if await self.notifications.dispatch(db, outbox_row):
            await db.commit()
        return TransitionResult(booking=updated, event=event)

    # ==================== LISTING ====================

    def list_provider_bookings(
        self,
        db: AsyncSession,
        provider_id: int,
        status_filter: Any,
        viewer: ViewerContext,
    ) -> BookingListing:
        """Bookings of a provider, optionally restricted to one status.

        Raises:
            UnknownStatus: Filter is not a registered status
            ValidationError: Filter is a registered but unselectable status
        """
        return BookingListing(self, db, provider_id, parse_status_filter(status_filter), viewer)

    async def counterpart_profile(self, db: AsyncSession, booking: Booking) -> Profile:
        """Customer profile for a booking entry, or placeholders if unresolvable."""
        try:
            return await self.profiles.get_profile(db, booking.user_id)
        except NotFoundError as e:
            logger.warning(f"Booking {booking.id}: counterpart not resolved ({e.detail}); using placeholder")
            return Profile.placeholder()

    def build_view(
        self,
        booking: Booking,
        catalog: CurrencyCatalog,
        viewer: ViewerContext,
        counterpart: Profile,
    ) -> BookingView:
        booking_status = booking.booking_status
        target_code = viewer.preferred_currency_code
        displayed_amount = normalize_amount(catalog, booking.amount, booking.currency_code, target_code)

        return BookingView(
            id=booking.id,
            service_id=booking.service_id,
            service_title=booking.service_title,
            provider_id=booking.provider_id,
            user_id=booking.user_id,
            status=int(booking_status),
            status_label=booking_status.label,
            status_class=booking_status.presentation_class,
            reason=booking.reason,
            show_reason=booking_status.requires_reason,
            amount=booking.amount,
            currency_code=booking.currency_code,
            displayed_amount=displayed_amount,
            display_currency_code=catalog.get(target_code).code,
            currency_symbol=catalog.symbol(target_code),
            formatted_amount=catalog.format(displayed_amount, target_code),
            service_date=booking.service_date,
            from_time=booking.from_time,
            to_time=booking.to_time,
            location=booking.location,
            counterpart=CounterpartProfile(
                name=counterpart.name,
                phone=counterpart.phone,
                avatar_path=counterpart.avatar_path,
            ),
            available_actions=available_actions(booking_status, viewer.role.actor_role),
            chat_enabled=booking_status is BookingStatus.IN_PROGRESS,
        )


booking_service = BookingService()
