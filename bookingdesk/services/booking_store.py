"""Booking storage: loads, compare-and-swap status updates, provider listings."""

import logging
from collections.abc import AsyncIterator

from sqlalchemy import Select, select, text, update
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.config import settings
from bookingdesk.core.exceptions import Contention, IllegalTransition, NotFoundError
from bookingdesk.domain.booking_state import BookingStatusChanged
from bookingdesk.domain.booking_status import BookingStatus
from bookingdesk.models.booking import Booking, BookingStatusEvent

logger = logging.getLogger(__name__)

# lock_not_available, serialization_failure, deadlock_detected
LOCK_SQLSTATES = {"55P03", "40001", "40P01"}


def is_lock_error(exc: DBAPIError) -> bool:
    """Whether a driver error means the row/table lock could not be taken."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in LOCK_SQLSTATES:
        return True
    if isinstance(exc, OperationalError):
        message = str(orig).lower()
        return "locked" in message or "busy" in message
    return False


class BookingStore:
    """SQLAlchemy-backed booking storage."""

    def __init__(self, lock_timeout_ms: int | None = None) -> None:
        self.lock_timeout_ms = lock_timeout_ms or settings.transition_lock_timeout_ms

    async def _set_lock_timeout(self, db: AsyncSession) -> None:
        # SQLite has no row locks; the compare-and-swap update covers it
        if db.get_bind().dialect.name == "postgresql":
            await db.execute(text(f"SET LOCAL lock_timeout = '{int(self.lock_timeout_ms)}ms'"))

    async def load_booking(
        self,
        db: AsyncSession,
        booking_id: int,
        for_update: bool = False,
    ) -> Booking:
        """Load a booking, optionally taking its row lock.

        Raises:
            NotFoundError: No such booking
            Contention: The row lock was not granted within the lock timeout
        """
        query = select(Booking).where(Booking.id == booking_id)
        try:
            if for_update:
                await self._set_lock_timeout(db)
                # Refresh an instance already in the session from the locked row
                query = query.with_for_update().execution_options(populate_existing=True)
            result = await db.execute(query)
        except DBAPIError as e:
            if is_lock_error(e):
                logger.warning(f"Lock not acquired for booking {booking_id}: {e.orig}")
                raise Contention(booking_id) from e
            raise

        booking = result.scalar_one_or_none()
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def save_booking_status(
        self,
        db: AsyncSession,
        booking_id: int,
        expected_current_status: BookingStatus,
        new_status: BookingStatus,
        reason: str | None = None,
        action: str | None = None,
    ) -> Booking:
        """Move a booking to ``new_status`` only if it is still in ``expected_current_status``.

        Raises:
            IllegalTransition: The status changed since it was read
            Contention: The database refused the write because of a lock
        """
        statement = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status == int(expected_current_status),
            )
            .values(status=int(new_status), reason=reason)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(statement)
        except DBAPIError as e:
            if is_lock_error(e):
                logger.warning(f"Status write for booking {booking_id} hit a lock: {e.orig}")
                raise Contention(booking_id) from e
            raise

        if result.rowcount != 1:
            # Report the status the booking is in now, not the one we expected
            current_status = await db.scalar(select(Booking.status).where(Booking.id == booking_id))
            if current_status is None:
                raise NotFoundError("Booking", str(booking_id))
            logger.warning(
                f"Booking {booking_id} moved from status {int(expected_current_status)} "
                f"to {current_status} before the update to {int(new_status)} was applied"
            )
            raise IllegalTransition(
                current_status,
                action or f"set_status:{int(new_status)}",
                detail=(
                    f"Booking {booking_id} is no longer in status "
                    f"'{expected_current_status.label}'"
                ),
            )

        booking = await db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        await db.refresh(booking)
        return booking

    async def record_event(self, db: AsyncSession, event: BookingStatusChanged) -> BookingStatusEvent:
        """Append an applied transition to the event outbox."""
        row = BookingStatusEvent(
            booking_id=event.booking_id,
            from_status=int(event.from_status),
            to_status=int(event.to_status),
            actor_role=event.actor_role.value,
            reason=event.reason,
            occurred_at=event.occurred_at,
        )
        db.add(row)
        await db.flush()
        return row

    def provider_bookings_query(
        self,
        provider_id: int,
        status_filter: BookingStatus | None = None,
    ) -> Select:
        query = select(Booking).where(Booking.provider_id == provider_id)
        if status_filter is not None:
            query = query.where(Booking.status == int(status_filter))
        # Creation order
        return query.order_by(Booking.id.asc())

    async def list_bookings_by_provider(
        self,
        db: AsyncSession,
        provider_id: int,
        status_filter: BookingStatus | None = None,
    ) -> AsyncIterator[Booking]:
        """Yield a provider's bookings in creation order."""
        result = await db.scalars(self.provider_bookings_query(provider_id, status_filter))
        for booking in result:
            yield booking


booking_store = BookingStore()
