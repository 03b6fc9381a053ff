"""Delivery of booking status events to notification and chat collaborators.

Events are written to the ``booking_status_events`` outbox in the same
transaction as the status change. After commit they are handed to a
dispatcher; rows that fail to deliver keep ``dispatched_at`` empty and are
picked up again by ``dispatch_pending``.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.config import settings
from bookingdesk.models.booking import BookingStatusEvent

logger = logging.getLogger(__name__)


class EventDispatcher(Protocol):
    """Anything that can deliver an event payload."""

    async def deliver(self, payload: dict[str, Any]) -> None: ...


class LoggingDispatcher:
    """Writes events to the log; used when no webhook is configured."""

    async def deliver(self, payload: dict[str, Any]) -> None:
        logger.info(
            f"Booking {payload['booking_id']} status {payload['from']} -> {payload['to']} "
            f"by {payload['actor_role']}"
        )


class WebhookDispatcher:
    """POSTs events as JSON to a notification endpoint."""

    def __init__(self, url: str, timeout: float | None = None) -> None:
        self.url = url
        self.timeout = timeout or settings.notification_timeout_seconds
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def deliver(self, payload: dict[str, Any]) -> None:
        response = await self.http_client.post(self.url, json=payload)
        response.raise_for_status()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None


def event_payload(row: BookingStatusEvent) -> dict[str, Any]:
    """Wire form of an outbox row."""
    return {
        "event_type": "booking.status_changed",
        "event_id": row.id,
        "booking_id": row.booking_id,
        "from": row.from_status,
        "to": row.to_status,
        "actor_role": row.actor_role,
        "reason": row.reason,
        "occurred_at": row.occurred_at.isoformat() if row.occurred_at else None,
    }


class NotificationService:
    """Hands outbox events to the configured dispatcher."""

    def __init__(self, dispatcher: EventDispatcher | None = None) -> None:
        if dispatcher is None:
            if settings.notification_webhook_url:
                dispatcher = WebhookDispatcher(settings.notification_webhook_url)
            else:
                dispatcher = LoggingDispatcher()
        self.dispatcher = dispatcher

    async def dispatch(self, db: AsyncSession, row: BookingStatusEvent) -> bool:
        """Deliver one event and mark it dispatched.

        Returns:
            bool: True if delivered, False if it stays queued for retry
        """
        # The status change is already committed; a failed delivery only delays the event
        try:
            await self.dispatcher.deliver(event_payload(row))
        except Exception as e:
            logger.error(f"Delivery of booking event {row.id} failed, left queued: {e!r}")
            return False

        row.dispatched_at = datetime.now(UTC)
        await db.flush()
        return True

    async def dispatch_pending(self, db: AsyncSession, limit: int = 100) -> int:
        """Retry undelivered events, oldest first.

        Returns:
            int: Number of events delivered
        """
        result = await db.scalars(
            select(BookingStatusEvent)
            .where(BookingStatusEvent.dispatched_at.is_(None))
            .order_by(BookingStatusEvent.id)
            .limit(limit)
        )
        delivered = 0
        for row in list(result):
            if await self.dispatch(db, row):
                delivered += 1
        return delivered

    async def close(self) -> None:
        close = getattr(self.dispatcher, "close", None)
        if close is not None:
            await close()


notification_service = NotificationService()
