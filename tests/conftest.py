"""Shared fixtures: in-memory database, seeded data, services and an API client."""

import os

os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite:///:memory:")

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bookingdesk.api.deps import get_booking_service, get_currency_service
from bookingdesk.database import Base, get_db
from bookingdesk.domain.booking_status import BookingStatus
from bookingdesk.main import create_application
from bookingdesk.models import Booking, Currency, Provider, User
from bookingdesk.services.booking_service import BookingService
from bookingdesk.services.booking_store import BookingStore
from bookingdesk.services.currency_service import CurrencyService
from bookingdesk.services.notification_service import NotificationService
from bookingdesk.services.profile_service import ProfileService


class RecordingDispatcher:
    """Collects delivered payloads instead of sending them anywhere."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []

    async def deliver(self, payload: dict[str, Any]) -> None:
        self.payloads.append(payload)


async def create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_database(session: AsyncSession) -> SimpleNamespace:
    """Currencies, one provider (EUR), two users and one booking per status."""
    session.add_all(
        [
            Currency(code="USD", rate_to_base=Decimal("1.0"), symbol="$", minor_units=2),
            Currency(code="EUR", rate_to_base=Decimal("0.9"), symbol="€", minor_units=2),
            Currency(code="INR", rate_to_base=Decimal("83.1"), symbol="₹", minor_units=2),
            Currency(code="JPY", rate_to_base=Decimal("150"), symbol="¥", minor_units=0),
        ]
    )
    provider = Provider(id=1, name="Ana Plumbing", mobileno="555-0101", currency_code="EUR")
    other_provider = Provider(id=2, name="Bo Electric", mobileno="555-0102", currency_code=None)
    user = User(
        id=10,
        name="Chris Customer",
        mobileno="555-0110",
        profile_img="uploads/profile/chris.jpg",
        currency_code="INR",
    )
    session.add_all([provider, other_provider, user])
    await session.flush()

    bookings = {}
    for booking_status in (
        BookingStatus.PENDING,
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETE_REQUESTED,
        BookingStatus.REJECTED_BY_USER,
        BookingStatus.COMPLETED_ACCEPTED,
        BookingStatus.CANCELLED_BY_PROVIDER,
    ):
        booking = Booking(
            service_id=100 + int(booking_status),
            service_title=f"Sink repair #{int(booking_status)}",
            provider_id=provider.id,
            user_id=user.id,
            status=int(booking_status),
            reason="customer unavailable" if booking_status.requires_reason else None,
            amount=Decimal("100.00"),
            currency_code="USD",
            service_date=date(2026, 11, 2),
            from_time="10:00 AM",
            to_time="11:00 AM",
            location="12 Harbour Road",
        )
        session.add(booking)
        bookings[booking_status] = booking

    # A second in-progress booking whose customer record no longer exists
    orphan = Booking(
        service_id=200,
        service_title="Boiler check",
        provider_id=provider.id,
        user_id=None,
        status=int(BookingStatus.IN_PROGRESS),
        amount=Decimal("50.00"),
        currency_code="EUR",
        service_date=date(2026, 11, 3),
        from_time="02:00 PM",
        to_time="03:00 PM",
        location="4 Mill Lane",
    )
    session.add(orphan)

    # Booking of another provider, never part of provider 1's listing
    foreign = Booking(
        service_id=300,
        service_title="Rewiring",
        provider_id=other_provider.id,
        user_id=user.id,
        status=int(BookingStatus.PENDING),
        amount=Decimal("80.00"),
        currency_code="USD",
        service_date=date(2026, 11, 4),
        from_time="09:00 AM",
        to_time="12:00 PM",
        location="9 Elm Street",
    )
    session.add(foreign)
    await session.commit()

    return SimpleNamespace(
        provider_id=provider.id,
        other_provider_id=other_provider.id,
        user_id=user.id,
        bookings={s: b.id for s, b in bookings.items()},
        orphan_id=orphan.id,
        foreign_id=foreign.id,
    )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def seeded(session_maker) -> SimpleNamespace:
    async with session_maker() as session:
        return await seed_database(session)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def service(dispatcher) -> BookingService:
    return BookingService(
        store=BookingStore(),
        profiles=ProfileService(),
        currencies=CurrencyService(ttl_seconds=300, default_currency="USD"),
        notifications=NotificationService(dispatcher),
    )


@pytest.fixture
async def client(session_maker, service):
    app = create_application()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = lambda: service
    app.dependency_overrides[get_currency_service] = lambda: service.currencies

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
