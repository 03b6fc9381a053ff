"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the tables used by the booking lifecycle service:
- Users and providers (profiles, preferred currency)
- Currencies (rates against the base currency)
- Bookings and the status event outbox
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== PARTIES ====================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(150)),
        sa.Column("email", sa.String(255), unique=True, index=True),
        sa.Column("mobileno", sa.String(20)),
        sa.Column("profile_img", sa.Text),
        sa.Column("currency_code", sa.String(3)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "providers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(150)),
        sa.Column("email", sa.String(255), unique=True, index=True),
        sa.Column("mobileno", sa.String(20)),
        sa.Column("profile_img", sa.Text),
        sa.Column("currency_code", sa.String(3)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== CURRENCIES ====================
    op.create_table(
        "currencies",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("code", sa.String(3), unique=True, nullable=False, index=True),
        sa.Column("rate_to_base", sa.Numeric(18, 8), nullable=False),
        sa.Column("symbol", sa.String(10), nullable=False),
        sa.Column("minor_units", sa.Integer, nullable=False, server_default="2"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("rate_to_base > 0", name="ck_currencies_rate_positive"),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("service_id", sa.Integer, nullable=False, index=True),
        sa.Column("service_title", sa.String(255), nullable=False),
        sa.Column("provider_id", sa.Integer, sa.ForeignKey("providers.id"), nullable=False, index=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), index=True),
        sa.Column("status", sa.SmallInteger, nullable=False, server_default="1", index=True),
        sa.Column("reason", sa.Text),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency_code", sa.String(3), nullable=False),
        sa.Column("service_date", sa.Date, nullable=False),
        sa.Column("from_time", sa.String(20), nullable=False),
        sa.Column("to_time", sa.String(20), nullable=False),
        sa.Column("location", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("status BETWEEN 1 AND 7", name="ck_bookings_status_range"),
    )

    op.create_table(
        "booking_status_events",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("booking_id", sa.Integer, sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("from_status", sa.SmallInteger, nullable=False),
        sa.Column("to_status", sa.SmallInteger, nullable=False),
        sa.Column("actor_role", sa.String(10), nullable=False),
        sa.Column("reason", sa.Text),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), index=True),
    )


def downgrade() -> None:
    """Drop all database tables."""
    op.drop_table("booking_status_events")
    op.drop_table("bookings")
    op.drop_table("currencies")
    op.drop_table("providers")
    op.drop_table("users")
