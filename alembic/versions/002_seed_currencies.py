"""Seed currencies data.

Revision ID: 002_seed_currencies
Revises: 001_initial
Create Date: 2026-10-19

Seeds the currencies table. USD is the base currency; every other rate is
the number of units of that currency per one US dollar.
"""

from decimal import Decimal
from typing import Sequence

from alembic import op
from sqlalchemy import Integer, Numeric, String, column, table

# revision identifiers
revision: str = "002_seed_currencies"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

CURRENCIES = [
    {"code": "USD", "rate_to_base": Decimal("1.00000000"), "symbol": "$", "minor_units": 2},
    {"code": "EUR", "rate_to_base": Decimal("0.90000000"), "symbol": "€", "minor_units": 2},
    {"code": "GBP", "rate_to_base": Decimal("0.79000000"), "symbol": "£", "minor_units": 2},
    {"code": "INR", "rate_to_base": Decimal("83.10000000"), "symbol": "₹", "minor_units": 2},
    {"code": "AED", "rate_to_base": Decimal("3.67250000"), "symbol": "د.إ", "minor_units": 2},
    {"code": "JPY", "rate_to_base": Decimal("149.50000000"), "symbol": "¥", "minor_units": 0},
]


def upgrade() -> None:
    """Insert seed currencies."""
    currencies_table = table(
        "currencies",
        column("code", String),
        column("rate_to_base", Numeric),
        column("symbol", String),
        column("minor_units", Integer),
    )
    op.bulk_insert(currencies_table, CURRENCIES)


def downgrade() -> None:
    """Remove seed currencies."""
    currencies_table = table("currencies", column("code", String))
    op.execute(
        currencies_table.delete().where(
            currencies_table.c.code.in_([c["code"] for c in CURRENCIES])
        )
    )
