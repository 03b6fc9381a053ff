"""Currency Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class CurrencyResponse(BaseModel):
    """Schema for a currency catalog entry."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    rate_to_base: Decimal
    symbol: str
    minor_units: int
