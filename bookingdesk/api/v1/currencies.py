"""Currency endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.api.deps import get_currency_service, get_db
from bookingdesk.schemas.currency import CurrencyResponse
from bookingdesk.services.currency_service import CurrencyService

router = APIRouter()


@router.get("/", response_model=list[CurrencyResponse])
async def list_currencies(
    db: Annotated[AsyncSession, Depends(get_db)],
    currencies: Annotated[CurrencyService, Depends(get_currency_service)],
) -> list[CurrencyResponse]:
    """Currencies amounts can be displayed in."""
    catalog = await currencies.get_catalog(db)
    return [CurrencyResponse.model_validate(currency) for currency in catalog]
