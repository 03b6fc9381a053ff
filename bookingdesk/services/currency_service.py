"""Currency catalog loading and viewer currency resolution."""

import asyncio
import logging
import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookingdesk.config import settings
from bookingdesk.domain.currency import Currency, CurrencyCatalog
from bookingdesk.domain.viewer import ViewerContext, ViewerRole
from bookingdesk.models.currency import Currency as CurrencyRow
from bookingdesk.models.user import Provider, User

logger = logging.getLogger(__name__)


class CurrencyService:
    """Caches the currency catalog and resolves each viewer's display currency."""

    def __init__(self, ttl_seconds: int | None = None, default_currency: str | None = None) -> None:
        self.ttl_seconds = settings.currency_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.default_currency = (default_currency or settings.default_currency).upper()
        self._catalog: CurrencyCatalog | None = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        return (
            self._catalog is not None
            and time.monotonic() - self._loaded_at < self.ttl_seconds
        )

    async def get_catalog(self, db: AsyncSession) -> CurrencyCatalog:
        """Return the cached catalog, reloading it once the TTL has passed."""
        if self._is_fresh():
            return self._catalog

        async with self._lock:
            if self._is_fresh():
                return self._catalog

            result = await db.scalars(select(CurrencyRow).order_by(CurrencyRow.code))
            catalog = CurrencyCatalog(
                Currency(
                    code=row.code,
                    rate_to_base=row.rate_to_base,
                    symbol=row.symbol,
                    minor_units=row.minor_units,
                )
                for row in result
            )
            self._catalog = catalog
            self._loaded_at = time.monotonic()
            logger.info(f"Loaded currency catalog with {len(catalog)} currencies")
            return catalog

    def invalidate(self) -> None:
        """Drop the cached catalog; the next lookup reloads it."""
        self._catalog = None
        self._loaded_at = 0.0

    async def resolve_preferred_currency(
        self,
        db: AsyncSession,
        role: ViewerRole,
        viewer_id: int | None = None,
    ) -> str:
        """Currency a viewer sees amounts in.

        Providers and users use the currency saved on their account; anonymous
        viewers, and accounts without a usable currency, get the default.
        """
        if role is ViewerRole.ANONYMOUS or viewer_id is None:
            return self.default_currency

        model = Provider if role is ViewerRole.PROVIDER else User
        account = await db.get(model, viewer_id)
        code = account.currency_code.upper() if account and account.currency_code else None
        if code is None:
            return self.default_currency

        catalog = await self.get_catalog(db)
        if code not in catalog:
            logger.warning(
                f"{role.value} {viewer_id} prefers unregistered currency {code}; "
                f"using {self.default_currency}"
            )
            return self.default_currency
        return code

    async def resolve_viewer_context(
        self,
        db: AsyncSession,
        role: ViewerRole,
        viewer_id: int | None = None,
    ) -> ViewerContext:
        currency_code = await self.resolve_preferred_currency(db, role, viewer_id)
        return ViewerContext(role=role, preferred_currency_code=currency_code, viewer_id=viewer_id)


currency_service = CurrencyService()
