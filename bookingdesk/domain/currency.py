"""Currency catalog and amount normalization.

Rates are expressed against a single base currency: ``rate_to_base`` is how
many units of a currency equal one unit of the base (the base itself has
rate 1). With USD as base and EUR at 0.9, 100 USD normalizes to 90.00 EUR.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal

from bookingdesk.core.exceptions import UnknownCurrency, ValidationError

DEFAULT_MINOR_UNITS = 2


@dataclass(frozen=True)
class Currency:
    """Catalog entry."""

    code: str
    rate_to_base: Decimal
    symbol: str
    minor_units: int = DEFAULT_MINOR_UNITS


class CurrencyCatalog:
    """Read-only lookup of currencies by code."""

    def __init__(self, currencies: Iterable[Currency] = ()) -> None:
        self._currencies: dict[str, Currency] = {}
        for currency in currencies:
            rate = Decimal(currency.rate_to_base)
            if rate <= 0:
                raise ValidationError(f"Currency {currency.code} must have a positive rate")
            code = currency.code.upper()
            self._currencies[code] = Currency(
                code=code,
                rate_to_base=rate,
                symbol=currency.symbol,
                minor_units=currency.minor_units,
            )

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._currencies

    def __len__(self) -> int:
        return len(self._currencies)

    def __iter__(self):
        return iter(self._currencies.values())

    def get(self, code: str) -> Currency:
        """Return the catalog entry for ``code``."""
        if not isinstance(code, str):
            raise UnknownCurrency(str(code))
        try:
            return self._currencies[code.upper()]
        except KeyError:
            raise UnknownCurrency(code) from None

    def rate(self, code: str) -> Decimal:
        return self.get(code).rate_to_base

    def symbol(self, code: str) -> str:
        return self.get(code).symbol

    def minor_units(self, code: str) -> int:
        return self.get(code).minor_units

    def quantum(self, code: str) -> Decimal:
        """Smallest displayable step, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.minor_units(code))

    def format(self, amount: Decimal, code: str) -> str:
        """Symbol followed by the amount at the currency's precision."""
        currency = self.get(code)
        value = Decimal(amount).quantize(self.quantum(code), rounding=ROUND_HALF_EVEN)
        return f"{currency.symbol}{value}"


def normalize_amount(
    catalog: CurrencyCatalog,
    amount: Decimal | int | str,
    source_code: str,
    target_code: str,
) -> Decimal:
    """Convert ``amount`` from ``source_code`` to ``target_code``.

    Same-currency conversion returns the amount untouched. Otherwise the
    result is rounded half-even to the target currency's minor units.
    Negative amounts pass through; validating them is the caller's job.
    """
    source = catalog.get(source_code)
    target = catalog.get(target_code)
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))

    if source.code == target.code:
        return value

    converted = value / source.rate_to_base * target.rate_to_base
    return converted.quantize(catalog.quantum(target.code), rounding=ROUND_HALF_EVEN)
