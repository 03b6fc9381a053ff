"""Tests for the currency catalog and amount normalization."""

from decimal import Decimal

import pytest

from bookingdesk.core.exceptions import UnknownCurrency, ValidationError
from bookingdesk.domain.currency import Currency, CurrencyCatalog, normalize_amount


@pytest.fixture
def catalog() -> CurrencyCatalog:
    return CurrencyCatalog(
        [
            Currency("USD", Decimal("1.0"), "$"),
            Currency("EUR", Decimal("0.9"), "€"),
            Currency("GBP", Decimal("0.79"), "£"),
            Currency("INR", Decimal("83.1"), "₹"),
            Currency("JPY", Decimal("150"), "¥", minor_units=0),
        ]
    )


class TestCurrencyCatalog:
    def test_lookups(self, catalog):
        assert catalog.rate("EUR") == Decimal("0.9")
        assert catalog.symbol("INR") == "₹"
        assert catalog.minor_units("JPY") == 0
        assert catalog.minor_units("USD") == 2

    def test_codes_are_case_insensitive(self, catalog):
        assert catalog.rate("eur") == Decimal("0.9")
        assert "gbp" in catalog

    def test_unknown_code_raises(self, catalog):
        with pytest.raises(UnknownCurrency) as exc_info:
            catalog.rate("XYZ")
        assert exc_info.value.currency_code == "XYZ"

        with pytest.raises(UnknownCurrency):
            catalog.symbol("XYZ")

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValidationError):
            CurrencyCatalog([Currency("BAD", Decimal("0"), "?")])

    def test_format_uses_symbol_and_precision(self, catalog):
        assert catalog.format(Decimal("90"), "EUR") == "€90.00"
        assert catalog.format(Decimal("1234.5"), "JPY") == "¥1234"


class TestNormalizeAmount:
    @pytest.mark.parametrize("code", ["USD", "EUR", "GBP", "INR", "JPY"])
    @pytest.mark.parametrize("amount", ["0", "100", "19.999", "0.005", "-42.125"])
    def test_identity_conversion_is_exact(self, catalog, code, amount):
        value = Decimal(amount)
        result = normalize_amount(catalog, value, code, code)
        assert result == value
        assert str(result) == amount

    def test_converts_into_viewer_currency(self, catalog):
        assert normalize_amount(catalog, Decimal("100"), "USD", "EUR") == Decimal("90.00")

    def test_converts_between_non_base_currencies(self, catalog):
        # 90 EUR = 100 USD = 8310 INR
        assert normalize_amount(catalog, Decimal("90"), "EUR", "INR") == Decimal("8310.00")

    def test_rounds_to_target_minor_units(self, catalog):
        assert normalize_amount(catalog, Decimal("10"), "USD", "JPY") == Decimal("1500")
        assert normalize_amount(catalog, Decimal("1.23"), "USD", "JPY").as_tuple().exponent == 0

    def test_rounding_is_half_even(self):
        catalog = CurrencyCatalog(
            [Currency("USD", Decimal("1"), "$"), Currency("HLF", Decimal("0.5"), "h")]
        )
        # 0.05 * 0.5 = 0.025 -> 0.02, 0.07 * 0.5 = 0.035 -> 0.04
        assert normalize_amount(catalog, Decimal("0.05"), "USD", "HLF") == Decimal("0.02")
        assert normalize_amount(catalog, Decimal("0.07"), "USD", "HLF") == Decimal("0.04")

    @pytest.mark.parametrize(
        "amount, source, target",
        [
            ("100.00", "USD", "EUR"),
            ("33.33", "EUR", "GBP"),
            ("12.34", "GBP", "INR"),
            ("999.99", "INR", "USD"),
            ("7.01", "USD", "GBP"),
        ],
    )
    def test_round_trip_within_one_minor_unit(self, catalog, amount, source, target):
        value = Decimal(amount)
        there = normalize_amount(catalog, value, source, target)
        back = normalize_amount(catalog, there, target, source)
        # One minor unit of either currency, expressed in the source currency
        step = max(
            catalog.quantum(source),
            catalog.quantum(target) / catalog.rate(target) * catalog.rate(source),
        )
        assert abs(back - value) <= step

    def test_negative_amount_is_preserved(self, catalog):
        assert normalize_amount(catalog, Decimal("-100"), "USD", "EUR") == Decimal("-90.00")

    def test_unknown_source_or_target(self, catalog):
        with pytest.raises(UnknownCurrency):
            normalize_amount(catalog, Decimal("1"), "XYZ", "USD")
        with pytest.raises(UnknownCurrency):
            normalize_amount(catalog, Decimal("1"), "USD", "XYZ")
        with pytest.raises(UnknownCurrency):
            normalize_amount(catalog, Decimal("1"), "XYZ", "XYZ")

    def test_accepts_plain_numbers(self, catalog):
        assert normalize_amount(catalog, 100, "USD", "EUR") == Decimal("90.00")
        assert normalize_amount(catalog, "100", "USD", "USD") == Decimal("100")
