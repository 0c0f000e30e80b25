"""Mini README: Tests for anchor-based currency conversion.

Structure:
    * identity, two-hop formula and round-trip properties.
    * strict versus lenient handling of unknown codes.
    * duplicate codes resolving to the first table entry.
"""

from __future__ import annotations

import pytest

from fintrack.finance import (
    Currency,
    CurrencyConverter,
    CurrencyTable,
    UnknownCurrencyError,
    convert,
)


def _table() -> CurrencyTable:
    return CurrencyTable(
        [
            Currency("usd", "USD", "US Dollar", 1.0),
            Currency("ars", "ARS", "Argentine Peso", 0.001),
            Currency("eur", "EUR", "Euro", 1.1),
            Currency("btc", "BTC", "Bitcoin", 60000.0),
        ]
    )


@pytest.mark.parametrize("code", ["USD", "ARS", "EUR", "BTC"])
def test_identity_conversion_is_exact(code: str) -> None:
    """Converting a currency into itself must not drift."""

    assert convert(123.456789, code, code, _table()) == 123.456789


def test_conversion_multiplies_then_divides_through_anchor() -> None:
    table = _table()

    assert convert(50.0, "EUR", "ARS", table) == 50.0 * 1.1 / 0.001
    assert convert(2.5, "BTC", "EUR", table) == 2.5 * 60000.0 / 1.1
    assert convert(1000.0, "ARS", "USD", table) == 1000.0 * 0.001


def test_round_trip_returns_original_amount() -> None:
    table = _table()

    there = convert(42.0, "EUR", "BTC", table)
    assert convert(there, "BTC", "EUR", table) == pytest.approx(42.0)


def test_codes_are_matched_case_insensitively() -> None:
    assert convert(10.0, "eur", "usd", _table()) == pytest.approx(11.0)


def test_unknown_currency_raises_in_strict_mode() -> None:
    with pytest.raises(UnknownCurrencyError) as excinfo:
        convert(10.0, "GBP", "USD", _table())
    assert excinfo.value.code == "GBP"

    with pytest.raises(UnknownCurrencyError):
        convert(10.0, "USD", "JPY", _table())


def test_unknown_currency_falls_back_to_raw_amount_in_lenient_mode() -> None:
    converter = CurrencyConverter(_table(), strict=False)

    assert converter(10.0, "GBP", "USD") == 10.0
    assert converter(10.0, "EUR", "JPY") == 10.0


def test_duplicate_codes_use_first_match() -> None:
    table = CurrencyTable(
        [
            Currency("usd", "USD", "US Dollar", 1.0),
            Currency("eur", "EUR", "Euro", 1.1),
            Currency("eur-old", "EUR", "Euro (stale)", 2.0),
        ]
    )

    assert convert(1.0, "EUR", "USD", table) == 1.1


def test_converter_rate_lookup() -> None:
    converter = CurrencyConverter(_table())

    assert converter.rate("btc") == 60000.0
    with pytest.raises(UnknownCurrencyError):
        converter.rate("XYZ")
