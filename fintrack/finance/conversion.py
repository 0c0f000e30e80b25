"""Mini README: Currency conversion through the anchor currency.

Structure:
    * convert - pure conversion of an amount between two codes.
    * CurrencyConverter - binds a currency table and an unknown-code policy.

Every conversion is two hops: multiply by the source rate to reach anchor
units, then divide by the target rate. Converting a code to itself returns
the amount untouched. Unknown codes raise ``UnknownCurrencyError`` in strict
mode; lenient mode logs a warning and hands back the amount unconverted.
"""

from __future__ import annotations

from typing import Optional

from ..logging_utils import get_logger
from .currencies import ANCHOR_CURRENCY_CODE, CurrencyTable
from .errors import UnknownCurrencyError

LOGGER = get_logger(__name__)


def convert(
    amount: float,
    from_code: str,
    to_code: str,
    table: CurrencyTable,
    *,
    strict: bool = True,
) -> float:
    """Convert ``amount`` from ``from_code`` into ``to_code`` using ``table`` rates."""

    source_code = from_code.strip().upper()
    target_code = to_code.strip().upper()
    if source_code == target_code:
        return amount

    source = table.find_by_code(source_code)
    target = table.find_by_code(target_code)
    missing: Optional[str] = None
    if source is None:
        missing = source_code
    elif target is None:
        missing = target_code
    if missing is not None:
        if strict:
            raise UnknownCurrencyError(missing)
        LOGGER.warning(
            "Currency %s not in table; leaving %s %s unconverted", missing, amount, source_code
        )
        return amount

    amount_in_base = amount * source.conversion_rate
    return amount_in_base / target.conversion_rate


class CurrencyConverter:
    """Callable conversion bound to a live currency table."""

    def __init__(self, table: CurrencyTable, *, strict: bool = True) -> None:
        self.table = table
        self.strict = strict

    def convert(self, amount: float, from_code: str, to_code: str = ANCHOR_CURRENCY_CODE) -> float:
        return convert(amount, from_code, to_code, self.table, strict=self.strict)

    def __call__(self, amount: float, from_code: str, to_code: str = ANCHOR_CURRENCY_CODE) -> float:
        return self.convert(amount, from_code, to_code)

    def rate(self, code: str) -> float:
        """Return the anchor-relative rate for ``code``."""

        currency = self.table.find_by_code(code)
        if currency is None:
            raise UnknownCurrencyError(code.strip().upper())
        return currency.conversion_rate
