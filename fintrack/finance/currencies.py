"""Mini README: Currency table anchored on the base currency.

Structure:
    * ANCHOR_CURRENCY_CODE - code of the rate-1 currency every conversion passes through.
    * default_currencies - seed table used when nothing has been persisted.
    * CurrencyTable - ordered collection with add/update/delete/list helpers.

Rates express how many anchor units one unit of a currency is worth. The
table refuses anything that would break the anchor: deleting it, renaming
its code, or moving its rate away from exactly 1. Codes are kept unique on
``add``/``update``; data loaded from storage may still contain duplicates,
in which case ``find_by_code`` returns the first match.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional
from uuid import uuid4

from ..logging_utils import get_logger
from .errors import NotFoundError, ProtectedResourceError, ValidationError
from .models import Currency

LOGGER = get_logger(__name__)

ANCHOR_CURRENCY_CODE = "USD"


def default_currencies() -> List[Currency]:
    """Return the illustrative seed rates shipped with a fresh ledger."""

    return [
        Currency("usd", ANCHOR_CURRENCY_CODE, "US Dollar", 1.0),
        Currency("ars", "ARS", "Argentine Peso", 0.001),
        Currency("eur", "EUR", "Euro", 1.1),
        Currency("btc", "BTC", "Bitcoin", 60000.0),
    ]


def anchor_currency() -> Currency:
    return Currency("usd", ANCHOR_CURRENCY_CODE, "US Dollar", 1.0)


class CurrencyTable:
    """Insertion-ordered currency collection keyed by id, looked up by code."""

    def __init__(self, currencies: Optional[Iterable[Currency]] = None) -> None:
        self._currencies: List[Currency] = (
            list(currencies) if currencies is not None else default_currencies()
        )
        if self.find_by_code(ANCHOR_CURRENCY_CODE) is None:
            LOGGER.warning("Currency table lacked %s; restoring anchor currency", ANCHOR_CURRENCY_CODE)
            self._currencies.insert(0, anchor_currency())
        else:
            self._repair_anchor_rate()

    def _repair_anchor_rate(self) -> None:
        for index, currency in enumerate(self._currencies):
            if currency.code == ANCHOR_CURRENCY_CODE and currency.conversion_rate != 1.0:
                LOGGER.warning(
                    "Anchor currency %s had rate %s; resetting to 1",
                    currency.code,
                    currency.conversion_rate,
                )
                self._currencies[index] = Currency(
                    currency.currency_id, currency.code, currency.name, 1.0
                )

    def __len__(self) -> int:
        return len(self._currencies)

    def list(self) -> List[Currency]:
        """Return currencies in insertion order."""

        return list(self._currencies)

    def find_by_code(self, code: str) -> Optional[Currency]:
        """Return the first currency whose code matches, ignoring case."""

        wanted = code.strip().upper()
        for currency in self._currencies:
            if currency.code == wanted:
                return currency
        return None

    def find(self, currency_id: str) -> Optional[Currency]:
        for currency in self._currencies:
            if currency.currency_id == currency_id:
                return currency
        return None

    def get(self, currency_id: str) -> Currency:
        """Retrieve a currency by id, raising ``NotFoundError`` when missing."""

        currency = self.find(currency_id)
        if currency is None:
            raise NotFoundError("Currency", currency_id)
        return currency

    def _ensure_code_available(self, code: str, *, ignore_id: Optional[str] = None) -> None:
        for currency in self._currencies:
            if currency.code == code and currency.currency_id != ignore_id:
                raise ValidationError(f"Currency code '{code}' is already in use.")

    def add(self, code: object, name: object, conversion_rate: object) -> Currency:
        """Validate and append a currency with a freshly generated id."""

        currency = Currency.create(uuid4().hex, code, name, conversion_rate)
        self._ensure_code_available(currency.code)
        if currency.code == ANCHOR_CURRENCY_CODE and currency.conversion_rate != 1.0:
            raise ProtectedResourceError(f"{ANCHOR_CURRENCY_CODE} must keep a conversion rate of 1.")
        self._currencies.append(currency)
        return currency

    def update(self, currency_id: str, changes: Mapping[str, object]) -> Optional[Currency]:
        """Merge ``changes`` into the matching currency; ``None`` when absent."""

        for index, current in enumerate(self._currencies):
            if current.currency_id != currency_id:
                continue
            updated = current.with_changes(changes)
            if current.code == ANCHOR_CURRENCY_CODE:
                if updated.code != ANCHOR_CURRENCY_CODE:
                    raise ProtectedResourceError("The anchor currency code cannot be changed.")
                if updated.conversion_rate != 1.0:
                    raise ProtectedResourceError("The anchor currency rate must stay at 1.")
            elif updated.code == ANCHOR_CURRENCY_CODE:
                raise ValidationError(f"Currency code '{ANCHOR_CURRENCY_CODE}' is already in use.")
            if updated.code != current.code:
                self._ensure_code_available(updated.code, ignore_id=currency_id)
            self._currencies[index] = updated
            return updated
        return None

    def delete(self, currency_id: str) -> Optional[Currency]:
        """Remove and return the matching currency; the anchor is protected."""

        currency = self.find(currency_id)
        if currency is None:
            return None
        if currency.code == ANCHOR_CURRENCY_CODE:
            raise ProtectedResourceError(
                f"The anchor currency {ANCHOR_CURRENCY_CODE} cannot be deleted."
            )
        self._currencies.remove(currency)
        return currency
