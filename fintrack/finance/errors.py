"""Mini README: Exception taxonomy raised by the finance core.

Structure:
    * FinanceError - common base so adapters can catch every domain failure.
    * ValidationError - rejected payloads (empty text, non-positive amounts).
    * UnknownCurrencyError - a currency code missing from the currency table.
    * ProtectedResourceError - attempts to remove or re-anchor the base currency.
    * NotFoundError - explicit lookups of ids that do not exist.
    * StoreDisposedError - mutations issued after ``FinanceStore.dispose``.

Every error is raised before the in-memory ledger changes, so callers can
report the message and carry on with the previous state.
"""

from __future__ import annotations


class FinanceError(Exception):
    """Base class for recoverable finance core failures."""


class ValidationError(FinanceError, ValueError):
    """Raised when a create/update payload breaks a field constraint."""


class UnknownCurrencyError(FinanceError, LookupError):
    """Raised when a currency code is not present in the currency table."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown currency code '{code}'")
        self.code = code


class ProtectedResourceError(FinanceError):
    """Raised when an operation would break the anchor currency invariant."""


class NotFoundError(FinanceError, LookupError):
    """Raised by explicit getters when the requested id does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class StoreDisposedError(FinanceError, RuntimeError):
    """Raised when a disposed store receives a mutation."""
