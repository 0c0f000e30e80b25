"""Mini README: Finance core for fintrack.

This package holds the ledger entities, the anchor-based currency table,
conversion and aggregation helpers, and the ``FinanceStore`` that ties them
to a key-value persistence backend. Presentation layers only ever talk to
``FinanceStore``; the helpers are exported for reuse and testing.
"""

from .aggregation import ListTotal, Totals, compute_savings, compute_totals, totals_by_list
from .conversion import CurrencyConverter, convert
from .currencies import ANCHOR_CURRENCY_CODE, CurrencyTable, default_currencies
from .errors import (
    FinanceError,
    NotFoundError,
    ProtectedResourceError,
    StoreDisposedError,
    UnknownCurrencyError,
    ValidationError,
)
from .models import Currency, Expense, ExpenseList, Income
from .store import CURRENCIES_KEY, EXPENSE_LISTS_KEY, INCOMES_KEY, FinanceStore, ResetScope

__all__ = [
    "ANCHOR_CURRENCY_CODE",
    "CURRENCIES_KEY",
    "Currency",
    "CurrencyConverter",
    "CurrencyTable",
    "EXPENSE_LISTS_KEY",
    "Expense",
    "ExpenseList",
    "FinanceError",
    "FinanceStore",
    "INCOMES_KEY",
    "Income",
    "ListTotal",
    "NotFoundError",
    "ProtectedResourceError",
    "ResetScope",
    "StoreDisposedError",
    "Totals",
    "UnknownCurrencyError",
    "ValidationError",
    "compute_savings",
    "compute_totals",
    "convert",
    "default_currencies",
    "totals_by_list",
]
