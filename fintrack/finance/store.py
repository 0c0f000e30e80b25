"""Mini README: The FinanceStore owning currencies, expense lists and incomes.

Structure:
    * CURRENCIES_KEY / EXPENSE_LISTS_KEY / INCOMES_KEY - persisted collection keys.
    * ResetScope - which collections ``reset_to_defaults`` clears.
    * FinanceStore - CRUD operations, totals queries and lifecycle hooks.

Lifecycle:
    The store is built around an injected ``KeyValueStore``. ``load`` reads
    every collection (falling back to defaults per key when the stored value
    is missing or unreadable) and runs automatically on construction unless
    ``autoload=False``. Each successful mutation rewrites the whole affected
    collection under its key and then notifies subscribed listeners with that
    key. Listeners run after the store lock is released, so they may hand work
    to other threads that read the store. ``dispose`` drops listeners and
    rejects further mutations.

Unreadable data:
    A key whose value cannot be decoded into a JSON list falls back to
    defaults with a WARNING. Inside a readable list, each
    record that fails validation is dropped on its own and its index is
    logged at ERROR; the valid records are kept and the next mutation
    rewrites the collection without the rejected ones.

Missing ids:
    Updates and deletes addressed at ids that do not exist are silent no-ops:
    nothing is persisted, no listener fires, and the method returns ``None``
    (updates) or ``False`` (deletes). The explicit ``get_*`` accessors raise
    ``NotFoundError`` instead.
"""

from __future__ import annotations

import json
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar
from uuid import uuid4

from ..logging_utils import get_logger
from ..storage import KeyValueStore
from .aggregation import (
    ListTotal,
    Totals,
    compute_savings,
    compute_totals,
    flatten_expenses,
    totals_by_list,
)
from .conversion import CurrencyConverter
from .currencies import ANCHOR_CURRENCY_CODE, CurrencyTable
from .errors import (
    NotFoundError,
    StoreDisposedError,
    UnknownCurrencyError,
    ValidationError,
)
from .models import Currency, Expense, ExpenseList, Income, coerce_code, coerce_text

LOGGER = get_logger(__name__)

CURRENCIES_KEY = "currencies"
EXPENSE_LISTS_KEY = "expenseLists"
INCOMES_KEY = "incomes"

Listener = Callable[[str], None]
T = TypeVar("T")


class ResetScope(str, Enum):
    """Collections that can be reset back to their defaults."""

    ALL = "all"
    CURRENCIES = "currencies"
    EXPENSES = "expenses"
    EXPENSE_LISTS = "expenseLists"
    INCOMES = "incomes"

    @classmethod
    def from_str(cls, value: str) -> "ResetScope":
        """Match a scope name ignoring case, e.g. ``"expenselists"``."""

        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValidationError(f"Unsupported reset scope: {value}") from error
        for scope in cls:
            if scope.value.lower() == normalised:
                return scope
        raise ValidationError(f"Unsupported reset scope: {value}")

    @property
    def keys(self) -> Tuple[str, ...]:
        if self is ResetScope.ALL:
            return (CURRENCIES_KEY, EXPENSE_LISTS_KEY, INCOMES_KEY)
        if self is ResetScope.CURRENCIES:
            return (CURRENCIES_KEY,)
        if self is ResetScope.INCOMES:
            return (INCOMES_KEY,)
        return (EXPENSE_LISTS_KEY,)


def _merge_payload(payload: Optional[Mapping[str, object]], fields: Dict[str, object]) -> Dict[str, object]:
    merged: Dict[str, object] = dict(payload or {})
    merged.update(fields)
    return merged


class FinanceStore:
    """In-memory ledger persisted collection-by-collection."""

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        strict_conversion: bool = True,
        default_currency: str = ANCHOR_CURRENCY_CODE,
        autoload: bool = True,
    ) -> None:
        self._storage = storage
        self._lock = RLock()
        self._listeners: List[Listener] = []
        self._disposed = False
        self.strict_conversion = strict_conversion
        self.default_currency = coerce_code(default_currency, "default_currency")
        self._currencies = CurrencyTable()
        self._expense_lists: List[ExpenseList] = []
        self._incomes: List[Income] = []
        if autoload:
            self.load()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> None:
        """(Re)read every collection from storage."""

        with self._lock:
            currencies = self._read_collection(CURRENCIES_KEY, Currency.from_dict)
            self._currencies = CurrencyTable(currencies)
            self._expense_lists = self._read_collection(EXPENSE_LISTS_KEY, ExpenseList.from_dict) or []
            self._incomes = self._read_collection(INCOMES_KEY, Income.from_dict) or []
            LOGGER.debug(
                "Finance store loaded %s currencies, %s expense lists, %s incomes",
                len(self._currencies),
                len(self._expense_lists),
                len(self._incomes),
            )

    def _read_collection(
        self, key: str, parser: Callable[[Mapping[str, Any]], T]
    ) -> Optional[List[T]]:
        """Parse the stored list under ``key``; ``None`` means use defaults."""

        try:
            raw = self._storage.get(key)
            if raw is None:
                LOGGER.debug("No persisted value for '%s'; using defaults", key)
                return None
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
        except (ValueError, TypeError) as error:
            LOGGER.warning("Ignoring unreadable persisted '%s' (%s); using defaults", key, error)
            return None
        records: List[T] = []
        for index, item in enumerate(payload):
            try:
                records.append(parser(item))
            except (ValueError, TypeError, AttributeError) as error:
                LOGGER.error("Dropping invalid record %s of persisted '%s': %s", index, key, error)
        return records

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(collection_key)``; returns an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Detach listeners and refuse any further mutation."""

        with self._lock:
            self._listeners.clear()
            self._disposed = True
            LOGGER.debug("Finance store disposed")

    @property
    def disposed(self) -> bool:
        return self._disposed

    def reset_to_defaults(self, scope: "ResetScope | str" = ResetScope.ALL) -> ResetScope:
        """Clear persisted key(s) for ``scope`` and restore in-memory defaults."""

        resolved = scope if isinstance(scope, ResetScope) else ResetScope.from_str(scope)
        with self._lock:
            self._ensure_active()
            for key in resolved.keys:
                self._storage.delete(key)
                if key == CURRENCIES_KEY:
                    self._currencies = CurrencyTable()
                elif key == EXPENSE_LISTS_KEY:
                    self._expense_lists = []
                else:
                    self._incomes = []
            LOGGER.info("Reset '%s' to defaults", resolved.value)
        self._notify(*resolved.keys)
        return resolved

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Export every collection in its persisted shape."""

        with self._lock:
            return {key: self._serialise(key) for key in (CURRENCIES_KEY, EXPENSE_LISTS_KEY, INCOMES_KEY)}

    # ------------------------------------------------------------------
    # Persistence plumbing
    # ------------------------------------------------------------------
    def _ensure_active(self) -> None:
        if self._disposed:
            raise StoreDisposedError("The finance store has been disposed.")

    def _serialise(self, key: str) -> List[Dict[str, Any]]:
        if key == CURRENCIES_KEY:
            return [currency.as_dict() for currency in self._currencies.list()]
        if key == EXPENSE_LISTS_KEY:
            return [expense_list.as_dict() for expense_list in self._expense_lists]
        return [income.as_dict() for income in self._incomes]

    def _persist(self, key: str) -> None:
        self._storage.set(key, json.dumps(self._serialise(key)))

    def _notify(self, *keys: str) -> None:
        """Call listeners for ``keys``; callers must not hold the lock."""

        with self._lock:
            listeners = list(self._listeners)
        for key in keys:
            for listener in listeners:
                try:
                    listener(key)
                except Exception:  # pragma: no cover - mutation already applied
                    LOGGER.exception("Listener %r failed for '%s'", listener, key)

    def _require_currency(self, code: str) -> None:
        if self._currencies.find_by_code(code) is None:
            raise UnknownCurrencyError(code)

    # ------------------------------------------------------------------
    # Currencies
    # ------------------------------------------------------------------
    def currencies(self) -> List[Currency]:
        with self._lock:
            return self._currencies.list()

    def get_currency(self, currency_id: str) -> Currency:
        with self._lock:
            return self._currencies.get(currency_id)

    def find_currency(self, code: str) -> Optional[Currency]:
        with self._lock:
            return self._currencies.find_by_code(code)

    def add_currency(self, code: object, name: object, conversion_rate: object) -> Currency:
        with self._lock:
            self._ensure_active()
            currency = self._currencies.add(code, name, conversion_rate)
            self._persist(CURRENCIES_KEY)
            LOGGER.info("Added currency %s (%s) at rate %s", currency.code, currency.currency_id, currency.conversion_rate)
        self._notify(CURRENCIES_KEY)
        return currency

    def update_currency(
        self, currency_id: str, changes: Optional[Mapping[str, object]] = None, **fields: object
    ) -> Optional[Currency]:
        with self._lock:
            self._ensure_active()
            updated = self._currencies.update(currency_id, _merge_payload(changes, fields))
            if updated is None:
                LOGGER.debug("update_currency ignored unknown id %s", currency_id)
                return None
            self._persist(CURRENCIES_KEY)
            LOGGER.info("Updated currency %s", currency_id)
        self._notify(CURRENCIES_KEY)
        return updated

    def delete_currency(self, currency_id: str) -> bool:
        """Delete a currency; expenses and incomes using its code are left as they are."""

        with self._lock:
            self._ensure_active()
            removed = self._currencies.delete(currency_id)
            if removed is None:
                LOGGER.debug("delete_currency ignored unknown id %s", currency_id)
                return False
            self._persist(CURRENCIES_KEY)
            LOGGER.info("Deleted currency %s (%s)", removed.code, currency_id)
        self._notify(CURRENCIES_KEY)
        return True

    # ------------------------------------------------------------------
    # Expense lists
    # ------------------------------------------------------------------
    def expense_lists(self) -> List[ExpenseList]:
        with self._lock:
            return list(self._expense_lists)

    def _list_index(self, list_id: str) -> Optional[int]:
        for index, expense_list in enumerate(self._expense_lists):
            if expense_list.list_id == list_id:
                return index
        return None

    def get_expense_list(self, list_id: str) -> ExpenseList:
        with self._lock:
            index = self._list_index(list_id)
            if index is None:
                raise NotFoundError("Expense list", list_id)
            return self._expense_lists[index]

    def add_expense_list(self, name: object) -> ExpenseList:
        with self._lock:
            self._ensure_active()
            expense_list = ExpenseList(list_id=uuid4().hex, name=coerce_text(name, "name"))
            self._expense_lists.append(expense_list)
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info("Added expense list '%s' (%s)", expense_list.name, expense_list.list_id)
        self._notify(EXPENSE_LISTS_KEY)
        return expense_list

    def update_expense_list(self, list_id: str, name: object) -> Optional[ExpenseList]:
        """Rename a list; its expenses keep their content and order."""

        with self._lock:
            self._ensure_active()
            new_name = coerce_text(name, "name")
            index = self._list_index(list_id)
            if index is None:
                LOGGER.debug("update_expense_list ignored unknown id %s", list_id)
                return None
            current = self._expense_lists[index]
            renamed = ExpenseList(list_id=current.list_id, name=new_name, expenses=current.expenses)
            self._expense_lists[index] = renamed
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info("Renamed expense list %s to '%s'", list_id, new_name)
        self._notify(EXPENSE_LISTS_KEY)
        return renamed

    def delete_expense_list(self, list_id: str) -> bool:
        with self._lock:
            self._ensure_active()
            index = self._list_index(list_id)
            if index is None:
                LOGGER.debug("delete_expense_list ignored unknown id %s", list_id)
                return False
            removed = self._expense_lists.pop(index)
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info("Deleted expense list '%s' with %s expenses", removed.name, len(removed.expenses))
        self._notify(EXPENSE_LISTS_KEY)
        return True

    # ------------------------------------------------------------------
    # Expenses (scoped to a list)
    # ------------------------------------------------------------------
    def add_expense(
        self, list_id: str, expense: Optional[Mapping[str, object]] = None, **fields: object
    ) -> Optional[Expense]:
        """Append an expense to ``list_id``; ``None`` when the list does not exist."""

        payload = _merge_payload(expense, fields)
        with self._lock:
            self._ensure_active()
            index = self._list_index(list_id)
            if index is None:
                LOGGER.debug("add_expense ignored unknown list %s", list_id)
                return None
            unsupported = set(payload) - {"description", "amount", "currency", "date", "occurred_on"}
            if unsupported:
                raise ValidationError(f"Unsupported expense fields: {', '.join(sorted(unsupported))}")
            created = Expense.create(
                uuid4().hex,
                payload.get("description"),
                payload.get("amount"),
                payload.get("currency") or ANCHOR_CURRENCY_CODE,
                payload.get("date", payload.get("occurred_on")),
            )
            self._require_currency(created.currency)
            current = self._expense_lists[index]
            self._expense_lists[index] = ExpenseList(
                list_id=current.list_id, name=current.name, expenses=current.expenses + (created,)
            )
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info(
                "Added expense %s (%s %s) to list %s",
                created.expense_id,
                created.amount,
                created.currency,
                list_id,
            )
        self._notify(EXPENSE_LISTS_KEY)
        return created

    def update_expense(
        self,
        list_id: str,
        expense_id: str,
        changes: Optional[Mapping[str, object]] = None,
        **fields: object,
    ) -> Optional[Expense]:
        payload = _merge_payload(changes, fields)
        with self._lock:
            self._ensure_active()
            index = self._list_index(list_id)
            if index is None:
                LOGGER.debug("update_expense ignored unknown list %s", list_id)
                return None
            current = self._expense_lists[index]
            existing = current.find_expense(expense_id)
            if existing is None:
                LOGGER.debug("update_expense ignored unknown expense %s in list %s", expense_id, list_id)
                return None
            updated = existing.with_changes(payload)
            if updated.currency != existing.currency:
                self._require_currency(updated.currency)
            self._expense_lists[index] = ExpenseList(
                list_id=current.list_id,
                name=current.name,
                expenses=tuple(
                    updated if expense.expense_id == expense_id else expense
                    for expense in current.expenses
                ),
            )
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info("Updated expense %s in list %s", expense_id, list_id)
        self._notify(EXPENSE_LISTS_KEY)
        return updated

    def delete_expense(self, list_id: str, expense_id: str) -> bool:
        with self._lock:
            self._ensure_active()
            index = self._list_index(list_id)
            if index is None:
                LOGGER.debug("delete_expense ignored unknown list %s", list_id)
                return False
            current = self._expense_lists[index]
            if current.find_expense(expense_id) is None:
                LOGGER.debug("delete_expense ignored unknown expense %s in list %s", expense_id, list_id)
                return False
            self._expense_lists[index] = ExpenseList(
                list_id=current.list_id,
                name=current.name,
                expenses=tuple(e for e in current.expenses if e.expense_id != expense_id),
            )
            self._persist(EXPENSE_LISTS_KEY)
            LOGGER.info("Deleted expense %s from list %s", expense_id, list_id)
        self._notify(EXPENSE_LISTS_KEY)
        return True

    # ------------------------------------------------------------------
    # Incomes
    # ------------------------------------------------------------------
    def incomes(self) -> List[Income]:
        with self._lock:
            return list(self._incomes)

    def _income_index(self, income_id: str) -> Optional[int]:
        for index, income in enumerate(self._incomes):
            if income.income_id == income_id:
                return index
        return None

    def get_income(self, income_id: str) -> Income:
        with self._lock:
            index = self._income_index(income_id)
            if index is None:
                raise NotFoundError("Income", income_id)
            return self._incomes[index]

    def add_income(self, income: Optional[Mapping[str, object]] = None, **fields: object) -> Income:
        payload = _merge_payload(income, fields)
        unsupported = set(payload) - {"description", "amount", "currency"}
        if unsupported:
            raise ValidationError(f"Unsupported income fields: {', '.join(sorted(unsupported))}")
        with self._lock:
            self._ensure_active()
            created = Income.create(
                uuid4().hex,
                payload.get("description"),
                payload.get("amount"),
                payload.get("currency") or ANCHOR_CURRENCY_CODE,
            )
            self._require_currency(created.currency)
            self._incomes.append(created)
            self._persist(INCOMES_KEY)
            LOGGER.info("Added income %s (%s %s)", created.income_id, created.amount, created.currency)
        self._notify(INCOMES_KEY)
        return created

    def update_income(
        self, income_id: str, changes: Optional[Mapping[str, object]] = None, **fields: object
    ) -> Optional[Income]:
        payload = _merge_payload(changes, fields)
        with self._lock:
            self._ensure_active()
            index = self._income_index(income_id)
            if index is None:
                LOGGER.debug("update_income ignored unknown id %s", income_id)
                return None
            existing = self._incomes[index]
            updated = existing.with_changes(payload)
            if updated.currency != existing.currency:
                self._require_currency(updated.currency)
            self._incomes[index] = updated
            self._persist(INCOMES_KEY)
            LOGGER.info("Updated income %s", income_id)
        self._notify(INCOMES_KEY)
        return updated

    def delete_income(self, income_id: str) -> bool:
        with self._lock:
            self._ensure_active()
            index = self._income_index(income_id)
            if index is None:
                LOGGER.debug("delete_income ignored unknown id %s", income_id)
                return False
            self._incomes.pop(index)
            self._persist(INCOMES_KEY)
            LOGGER.info("Deleted income %s", income_id)
        self._notify(INCOMES_KEY)
        return True

    # ------------------------------------------------------------------
    # Conversion and aggregation queries
    # ------------------------------------------------------------------
    @property
    def converter(self) -> CurrencyConverter:
        return CurrencyConverter(self._currencies, strict=self.strict_conversion)

    def resolve_target(self, target: Optional[str]) -> str:
        """Normalise a query target code, defaulting to ``default_currency``."""

        return coerce_code(target, "target") if target else self.default_currency

    def convert(self, amount: float, from_code: str, to_code: Optional[str] = None) -> float:
        with self._lock:
            return self.converter.convert(amount, from_code, self.resolve_target(to_code))

    def expense_totals(self, target: Optional[str] = None) -> Totals:
        with self._lock:
            return compute_totals(flatten_expenses(self._expense_lists), self.converter, self.resolve_target(target))

    def income_totals(self, target: Optional[str] = None) -> Totals:
        with self._lock:
            return compute_totals(self._incomes, self.converter, self.resolve_target(target))

    def savings(self, target: Optional[str] = None) -> float:
        """Income total minus expense total, both converted into ``target``."""

        with self._lock:
            return compute_savings(
                self._incomes,
                flatten_expenses(self._expense_lists),
                self.converter,
                self.resolve_target(target),
            )

    def list_totals(self, target: Optional[str] = None) -> List[ListTotal]:
        with self._lock:
            return totals_by_list(self._expense_lists, self.converter, self.resolve_target(target))

    def expense_list_total(self, list_id: str, target: Optional[str] = None) -> float:
        with self._lock:
            expense_list = self.get_expense_list(list_id)
            return compute_totals(expense_list.expenses, self.converter, self.resolve_target(target)).total

    def summary(self, target: Optional[str] = None) -> Dict[str, Any]:
        """Dashboard view: totals, savings and the non-empty per-list breakdown."""

        with self._lock:
            resolved = self.resolve_target(target)
            income_totals = self.income_totals(resolved)
            expense_totals = self.expense_totals(resolved)
            return {
                "target": resolved,
                "incomes": income_totals.as_dict(),
                "expenses": expense_totals.as_dict(),
                "savings": income_totals.total - expense_totals.total,
                "expenses_by_list": [
                    list_total.as_dict()
                    for list_total in self.list_totals(resolved)
                    if list_total.total > 0
                ],
            }
