"""Mini README: Ledger entities and payload coercion helpers.

Structure:
    * Currency - code, display name and rate relative to the anchor currency.
    * Expense - single spending entry owned by exactly one expense list.
    * ExpenseList - named, insertion-ordered group of expenses.
    * Income - flat income entry.
    * coerce_* helpers - validate raw payload values at the mutation boundary.

Records are immutable. Updates go through ``with_changes`` which validates a
partial payload and returns a new record, leaving the original untouched if
anything is rejected. ``as_dict``/``from_dict`` speak the persisted JSON shape
(``id``, ``conversionRate``, ISO ``date`` strings).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .errors import ValidationError


def coerce_text(value: object, field_name: str) -> str:
    """Return a stripped, non-empty string."""

    if value is None:
        raise ValidationError(f"Field '{field_name}' is required.")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"Field '{field_name}' must not be empty.")
    return text


def coerce_code(value: object, field_name: str = "code") -> str:
    """Normalise a currency code to its upper-case form."""

    return coerce_text(value, field_name).upper()


def coerce_positive(value: object, field_name: str) -> float:
    """Return a finite float strictly greater than zero."""

    if value is None:
        raise ValidationError(f"Field '{field_name}' is required.")
    if isinstance(value, bool):
        raise ValidationError(f"Field '{field_name}' must be a number.")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValidationError(f"Field '{field_name}' must be a number.") from error
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"Field '{field_name}' must be greater than zero.")
    return number


def parse_date(value: object, field_name: str = "date") -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Only a ``T`` time suffix is dropped; any other trailing text is rejected.
        text = value.strip().split("T", 1)[0]
        try:
            return date.fromisoformat(text)
        except ValueError as error:
            raise ValidationError(f"Field '{field_name}' is not an ISO date: {value!r}") from error
    raise ValidationError(
        f"Field '{field_name}' must be an ISO string or a date/datetime instance."
    )


def _apply_changes(
    changes: Mapping[str, object],
    coercers: Mapping[str, Tuple[str, Callable[[object], object]]],
    kind: str,
) -> Dict[str, object]:
    """Map partial payload keys onto attribute names, coercing every value.

    ``None`` values are skipped so callers may send sparse forms.
    """

    coerced: Dict[str, object] = {}
    for key, value in changes.items():
        if key not in coercers:
            raise ValidationError(f"Update of {kind} field '{key}' is not supported.")
        if value is None:
            continue
        attribute, coercer = coercers[key]
        coerced[attribute] = coercer(value)
    return coerced


@dataclass(slots=True, frozen=True)
class Currency:
    """A currency of the rate table, valued against the anchor currency."""

    currency_id: str
    code: str
    name: str
    conversion_rate: float

    @classmethod
    def create(cls, currency_id: str, code: object, name: object, conversion_rate: object) -> "Currency":
        return cls(
            currency_id=currency_id,
            code=coerce_code(code),
            name=coerce_text(name, "name"),
            conversion_rate=coerce_positive(conversion_rate, "conversion_rate"),
        )

    def with_changes(self, changes: Mapping[str, object]) -> "Currency":
        """Return a copy with validated ``code``/``name``/``conversion_rate`` edits."""

        return replace(self, **_apply_changes(changes, _CURRENCY_FIELDS, "currency"))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.currency_id,
            "code": self.code,
            "name": self.name,
            "conversionRate": self.conversion_rate,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Currency":
        return cls.create(
            coerce_text(payload.get("id"), "id"),
            payload.get("code"),
            payload.get("name"),
            payload.get("conversionRate", payload.get("conversion_rate")),
        )


_CURRENCY_FIELDS: Dict[str, Tuple[str, Callable[[object], object]]] = {
    "code": ("code", coerce_code),
    "name": ("name", lambda value: coerce_text(value, "name")),
    "conversion_rate": ("conversion_rate", lambda value: coerce_positive(value, "conversion_rate")),
    "conversionRate": ("conversion_rate", lambda value: coerce_positive(value, "conversion_rate")),
}


@dataclass(slots=True, frozen=True)
class Expense:
    """A single expense; ``currency`` holds a currency code, not an id."""

    expense_id: str
    description: str
    amount: float
    currency: str
    occurred_on: date

    @classmethod
    def create(
        cls,
        expense_id: str,
        description: object,
        amount: object,
        currency: object = "USD",
        occurred_on: object = None,
    ) -> "Expense":
        return cls(
            expense_id=expense_id,
            description=coerce_text(description, "description"),
            amount=coerce_positive(amount, "amount"),
            currency=coerce_code(currency, "currency"),
            occurred_on=date.today() if occurred_on is None else parse_date(occurred_on),
        )

    def with_changes(self, changes: Mapping[str, object]) -> "Expense":
        return replace(self, **_apply_changes(changes, _EXPENSE_FIELDS, "expense"))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.expense_id,
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency,
            "date": self.occurred_on.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Expense":
        return cls.create(
            coerce_text(payload.get("id"), "id"),
            payload.get("description"),
            payload.get("amount"),
            payload.get("currency"),
            payload.get("date"),
        )


_EXPENSE_FIELDS: Dict[str, Tuple[str, Callable[[object], object]]] = {
    "description": ("description", lambda value: coerce_text(value, "description")),
    "amount": ("amount", lambda value: coerce_positive(value, "amount")),
    "currency": ("currency", lambda value: coerce_code(value, "currency")),
    "date": ("occurred_on", parse_date),
    "occurred_on": ("occurred_on", parse_date),
}


@dataclass(slots=True, frozen=True)
class ExpenseList:
    """Named container that exclusively owns its expenses."""

    list_id: str
    name: str
    expenses: Tuple[Expense, ...] = field(default_factory=tuple)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        for expense in self.expenses:
            if expense.expense_id == expense_id:
                return expense
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.list_id,
            "name": self.name,
            "expenses": [expense.as_dict() for expense in self.expenses],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ExpenseList":
        raw_expenses = payload.get("expenses") or []
        if not isinstance(raw_expenses, list):
            raise ValidationError("Field 'expenses' must be a list.")
        return cls(
            list_id=coerce_text(payload.get("id"), "id"),
            name=coerce_text(payload.get("name"), "name"),
            expenses=tuple(Expense.from_dict(item) for item in raw_expenses),
        )


@dataclass(slots=True, frozen=True)
class Income:
    """A flat income entry."""

    income_id: str
    description: str
    amount: float
    currency: str

    @classmethod
    def create(cls, income_id: str, description: object, amount: object, currency: object = "USD") -> "Income":
        return cls(
            income_id=income_id,
            description=coerce_text(description, "description"),
            amount=coerce_positive(amount, "amount"),
            currency=coerce_code(currency, "currency"),
        )

    def with_changes(self, changes: Mapping[str, object]) -> "Income":
        return replace(self, **_apply_changes(changes, _INCOME_FIELDS, "income"))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.income_id,
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Income":
        return cls.create(
            coerce_text(payload.get("id"), "id"),
            payload.get("description"),
            payload.get("amount"),
            payload.get("currency"),
        )


_INCOME_FIELDS: Dict[str, Tuple[str, Callable[[object], object]]] = {
    "description": ("description", lambda value: coerce_text(value, "description")),
    "amount": ("amount", lambda value: coerce_positive(value, "amount")),
    "currency": ("currency", lambda value: coerce_code(value, "currency")),
}
