"""Mini README: Totals and savings over amount-bearing ledger entries.

Structure:
    * Totals - converted grand total plus the raw per-currency breakdown.
    * ListTotal - converted total of a single expense list.
    * compute_totals - fold expenses or incomes into a ``Totals``.
    * compute_savings - income total minus expense total in one target.
    * flatten_expenses / totals_by_list - helpers over expense lists.

``by_currency`` sums raw amounts per code and is never converted; only
``total`` goes through the converter, one entry at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Protocol

from .currencies import ANCHOR_CURRENCY_CODE
from .models import Expense, ExpenseList


class AmountEntry(Protocol):
    amount: float
    currency: str


Converter = Callable[[float, str, str], float]


@dataclass(slots=True, frozen=True)
class Totals:
    """Aggregated amounts expressed in ``target`` currency."""

    target: str
    total: float = 0.0
    by_currency: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, object]:
        return {
            "target": self.target,
            "total": self.total,
            "by_currency": dict(self.by_currency),
        }


@dataclass(slots=True, frozen=True)
class ListTotal:
    list_id: str
    name: str
    total: float

    def as_dict(self) -> Dict[str, object]:
        return {"list_id": self.list_id, "name": self.name, "total": self.total}


def compute_totals(
    entries: Iterable[AmountEntry],
    converter: Converter,
    target: str = ANCHOR_CURRENCY_CODE,
) -> Totals:
    """Sum ``entries`` per currency and as a converted grand total."""

    by_currency: Dict[str, float] = {}
    total = 0.0
    for entry in entries:
        by_currency[entry.currency] = by_currency.get(entry.currency, 0.0) + entry.amount
        total += converter(entry.amount, entry.currency, target)
    return Totals(target=target, total=total, by_currency=by_currency)


def compute_savings(
    incomes: Iterable[AmountEntry],
    expenses: Iterable[AmountEntry],
    converter: Converter,
    target: str = ANCHOR_CURRENCY_CODE,
) -> float:
    income_total = compute_totals(incomes, converter, target).total
    expense_total = compute_totals(expenses, converter, target).total
    return income_total - expense_total


def flatten_expenses(expense_lists: Iterable[ExpenseList]) -> Iterator[Expense]:
    for expense_list in expense_lists:
        yield from expense_list.expenses


def totals_by_list(
    expense_lists: Iterable[ExpenseList],
    converter: Converter,
    target: str = ANCHOR_CURRENCY_CODE,
) -> List[ListTotal]:
    """Return one converted total per expense list, in list order."""

    return [
        ListTotal(
            list_id=expense_list.list_id,
            name=expense_list.name,
            total=compute_totals(expense_list.expenses, converter, target).total,
        )
        for expense_list in expense_lists
    ]
