"""Mini README: FastAPI JSON adapter over the FinanceStore.

Structure:
    * create_application - application factory wiring routes to a store.
    * build_store_from_settings - construct the store from ``FintrackSettings``.
    * Request bodies - Pydantic models for currency/expense/income payloads.

The adapter is deliberately thin: every route delegates to one store method
and domain errors are translated to HTTP responses by exception handlers.
Store no-ops on unknown ids are surfaced to HTTP clients as 404 responses.
"""

from __future__ import annotations

import datetime as dt
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..configuration import FintrackSettings, get_settings
from ..finance import FinanceStore, errors
from ..logging_utils import get_logger
from ..storage import REGISTRY

LOGGER = get_logger(__name__)

_STATUS_BY_ERROR = (
    (errors.ValidationError, 400),
    (errors.UnknownCurrencyError, 400),
    (errors.ProtectedResourceError, 409),
    (errors.NotFoundError, 404),
    (errors.StoreDisposedError, 503),
)


class CurrencyCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    name: str
    conversion_rate: float = Field(..., alias="conversionRate")


class CurrencyUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
    name: Optional[str] = None
    conversion_rate: Optional[float] = Field(None, alias="conversionRate")


class ExpenseListBody(BaseModel):
    name: str


class ExpenseCreate(BaseModel):
    description: str
    amount: float
    currency: str = "USD"
    date: Optional[dt.date] = None


class ExpenseUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    date: Optional[dt.date] = None


class IncomeCreate(BaseModel):
    description: str
    amount: float
    currency: str = "USD"


class IncomeUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None


def build_store_from_settings(settings: Optional[FintrackSettings] = None) -> FinanceStore:
    """Create a ``FinanceStore`` backed by the configured storage backend."""

    settings = settings or get_settings()
    location = None if settings.storage_backend == "memory" else str(settings.data_directory)
    storage = REGISTRY.create(settings.storage_backend, location=location)
    return FinanceStore(
        storage,
        strict_conversion=settings.strict_conversion,
        default_currency=settings.default_currency,
    )


def _not_found(kind: str, identifier: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} {identifier} not found")


def create_application(store: Optional[FinanceStore] = None) -> FastAPI:
    """Create the FastAPI application bound to ``store`` (or one built from settings)."""

    finance = store if store is not None else build_store_from_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        finance.dispose()

    app = FastAPI(title="Fintrack", version=__version__, lifespan=lifespan)
    app.state.store = finance

    @app.exception_handler(errors.FinanceError)
    async def finance_error_handler(request: Request, exc: errors.FinanceError) -> JSONResponse:
        status_code = next(
            (code for error_cls, code in _STATUS_BY_ERROR if isinstance(exc, error_cls)), 400
        )
        LOGGER.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    # Currencies ---------------------------------------------------------
    @app.get("/currencies")
    def list_currencies() -> Dict[str, Any]:
        return {"currencies": [currency.as_dict() for currency in finance.currencies()]}

    @app.post("/currencies", status_code=201)
    def add_currency(body: CurrencyCreate) -> Dict[str, Any]:
        currency = finance.add_currency(body.code, body.name, body.conversion_rate)
        return currency.as_dict()

    @app.patch("/currencies/{currency_id}")
    def update_currency(currency_id: str, body: CurrencyUpdate) -> Dict[str, Any]:
        updated = finance.update_currency(currency_id, body.model_dump(exclude_unset=True))
        if updated is None:
            raise _not_found("Currency", currency_id)
        return updated.as_dict()

    @app.delete("/currencies/{currency_id}", status_code=204)
    def delete_currency(currency_id: str) -> None:
        if not finance.delete_currency(currency_id):
            raise _not_found("Currency", currency_id)

    @app.get("/convert")
    def convert(
        amount: float,
        from_code: str = Query(..., alias="from"),
        to_code: Optional[str] = Query(None, alias="to"),
    ) -> Dict[str, Any]:
        target = finance.resolve_target(to_code)
        return {
            "amount": amount,
            "from": from_code.strip().upper(),
            "to": target,
            "result": finance.convert(amount, from_code, target),
        }

    # Expense lists and expenses ----------------------------------------
    @app.get("/expense-lists")
    def list_expense_lists() -> Dict[str, Any]:
        return {"expense_lists": [item.as_dict() for item in finance.expense_lists()]}

    @app.post("/expense-lists", status_code=201)
    def add_expense_list(body: ExpenseListBody) -> Dict[str, Any]:
        return finance.add_expense_list(body.name).as_dict()

    @app.patch("/expense-lists/{list_id}")
    def rename_expense_list(list_id: str, body: ExpenseListBody) -> Dict[str, Any]:
        renamed = finance.update_expense_list(list_id, body.name)
        if renamed is None:
            raise _not_found("Expense list", list_id)
        return renamed.as_dict()

    @app.delete("/expense-lists/{list_id}", status_code=204)
    def delete_expense_list(list_id: str) -> None:
        if not finance.delete_expense_list(list_id):
            raise _not_found("Expense list", list_id)

    @app.post("/expense-lists/{list_id}/expenses", status_code=201)
    def add_expense(list_id: str, body: ExpenseCreate) -> Dict[str, Any]:
        expense = finance.add_expense(list_id, body.model_dump(exclude_none=True))
        if expense is None:
            raise _not_found("Expense list", list_id)
        return expense.as_dict()

    @app.patch("/expense-lists/{list_id}/expenses/{expense_id}")
    def update_expense(list_id: str, expense_id: str, body: ExpenseUpdate) -> Dict[str, Any]:
        updated = finance.update_expense(list_id, expense_id, body.model_dump(exclude_unset=True))
        if updated is None:
            raise _not_found("Expense", expense_id)
        return updated.as_dict()

    @app.delete("/expense-lists/{list_id}/expenses/{expense_id}", status_code=204)
    def delete_expense(list_id: str, expense_id: str) -> None:
        if not finance.delete_expense(list_id, expense_id):
            raise _not_found("Expense", expense_id)

    # Incomes ------------------------------------------------------------
    @app.get("/incomes")
    def list_incomes() -> Dict[str, Any]:
        return {"incomes": [income.as_dict() for income in finance.incomes()]}

    @app.post("/incomes", status_code=201)
    def add_income(body: IncomeCreate) -> Dict[str, Any]:
        return finance.add_income(body.model_dump()).as_dict()

    @app.patch("/incomes/{income_id}")
    def update_income(income_id: str, body: IncomeUpdate) -> Dict[str, Any]:
        updated = finance.update_income(income_id, body.model_dump(exclude_unset=True))
        if updated is None:
            raise _not_found("Income", income_id)
        return updated.as_dict()

    @app.delete("/incomes/{income_id}", status_code=204)
    def delete_income(income_id: str) -> None:
        if not finance.delete_income(income_id):
            raise _not_found("Income", income_id)

    # Aggregates ---------------------------------------------------------
    @app.get("/totals/expenses")
    def expense_totals(target: Optional[str] = None) -> Dict[str, Any]:
        return finance.expense_totals(target).as_dict()

    @app.get("/totals/incomes")
    def income_totals(target: Optional[str] = None) -> Dict[str, Any]:
        return finance.income_totals(target).as_dict()

    @app.get("/savings")
    def savings(target: Optional[str] = None) -> Dict[str, Any]:
        resolved = finance.resolve_target(target)
        return {"target": resolved, "savings": finance.savings(resolved)}

    @app.get("/summary")
    def summary(target: Optional[str] = None) -> Dict[str, Any]:
        result = finance.summary(target)
        LOGGER.debug(
            "Summary in %s -> incomes %.2f expenses %.2f savings %.2f",
            result["target"],
            result["incomes"]["total"],
            result["expenses"]["total"],
            result["savings"],
        )
        return result

    @app.post("/reset/{scope}")
    def reset(scope: str) -> Dict[str, Any]:
        resolved = finance.reset_to_defaults(scope)
        return {"reset": resolved.value, "snapshot": finance.snapshot()}

    return app
