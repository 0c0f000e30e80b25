"""Mini README: Command line entry point for fintrack.

Commands:
    * run - serve the HTTP adapter with uvicorn.
    * summary - print income, expense and savings totals in a target currency.
    * reset - clear one persisted collection (or all of them) back to defaults.

All commands read ``FintrackSettings`` so the same storage backend and data
directory are used whether the ledger is served or inspected offline.
"""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn

from fintrack.configuration import FintrackSettings, get_settings
from fintrack.finance import FinanceError, FinanceStore, ResetScope
from fintrack.interface import build_store_from_settings
from fintrack.logging_utils import configure_root_logger
from fintrack.storage import REGISTRY, UnknownStorageBackendError

cli = typer.Typer(help="Track incomes and expenses across currencies.")


def _exit_on_unknown_backend(error: UnknownStorageBackendError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=2)


def _open_store(settings: FintrackSettings) -> FinanceStore:
    try:
        return build_store_from_settings(settings)
    except UnknownStorageBackendError as error:
        raise _exit_on_unknown_backend(error) from error


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)
    try:
        REGISTRY.resolve(settings.storage_backend)
    except UnknownStorageBackendError as error:
        raise _exit_on_unknown_backend(error) from error

    # Browsers cannot open the 0.0.0.0 wildcard, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting fintrack on {effective_host}:{effective_port} "
        f"with the '{settings.storage_backend}' backend.\n"
        f"API docs: http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "fintrack.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary(
    target: Optional[str] = typer.Option(None, help="Currency code totals are expressed in."),
) -> None:
    """Print converted totals and savings."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    store = _open_store(settings)
    try:
        result = store.summary(target)
    except FinanceError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error
    finally:
        store.dispose()

    code = result["target"]
    typer.echo(f"Incomes:  {code} {result['incomes']['total']:.2f}")
    typer.echo(f"Expenses: {code} {result['expenses']['total']:.2f}")
    typer.echo(f"Savings:  {code} {result['savings']:.2f}")
    for list_total in result["expenses_by_list"]:
        typer.echo(f"  - {list_total['name']}: {code} {list_total['total']:.2f}")


@cli.command()
def reset(
    scope: str = typer.Argument(
        "all", help="One of: all, currencies, expenses, expenseLists, incomes."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Restore a persisted collection to its defaults."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        resolved = ResetScope.from_str(scope)
    except FinanceError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=2) from error
    if not yes:
        typer.confirm(f"Reset '{resolved.value}' to defaults?", abort=True)
    store = _open_store(settings)
    try:
        store.reset_to_defaults(resolved)
    finally:
        store.dispose()
    typer.echo(f"Reset '{resolved.value}' to defaults.")


if __name__ == "__main__":
    cli()
