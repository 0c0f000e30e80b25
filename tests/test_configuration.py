"""Mini README: Tests for environment-driven settings and the CLI.

Settings are read from ``FINTRACK_`` variables; the CLI commands are run
with Typer's ``CliRunner`` against a memory backend.
"""

from __future__ import annotations

from typer.testing import CliRunner

from fintrack.configuration import FintrackSettings, get_settings
from fintrack.interface import build_store_from_settings
from main_finance_tracker import cli


def test_settings_normalise_environment_values(tmp_path, monkeypatch) -> None:
    data_directory = tmp_path / "ledger"
    monkeypatch.setenv("FINTRACK_DATA_DIRECTORY", str(data_directory))
    monkeypatch.setenv("FINTRACK_STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("FINTRACK_DEFAULT_CURRENCY", " eur ")
    monkeypatch.setenv("FINTRACK_STRICT_CONVERSION", "false")

    settings = FintrackSettings()

    assert settings.data_directory == data_directory.resolve()
    assert data_directory.is_dir()
    assert settings.storage_backend == "memory"
    assert settings.default_currency == "EUR"
    assert settings.strict_conversion is False

    store = build_store_from_settings(settings)
    assert store.default_currency == "EUR"
    assert store.strict_conversion is False


def test_cli_summary_and_reset(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("FINTRACK_DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("FINTRACK_STORAGE_BACKEND", "json-file")
    get_settings.cache_clear()
    runner = CliRunner()
    try:
        store = build_store_from_settings(get_settings())
        store.add_income(description="Salary", amount=100, currency="USD")
        store.dispose()

        summary = runner.invoke(cli, ["summary"])
        assert summary.exit_code == 0
        assert "Savings:  USD 100.00" in summary.output

        reset = runner.invoke(cli, ["reset", "incomes", "--yes"])
        assert reset.exit_code == 0
        assert not (tmp_path / "incomes.json").exists()

        bad_scope = runner.invoke(cli, ["reset", "budgets", "--yes"])
        assert bad_scope.exit_code == 2
    finally:
        get_settings.cache_clear()


def test_cli_reports_unknown_storage_backend(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("FINTRACK_DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("FINTRACK_STORAGE_BACKEND", "redis")
    get_settings.cache_clear()
    runner = CliRunner()
    try:
        for arguments in (["run", "--production"], ["summary"], ["reset", "--yes"]):
            result = runner.invoke(cli, arguments)
            assert result.exit_code == 2
            assert "Unknown storage backend 'redis'" in result.output
            assert "json-file, memory" in result.output
    finally:
        get_settings.cache_clear()
