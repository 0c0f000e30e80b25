"""Mini README: Tests for the storage backend registry and built-in backends.

Ensures both built-in backends register on import, that the file backend
writes one JSON document per key, and that a FinanceStore survives a
restart when backed by files.
"""

from __future__ import annotations

import json

import pytest

from fintrack.finance import CURRENCIES_KEY, INCOMES_KEY, FinanceStore
from fintrack.storage import (
    REGISTRY,
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    UnknownStorageBackendError,
)


def test_registry_contains_builtin_backends() -> None:
    assert list(REGISTRY.available_backends()) == ["json-file", "memory"]


def test_registry_instantiates_backends(tmp_path) -> None:
    memory = REGISTRY.create("MEMORY")
    files = REGISTRY.create("json-file", location=str(tmp_path))

    assert isinstance(memory, MemoryKeyValueStore)
    assert isinstance(files, JsonFileKeyValueStore)
    assert isinstance(files, KeyValueStore)
    assert files.metadata() == {"backend": "json-file", "location": str(tmp_path)}
    with pytest.raises(KeyError):
        REGISTRY.create("redis")


def test_unknown_backend_error_names_the_setting_and_choices() -> None:
    with pytest.raises(UnknownStorageBackendError) as excinfo:
        REGISTRY.create(" Redis ")

    message = str(excinfo.value)
    assert "FINTRACK_STORAGE_BACKEND" in message
    assert "json-file, memory" in message
    assert REGISTRY.resolve(" MEMORY ") is MemoryKeyValueStore


def test_json_file_backend_round_trips_strings(tmp_path) -> None:
    backend = JsonFileKeyValueStore(location=str(tmp_path / "ledger"))

    assert backend.get(INCOMES_KEY) is None
    backend.set(INCOMES_KEY, "[]")
    assert (tmp_path / "ledger" / "incomes.json").read_text(encoding="utf-8") == "[]"
    assert backend.get(INCOMES_KEY) == "[]"

    backend.delete(INCOMES_KEY)
    backend.delete(INCOMES_KEY)
    assert backend.get(INCOMES_KEY) is None


def test_json_file_backend_rejects_path_like_keys(tmp_path) -> None:
    backend = JsonFileKeyValueStore(location=str(tmp_path))

    with pytest.raises(ValueError):
        backend.set("../escape", "{}")


def test_finance_store_persists_through_files(tmp_path) -> None:
    store = FinanceStore(JsonFileKeyValueStore(location=str(tmp_path)))
    store.add_currency("GBP", "Pound Sterling", 1.27)
    store.add_income(description="Salary", amount=2000, currency="GBP")

    persisted = json.loads((tmp_path / f"{CURRENCIES_KEY}.json").read_text(encoding="utf-8"))
    assert persisted[-1]["code"] == "GBP"

    restarted = FinanceStore(JsonFileKeyValueStore(location=str(tmp_path)))
    assert restarted.income_totals("USD").total == pytest.approx(2540.0)


def test_undecodable_file_falls_back_to_defaults(tmp_path) -> None:
    (tmp_path / f"{INCOMES_KEY}.json").write_bytes(b"\xff\xfe[garbage")

    store = FinanceStore(JsonFileKeyValueStore(location=str(tmp_path)))

    assert store.incomes() == []
    store.add_income(description="Salary", amount=10, currency="USD")
    assert len(json.loads((tmp_path / f"{INCOMES_KEY}.json").read_text(encoding="utf-8"))) == 1
