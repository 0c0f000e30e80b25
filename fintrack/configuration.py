"""Mini README: Centralised runtime configuration for fintrack.

Structure:
    * FintrackSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the CLI and the web adapter.

Usage:
    Variables use the ``FINTRACK_`` prefix (``FINTRACK_STORAGE_BACKEND=memory``,
    ``FINTRACK_STRICT_CONVERSION=false`` ...) and may also live in a ``.env``
    file. Call ``get_settings.cache_clear()`` after changing the environment in
    tests.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FintrackSettings(BaseSettings):
    """Runtime configuration for the finance tracker."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI entry point.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory used by the json-file backend to store collections.",
    )
    storage_backend: str = Field(
        "json-file",
        description="Identifier of the registered key-value backend (json-file or memory).",
    )
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the HTTP adapter to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the HTTP adapter listens on.",
        ge=1,
        le=65535,
    )
    default_currency: str = Field(
        "USD",
        description="Target currency used for totals when a query does not name one.",
    )
    strict_conversion: bool = Field(
        True,
        description=(
            "Raise UnknownCurrencyError when converting from or to a code missing from"
            " the currency table. When disabled the amount is returned unconverted."
        ),
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Union[str, Path]) -> Path:
        """Expand user directories and make sure the directory exists."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("default_currency")
    @classmethod
    def _normalise_currency(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("default_currency must not be empty")
        return code

    @field_validator("storage_backend")
    @classmethod
    def _normalise_backend(cls, value: str) -> str:
        return value.strip().lower()


@lru_cache()
def get_settings() -> FintrackSettings:
    """Return cached settings so every module sees the same configuration."""

    return FintrackSettings()
