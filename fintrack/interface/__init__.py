"""Mini README: Interfaces (HTTP) exposing the fintrack finance store.

Exports the FastAPI application factory used by ``main_finance_tracker run``
and by tests through ``fastapi.testclient.TestClient``.
"""

from .web_app import build_store_from_settings, create_application

__all__ = ["build_store_from_settings", "create_application"]
