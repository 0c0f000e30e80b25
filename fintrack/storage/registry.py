"""Mini README: Registry of storage backends selectable by name.

Structure:
    * UnknownStorageBackendError - raised when settings name an unregistered backend.
    * StorageBackendRegistry - maps identifiers such as ``json-file`` to classes.
    * REGISTRY - process-wide registry populated by ``fintrack.storage.backends``.

Third-party packages can add backends by subclassing ``KeyValueStore`` and
decorating the class with ``REGISTRY.register`` at import time. Identifiers
are matched ignoring case and surrounding whitespace.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type

from .base import KeyValueStore
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class UnknownStorageBackendError(KeyError):
    """The configured ``storage_backend`` does not name a registered backend."""

    def __init__(self, identifier: str, available: Iterable[str]) -> None:
        self.identifier = identifier
        self.available = list(available)
        super().__init__(identifier)

    def __str__(self) -> str:
        choices = ", ".join(self.available) or "none registered"
        return (
            f"Unknown storage backend '{self.identifier}' "
            f"(check FINTRACK_STORAGE_BACKEND); available backends: {choices}"
        )


class StorageBackendRegistry:
    """Registry mapping backend identifiers to ``KeyValueStore`` classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[KeyValueStore]] = {}

    def register(self, backend: Type[KeyValueStore]) -> Type[KeyValueStore]:
        """Register a backend class; returns it so the call works as a decorator."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering storage backend '%s'", identifier)
        self._backends[identifier] = backend
        return backend

    def available_backends(self) -> Iterable[str]:
        return sorted(self._backends.keys())

    def resolve(self, identifier: str) -> Type[KeyValueStore]:
        """Return the class registered under ``identifier`` or raise a settings error."""

        backend_cls = self._backends.get(identifier.strip().lower())
        if backend_cls is None:
            raise UnknownStorageBackendError(identifier, self.available_backends())
        return backend_cls

    def create(self, identifier: str, *, location: Optional[str] = None) -> KeyValueStore:
        """Instantiate the backend registered under ``identifier``."""

        backend_cls = self.resolve(identifier)
        LOGGER.info("Creating storage backend '%s' at '%s'", backend_cls.backend_name, location)
        return backend_cls(location=location)


REGISTRY = StorageBackendRegistry()
