"""Mini README: Key-value persistence subsystem.

Re-exports the ``KeyValueStore`` interface, the backend registry, and the
built-in backends so callers can write ``REGISTRY.create("memory")``.
"""

from .base import KeyValueStore
from .registry import REGISTRY, StorageBackendRegistry, UnknownStorageBackendError
from . import backends  # noqa: F401  # ensure built-in backends register on import
from .backends import JsonFileKeyValueStore, MemoryKeyValueStore

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "REGISTRY",
    "StorageBackendRegistry",
    "UnknownStorageBackendError",
]
