"""Mini README: Built-in storage backends.

Importing this package registers ``memory`` and ``json-file`` with the
storage ``REGISTRY``. New backends should subclass ``KeyValueStore`` and
register themselves the same way.
"""

from .json_file_backend import JsonFileKeyValueStore
from .memory_backend import MemoryKeyValueStore

__all__ = ["JsonFileKeyValueStore", "MemoryKeyValueStore"]
