"""Mini README: In-process key-value backend.

Structure:
    * MemoryKeyValueStore - dict-backed store used by tests and demos.

Nothing survives the process; the backend mirrors the semantics of browser
local storage closely enough for the finance store to be exercised.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..base import KeyValueStore
from ..registry import REGISTRY


@REGISTRY.register
class MemoryKeyValueStore(KeyValueStore):
    """Keep persisted collections in a plain dictionary."""

    backend_name = "memory"

    def __init__(self, location: Optional[str] = None, initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(location=location)
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._values)
