"""Mini README: Abstract key-value persistence contract.

Structure:
    * KeyValueStore - interface implemented by concrete storage backends.

The finance store persists each collection as one JSON string under a fixed
key. Backends only need to move strings around; serialisation and fallback
to defaults stay in ``fintrack.finance.store``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class KeyValueStore(ABC):
    """Base interface for string key-value persistence backends."""

    backend_name: str = "generic"

    def __init__(self, location: Optional[str] = None) -> None:
        self.location = location
        LOGGER.debug("Initialising %s storage backend at '%s'", self.backend_name, location)

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string for ``key`` or ``None`` when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite ``key`` with ``value``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; deleting an absent key is not an error."""

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for CLI and HTTP status output."""

        return {
            "backend": self.backend_name,
            "location": self.location or "in-process",
        }
