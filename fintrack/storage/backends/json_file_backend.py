"""Mini README: File-system key-value backend.

Structure:
    * JsonFileKeyValueStore - one ``<key>.json`` file per key in a directory.

Writes go to a temporary sibling first and are moved into place with
``Path.replace`` so a crash mid-write never leaves a truncated collection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..base import KeyValueStore
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)


@REGISTRY.register
class JsonFileKeyValueStore(KeyValueStore):
    """Persist each key as a UTF-8 JSON document inside ``location``."""

    backend_name = "json-file"

    def __init__(self, location: Optional[str] = None) -> None:
        super().__init__(location=location or "data")
        self.directory = Path(self.location).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(value, encoding="utf-8")
        temp_path.replace(path)
        LOGGER.debug("Wrote %s bytes to %s", len(value), path)

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            LOGGER.debug("Removed %s", path)
