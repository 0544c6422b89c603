"""
Durable key/value storage for the map store.

Mirrors the browser's localStorage contract (string keys, string values) on
top of a single JSON document on disk. Any I/O or decoding problem surfaces
as PersistenceUnavailable; the store decides what to do about it.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from shared.errors import PersistenceUnavailable

logger = logging.getLogger("Storage")


class JsonFileStorage:
    def __init__(self, path: str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceUnavailable(f"Unexpected storage layout in {self.path}")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceUnavailable(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceUnavailable:
            logger.warning(f"Overwriting unreadable storage file {self.path}")
            data = {}
        data[key] = value
        self._write_all(data)


class MemoryStorage:
    """In-process storage; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
