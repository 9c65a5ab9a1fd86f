"""
String-keyed local storage.

The tracker persists one serialized blob under a fixed key. JsonFileStorage
keeps all keys in a single JSON object file and replaces it atomically on
every write; MemoryStorage is the in-process equivalent used by tests.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from ..core.config import CORRUPT_SUFFIX

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal local-storage interface: string keys to string values."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage that lives as long as the object."""

    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStorage:
    """
    Storage backed by one JSON object file.

    The file maps keys to string values. Writes go to a temporary file in the
    same directory which then replaces the original, so a crash leaves either
    the old or the new file. Write errors (quota, permissions) propagate.

    A file that is not a JSON object is moved to <path>.corrupt and the
    storage starts empty; the next write creates a fresh file.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the storage.

        Args:
            path: Path to the JSON storage file (created on first write)
        """
        self.path = Path(path)

    @property
    def backup_path(self) -> Path:
        """Where an unreadable storage file is moved before it is replaced."""
        return self.path.with_name(self.path.name + CORRUPT_SUFFIX)

    def _quarantine(self, reason: str) -> None:
        os.replace(self.path, self.backup_path)
        logger.warning(
            "Storage file is unreadable (%s); moved aside, starting empty",
            reason,
            extra={"storage_path": str(self.path), "backup": str(self.backup_path)},
        )

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self._quarantine(str(e))
            return {}
        if not isinstance(data, dict):
            self._quarantine(f"top level is {type(data).__name__}, not an object")
            return {}
        # Non-string values are kept as their JSON text so a later write does not drop them
        return {k: v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _write_all(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
