"""
Local Storage Implementations

- InMemoryKeyValueStore: a dict, for tests and throwaway sessions
- JsonFileKeyValueStore: one <slot>.json file per slot in a data directory,
  the per-user local storage of the tracker

Each write replaces the slot's file atomically (write to a temp file,
then rename). Writes to different slots are independent.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from finance_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)


_SLOT_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Slots kept in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """Slots stored as files under `data_dir`."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _SLOT_NAME.match(key):
            raise StorageError(f"Invalid slot name: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read slot '{key}': {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write slot '{key}': {e}")
