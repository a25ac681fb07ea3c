"""
JSON File Storage Implementation

DESIGN DECISION: Local JSON files are the default storage backend because:
1. The tracker is a single-user, single-process utility
2. Users can open and back up their data with any text editor
3. No database setup required

Each entry lives in its own file: <data_dir>/<key>.json.
Writes go to a temporary file in the same directory and are then
renamed over the target, so a crash mid-write never leaves a
half-written entry behind.

TRADEOFFS:
- Not suitable for concurrent writers (there are none)
- Two entries are not written atomically together (see LedgerStore.persist)
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from finance_tracker.services.storage.interface import (
    CorruptStateError,
    KeyValueStore,
    StorageError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_SUFFIX = ".json"


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value storage backed by one JSON file per entry.

    The data directory is created lazily on the first write.
    """

    def __init__(self, data_dir: Path | str):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        """Map an entry name to its file, refusing names that could escape the directory."""
        if not _KEY_PATTERN.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{_SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        """Read an entry, returning None when its file does not exist."""
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptStateError(f"Entry {key!r} is not valid UTF-8: {e}", key=key)
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        """Write an entry atomically (temp file + rename)."""
        path = self._path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        """Delete an entry's file."""
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")

    def keys(self) -> list[str]:
        """List entries present in the data directory."""
        if not self._data_dir.is_dir():
            return []
        return sorted(
            path.stem
            for path in self._data_dir.glob(f"*{_SUFFIX}")
            if path.is_file() and not path.name.startswith(".")
        )
