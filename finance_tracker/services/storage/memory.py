"""
In-Memory Storage Implementation

Used by tests and by the "memory" storage backend, where nothing
should survive the process.
"""

from typing import Optional

from finance_tracker.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed key-value storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._entries: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._entries)

    def snapshot(self) -> dict[str, str]:
        """Copy of every stored entry (handy for assertions)."""
        return dict(self._entries)
