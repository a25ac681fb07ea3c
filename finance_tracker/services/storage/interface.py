"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a minimal key-value interface.
This allows us to:
1. Keep state in JSON files on disk for the real application
2. Use in-memory storage for testing
3. Swap in another backend later without touching ledger logic

Values are opaque strings (serialized JSON). The interface does not know
anything about transactions or budgets; parsing and shape checks belong
to the ledger store.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.errors import TrackerError


class KeyValueStore(ABC):
    """
    Abstract interface for named-entry storage.

    Any storage implementation (JSON files, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read an entry.

        Args:
            key: Entry name

        Returns:
            The stored string, or None if the entry does not exist

        Raises:
            StorageError: If the backend cannot be read
            CorruptStateError: If the entry exists but cannot be decoded
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Create or overwrite an entry.

        Args:
            key: Entry name
            value: Serialized value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove an entry.

        Returns:
            True if the entry existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List entry names, sorted."""
        pass

    def set_many(self, entries: dict[str, str]) -> None:
        """
        Write several entries.

        Backends that can write atomically across entries should override this.
        """
        for key, value in entries.items():
            self.set(key, value)


class StorageError(TrackerError):
    """Base exception for storage operations."""
    pass


class CorruptStateError(StorageError):
    """Stored data is present but not in the expected shape."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
