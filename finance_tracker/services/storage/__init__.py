"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
JSON files on disk are the default backend; the in-memory backend is
used for tests and throwaway sessions.
"""

from finance_tracker.services.storage.interface import (
    CorruptStateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileKeyValueStore
from finance_tracker.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "CorruptStateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
