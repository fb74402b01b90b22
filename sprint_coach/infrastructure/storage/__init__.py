"""
Local key-value storage for the client's session log.

JSON file on disk, or an in-memory dict for tests.
"""

from .client import (
    CorruptStorageError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    create_storage,
)

__all__ = [
    "CorruptStorageError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "create_storage",
]
