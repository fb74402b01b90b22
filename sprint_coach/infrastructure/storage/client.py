"""
Local durable key-value storage for the client.

The session log lives on the athlete's machine, not on the server. This
module gives it a small string-keyed store, the same shape as a browser's
localStorage: values are strings, callers do their own serialization.

Two backends:
- JsonFileStorage: one JSON object on disk, rewritten atomically
- InMemoryStorage: a dict, for tests and throwaway runs
"""

import json
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class CorruptStorageError(StorageError):
    """Raised when the backing file exists but cannot be read as a JSON object."""
    pass


class KeyValueStorage(Protocol):
    """
    Protocol for string key-value storage.

    Using a protocol means the session store can be tested against an
    in-memory dict and pointed at a real file in production.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key has never been set."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store the value under key, replacing any previous value."""
        ...


class JsonFileStorage:
    """
    Key-value storage backed by a single JSON file.

    Every write rewrites the whole file through a temporary file and a
    rename, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is not None and not isinstance(value, str):
            raise CorruptStorageError(
                f"{self._path}: value for {key!r} must be a string, got {type(value).__name__}"
            )
        return value

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except CorruptStorageError as e:
            logger.warning(
                "Overwriting unreadable storage file",
                extra={"path": str(self._path), "error": str(e)},
            )
            data = {}

        data[key] = value
        self._write(data)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8").strip() or "{}"
        except UnicodeDecodeError as e:
            raise CorruptStorageError(f"{self._path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStorageError(f"Could not parse {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptStorageError(f"{self._path} must contain a JSON object")

        return data

    def _write(self, data: dict[str, str]) -> None:
        payload = json.dumps(data, indent=2, sort_keys=True) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=self._path.parent, delete=False, encoding="utf-8"
            ) as tmp:
                tmp.write(payload)
                temp_path = Path(tmp.name)
            temp_path.replace(self._path)
        except OSError as e:
            logger.error(
                "Failed to write storage file",
                extra={"path": str(self._path), "error": str(e)},
            )
            raise StorageError(f"Write failed: {e}") from e

        logger.debug(
            "Wrote storage file",
            extra={"path": str(self._path), "keys": sorted(data.keys())},
        )


# ---------------------------------------------------------------------------
# In-memory Storage for Tests
# ---------------------------------------------------------------------------

class InMemoryStorage:
    """
    Dict-backed storage.

    Lives as long as the object does. Handy for tests and for running
    the client without touching the filesystem.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage(
    path: Optional[Union[str, Path]] = None,
    mock_mode: bool = False,
) -> KeyValueStorage:
    """
    Create storage based on configuration.

    Args:
        path: Location of the JSON file (required if not mock_mode)
        mock_mode: If True, return in-memory storage

    Returns:
        KeyValueStorage implementation (file or in-memory)
    """
    if mock_mode:
        logger.info("Using in-memory storage")
        return InMemoryStorage()

    if path is None:
        raise ValueError("path is required when not in mock mode")

    return JsonFileStorage(path)
