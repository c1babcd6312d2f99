"""Flat string-keyed key-value storage for account records.

Values are JSON-compatible (dicts, lists, strings, numbers, bools, None).
``MemoryStorage`` keeps everything in a dict and is used by tests and demos.
``JsonFileStorage`` keeps the whole store in one JSON file, re-reading it on
every access so that changes made by other processes are visible, and
writing it atomically via temp-file-then-rename.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()

# Owner-only file permissions: the store holds credentials.
_STORE_FILE_MODE = 0o600


class StorageUnavailableError(OSError):
    """The store could not be read or written."""


class KeyValueStorage(Protocol):
    """Synchronous key-value store contract."""

    def get(self, key: str) -> Any | None: ...  # noqa: ANN401

    def set(self, key: str, value: Any) -> None: ...  # noqa: ANN401

    def remove(self, key: str) -> None: ...

    def keys_with_prefix(self, prefix: str) -> list[str]: ...


class MemoryStorage:
    """In-process dict-backed store.

    Values are round-tripped through JSON on write so callers can never
    mutate stored state through a shared reference.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageUnavailableError(f"Value for '{key}' is not JSON serializable") from exc

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys_with_prefix(self, prefix: str) -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]


class JsonFileStorage:
    """Single-file JSON store.

    Limitation: writers are not serialized across processes. Two processes
    doing read-modify-write at the same time can lose one update. This
    matches the guarantees of browser local storage shared between tabs.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def keys_with_prefix(self, prefix: str) -> list[str]:
        return [key for key in self._load() if key.startswith(prefix)]

    def _load(self) -> dict[str, Any]:
        """Read the whole store. A missing file is an empty store.

        Raises on read/parse failures of an existing file so that a later
        write never overwrites data we could not read.
        """
        if not self._file_path.exists():
            return {}

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to read store from {self._file_path}"
            raise StorageUnavailableError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {self._file_path}"
            raise StorageUnavailableError(msg)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Atomically replace the store file with ``data``."""
        try:
            content = json.dumps(data, indent=2).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StorageUnavailableError("Store contents are not JSON serializable") from exc

        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._file_path.parent, prefix=".store_", suffix=".tmp")
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to write store to {self._file_path}") from exc

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fchmod(f.fileno(), _STORE_FILE_MODE)
            Path(tmp_path).replace(self._file_path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise StorageUnavailableError(f"Failed to write store to {self._file_path}") from exc
        logger.debug("saved store", path=str(self._file_path), entries=len(data))
