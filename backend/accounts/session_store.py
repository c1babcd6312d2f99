"""Stored pointer to the currently logged-in username."""

from __future__ import annotations

from typing import TYPE_CHECKING

from accounts.errors import StorageError
from shared.storage import StorageUnavailableError

if TYPE_CHECKING:
    from shared.storage import KeyValueStorage

CURRENT_USER_KEY = "currentUser"


class SessionPointer:
    """At most one active session per store.

    The pointer lives in the same store as the accounts, so every process
    sharing that store also shares the session.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def get(self) -> str | None:
        try:
            username = self._storage.get(CURRENT_USER_KEY)
        except StorageUnavailableError as exc:
            raise StorageError("Failed to read current session") from exc
        if not isinstance(username, str) or not username:
            return None
        return username

    def set(self, username: str) -> None:
        try:
            self._storage.set(CURRENT_USER_KEY, username)
        except StorageUnavailableError as exc:
            raise StorageError("Failed to record session") from exc

    def clear(self) -> None:
        """Remove the pointer. Safe to call without a session."""
        try:
            self._storage.remove(CURRENT_USER_KEY)
        except StorageUnavailableError as exc:
            raise StorageError("Failed to clear session") from exc
