"""Account persistence on top of a flat key-value store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pydantic
import structlog

from accounts.enums import Tier
from accounts.errors import StorageError
from accounts.models import DEFAULT_PRODUCT, Account, RedeemedKey
from shared.storage import StorageUnavailableError

if TYPE_CHECKING:
    from datetime import datetime

    from accounts.catalog import KeyDefinition
    from shared.storage import KeyValueStorage

logger = structlog.get_logger()

ACCOUNT_KEY_PREFIX = "user_"


def account_key(username: str) -> str:
    return ACCOUNT_KEY_PREFIX + username


class AccountStore:
    """CRUD over Account records stored as ``user_<username>``.

    Storage failures surface as StorageError and are never retried. Since
    Account is immutable, a failed create or update leaves both the stored
    record and the caller's object as they were.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def exists(self, username: str) -> bool:
        return self._read(account_key(username)) is not None

    def get(self, username: str) -> Account | None:
        data = self._read(account_key(username))
        if data is None:
            return None
        return _parse_account(account_key(username), data)

    def create(
        self,
        username: str,
        password: str,
        key_def: KeyDefinition,
        now: datetime,
        *,
        product: str = DEFAULT_PRODUCT,
    ) -> Account:
        """Build a new account holding ``key_def`` as its only key and persist it."""
        first_key = RedeemedKey.activate(key_def, now, product)
        account = Account(
            username=username,
            password=password,
            is_admin=key_def.tier == Tier.ADMIN,
            keys=(first_key,),
            joined_at=now,
            last_login_at=now,
        )
        self._write(account)
        logger.info("created account", username=username, tier=key_def.tier, is_admin=account.is_admin)
        return account

    def update(self, account: Account) -> None:
        """Overwrite the stored record for ``account.username``."""
        self._write(account)

    def delete(self, username: str) -> None:
        try:
            self._storage.remove(account_key(username))
        except StorageUnavailableError as exc:
            raise StorageError(f"Failed to delete account '{username}'") from exc

    def list_all(self) -> list[Account]:
        """Return every persisted account. Used for key-uniqueness scans.

        A corrupt record fails the whole scan: the codes it holds cannot be
        read, so skipping it could hand one of them out a second time.
        """
        try:
            keys = self._storage.keys_with_prefix(ACCOUNT_KEY_PREFIX)
        except StorageUnavailableError as exc:
            raise StorageError("Failed to enumerate accounts") from exc
        accounts = []
        for key in keys:
            data = self._read(key)
            if data is None:
                continue
            try:
                accounts.append(_parse_account(key, data))
            except StorageError:
                logger.warning("corrupt account record blocks scan", key=key)
                raise
        return accounts

    def _read(self, key: str) -> object | None:
        try:
            return self._storage.get(key)
        except StorageUnavailableError as exc:
            raise StorageError(f"Failed to read '{key}'") from exc

    def _write(self, account: Account) -> None:
        try:
            self._storage.set(account_key(account.username), account.model_dump(mode="json"))
        except StorageUnavailableError as exc:
            logger.warning("account write failed", username=account.username, error=str(exc))
            raise StorageError(f"Failed to save account '{account.username}'") from exc


def _parse_account(key: str, data: object) -> Account:
    try:
        return Account.model_validate(data)
    except pydantic.ValidationError as exc:
        raise StorageError(f"Corrupt account record at '{key}'") from exc
