"""Per-account key ledger: status refresh, redemption, and uniqueness.

Uniqueness of a code across accounts is checked by scanning every stored
account before appending. The scan and the write are not atomic: two
processes sharing one store can both pass the scan and assign the same code
twice. A multi-writer store would need an index keyed by code with an
atomic insert-if-absent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from accounts.enums import ErrorCode
from accounts.errors import ConflictError
from accounts.models import DEFAULT_PRODUCT, RedeemedKey
from accounts.validation import validate_key

if TYPE_CHECKING:
    from datetime import datetime

    from accounts.catalog import KeyCatalog
    from accounts.models import Account
    from accounts.repository import AccountStore

logger = structlog.get_logger()


class KeyLedger:
    """Derive key status and append redeemed keys to accounts."""

    def __init__(
        self,
        store: AccountStore,
        catalog: KeyCatalog,
        *,
        product: str = DEFAULT_PRODUCT,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._product = product

    @property
    def product(self) -> str:
        return self._product

    def recompute(self, account: Account, now: datetime) -> tuple[Account, bool]:
        """Re-derive ``active`` for every key without persisting.

        Returns the account (the same instance when nothing changed) and
        whether any flag flipped.
        """
        changed = False
        keys = []
        for key in account.keys:
            active = key.is_active_at(now)
            if active != key.active:
                changed = True
                key = key.model_copy(update={"active": active})  # noqa: PLW2901
            keys.append(key)
        if not changed:
            return account, False
        return account.model_copy(update={"keys": tuple(keys)}), True

    def refresh_status(self, account: Account, now: datetime) -> Account:
        """Re-derive key status and persist only if a flag changed."""
        refreshed, changed = self.recompute(account, now)
        if changed:
            self._store.update(refreshed)
            logger.info(
                "key status changed",
                username=account.username,
                active=sum(key.active for key in refreshed.keys),
            )
        return refreshed

    def active_count(self, account: Account, now: datetime) -> int:
        refreshed = self.refresh_status(account, now)
        return sum(1 for key in refreshed.keys if key.active)

    def is_code_taken(self, code: str, *, exclude_username: str | None = None) -> bool:
        """Return True if any stored account (other than ``exclude_username``) holds ``code``."""
        return any(
            existing.holds_key(code)
            for existing in self._store.list_all()
            if existing.username != exclude_username
        )

    def redeem(self, account: Account, code: str, now: datetime) -> Account:
        """Activate ``code`` on ``account`` and persist it.

        Raises ValidationError for invalid codes and ConflictError when the
        code is already held by this or any other account.
        """
        key_def = validate_key(code, self._catalog)
        if account.holds_key(code):
            raise ConflictError(ErrorCode.KEY_DUPLICATE_FOR_ACCOUNT, "You already have this key")
        if self.is_code_taken(code, exclude_username=account.username):
            raise ConflictError(ErrorCode.KEY_ALREADY_USED, "Key already used")

        new_key = RedeemedKey.activate(key_def, now, self._product)
        updated = account.model_copy(update={"keys": (*account.keys, new_key)})
        self._store.update(updated)
        logger.info("redeemed key", username=account.username, code=code, tier=key_def.tier)
        return updated
