"""
Read-only dashboard snapshots for whatever renders account data.

A snapshot is built from an account whose key status has just been
refreshed, so ``status`` and ``active_keys`` always reflect the clock at
build time rather than whatever was cached in storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from accounts.duration import days_remaining, duration_label
from accounts.enums import DurationClass, KeyStatus, Tier
from accounts.errors import AccountsError
from accounts.models import utc_now

if TYPE_CHECKING:
    from collections.abc import Callable

    from accounts.ledger import KeyLedger
    from accounts.models import Account, RedeemedKey
    from accounts.repository import AccountStore

logger = structlog.get_logger()


class AccountStats(BaseModel, frozen=True):
    balance: float
    active_keys: int
    total_orders: int
    member_since: datetime


class KeyView(BaseModel, frozen=True):
    """One redeemed key as shown in the subscriptions and keys tabs."""

    code: str
    product: str
    tier: Tier
    duration: DurationClass
    duration_label: str
    activated_at: datetime
    expires_at: datetime | None
    remaining: str  # "Unlimited", "N days", or "Expired"
    status: KeyStatus


class DashboardSnapshot(BaseModel, frozen=True):
    username: str
    is_admin: bool
    stats: AccountStats
    keys: list[KeyView]


class Dashboard:
    """Build snapshots from freshly refreshed account data."""

    def __init__(
        self,
        store: AccountStore,
        ledger: KeyLedger,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._clock = clock

    def init(self, account: Account) -> DashboardSnapshot | None:
        """Snapshot ``account`` after refreshing its key status. None if the store fails."""
        now = self._clock()
        try:
            account = self._ledger.refresh_status(account, now)
        except AccountsError as exc:
            logger.warning("could not build dashboard", username=account.username, error=exc.message)
            return None
        return build_snapshot(account, now)

    def refresh(self, account: Account) -> DashboardSnapshot | None:
        """Re-read ``account`` from the store and snapshot it. None if it is gone or unreadable."""
        try:
            latest = self._store.get(account.username)
        except AccountsError as exc:
            logger.warning("could not reload account", username=account.username, error=exc.message)
            return None
        if latest is None:
            return None
        return self.init(latest)


def build_snapshot(account: Account, now: datetime) -> DashboardSnapshot:
    """Snapshot an account whose key status is already current."""
    return DashboardSnapshot(
        username=account.username,
        is_admin=account.is_admin,
        stats=AccountStats(
            balance=account.balance,
            active_keys=sum(1 for key in account.keys if key.active),
            total_orders=account.total_orders,
            member_since=account.joined_at,
        ),
        keys=[_key_view(key, now) for key in account.keys],
    )


def _key_view(key: RedeemedKey, now: datetime) -> KeyView:
    return KeyView(
        code=key.code,
        product=key.product,
        tier=key.tier,
        duration=key.duration,
        duration_label=duration_label(key.duration),
        activated_at=key.activated_at,
        expires_at=key.expires_at,
        remaining=days_remaining(key.expires_at, now),
        status=KeyStatus.ACTIVE if key.active else KeyStatus.EXPIRED,
    )
