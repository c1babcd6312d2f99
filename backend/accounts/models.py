"""Account, redeemed-key, and operation result models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, Field, model_validator

from accounts.duration import expiry_for, is_expired
from accounts.enums import Destination, DurationClass, ErrorCode, Tier

if TYPE_CHECKING:
    from accounts.catalog import KeyDefinition
    from accounts.errors import AccountsError

DEFAULT_PRODUCT = "Reverse"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class RedeemedKey(BaseModel, frozen=True):
    """A catalog key activated on exactly one account.

    ``expires_at`` is the source of truth. ``active`` is a cached copy of
    "not expired" that KeyLedger re-derives on every read.
    """

    code: str
    duration: DurationClass
    tier: Tier
    product: str = DEFAULT_PRODUCT
    active: bool
    activated_at: datetime
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def _validate_expiry(self) -> Self:
        if (self.duration == DurationClass.LIFETIME) != (self.expires_at is None):
            raise ValueError("expires_at must be None exactly when duration is lifetime")
        return self

    @classmethod
    def activate(cls, key_def: KeyDefinition, now: datetime, product: str = DEFAULT_PRODUCT) -> RedeemedKey:
        """Build a freshly activated key from its catalog definition."""
        expires_at = expiry_for(key_def.duration, now)
        return cls(
            code=key_def.code,
            duration=key_def.duration,
            tier=key_def.tier,
            product=product,
            active=not is_expired(expires_at, now),
            activated_at=now,
            expires_at=expires_at,
        )

    def is_active_at(self, now: datetime) -> bool:
        return not is_expired(self.expires_at, now)


class Account(BaseModel, frozen=True):
    """User account persisted under ``user_<username>``."""

    username: str
    password: str  # plaintext under PlainHasher, bcrypt hash under BcryptHasher
    is_admin: bool = False  # fixed at registration from the first key's tier
    keys: tuple[RedeemedKey, ...] = ()
    joined_at: datetime
    balance: float = 0
    total_orders: int = 0
    last_login_at: datetime

    def holds_key(self, code: str) -> bool:
        return any(key.code == code for key in self.keys)


class OperationResult(BaseModel, frozen=True):
    """Outcome of an engine operation, carrying a message for display."""

    success: bool
    message: str
    error: ErrorCode | None = None
    destination: Destination | None = None  # set by a successful login
    account: Account | None = Field(default=None, repr=False)

    @classmethod
    def ok(
        cls,
        message: str,
        *,
        destination: Destination | None = None,
        account: Account | None = None,
    ) -> OperationResult:
        return cls(success=True, message=message, destination=destination, account=account)

    @classmethod
    def failure(cls, exc: AccountsError) -> OperationResult:
        return cls(success=False, message=exc.message, error=exc.code)
