"""Auth session coordinating registration, login, key redemption, and the current session.

AuthSession is the engine boundary: every public operation returns an
OperationResult (or a plain value) and never lets an AccountsError escape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from accounts.enums import Destination, ErrorCode
from accounts.errors import AccountsError, AuthError, ConflictError, StorageError, ValidationError
from accounts.models import OperationResult, utc_now
from accounts.validation import validate_key, validate_password, validate_username

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from accounts.catalog import KeyCatalog
    from accounts.ledger import KeyLedger
    from accounts.models import Account
    from accounts.password import PasswordHasher
    from accounts.repository import AccountStore
    from accounts.session_store import SessionPointer

logger = structlog.get_logger()


class AuthSession:
    """Coordinate account registration, login, and session-bound operations."""

    def __init__(
        self,
        store: AccountStore,
        ledger: KeyLedger,
        catalog: KeyCatalog,
        session_pointer: SessionPointer,
        *,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._catalog = catalog
        self._pointer = session_pointer
        self._hasher = password_hasher
        self._clock = clock

    def register(self, username: str, password: str, code: str) -> OperationResult:
        """Create an account holding ``code`` as its first key.

        Checks run in order and the first failure is reported: username,
        password, and key shape, then username availability, then whether
        any existing account already holds the key.
        """
        try:
            validate_username(username)
            validate_password(password)
            key_def = validate_key(code, self._catalog)
            if self._store.exists(username):
                raise ConflictError(ErrorCode.USERNAME_TAKEN, "Username already taken")
            if self._ledger.is_code_taken(code):
                raise ConflictError(ErrorCode.KEY_ALREADY_USED, "Key already used")
            account = self._store.create(
                username,
                self._hasher.hash(password),
                key_def,
                self._clock(),
                product=self._ledger.product,
            )
        except AccountsError as exc:
            return _failed("register", exc, username=username)
        return OperationResult.ok("Account created successfully!", account=account)

    def login(self, username: str, password: str) -> OperationResult:
        """Check credentials, refresh key status, and record the session."""
        try:
            account = self._store.get(username)
            if account is None:
                raise AuthError(ErrorCode.USER_NOT_FOUND, "User not found")
            if not self._hasher.verify(password, account.password):
                raise AuthError(ErrorCode.WRONG_PASSWORD, "Incorrect password")

            now = self._clock()
            account, _ = self._ledger.recompute(account.model_copy(update={"last_login_at": now}), now)
            previous = self._pointer.get()
            self._pointer.set(account.username)
            try:
                self._store.update(account)
            except StorageError:
                self._restore_pointer(previous)
                raise
        except AccountsError as exc:
            return _failed("login", exc, username=username)

        destination = Destination.ADMIN if account.is_admin else Destination.STANDARD
        logger.info("logged in", username=username, destination=destination)
        return OperationResult.ok("Login successful", destination=destination, account=account)

    def logout(self) -> OperationResult:
        try:
            self._pointer.clear()
        except AccountsError as exc:
            return _failed("logout", exc)
        return OperationResult.ok("Logged out")

    def current_account(self) -> Account | None:
        """Return the logged-in account with fresh key status, or None."""
        try:
            return self._require_account(self._clock())
        except AuthError:
            return None
        except StorageError as exc:
            logger.warning("could not resolve current session", error=exc.message)
            return None

    def change_password(self, current: str, new: str, confirm: str) -> OperationResult:
        try:
            account = self._require_account(self._clock())
            if not self._hasher.verify(current, account.password):
                raise AuthError(ErrorCode.WRONG_PASSWORD, "Current password is incorrect")
            validate_password(new)
            if new != confirm:
                raise ValidationError(ErrorCode.PASSWORD_MISMATCH, "Passwords do not match")
            account = account.model_copy(update={"password": self._hasher.hash(new)})
            self._store.update(account)
        except AccountsError as exc:
            return _failed("change_password", exc)
        logger.info("changed password", username=account.username)
        return OperationResult.ok("Password changed successfully", account=account)

    def redeem_key(self, code: str) -> OperationResult:
        """Activate ``code`` on the logged-in account."""
        try:
            now = self._clock()
            account = self._require_account(now)
            account = self._ledger.redeem(account, code, now)
        except AccountsError as exc:
            return _failed("redeem_key", exc, code=code)
        return OperationResult.ok("Key activated successfully!", account=account)

    def active_key_count(self) -> int:
        """Number of active keys on the logged-in account, 0 without a session."""
        account = self.current_account()
        if account is None:
            return 0
        return sum(1 for key in account.keys if key.active)

    # -- private helpers --

    def _require_account(self, now: datetime) -> Account:
        """Resolve the session pointer to an account with refreshed key status."""
        username = self._pointer.get()
        account = self._store.get(username) if username is not None else None
        if account is None:
            raise AuthError(ErrorCode.NOT_LOGGED_IN, "Not logged in")
        return self._ledger.refresh_status(account, now)

    def _restore_pointer(self, previous: str | None) -> None:
        """Put back the session that was current before a failed login."""
        try:
            if previous is None:
                self._pointer.clear()
            else:
                self._pointer.set(previous)
        except StorageError as exc:
            logger.warning("could not restore session", previous=previous, error=exc.message)


def _failed(operation: str, exc: AccountsError, **context: object) -> OperationResult:
    if isinstance(exc, StorageError):
        logger.warning("operation failed", operation=operation, error=exc.code, detail=exc.message, **context)
    else:
        logger.info("operation rejected", operation=operation, error=exc.code, **context)
    return OperationResult.failure(exc)
