"""Exception hierarchy raised inside the account engine.

AuthSession catches AccountsError at its boundary and turns it into an
OperationResult, so callers of the engine never see these exceptions.
"""

from accounts.enums import ErrorCode


class AccountsError(Exception):
    """Base class for recoverable engine failures."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ValidationError(AccountsError):
    """Username, password, or key failed a shape or catalog check."""


class ConflictError(AccountsError):
    """Username taken, or key already held by this or another account."""


class AuthError(AccountsError):
    """Unknown user, wrong password, or no active session."""


class StorageError(AccountsError):
    """Underlying key-value store refused or failed the operation."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORAGE_UNAVAILABLE) -> None:
        super().__init__(code, message)
