"""
String enum definitions for license keys, accounts, and engine results.
"""

from enum import StrEnum


class DurationClass(StrEnum):
    """How long a redeemed key stays active."""

    ONE_DAY = "1day"
    ONE_WEEK = "1week"
    ONE_MONTH = "1month"
    LIFETIME = "lifetime"


class Tier(StrEnum):
    """Account privilege class granted by a key."""

    TRIAL = "Trial"
    STANDARD = "Standard"
    PREMIUM = "Premium"
    ADMIN = "Admin"


class Destination(StrEnum):
    """Where a successful login sends the user."""

    ADMIN = "admin"
    STANDARD = "standard"


class KeyStatus(StrEnum):
    ACTIVE = "Active"
    EXPIRED = "Expired"


class ErrorCode(StrEnum):
    """Failure kinds reported by engine operations."""

    # validation
    USERNAME_TOO_SHORT = "username_too_short"
    USERNAME_TOO_LONG = "username_too_long"
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    PASSWORD_MISSING = "password_missing"  # noqa: S105
    PASSWORD_TOO_SHORT = "password_too_short"  # noqa: S105
    KEY_MISSING = "key_missing"
    KEY_BAD_FORMAT = "key_bad_format"
    KEY_NOT_FOUND = "key_not_found"
    PASSWORD_MISMATCH = "password_mismatch"  # noqa: S105

    # conflicts
    USERNAME_TAKEN = "username_taken"
    KEY_ALREADY_USED = "key_already_used"
    KEY_DUPLICATE_FOR_ACCOUNT = "key_duplicate_for_account"

    # auth
    USER_NOT_FOUND = "user_not_found"
    WRONG_PASSWORD = "wrong_password"  # noqa: S105
    NOT_LOGGED_IN = "not_logged_in"

    # storage
    STORAGE_UNAVAILABLE = "storage_unavailable"
