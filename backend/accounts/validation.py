"""Stateless shape checks for usernames, passwords, and key codes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from accounts.enums import ErrorCode
from accounts.errors import ValidationError

if TYPE_CHECKING:
    from accounts.catalog import KeyCatalog, KeyDefinition

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_]+")

PASSWORD_MIN_LENGTH = 6

KEY_PATTERN = re.compile(r"[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}")


def validate_username(username: str) -> None:
    """Validate username: 3-20 chars, letters, digits, and underscores."""
    if not username:
        raise ValidationError(ErrorCode.USERNAME_INVALID_CHARS, "Username is required")
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            ErrorCode.USERNAME_TOO_SHORT,
            f"Username must be at least {USERNAME_MIN_LENGTH} characters",
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            ErrorCode.USERNAME_TOO_LONG,
            f"Username must be at most {USERNAME_MAX_LENGTH} characters",
        )
    if not USERNAME_PATTERN.fullmatch(username):
        raise ValidationError(
            ErrorCode.USERNAME_INVALID_CHARS,
            "Username can only contain letters, numbers and underscores",
        )


def validate_password(password: str) -> None:
    if not password:
        raise ValidationError(ErrorCode.PASSWORD_MISSING, "Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            ErrorCode.PASSWORD_TOO_SHORT,
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        )


def validate_key(code: str, catalog: KeyCatalog) -> KeyDefinition:
    """Validate a key code and return its catalog definition.

    Codes must look like ``XXXX-XXXX-XXXX-XXXX`` (uppercase letters and
    digits). Catalog codes that predate this format are accepted as listed.
    """
    if not code:
        raise ValidationError(ErrorCode.KEY_MISSING, "Key is required")
    if not KEY_PATTERN.fullmatch(code) and code not in catalog:
        raise ValidationError(ErrorCode.KEY_BAD_FORMAT, "Invalid key format (use: XXXX-XXXX-XXXX-XXXX)")
    key_def = catalog.find(code)
    if key_def is None:
        raise ValidationError(ErrorCode.KEY_NOT_FOUND, "Invalid or expired key")
    return key_def
