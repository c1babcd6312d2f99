"""Password storage and comparison: protocol, plaintext (default), and bcrypt.

PlainHasher stores the password as given and compares it exactly. It keeps
the historical behaviour of the demo, where stored records hold raw
passwords. BcryptHasher is the opt-in choice for anything beyond a demo;
accounts written under one hasher cannot log in under the other.
"""

from __future__ import annotations

import hmac
from typing import Protocol, runtime_checkable

import bcrypt

BCRYPT_MAX_BYTES = 72  # bcrypt only looks at the first 72 bytes


@runtime_checkable
class PasswordHasher(Protocol):
    """Turn a password into its stored form and check it later."""

    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, stored: str) -> bool: ...


class PlainHasher:
    """Stores passwords verbatim. Exact string comparison."""

    def hash(self, plain: str) -> str:
        return plain

    def verify(self, plain: str, stored: str) -> bool:
        return hmac.compare_digest(plain.encode("utf-8"), stored.encode("utf-8"))


class BcryptHasher:
    """Salted bcrypt hashes. Input beyond 72 bytes is ignored, as bcrypt always has."""

    def hash(self, plain: str) -> str:
        return bcrypt.hashpw(_bcrypt_input(plain), bcrypt.gensalt()).decode("utf-8")

    def verify(self, plain: str, stored: str) -> bool:
        """Return False for malformed hashes rather than propagating a ValueError."""
        try:
            return bcrypt.checkpw(_bcrypt_input(plain), stored.encode("utf-8"))
        except ValueError:
            return False


def _bcrypt_input(plain: str) -> bytes:
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_hasher(name: str = "plain") -> PasswordHasher:
    """Return a PasswordHasher by name ("plain" or "bcrypt")."""
    if name == "plain":
        return PlainHasher()
    if name == "bcrypt":
        return BcryptHasher()
    raise ValueError(f"Unknown password hasher: {name!r}")
