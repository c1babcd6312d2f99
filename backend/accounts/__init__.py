"""License-key gated account engine: catalog, ledger, account store, and auth session."""

from accounts.app import AccountsApp, create_app
from accounts.catalog import DEFAULT_KEYS, KeyCatalog, KeyDefinition, default_catalog
from accounts.dashboard import Dashboard, DashboardSnapshot
from accounts.enums import Destination, DurationClass, ErrorCode, Tier
from accounts.errors import AccountsError, AuthError, ConflictError, StorageError, ValidationError
from accounts.ledger import KeyLedger
from accounts.models import Account, OperationResult, RedeemedKey
from accounts.repository import AccountStore
from accounts.service import AuthSession
from accounts.settings import AccountsSettings

__all__ = [
    "DEFAULT_KEYS",
    "Account",
    "AccountStore",
    "AccountsApp",
    "AccountsError",
    "AccountsSettings",
    "AuthError",
    "AuthSession",
    "ConflictError",
    "Dashboard",
    "DashboardSnapshot",
    "Destination",
    "DurationClass",
    "ErrorCode",
    "KeyCatalog",
    "KeyDefinition",
    "KeyLedger",
    "OperationResult",
    "RedeemedKey",
    "StorageError",
    "Tier",
    "ValidationError",
    "create_app",
    "default_catalog",
]
