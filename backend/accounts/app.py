"""Wire the account engine from settings.

Every collaborator is built once here and handed to the components that
use it, so nothing in the engine reaches for module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from accounts.catalog import default_catalog
from accounts.dashboard import Dashboard
from accounts.ledger import KeyLedger
from accounts.models import utc_now
from accounts.password import get_hasher
from accounts.repository import AccountStore
from accounts.service import AuthSession
from accounts.session_store import SessionPointer
from accounts.settings import AccountsSettings
from shared.logging import setup_logging
from shared.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from accounts.catalog import KeyCatalog

logger = structlog.get_logger()


@dataclass
class AccountsApp:
    """The wired engine: one instance per process."""

    settings: AccountsSettings
    catalog: KeyCatalog
    storage: KeyValueStorage
    store: AccountStore
    ledger: KeyLedger
    auth: AuthSession
    dashboard: Dashboard


def create_storage(settings: AccountsSettings) -> KeyValueStorage:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return JsonFileStorage(settings.storage_path)


def create_app(
    settings: AccountsSettings | None = None,
    *,
    storage: KeyValueStorage | None = None,
    catalog: KeyCatalog | None = None,
    clock: Callable[[], datetime] = utc_now,
    configure_logging: bool = False,
) -> AccountsApp:
    """Build the engine. ``storage`` and ``catalog`` override the settings-derived defaults."""
    if settings is None:
        settings = AccountsSettings()
    if configure_logging:
        setup_logging(log_dir=settings.log_dir)

    catalog = catalog if catalog is not None else default_catalog()
    storage = storage if storage is not None else create_storage(settings)
    store = AccountStore(storage)
    ledger = KeyLedger(store, catalog, product=settings.product_name)
    auth = AuthSession(
        store,
        ledger,
        catalog,
        SessionPointer(storage),
        password_hasher=get_hasher(settings.password_hasher),
        clock=clock,
    )
    dashboard = Dashboard(store, ledger, clock=clock)

    logger.info(
        "accounts engine ready",
        storage_backend=settings.storage_backend,
        password_hasher=settings.password_hasher,
        catalog_size=len(catalog),
    )
    return AccountsApp(
        settings=settings,
        catalog=catalog,
        storage=storage,
        store=store,
        ledger=ledger,
        auth=auth,
        dashboard=dashboard,
    )
