"""Shared fixtures for account engine tests."""

from datetime import UTC, datetime, timedelta

import pytest

from accounts.app import create_app
from accounts.catalog import default_catalog
from accounts.ledger import KeyLedger
from accounts.repository import AccountStore
from accounts.settings import AccountsSettings
from shared.storage import MemoryStorage

START = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingStorage(MemoryStorage):
    """MemoryStorage that records every key written."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[str] = []

    def set(self, key, value):
        self.writes.append(key)
        super().set(key, value)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def store(storage):
    return AccountStore(storage)


@pytest.fixture
def ledger(store, catalog):
    return KeyLedger(store, catalog)


@pytest.fixture
def settings():
    return AccountsSettings(storage_backend="memory", password_hasher="plain")


@pytest.fixture
def app(settings, storage, clock):
    return create_app(settings, storage=storage, clock=clock)


@pytest.fixture
def auth(app):
    return app.auth
