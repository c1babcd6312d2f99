"""Tests for dashboard snapshots."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from accounts.dashboard import Dashboard
from accounts.enums import DurationClass, KeyStatus, Tier
from shared.storage import StorageUnavailableError


@pytest.fixture
def dashboard(store, ledger, clock):
    return Dashboard(store, ledger, clock=clock)


@pytest.fixture
def alice(store, catalog, clock):
    return store.create("alice", "secret1", catalog.find("DEMO-1234-ABCD-5678"), clock())


class TestInit:
    def test_stats(self, dashboard, alice, clock):
        snapshot = dashboard.init(alice)

        assert snapshot.username == "alice"
        assert snapshot.is_admin is False
        assert snapshot.stats.balance == 0
        assert snapshot.stats.active_keys == 1
        assert snapshot.stats.total_orders == 0
        assert snapshot.stats.member_since == clock()

    def test_key_views(self, dashboard, alice):
        view = dashboard.init(alice).keys[0]

        assert view.code == "DEMO-1234-ABCD-5678"
        assert view.product == "Reverse"
        assert view.tier == Tier.TRIAL
        assert view.duration == DurationClass.ONE_DAY
        assert view.duration_label == "1 Day"
        assert view.remaining == "1 days"
        assert view.status == KeyStatus.ACTIVE

    def test_expired_key(self, dashboard, alice, clock):
        clock.advance(timedelta(days=2))

        snapshot = dashboard.init(alice)

        assert snapshot.stats.active_keys == 0
        assert snapshot.keys[0].status == KeyStatus.EXPIRED
        assert snapshot.keys[0].remaining == "Expired"

    def test_init_persists_refreshed_status(self, dashboard, store, alice, clock):
        clock.advance(timedelta(days=2))

        dashboard.init(alice)

        assert store.get("alice").keys[0].active is False

    def test_lifetime_key(self, dashboard, ledger, alice, clock):
        account = ledger.redeem(alice, "SPECIAL-ACCESS-2025", clock())

        view = dashboard.init(account).keys[1]

        assert view.expires_at is None
        assert view.remaining == "Unlimited"
        assert view.duration_label == "Lifetime"


class TestRefresh:
    def test_pulls_latest_from_store(self, dashboard, ledger, alice, clock):
        ledger.redeem(alice, "TEST-KEY1-2025-GAME", clock())

        snapshot = dashboard.refresh(alice)

        assert [k.code for k in snapshot.keys] == ["DEMO-1234-ABCD-5678", "TEST-KEY1-2025-GAME"]
        assert snapshot.stats.active_keys == 2

    def test_none_when_account_removed(self, dashboard, store, alice):
        store.delete("alice")

        assert dashboard.refresh(alice) is None

    def test_snapshot_is_json_serializable(self, dashboard, alice):
        data = dashboard.refresh(alice).model_dump(mode="json")

        assert data["keys"][0]["status"] == "Active"
        assert data["keys"][0]["tier"] == "Trial"


class TestStorageFailures:
    def test_init_returns_none_when_status_write_fails(self, dashboard, store, storage, alice, clock):
        clock.advance(timedelta(days=2))

        with patch.object(storage, "set", side_effect=StorageUnavailableError("quota exceeded")):
            snapshot = dashboard.init(alice)

        assert snapshot is None
        assert store.get("alice").keys[0].active is True

    def test_init_without_status_change_needs_no_write(self, dashboard, storage, alice):
        with patch.object(storage, "set", side_effect=StorageUnavailableError("quota exceeded")):
            snapshot = dashboard.init(alice)

        assert snapshot.stats.active_keys == 1

    def test_refresh_returns_none_for_corrupt_record(self, dashboard, storage, alice):
        storage.set("user_alice", {"username": "alice"})

        assert dashboard.refresh(alice) is None

    def test_refresh_returns_none_when_read_fails(self, dashboard, storage, alice):
        with patch.object(storage, "get", side_effect=StorageUnavailableError("unavailable")):
            assert dashboard.refresh(alice) is None
