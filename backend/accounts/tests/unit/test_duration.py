from datetime import UTC, datetime, timedelta

import pytest

from accounts.duration import days_remaining, duration_label, expiry_for, is_expired
from accounts.enums import DurationClass

NOW = datetime(2025, 1, 1, tzinfo=UTC)
ONE_MS = timedelta(milliseconds=1)


class TestExpiryFor:
    @pytest.mark.parametrize(
        ("duration", "offset"),
        [
            (DurationClass.ONE_DAY, timedelta(milliseconds=86_400_000)),
            (DurationClass.ONE_WEEK, timedelta(milliseconds=7 * 86_400_000)),
            (DurationClass.ONE_MONTH, timedelta(milliseconds=30 * 86_400_000)),
        ],
    )
    def test_fixed_offsets_are_exact(self, duration, offset):
        assert expiry_for(duration, NOW) == NOW + offset

    def test_lifetime_has_no_expiry(self):
        assert expiry_for(DurationClass.LIFETIME, NOW) is None


class TestIsExpired:
    def test_none_never_expires(self):
        assert is_expired(None, NOW + timedelta(days=10_000)) is False

    def test_not_expired_at_exact_expiry(self):
        assert is_expired(NOW, NOW) is False

    def test_expired_one_ms_after(self):
        assert is_expired(NOW, NOW + ONE_MS) is True

    def test_not_expired_before(self):
        assert is_expired(NOW, NOW - ONE_MS) is False


class TestLabels:
    def test_every_duration_has_label(self):
        assert [duration_label(d) for d in DurationClass] == ["1 Day", "1 Week", "1 Month", "Lifetime"]


class TestDaysRemaining:
    def test_unlimited_for_lifetime(self):
        assert days_remaining(None, NOW) == "Unlimited"

    def test_rounds_partial_days_up(self):
        assert days_remaining(NOW + timedelta(days=6, hours=1), NOW) == "7 days"

    def test_whole_days(self):
        assert days_remaining(NOW + timedelta(days=30), NOW) == "30 days"

    def test_expired_when_past(self):
        assert days_remaining(NOW - timedelta(hours=1), NOW) == "Expired"

    def test_expired_at_exact_expiry(self):
        assert days_remaining(NOW, NOW) == "Expired"
