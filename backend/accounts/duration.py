"""
Key lifetime policy: expiry computation, expiry checks, and display helpers.

Fixed lifetimes are exact (1, 7, and 30 days). Lifetime keys have no expiry.
A key is expired strictly after its expiry instant, so at ``now == expires_at``
it is still active.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from accounts.enums import DurationClass

DURATION_OFFSETS: dict[DurationClass, timedelta] = {
    DurationClass.ONE_DAY: timedelta(days=1),
    DurationClass.ONE_WEEK: timedelta(days=7),
    DurationClass.ONE_MONTH: timedelta(days=30),
}

DURATION_LABELS: dict[DurationClass, str] = {
    DurationClass.ONE_DAY: "1 Day",
    DurationClass.ONE_WEEK: "1 Week",
    DurationClass.ONE_MONTH: "1 Month",
    DurationClass.LIFETIME: "Lifetime",
}

_SECONDS_PER_DAY = 86400


def expiry_for(duration: DurationClass, now: datetime) -> datetime | None:
    """Return the expiry instant for a key activated at ``now``, or None for lifetime keys."""
    if duration == DurationClass.LIFETIME:
        return None
    return now + DURATION_OFFSETS[duration]


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    if expires_at is None:
        return False
    return now > expires_at


def duration_label(duration: DurationClass) -> str:
    return DURATION_LABELS[duration]


def days_remaining(expires_at: datetime | None, now: datetime) -> str:
    """Describe remaining lifetime: "Unlimited", "N days" (rounded up), or "Expired"."""
    if expires_at is None:
        return "Unlimited"
    days = math.ceil((expires_at - now).total_seconds() / _SECONDS_PER_DAY)
    return f"{days} days" if days > 0 else "Expired"
