"""Compiled-in catalog of redeemable license keys."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from accounts.enums import DurationClass, Tier

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class KeyDefinition(BaseModel, frozen=True):
    """Static catalog entry describing what a key grants."""

    code: str
    duration: DurationClass
    tier: Tier


class KeyCatalog:
    """Fixed set of valid key codes, looked up by exact code."""

    def __init__(self, definitions: Iterable[KeyDefinition]) -> None:
        self._by_code: dict[str, KeyDefinition] = {}
        for definition in definitions:
            if definition.code in self._by_code:
                raise ValueError(f"Duplicate catalog code '{definition.code}'")
            self._by_code[definition.code] = definition

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[KeyDefinition]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)

    def find(self, code: str) -> KeyDefinition | None:
        """Return the definition with exactly this code, or None."""
        return self._by_code.get(code)


DEFAULT_KEYS: tuple[KeyDefinition, ...] = (
    KeyDefinition(code="DEMO-1234-ABCD-5678", duration=DurationClass.ONE_DAY, tier=Tier.TRIAL),
    KeyDefinition(code="TEST-KEY1-2025-GAME", duration=DurationClass.ONE_WEEK, tier=Tier.STANDARD),
    KeyDefinition(code="FREE-BETA-KEY9-2025", duration=DurationClass.ONE_MONTH, tier=Tier.PREMIUM),
    KeyDefinition(code="PREMIUM-2025-ALPHA", duration=DurationClass.LIFETIME, tier=Tier.PREMIUM),
    KeyDefinition(code="SPECIAL-ACCESS-2025", duration=DurationClass.LIFETIME, tier=Tier.PREMIUM),
    KeyDefinition(code="ADMIN-2025-MASTER-KEY", duration=DurationClass.LIFETIME, tier=Tier.ADMIN),
)


def default_catalog() -> KeyCatalog:
    return KeyCatalog(DEFAULT_KEYS)
