from __future__ import annotations

from time import monotonic
from typing import Callable, Protocol


class PriceCache(Protocol):
    def read(self, provider_id: str, currency: str) -> float | None: ...

    def write(self, provider_id: str, currency: str, price: float) -> None: ...


class NullPriceCache(PriceCache):
    def read(self, provider_id: str, currency: str) -> float | None:
        return None

    def write(self, provider_id: str, currency: str, price: float) -> None:
        return None


class TTLPriceCache(PriceCache):
    """In-memory prices keyed by provider id and currency, expiring after ``ttl_seconds``."""

    def __init__(self, *, ttl_seconds: float, clock: Callable[[], float] = monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, float]] = {}

    def read(self, provider_id: str, currency: str) -> float | None:
        key = (provider_id, currency.lower())
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, price = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return price

    def write(self, provider_id: str, currency: str, price: float) -> None:
        self._entries[(provider_id, currency.lower())] = (self._clock(), price)


def build_price_cache(ttl_seconds: float) -> PriceCache:
    if ttl_seconds <= 0:
        return NullPriceCache()
    return TTLPriceCache(ttl_seconds=ttl_seconds)


__all__ = ["NullPriceCache", "PriceCache", "TTLPriceCache", "build_price_cache"]
