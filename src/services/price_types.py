from __future__ import annotations

from dataclasses import dataclass


class PriceFetchError(RuntimeError):
    """The current price could not be read from the price API."""


@dataclass(frozen=True)
class PriceQuoteResult:
    """Current price of an asset in the reference currency."""

    symbol: str
    provider_id: str
    price: float
    currency: str


__all__ = ["PriceFetchError", "PriceQuoteResult"]
