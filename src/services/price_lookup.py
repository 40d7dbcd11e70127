from __future__ import annotations

import logging
from typing import Protocol

from config import AppSettings, config
from domain.tickers import DEFAULT_CATALOG, TickerCatalog

from .coingecko_client import CoinGeckoClient
from .price_cache import NullPriceCache, PriceCache, build_price_cache
from .price_types import PriceQuoteResult

logger = logging.getLogger(__name__)


class PriceClient(Protocol):
    def get_simple_price(self, coin_id: str, vs_currency: str = "usd") -> float: ...


class PriceLookup:
    """Resolves a ticker through the catalog and reads its current price.

    ``lookup`` returns ``None`` when the ticker has no provider id; no request
    is made in that case. Fetch failures propagate as ``PriceFetchError``.
    """

    def __init__(
        self,
        client: PriceClient,
        *,
        catalog: TickerCatalog = DEFAULT_CATALOG,
        cache: PriceCache | None = None,
        currency: str = "usd",
    ) -> None:
        if not currency:
            raise ValueError("currency must be provided")
        self.client = client
        self.catalog = catalog
        self.cache = cache or NullPriceCache()
        self.currency = currency.lower()

    def lookup(self, symbol: str) -> PriceQuoteResult | None:
        provider_id = self.catalog.resolve(symbol)
        if provider_id is None:
            logger.debug("No price provider id for %r, skipping price lookup", symbol)
            return None

        normalized = symbol.strip().upper()
        price = self.cache.read(provider_id, self.currency)
        if price is None:
            logger.info("Fetching %s price for %s (%s)", self.currency.upper(), normalized, provider_id)
            price = self.client.get_simple_price(provider_id, self.currency)
            self.cache.write(provider_id, self.currency, price)
        else:
            logger.debug("Using cached %s price for %s", self.currency.upper(), provider_id)

        return PriceQuoteResult(
            symbol=normalized,
            provider_id=provider_id,
            price=price,
            currency=self.currency.upper(),
        )


def build_price_lookup(settings: AppSettings | None = None) -> PriceLookup:
    settings = settings or config()
    client = CoinGeckoClient(
        base_url=settings.coingecko_base_url,
        api_key=settings.coingecko_api_key,
        timeout=settings.price_timeout_seconds,
        retry_attempts=settings.price_retry_attempts,
        retry_backoff_seconds=settings.price_retry_backoff_seconds,
    )
    return PriceLookup(
        client,
        cache=build_price_cache(settings.price_cache_ttl_seconds),
        currency=settings.reference_currency,
    )


__all__ = ["PriceClient", "PriceLookup", "build_price_lookup"]
