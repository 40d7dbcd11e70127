from __future__ import annotations

from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

OTHER_SYMBOL = "OTHER"


class Ticker(BaseModel):
    """A selectable asset: ticker symbol, display label and price provider id.

    ``provider_id`` is ``None`` for entries without a price source (the
    ``OTHER`` sentinel).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    symbol: str
    label: str
    provider_id: str | None


class TickerCatalog:
    def __init__(self, tickers: Iterable[Ticker]) -> None:
        self._tickers = tuple(tickers)
        by_symbol: dict[str, Ticker] = {}
        for ticker in self._tickers:
            key = ticker.symbol.upper()
            if key in by_symbol:
                raise ValueError(f"Duplicate ticker symbol: {ticker.symbol}")
            by_symbol[key] = ticker
        self._by_symbol = by_symbol

    def __iter__(self) -> Iterator[Ticker]:
        return iter(self._tickers)

    def __len__(self) -> int:
        return len(self._tickers)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None

    def get(self, symbol: str) -> Ticker | None:
        return self._by_symbol.get(symbol.strip().upper())

    def resolve(self, symbol: str) -> str | None:
        """Return the provider id for ``symbol``, or ``None`` when it has none."""
        ticker = self.get(symbol)
        if ticker is None:
            return None
        return ticker.provider_id


DEFAULT_CATALOG = TickerCatalog(
    [
        Ticker(symbol="BTC", label="Bitcoin (BTC)", provider_id="bitcoin"),
        Ticker(symbol="ETH", label="Ethereum (ETH)", provider_id="ethereum"),
        Ticker(symbol="USDT", label="Tether (USDT)", provider_id="tether"),
        Ticker(symbol="BNB", label="BNB", provider_id="binancecoin"),
        Ticker(symbol="XRP", label="XRP", provider_id="ripple"),
        Ticker(symbol="USDC", label="USD Coin (USDC)", provider_id="usd-coin"),
        Ticker(symbol="SOL", label="Solana (SOL)", provider_id="solana"),
        Ticker(symbol="ADA", label="Cardano (ADA)", provider_id="cardano"),
        Ticker(symbol="DOGE", label="Dogecoin (DOGE)", provider_id="dogecoin"),
        Ticker(symbol="TRX", label="TRON (TRX)", provider_id="tron"),
        Ticker(symbol="TON", label="Toncoin (TON)", provider_id="toncoin"),
        Ticker(symbol="DAI", label="Dai (DAI)", provider_id="dai"),
        Ticker(symbol="MATIC", label="Polygon (MATIC)", provider_id="matic-network"),
        Ticker(symbol="DOT", label="Polkadot (DOT)", provider_id="polkadot"),
        Ticker(symbol="LTC", label="Litecoin (LTC)", provider_id="litecoin"),
        Ticker(symbol="BCH", label="Bitcoin Cash (BCH)", provider_id="bitcoin-cash"),
        Ticker(symbol="SHIB", label="Shiba Inu (SHIB)", provider_id="shiba-inu"),
        Ticker(symbol="AVAX", label="Avalanche (AVAX)", provider_id="avalanche-2"),
        Ticker(symbol="LINK", label="Chainlink (LINK)", provider_id="chainlink"),
        Ticker(symbol="XLM", label="Stellar (XLM)", provider_id="stellar"),
        Ticker(symbol="UNI", label="Uniswap (UNI)", provider_id="uniswap"),
        Ticker(symbol="ATOM", label="Cosmos (ATOM)", provider_id="cosmos"),
        Ticker(symbol="XMR", label="Monero (XMR)", provider_id="monero"),
        Ticker(symbol="OKB", label="OKB", provider_id="okb"),
        Ticker(symbol="ETC", label="Ethereum Classic (ETC)", provider_id="ethereum-classic"),
        Ticker(symbol=OTHER_SYMBOL, label="Other", provider_id=None),
    ]
)


__all__ = ["DEFAULT_CATALOG", "OTHER_SYMBOL", "Ticker", "TickerCatalog"]
