from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pydantic.alias_generators import to_camel

from domain.calculator import CalculationResult, calculate_parsed
from domain.calculator_input import DEFAULT_FORM_VALUES, InputValidationError, ParsedInput, validate_and_parse

from .price_types import PriceFetchError, PriceQuoteResult

logger = logging.getLogger(__name__)


class PriceLookupProvider(Protocol):
    def lookup(self, symbol: str) -> PriceQuoteResult | None: ...


class CalculatorSession:
    """Form state of a single calculator session.

    Selecting a ticker pre-fills the buy and sell prices with the current
    price. Only the latest selection may write those fields: a lookup that
    finishes after another ticker was chosen is dropped.
    """

    def __init__(self, lookup: PriceLookupProvider) -> None:
        self.lookup = lookup
        self.values: dict[str, str] = dict(DEFAULT_FORM_VALUES)
        self.errors: dict[str, str] = {}
        self.notice: str | None = None
        self.result: CalculationResult | None = None
        self.parsed: ParsedInput | None = None
        self._selection = 0

    def set_field(self, name: str, value: str) -> None:
        key = name if name in self.values else to_camel(name)
        if key not in self.values:
            raise KeyError(name)
        self.values[key] = value

    async def select_crypto(self, symbol: str) -> PriceQuoteResult | None:
        self.values["crypto"] = symbol
        self._selection += 1
        selection = self._selection
        self.notice = None

        try:
            quote = await asyncio.to_thread(self.lookup.lookup, symbol)
        except PriceFetchError as exc:
            logger.warning("Price lookup for %s failed: %s", symbol, exc)
            if selection == self._selection:
                self.notice = f"Could not fetch the current price for {symbol}: {exc}"
            return None

        if selection != self._selection:
            logger.debug("Dropping stale price for %s, selection is now %s", symbol, self.values["crypto"])
            return None
        if quote is None:
            return None

        # A zero price means the API had no quote; keep whatever the user typed.
        if quote.price:
            price = str(quote.price)
            self.values["buyPrice"] = price
            self.values["sellPrice"] = price
        return quote

    def submit(self) -> CalculationResult:
        try:
            parsed = validate_and_parse(self.values)
        except InputValidationError as exc:
            self.errors = exc.errors
            self.result = None
            self.parsed = None
            raise

        self.errors = {}
        self.parsed = parsed
        self.result = calculate_parsed(parsed)
        return self.result


__all__ = ["CalculatorSession", "PriceLookupProvider"]
