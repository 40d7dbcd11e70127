from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .calculator_input import BUY_PRICE_NOT_POSITIVE, InputValidationError, ParsedInput


class CalculationResult(BaseModel):
    """Outcome of a single calculation. Values are not rounded."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_investment: float
    units: float
    take_home: float
    profit_loss: float
    percentage_change: float


def calculate(
    investment: float,
    buy_price: float,
    sell_price: float,
    investment_fee: float = 0.0,
    exit_fee: float = 0.0,
) -> CalculationResult:
    if buy_price <= 0:
        raise InputValidationError({"buyPrice": BUY_PRICE_NOT_POSITIVE})

    units = investment / buy_price
    gross_profit = (sell_price - buy_price) * units
    return CalculationResult(
        total_investment=investment + investment_fee,
        units=units,
        take_home=gross_profit - exit_fee,
        profit_loss=gross_profit,
        percentage_change=(sell_price - buy_price) / buy_price * 100,
    )


def calculate_parsed(parsed: ParsedInput) -> CalculationResult:
    return calculate(
        parsed.investment,
        parsed.buy_price,
        parsed.sell_price,
        investment_fee=parsed.investment_fee,
        exit_fee=parsed.exit_fee,
    )


__all__ = ["CalculationResult", "calculate", "calculate_parsed"]
