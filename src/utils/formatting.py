from __future__ import annotations

from domain.calculator import CalculationResult

CURRENCY_SYMBOLS = {"USD": "$"}


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")


def format_amount(value: float) -> str:
    return f"{value:.2f}"


def format_currency(value: float, symbol: str = "$") -> str:
    return f"{symbol}{format_amount(value)}"


def render_result(result: CalculationResult, symbol: str = "$") -> list[str]:
    """Display lines for a calculation, rounded to two decimals."""
    profit_loss = f"{format_currency(result.profit_loss, symbol)} ({format_amount(result.percentage_change)}%)"
    return [
        f"Profit/Loss: {profit_loss}",
        f"Total Investment: {format_currency(result.total_investment, symbol)}",
        f"Total Take-Home: {format_currency(result.take_home, symbol)}",
    ]


__all__ = ["currency_symbol", "format_amount", "format_currency", "render_result"]
