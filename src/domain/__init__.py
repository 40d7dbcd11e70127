"""Domain models and calculations for the investment calculator.

This package holds the ticker catalog, the form input validation and the
profit/loss calculation. Nothing here performs I/O, so it can be tested
without the price API.
"""

__all__ = [
    "calculator",
    "calculator_input",
    "tickers",
]
