from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from domain.calculator_input import InputValidationError
from services.calculator_session import CalculatorSession
from services.price_lookup import PriceLookup, build_price_lookup
from utils.formatting import currency_symbol, render_result

FORM_FLAGS = {
    "currency": "currency",
    "investment": "investment",
    "buy_price": "buyPrice",
    "sell_price": "sellPrice",
    "investment_fee": "investmentFee",
    "exit_fee": "exitFee",
}


def run(args: argparse.Namespace, lookup: PriceLookup) -> int:
    session = CalculatorSession(lookup)

    if args.crypto is not None:
        if args.fetch_price:
            quote = asyncio.run(session.select_crypto(args.crypto))
            if quote is not None:
                print(f"Current {quote.symbol} price: {quote.price} {quote.currency}")
            elif session.notice:
                print(f"Notice: {session.notice}")
            else:
                print(f"No price available for {args.crypto}")
        else:
            session.set_field("crypto", args.crypto)

    # Explicit flags win over pre-filled prices.
    for attr, field in FORM_FLAGS.items():
        value = getattr(args, attr)
        if value is not None:
            session.set_field(field, value)

    try:
        result = session.submit()
    except InputValidationError as exc:
        print("Invalid input:", file=sys.stderr)
        for message in exc.errors.values():
            print(f"  {message}", file=sys.stderr)
        return 2

    if session.parsed is not None:
        for warning in session.parsed.warnings:
            print(f"Warning: {warning}")
    for line in render_result(result, currency_symbol(session.values["currency"])):
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate profit or loss of a crypto investment.")
    parser.add_argument("--currency", help="Fiat currency of the amounts (default: USD).")
    parser.add_argument("--crypto", help="Ticker symbol, e.g. BTC, or OTHER.")
    parser.add_argument("--investment", help="Amount invested.")
    parser.add_argument("--buy-price", help="Price per unit at entry.")
    parser.add_argument("--sell-price", help="Price per unit at exit.")
    parser.add_argument("--investment-fee", help="Fee paid on entry (default: 0).")
    parser.add_argument("--exit-fee", help="Fee paid on exit (default: 0).")
    parser.add_argument(
        "--fetch-price",
        action="store_true",
        help="Pre-fill buy and sell price with the current market price of --crypto.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    return run(args, build_price_lookup())


if __name__ == "__main__":
    sys.exit(main())
