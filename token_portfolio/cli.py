"""Command-line interface for the token portfolio tracker."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .errors import PriceError, TokenNotFoundError
from .logging_setup import configure_logging
from .services import PortfolioTracker


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="token-portfolio",
        description="Token portfolio valuation and level tracker",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    price_parser = sub.add_parser("price", help="Current price for a ticker")
    price_parser.add_argument("ticker", help="Token ticker, e.g. BTC")

    address_parser = sub.add_parser(
        "price-address", help="Current price for a contract address"
    )
    address_parser.add_argument("chain_id", help="Chain ID, e.g. ethereum")
    address_parser.add_argument("address", help="Token contract address")

    value_parser = sub.add_parser("value", help="Value a portfolio once")
    value_parser.add_argument(
        "portfolio",
        nargs="?",
        default=None,
        help="Portfolio label (default: first configured portfolio)",
    )

    check_parser = sub.add_parser(
        "check", help="Confirm every ticker in a portfolio can be priced"
    )
    check_parser.add_argument(
        "portfolio",
        nargs="?",
        default=None,
        help="Portfolio label (default: first configured portfolio)",
    )

    watch_parser = sub.add_parser("watch", help="Re-value a portfolio periodically")
    watch_parser.add_argument(
        "portfolio",
        nargs="?",
        default=None,
        help="Portfolio label (default: first configured portfolio)",
    )
    watch_parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Refresh interval in seconds (overrides config)",
    )

    return parser


def _report_check(results: list[tuple[str, str | None, PriceError | None]]) -> int:
    """Print ticker check results and return the exit code."""
    code = 0
    for ticker, name, error in results:
        if error is None:
            print(f"✅ {ticker} — {name}")
        elif isinstance(error, TokenNotFoundError):
            print(f"❌ {ticker}: unknown token, check the ticker symbol")
            code = 2
        else:
            print(f"⚠️ {ticker}: price unavailable ({error})")
            code = code or 3
    return code


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    tracker = PortfolioTracker(config)

    try:
        if args.command == "price":
            print(tracker.format_quote(await tracker.price(args.ticker)))
        elif args.command == "price-address":
            resolved = await tracker.price_by_address(args.chain_id, args.address)
            print(tracker.format_quote(resolved))
        elif args.command == "value":
            label = args.portfolio or tracker.default_portfolio
            valuation = await tracker.valuate_portfolio(label)
            print(tracker.format_report(label, valuation))
        elif args.command == "check":
            return _report_check(await tracker.check_portfolio(args.portfolio))
        elif args.command == "watch":
            await tracker.run_continuous(args.portfolio, args.interval)
        else:
            build_parser().print_help()
            return 1
    except KeyError as e:
        print(e.args[0], file=sys.stderr)
        return 2
    except TokenNotFoundError as e:
        print(f"Unknown token: {e}", file=sys.stderr)
        return 2
    except PriceError as e:
        print(f"Price unavailable, try again later: {e}", file=sys.stderr)
        return 3
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
