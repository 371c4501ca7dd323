"""
Scoring Engine - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line access to impact scores and market data.

- Loads settings from the environment (.env supported)
- Resolves company profiles via the market data provider
- Prints results as JSON
- Closes every HTTP session on exit

============================================================
USAGE
============================================================
python -m scoring_engine score TSLA
python -m scoring_engine score AAPL --impact environmental
python -m scoring_engine quote MSFT
python -m scoring_engine history NVDA --period 6M

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from core.config import AppSettings
from market_data import StockDataProvider, TimePeriod

from .models import ImpactCategory
from .service import ScoringService


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="impact-engine",
        description="Impact scores for companies from sector baselines and recent news",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s score TSLA                        # Broad impact score
  %(prog)s score AAPL --impact environmental  # Category score
  %(prog)s history NVDA --period 6M          # Price history
        """
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        metavar="PATH",
        help="Path to a .env file",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    score = commands.add_parser("score", help="Compute impact scores for a company")
    score.add_argument("symbol", help="Ticker symbol")
    score.add_argument(
        "--impact",
        type=str,
        default=ImpactCategory.BROAD.value,
        metavar="CATEGORY",
        help=f"Impact category ({', '.join(c.value for c in ImpactCategory)})",
    )

    quote = commands.add_parser("quote", help="Latest quote for a symbol")
    quote.add_argument("symbol", help="Ticker symbol")

    history = commands.add_parser("history", help="Price history for a symbol")
    history.add_argument("symbol", help="Ticker symbol")
    history.add_argument(
        "--period",
        type=str,
        choices=[p.value for p in TimePeriod],
        default=TimePeriod.ONE_MONTH.value,
        help="Chart window (default: 1M)",
    )

    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


# ============================================================
# COMMANDS
# ============================================================

async def run_command(
    args: argparse.Namespace,
    provider: StockDataProvider,
    service: ScoringService,
) -> Any:
    """Execute one subcommand and return a JSON-ready payload."""
    if args.command == "score":
        profile = await provider.get_company_info(args.symbol)
        result = await service.compute_impact_scores(profile, args.impact)
        return {"company": profile.to_dict(), **result.to_dict()}

    if args.command == "quote":
        quote = await provider.get_quote(args.symbol)
        return quote.to_dict()

    if args.command == "history":
        points = await provider.get_historical_data(args.symbol, args.period)
        return [point.to_dict() for point in points]

    raise ValueError(f"Unknown command: {args.command}")


async def async_main(args: argparse.Namespace, settings: AppSettings) -> int:
    provider = StockDataProvider(
        api_key=settings.stock_api_key,
        base_url=settings.stock_api_base_url,
        timeout=settings.http_timeout_seconds,
    )
    service = ScoringService.from_settings(settings)

    try:
        payload = await run_command(args, provider, service)
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    finally:
        await provider.close()
        await service.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = AppSettings.from_env(args.env_file)
    setup_logging(args.log_level or settings.log_level)

    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    return asyncio.run(async_main(args, settings))
