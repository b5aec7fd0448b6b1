#!/usr/bin/env python3
"""
Command-line interface for the TVL run.

Usage:
    python -m mobius_tvl
    python -m mobius_tvl --dry-run --breakdown
    python -m mobius_tvl --chunk-size 50 --output-dir ./out
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import get_config, setup_logging
from .core.pipeline import build_pipeline
from .core.tvl import TVLReport, format_usd
from .errors import TVLError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute the USD TVL of the tracked stable-swap pools"
    )
    parser.add_argument("--output-dir", help="Directory for the output file")
    parser.add_argument("--output-file", help="Output file name (default: pools.json)")
    parser.add_argument("--pools-file", help="JSON pool list replacing the built-in one")
    parser.add_argument("--chunk-size", type=int, help="Calls per multicall chunk")
    parser.add_argument(
        "--include-fees",
        action="store_true",
        help="Derive missing prices from the post-fee swap rate",
    )
    parser.add_argument("--dry-run", action="store_true", help="Do not write the output file")
    parser.add_argument("--breakdown", action="store_true", help="Log the value of every pool")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL",
    )
    args = parser.parse_args(argv)
    if args.chunk_size is not None and args.chunk_size <= 0:
        parser.error("--chunk-size must be positive")
    return args


def log_breakdown(report: TVLReport) -> None:
    """Log one line per pool."""
    logger.info("=" * 60)
    for valuation in report.valuations:
        if valuation.resolved:
            logger.info(f"{valuation.pool.name}: ${format_usd(valuation.value)}")
        else:
            logger.info(f"{valuation.pool.name}: skipped ({valuation.reason})")
    logger.info("=" * 60)


async def run(args: argparse.Namespace) -> TVLReport:
    config = get_config()
    async with build_pipeline(
        config,
        pools_file=args.pools_file,
        chunk_size=args.chunk_size,
        output_dir=args.output_dir,
        output_file=args.output_file,
        include_fees=args.include_fees,
    ) as pipeline:
        return await pipeline.run(write_output=not args.dry_run)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        setup_logging(args.log_level)
        logging.getLogger().setLevel(args.log_level)

    try:
        report = asyncio.run(run(args))
    except TVLError as e:
        logger.error(f"TVL run failed: {e}", exc_info=True)
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error during TVL run: {e}")
        return 1

    if args.breakdown:
        log_breakdown(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
