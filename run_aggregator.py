#!/usr/bin/env python3
"""
Command-line script to run one aggregation and print the JSON payload.

Usage:
    python run_aggregator.py directory
    python run_aggregator.py ranking --year 2023
    python run_aggregator.py ranking --categories Engineering Law -o colleges.json
    python run_aggregator.py ranking --workers 4 --verbose
"""

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from institution_aggregator.config import get_settings
from institution_aggregator.main import InstitutionAggregator, configure_logging
from institution_aggregator.sources import RANKING_CATEGORIES


def main():
    parser = argparse.ArgumentParser(
        description="Aggregate institution listings from external ranking pages"
    )
    parser.add_argument(
        "family",
        choices=["directory", "ranking"],
        help="Source family to aggregate"
    )
    parser.add_argument(
        "--year", "-y",
        help="Ranking year (ranking family only)"
    )
    parser.add_argument(
        "--categories", "-c",
        nargs="+",
        default=list(RANKING_CATEGORIES),
        help="Ranking categories to fetch (default: all)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Concurrent fetches (default: AGGREGATOR_MAX_WORKERS or 1)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output JSON file (default: print to stdout)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings, level=logging.DEBUG if args.verbose else None)

    aggregator = InstitutionAggregator(settings=settings, max_workers=args.workers)

    if args.family == "directory":
        listing = aggregator.aggregate_directory()
    else:
        listing = aggregator.aggregate_rankings(args.year, args.categories)

    # ensure_ascii=False keeps institution names readable
    output = json.dumps(listing.model_dump(), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Saved {listing.total} entries to: {args.output} "
              f"({len(listing.errors)} failed sources)")
    else:
        print(output)


if __name__ == "__main__":
    main()
