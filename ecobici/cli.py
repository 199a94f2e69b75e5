"""
Command line entry point

Fetches a dataset and writes it to a CSV file:

    ecobici users 2024 --month 3 --enrich -o usuarios.csv
    ecobici trips 2024 3
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import EcobiciError
from .trips import fetch_trips
from .users import fetch_users

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog="ecobici",
        description="Download Ecobici open data (Buenos Aires bike share)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="dataset", required=True)

    users = subparsers.add_parser("users", help="Yearly user registry")
    users.add_argument("year", type=int, help="Dataset year")
    users.add_argument(
        "--month",
        type=int,
        default=None,
        help="Registration month to keep (default: whole year)",
    )
    users.add_argument(
        "--enrich",
        action="store_true",
        help="Add age bracket, time of day and date label columns",
    )
    users.add_argument("-o", "--output", type=Path, default=None, help="Output CSV path")

    trips = subparsers.add_parser("trips", help="Trips of one month")
    trips.add_argument("year", type=int, help="Dataset year")
    trips.add_argument("month", type=int, help="Month of the trip origin")
    trips.add_argument("-o", "--output", type=Path, default=None, help="Output CSV path")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        if args.dataset == "users":
            df = fetch_users(args.year, month=args.month, enrich=args.enrich)
            default_name = f"usuarios_{args.year}.csv"
        else:
            df = fetch_trips(args.year, args.month)
            default_name = f"recorridos_{args.year}_{args.month:02d}.csv"
    except EcobiciError as e:
        logger.error(f"Fetch failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = args.output or Path(default_name)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index=False)

    logger.info(f"Wrote {len(df)} rows to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
