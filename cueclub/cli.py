#!/usr/bin/env python3
"""
Command line front end for the pricing and conflict engines.

Usage:
    cueclub estimate --table-type premium --start 2025-12-20T19:00 --duration 1 --membership premium
    cueclub bill --start 2025-12-20T19:00 --end 2025-12-20T20:10 --rate 25 --extra 12.5
    cueclub check --bookings bookings.json --table 1 --start 2025-12-20T15:00 --duration 2

Every command prints JSON. Exit codes: 0 success, 1 error-level booking
conflict, 2 invalid input or configuration.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from cueclub.config.settings import load_settings
from cueclub.conflicts.detector import ConflictDetector
from cueclub.domain.booking import Booking
from cueclub.domain.conflict import Severity
from cueclub.exceptions import CueClubError
from cueclub.pricing.calculator import PricingEngine
from cueclub.validation.booking_request import parse_booking

EXIT_OK = 0
EXIT_CONFLICT = 1
EXIT_INVALID = 2

logger = logging.getLogger(__name__)


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cueclub", description="Snooker club pricing tools")
    parser.add_argument("--config", help="Path to pricing YAML (default: CUECLUB_CONFIG_FILE)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    estimate = sub.add_parser("estimate", help="Estimate the cost of a booking")
    rate = estimate.add_mutually_exclusive_group()
    rate.add_argument("--table-type", default=None, help="Table type (full-size, compact, premium)")
    rate.add_argument("--rate", type=float, default=None, help="Explicit hourly rate")
    estimate.add_argument("--start", type=_timestamp, required=True)
    estimate.add_argument("--duration", type=float, required=True, help="Hours")
    estimate.add_argument("--membership", default=None)

    bill = sub.add_parser("bill", help="Final bill for a completed session")
    bill.add_argument("--start", type=_timestamp, required=True)
    bill.add_argument("--end", type=_timestamp, required=True)
    bill.add_argument("--rate", type=float, required=True)
    bill.add_argument("--membership", default=None)
    bill.add_argument("--extra", type=float, default=0.0, help="Additional charges")

    check = sub.add_parser("check", help="Check a booking against existing bookings")
    check.add_argument("--bookings", required=True, help="JSON file with a list of bookings")
    check.add_argument("--table", required=True)
    check.add_argument("--start", type=_timestamp, required=True)
    check.add_argument("--duration", type=float, required=True)
    check.add_argument("--no-suggest", action="store_true", help="Skip alternative slot search")

    return parser


def _load_bookings(path: str) -> List[Booking]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("bookings", [])
    return [parse_booking(item) for item in payload]


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings(args.config)
        engine = PricingEngine(settings.pricing)

        if args.command == "estimate":
            rate = args.rate if args.rate is not None else args.table_type
            result = engine.estimate_cost(rate, args.start, args.duration, args.membership)
            print(json.dumps(result.to_dict(), indent=2))
            return EXIT_OK

        if args.command == "bill":
            result = engine.calculate_final_bill(
                args.start, args.end, args.rate, args.membership, args.extra
            )
            print(json.dumps(result.to_dict(), indent=2))
            return EXIT_OK

        existing = _load_bookings(args.bookings)
        candidate = parse_booking(
            {"table_id": args.table, "start_time": args.start.isoformat(), "duration": args.duration}
        )
        result = ConflictDetector(settings).check(candidate, existing, suggest=not args.no_suggest)
        print(json.dumps(result.to_dict(), indent=2))
        return EXIT_CONFLICT if result.severity == Severity.ERROR else EXIT_OK

    except CueClubError as e:
        logger.error(f"{args.command} failed: {e}")
        print(json.dumps({"error": str(e), "errors": getattr(e, "errors", [])}), file=sys.stderr)
        return EXIT_INVALID
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
