"""Command line entry point for Common Ground."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.exceptions import CommonGroundError, PolicyError
from .core.formatting import WEEKDAY_NAMES, format_slots
from .core.importer import load_events
from .core.logging_config import configure_logging
from .core.policy import PolicyStore
from .core.slot_finder import find_available_slots

LOGGER = logging.getLogger("common_ground.main")

EXIT_OK = 0
EXIT_CRASH = 1
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="common-ground",
        description="Find open meeting slots from a working-hours policy and busy calendar events.",
    )
    parser.add_argument("--events", required=True, type=Path, help="JSON events listing (provider 'items' format)")
    parser.add_argument("--policy", type=Path, help="Policy JSON file (defaults to the stored policy)")
    parser.add_argument("--start-date", type=date.fromisoformat, help="Override the search start date (YYYY-MM-DD)")
    parser.add_argument("--timezone", help="IANA zone used to read event times (defaults to the local zone)")
    parser.add_argument("--lang", choices=sorted(WEEKDAY_NAMES), default="en", help="Weekday names language")
    parser.add_argument("--json", action="store_true", help="Print slots as JSON instead of text")
    parser.add_argument("--verbose", action="store_true", help="Also log to stderr")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.policy is not None:
        if not args.policy.exists():
            raise PolicyError(f"Policy file not found: {args.policy}")
        store = PolicyStore(args.policy)
    else:
        store = PolicyStore()
    policy = store.load()
    if args.start_date is not None:
        policy = policy.with_start_date(args.start_date)

    tz = None
    if args.timezone:
        try:
            tz = ZoneInfo(args.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise CommonGroundError(f"Unknown timezone: {args.timezone}") from exc

    events = load_events(args.events)
    slots = find_available_slots(policy, events, tz)

    if args.json:
        payload = [
            {"date": slot.date.isoformat(), "start": slot.start, "end": slot.end}
            for slot in slots
        ]
        print(json.dumps(payload, indent=2))
    elif slots:
        print(format_slots(slots, args.lang))

    if len(slots) < policy.num_slots_required:
        print(
            f"Only {len(slots)} of {policy.num_slots_required} requested slots are available.",
            file=sys.stderr,
        )
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, console=args.verbose)
    LOGGER.info("Starting Common Ground", extra={"event": "app_start"})
    try:
        exit_code = run(args)
    except CommonGroundError as exc:
        LOGGER.error("Input rejected: %s", exc, extra={"event": "app_input_error"})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except Exception:
        LOGGER.exception("Fatal error during application execution", extra={"event": "app_crash"})
        return EXIT_CRASH
    LOGGER.info("Common Ground exited", extra={"event": "app_exit", "code": exit_code})
    return exit_code
