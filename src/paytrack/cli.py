"""PayTrack Command Line Interface.

Pay period lookups without a running server.

Usage:
    python -m paytrack.cli period --date 2026-02-20
    python -m paytrack.cli period --offset -1
    python -m paytrack.cli periods --date 2026-01-01 --count 4
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from typing import Callable

from paytrack.calculators.periods import (
    InvalidDateError,
    format_for_storage,
    label,
    period_by_offset,
    period_containing,
    to_local_date,
    today_in_timezone,
)
from paytrack.calculators.types import PayPeriod
from paytrack.config import get_settings

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse a YYYY-MM-DD date argument."""
    return to_local_date(s)


def period_payload(period: PayPeriod) -> dict[str, str]:
    return {
        "start": format_for_storage(period.start),
        "end": format_for_storage(period.end),
        "label": label(period),
    }


class PayTrackCli:
    """PayTrack Command Line Interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m paytrack.cli",
            description="Semi-monthly pay period tools",
        )
        parser.add_argument(
            "--timezone",
            type=str,
            help="Employer timezone used when --date is omitted "
            "(default: EMPLOYER_TIMEZONE setting)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # period command
        period = subparsers.add_parser(
            "period",
            help="Show the pay period for a date and offset",
        )
        period.add_argument(
            "--date",
            type=parse_date,
            help="Reference date (YYYY-MM-DD, default: today)",
        )
        period.add_argument(
            "--offset",
            type=int,
            default=0,
            help="Periods to move from the reference date (default: 0)",
        )
        period.add_argument(
            "--json",
            action="store_true",
            help="Print JSON instead of text",
        )

        # periods command
        periods = subparsers.add_parser(
            "periods",
            help="List consecutive pay periods",
        )
        periods.add_argument(
            "--date",
            type=parse_date,
            help="Date inside the first period (YYYY-MM-DD, default: today)",
        )
        periods.add_argument(
            "--count",
            type=int,
            default=6,
            help="Number of periods; negative lists backwards (default: 6)",
        )
        periods.add_argument(
            "--json",
            action="store_true",
            help="Print JSON instead of text",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[..., int]] = {
            "period": self._cmd_period,
            "periods": self._cmd_periods,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _reference_date(self, args: argparse.Namespace) -> date:
        if args.date is not None:
            return args.date
        tz_name = args.timezone or get_settings().employer_timezone
        logger.debug("No --date given, using today in %s", tz_name)
        return today_in_timezone(tz_name)

    def _cmd_period(self, args: argparse.Namespace) -> int:
        """Show one pay period."""
        try:
            period = period_by_offset(args.offset, self._reference_date(args))
        except InvalidDateError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        payload = period_payload(period)

        if args.json:
            print(json.dumps(payload))
        else:
            print(f"{payload['label']}  ({payload['start']} to {payload['end']})")
        return 0

    def _cmd_periods(self, args: argparse.Namespace) -> int:
        """List consecutive pay periods."""
        if args.count == 0:
            print("--count must not be zero", file=sys.stderr)
            return 2

        step = 1 if args.count > 0 else -1
        period = period_containing(self._reference_date(args))
        payloads = [period_payload(period)]
        try:
            for _ in range(abs(args.count) - 1):
                period = period_by_offset(step, period.start)
                payloads.append(period_payload(period))
        except InvalidDateError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

        if args.json:
            print(json.dumps(payloads))
        else:
            for payload in payloads:
                print(f"{payload['label']}  ({payload['start']} to {payload['end']})")
        return 0


def main() -> int:
    """CLI entry point."""
    logging.basicConfig(level=get_settings().log_level)
    cli = PayTrackCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
