"""
Command-line entry point for the repair shop availability views.

Reads orders from the hosted Supabase store configured in the environment
(SUPABASE_URL, SUPABASE_ANON_KEY) and prints the admin month calendar,
a day's slot detail, or the booking form's slot picker. ``console`` runs
the offline demo instead and needs no credentials.

Usage:
    Month calendar:  python main.py month 2024 6
    Slot detail:     python main.py day 2024-06-10
    Slot picker:     python main.py slots 2024-06-10
    Offline demo:    python main.py console
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Optional

from repairshop.config import settings
from repairshop.utils import parse_date

logger = logging.getLogger(__name__)


async def _show(args: argparse.Namespace) -> int:
    from console_demo import render_month, render_picker, render_slots
    from repairshop.scheduling.calendar_view import (
        build_month_calendar,
        build_slot_detail,
        build_slot_picker,
    )
    from repairshop.scheduling.loader import AvailabilityLoader
    from repairshop.store.supabase import SupabaseOrderStore

    loader = AvailabilityLoader(SupabaseOrderStore())

    if args.command == "month":
        result = await loader.load_month(args.year, args.month)
    else:
        result = await loader.load_day(args.date)

    if not result.success:
        print(f"加载失败: {result.error}", file=sys.stderr)
        return 1

    if args.command == "month":
        cells = build_month_calendar(result.days, args.year, args.month)
        print(render_month(cells, args.year, args.month))
    elif args.command == "day":
        occupancy = result.days[args.date]
        print(render_slots(args.date, build_slot_detail(occupancy), occupancy.total))
    else:
        picker = build_slot_picker(args.date, result.days[args.date], date.today())
        print(render_picker(picker))
    return 0


def _run_console_mode() -> None:
    """Start the offline console demo (no credentials required)."""
    from console_demo import ConsoleCalendar

    ConsoleCalendar().run_scenario("month")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.shop.name} availability")
    sub = parser.add_subparsers(dest="command", required=True)

    month = sub.add_parser("month", help="Admin month calendar")
    month.add_argument("year", type=int)
    month.add_argument("month", type=int, choices=range(1, 13), metavar="month")

    for name, text in [("day", "Slot detail for one date"), ("slots", "Booking form slot picker")]:
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("date", type=parse_date, help="YYYY-MM-DD")

    sub.add_parser("console", help="Offline demo with generated orders")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "console":
        _run_console_mode()
        return 0

    if not settings.store.is_configured:
        logger.error("SUPABASE_URL and SUPABASE_ANON_KEY must be set; try 'console' mode")
        return 1
    return asyncio.run(_show(args))


if __name__ == "__main__":
    sys.exit(main())
