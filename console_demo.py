"""
Offline console demo: runs the calendar and slot picker without a hosted store.

Seeds an in-memory store with a deterministic month of repair orders and
drives the real aggregator, tier classifier, loader, and optimistic status
board against it. No network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario slots
    python console_demo.py --scenario rollback
"""

import argparse
import asyncio
import random
from datetime import date, timedelta
from typing import Optional

from repairshop.config import settings
from repairshop.orders.board import StatusBoard
from repairshop.scheduling.calendar_view import (
    CalendarCell,
    SlotCell,
    SlotPicker,
    build_admin_schedule,
    build_month_calendar,
    build_slot_detail,
    build_slot_picker,
)
from repairshop.scheduling.loader import AvailabilityLoader
from repairshop.scheduling.slot_catalog import REJECTION_MESSAGES, generate_time_slots, is_workday
from repairshop.scheduling.tiers import OccupancyTier, tier_label
from repairshop.schemas.occupancy_schema import DayOccupancy
from repairshop.schemas.order_schema import (
    GuitarType,
    OrderFilter,
    OrderStatus,
    RepairOrder,
    guitar_type_label,
    status_label,
)
from repairshop.store.base import OrderWriteResult
from repairshop.store.memory import InMemoryOrderStore

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

TIER_COLORS = {
    OccupancyTier.IDLE: GREEN,
    OccupancyTier.NORMAL: YELLOW,
    OccupancyTier.BUSY: RED,
}

# Demo data generation parameters
DEMO_SEED = 42
MAX_ORDERS_PER_DAY = 9
CANCELLATION_PROBABILITY = 0.1


def _tier_text(tier: Optional[OccupancyTier]) -> str:
    if tier is None:
        return f"{DIM}休息日{RESET}"
    return f"{TIER_COLORS[tier]}{tier_label(tier)}{RESET}"


def render_month(cells: list[CalendarCell], year: int, month: int) -> str:
    """Month grid, one row per week, Monday first."""
    lines = [f"{BOLD}{year}年{month}月{RESET}", "  ".join(f"{d:^10}" for d in "一二三四五六日")]
    row = [" " * 10] * cells[0].date.weekday()
    for cell in cells:
        text = f"{cell.date.day:>2} {cell.total}单"
        row.append(f"{text:<7}{_tier_text(cell.tier)}")
        if len(row) == 7:
            lines.append("  ".join(row))
            row = []
    if row:
        lines.append("  ".join(row))
    return "\n".join(lines)


def render_slots(day: date, slots: list[SlotCell], total: int) -> str:
    lines = [f"{BOLD}{day} 时间段详情（共{total}单）{RESET}"]
    for slot in slots:
        lines.append(f"  {slot.label}  {slot.count}单  {_tier_text(slot.tier)}")
    return "\n".join(lines)


def render_picker(picker: SlotPicker) -> str:
    if picker.rejection is not None:
        return f"{picker.date}: {REJECTION_MESSAGES[picker.rejection]}"
    total = sum(slot.count for slot in picker.slots)
    return render_slots(picker.date, picker.slots, total)


def describe_order(order: RepairOrder, status: Optional[OrderStatus] = None) -> str:
    """One-line order summary, e.g. ``Order RO-1 电吉他 2024-06-10 09:00-10:00: 待确认``."""
    guitar = guitar_type_label(order.guitar_type) if order.guitar_type else "-"
    return (
        f"Order {order.id} {guitar} {order.appointment_date} {order.appointment_time}: "
        f"{status_label(status or order.status)}"
    )


def seed_demo_orders(store: InMemoryOrderStore, year: int, month: int) -> None:
    """Fill ``store`` with a reproducible month of bookings on workdays."""
    rng = random.Random(DEMO_SEED)
    labels = generate_time_slots()
    statuses = [s for s in OrderStatus if s != OrderStatus.CANCELLED]
    guitar_types = list(GuitarType)
    day = date(year, month, 1)
    while day.month == month:
        if is_workday(day):
            for _ in range(rng.randint(0, MAX_ORDERS_PER_DAY)):
                cancelled = rng.random() < CANCELLATION_PROBABILITY
                store.insert(
                    appointment_date=day,
                    appointment_time=rng.choice(labels),
                    status=OrderStatus.CANCELLED if cancelled else rng.choice(statuses),
                    customer_phone=f"138{rng.randint(0, 99999999):08d}",
                    guitar_type=rng.choice(guitar_types).value,
                    problem_description="Demo order",
                )
        day += timedelta(days=1)


class _FlakyStore(InMemoryOrderStore):
    """Rejects every status write, to show the rollback path."""

    async def update_order_status(self, order_id, status, admin_notes=None):
        await asyncio.sleep(0)
        return OrderWriteResult(success=False, error="Store unavailable (demo)")


class ConsoleCalendar:
    """Drives the availability views against a seeded in-memory store."""

    def __init__(self, today: Optional[date] = None) -> None:
        self.today = today or date.today()
        self.store = InMemoryOrderStore()
        seed_demo_orders(self.store, self.today.year, self.today.month)
        self.loader = AvailabilityLoader(self.store)

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    async def show_month(self) -> dict[date, DayOccupancy]:
        year, month = self.today.year, self.today.month
        result = await self.loader.load_month(year, month)
        self.system_log(f"Request {result.token}: {len(result.days)} booked days")
        print(render_month(build_month_calendar(result.days, year, month), year, month))
        return result.days

    async def show_day(self, day: date) -> None:
        result = await self.loader.load_day(day)
        occupancy = result.days[day]
        print(render_slots(day, build_slot_detail(occupancy), occupancy.total))
        print(f"\n{BOLD}Admin schedule (no lunch slot){RESET}")
        print(render_slots(day, build_admin_schedule(occupancy), occupancy.total))

    async def show_picker(self, day: date) -> None:
        result = await self.loader.load_day(day)
        print(render_picker(build_slot_picker(day, result.days[day], self.today)))

    async def show_rollback(self) -> None:
        orders = await self.store.query_orders(OrderFilter(status=OrderStatus.PENDING))
        if not orders:
            self.system_log("No pending orders to change")
            return
        flaky = _FlakyStore(orders)
        board = StatusBoard(flaky, orders)
        order: RepairOrder = orders[0]
        print(describe_order(order))
        change = await board.change_status(order.id, OrderStatus.CONFIRMED.value)
        self.system_log(f"Update trace: {' -> '.join(change.machine.get_state_trace())}")
        print(
            f"{describe_order(order, change.displayed_status)} "
            f"{RED}({change.error}){RESET}"
        )

    def run_scenario(self, scenario: str) -> None:
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.shop.name} - Scenario: {scenario}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        asyncio.run(self._run(scenario))

    async def _run(self, scenario: str) -> None:
        if scenario == "month":
            days = await self.show_month()
            if days:
                busiest = max(days.values(), key=lambda d: d.total)
                print()
                await self.show_day(busiest.date)
        elif scenario == "slots":
            for offset in range(7):
                await self.show_picker(self.today + timedelta(days=offset))
                print()
        elif scenario == "rollback":
            await self.show_rollback()
        else:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline calendar demo")
    parser.add_argument(
        "--scenario",
        choices=["month", "slots", "rollback"],
        default="month",
        help="Which view to demonstrate",
    )
    args = parser.parse_args()
    ConsoleCalendar().run_scenario(args.scenario)


if __name__ == "__main__":
    main()
