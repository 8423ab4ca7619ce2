"""
Availability aggregation over repair orders.

Turns a collection of orders into per-day and per-slot booking counts.
Every call is a pure function of its input: nothing is cached between
calls, and the caller owns the returned mapping.

Cancelled orders free their slot and are never counted. Orders without an
appointment date or with a missing/malformed slot label are excluded and
reported through the logger rather than counted under a bogus key.
"""

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from repairshop.scheduling.slot_catalog import is_valid_slot_label
from repairshop.schemas.occupancy_schema import DayOccupancy
from repairshop.schemas.order_schema import OrderStatus, RepairOrder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MalformedOrder:
    """An order excluded from counting, with the reason."""
    order_id: str
    reason: str


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _malformed_reason(order: RepairOrder) -> str:
    if order.appointment_date is None:
        return "missing appointment_date"
    if not order.appointment_time:
        return "missing appointment_time"
    if not is_valid_slot_label(order.appointment_time):
        return f"malformed appointment_time {order.appointment_time!r}"
    return ""


def partition_orders(
    orders: Iterable[RepairOrder],
) -> tuple[list[RepairOrder], list[MalformedOrder]]:
    """Split orders into countable ones and ones with broken appointment fields."""
    valid: list[RepairOrder] = []
    malformed: list[MalformedOrder] = []
    for order in orders:
        reason = _malformed_reason(order)
        if reason:
            malformed.append(MalformedOrder(order_id=order.id, reason=reason))
        else:
            valid.append(order)
    return valid, malformed


def _countable(orders: Iterable[RepairOrder], start: date, end: date) -> list[RepairOrder]:
    """Non-cancelled, well-formed orders with an appointment in [start, end]."""
    active = [o for o in orders if o.status != OrderStatus.CANCELLED]
    valid, malformed = partition_orders(active)
    for bad in malformed:
        logger.warning("Skipping order %s: %s", bad.order_id, bad.reason)
    return [o for o in valid if start <= o.appointment_date <= end]


def _group(orders: Iterable[RepairOrder]) -> dict[date, dict[str, int]]:
    grouped: dict[date, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for order in orders:
        grouped[order.appointment_date][order.appointment_time] += 1
    return grouped


def aggregate_month(
    orders: Iterable[RepairOrder], year: int, month: int
) -> dict[date, DayOccupancy]:
    """
    Count bookings per day and per slot for one calendar month.

    Only dates with at least one booking appear in the result. Callers
    must read a missing date as a count of 0.
    """
    start, end = month_bounds(year, month)
    grouped = _group(_countable(orders, start, end))
    result = {
        day: DayOccupancy.from_slot_counts(day, slots)
        for day, slots in sorted(grouped.items())
    }
    logger.debug("Aggregated %d booked days for %04d-%02d", len(result), year, month)
    return result


def aggregate_day(orders: Iterable[RepairOrder], day: date) -> DayOccupancy:
    """Per-slot bookings for a single date; empty when nothing is booked."""
    grouped = _group(_countable(orders, day, day))
    if day not in grouped:
        return DayOccupancy.empty(day)
    return DayOccupancy.from_slot_counts(day, grouped[day])
