"""
View models for the admin month calendar, the slot detail panel, and the
booking form's slot picker.

These are plain data: a renderer (web template or console) turns them into
cells. Day cells are tiered with day thresholds, slot cells with slot
thresholds.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from repairshop.scheduling.slot_catalog import (
    ADMIN_HOURS,
    PUBLIC_HOURS,
    BusinessHours,
    DateRejection,
    check_bookable_date,
    generate_time_slots,
    is_workday,
)
from repairshop.scheduling.tiers import OccupancyTier, classify_day, classify_slot
from repairshop.schemas.occupancy_schema import DayOccupancy


@dataclass(frozen=True)
class CalendarCell:
    """One day in the admin month grid."""
    date: date
    is_workday: bool
    total: int
    tier: Optional[OccupancyTier]

    @property
    def weekday(self) -> int:
        return self.date.weekday()


@dataclass(frozen=True)
class SlotCell:
    """One slot with its booking count and slot-level tier."""
    label: str
    count: int
    tier: OccupancyTier


@dataclass(frozen=True)
class SlotPicker:
    """Slots offered for a date in the booking form.

    ``slots`` is empty whenever ``rejection`` is set.
    """
    date: date
    rejection: Optional[DateRejection] = None
    slots: list[SlotCell] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.rejection is None


def build_month_calendar(
    occupancy: dict[date, DayOccupancy],
    year: int,
    month: int,
    hours: BusinessHours = PUBLIC_HOURS,
) -> list[CalendarCell]:
    """
    Cells for every day of the month.

    Weekend cells still report their booking count (legacy data or admin
    overrides) but carry no tier.
    """
    days_in_month = calendar.monthrange(year, month)[1]
    cells = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        day_occupancy = occupancy.get(day)
        total = day_occupancy.total if day_occupancy else 0
        workday = is_workday(day, hours)
        cells.append(CalendarCell(
            date=day,
            is_workday=workday,
            total=total,
            tier=classify_day(total) if workday else None,
        ))
    return cells


def build_slot_detail(
    day_occupancy: DayOccupancy, hours: BusinessHours = PUBLIC_HOURS
) -> list[SlotCell]:
    """Per-slot counts for the admin detail panel of one date."""
    return [
        SlotCell(label=label, count=day_occupancy.count(label),
                 tier=classify_slot(day_occupancy.count(label)))
        for label in generate_time_slots(hours)
    ]


def build_admin_schedule(day_occupancy: DayOccupancy) -> list[SlotCell]:
    """Per-slot counts over the admin split catalog (no lunch slot)."""
    return build_slot_detail(day_occupancy, ADMIN_HOURS)


def build_slot_picker(
    day: date,
    day_occupancy: DayOccupancy,
    today: date,
    hours: BusinessHours = PUBLIC_HOURS,
    window_days: Optional[int] = None,
) -> SlotPicker:
    """Slots the booking form may offer for ``day``.

    A rejected date (past, beyond the booking window, or not a workday)
    offers nothing, whatever the occupancy says.
    """
    rejection = check_bookable_date(day, today, hours, window_days)
    if rejection is not None:
        return SlotPicker(date=day, rejection=rejection)
    return SlotPicker(date=day, slots=build_slot_detail(day_occupancy, hours))
