"""
Fixed one-hour booking slots within business hours.

Two catalogs are in use. The booking form and the admin slot detail use
the continuous public range (09:00-18:00, nine slots). The admin schedule
view uses a split range that skips the lunch hour (10:00-12:00 plus
13:00-18:00, seven slots). Both are kept as named configurations.

Usage:
    generate_time_slots(PUBLIC_HOURS)
    # ['09:00-10:00', '10:00-11:00', ..., '17:00-18:00']
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from repairshop.config import settings

logger = logging.getLogger(__name__)

SLOT_LABEL_PATTERN = re.compile(r"^(\d{2}):00-(\d{2}):00$")

MONDAY_TO_FRIDAY: frozenset[int] = frozenset({0, 1, 2, 3, 4})


@dataclass(frozen=True)
class BusinessHours:
    """Bookable hour ranges and workdays.

    ``ranges`` holds ``(start, end)`` pairs on the 24-hour clock, start
    inclusive and end exclusive. ``workdays`` uses ``date.weekday()``
    numbering (Monday=0).
    """
    name: str
    ranges: tuple[tuple[int, int], ...]
    workdays: frozenset[int] = MONDAY_TO_FRIDAY

    def __post_init__(self) -> None:
        previous_end = 0
        for start, end in self.ranges:
            if not 0 <= start < end <= 24:
                raise ValueError(f"Invalid hour range {start}-{end} in '{self.name}'")
            if start < previous_end:
                raise ValueError(f"Overlapping or unordered hour ranges in '{self.name}'")
            previous_end = end


PUBLIC_HOURS = BusinessHours(
    name="public",
    ranges=((settings.hours.start_hour, settings.hours.end_hour),),
    workdays=frozenset(settings.hours.workdays),
)

ADMIN_HOURS = BusinessHours(
    name="admin",
    ranges=((10, 12), (13, 18)),
)


class DateRejection(str, Enum):
    """Why a date cannot be offered in the booking form."""
    PAST_DATE = "past_date"
    BEYOND_WINDOW = "beyond_window"
    NON_WORKDAY = "non_workday"


REJECTION_MESSAGES: dict[DateRejection, str] = {
    DateRejection.PAST_DATE: "不能选择过去的日期",
    DateRejection.BEYOND_WINDOW: "超出可预约的日期范围",
    DateRejection.NON_WORKDAY: "维修店周末不营业，请选择工作日",
}


def format_slot_label(hour: int) -> str:
    """Label for the slot starting at ``hour``, e.g. ``9`` -> ``'09:00-10:00'``."""
    return f"{hour:02d}:00-{hour + 1:02d}:00"


def is_valid_slot_label(label: Optional[str]) -> bool:
    """Check a label is ``HH:00-HH:00`` spanning exactly one hour."""
    if not label:
        return False
    match = SLOT_LABEL_PATTERN.match(label)
    if not match:
        return False
    start, end = int(match.group(1)), int(match.group(2))
    return 0 <= start <= 23 and end == start + 1


def generate_time_slots(hours: BusinessHours = PUBLIC_HOURS) -> list[str]:
    """Ordered slot labels for one business day."""
    return [
        format_slot_label(hour)
        for start, end in hours.ranges
        for hour in range(start, end)
    ]


def is_workday(day: date, hours: BusinessHours = PUBLIC_HOURS) -> bool:
    return day.weekday() in hours.workdays


def booking_window(today: date, window_days: Optional[int] = None) -> tuple[date, date]:
    """First and last date the booking form accepts, both inclusive."""
    if window_days is None:
        window_days = settings.shop.booking_window_days
    return today, today + timedelta(days=window_days)


def check_bookable_date(
    day: date,
    today: date,
    hours: BusinessHours = PUBLIC_HOURS,
    window_days: Optional[int] = None,
) -> Optional[DateRejection]:
    """Return why ``day`` cannot be booked, or None when it can."""
    first, last = booking_window(today, window_days)
    if day < first:
        return DateRejection.PAST_DATE
    if day > last:
        return DateRejection.BEYOND_WINDOW
    if not is_workday(day, hours):
        return DateRejection.NON_WORKDAY
    return None


def is_bookable_date(
    day: date,
    today: date,
    hours: BusinessHours = PUBLIC_HOURS,
    window_days: Optional[int] = None,
) -> bool:
    return check_bookable_date(day, today, hours, window_days) is None
