"""Derived occupancy values. Rebuilt on every query, never persisted."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class DayOccupancy:
    """
    Bookings on a single date, counted per slot label.

    ``total`` always equals ``sum(by_slot.values())``; construct through
    ``from_slot_counts`` to keep the two in step.
    """
    date: date
    total: int = 0
    by_slot: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.total != sum(self.by_slot.values()):
            raise ValueError(
                f"DayOccupancy total {self.total} does not match slot counts "
                f"{sum(self.by_slot.values())} for {self.date}"
            )

    @classmethod
    def from_slot_counts(cls, day: date, by_slot: dict[str, int]) -> "DayOccupancy":
        return cls(date=day, total=sum(by_slot.values()), by_slot=dict(by_slot))

    @classmethod
    def empty(cls, day: date) -> "DayOccupancy":
        return cls(date=day)

    def count(self, slot_label: str) -> int:
        """Bookings in one slot; slots without bookings count as 0."""
        return self.by_slot.get(slot_label, 0)
