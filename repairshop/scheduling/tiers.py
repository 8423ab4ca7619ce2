"""
Occupancy tier classification.

Day totals and single-slot counts use separate threshold tables. A day
holds up to nine slots, so its thresholds sit higher than those of one
slot. Always classify a day total with ``classify_day`` and a slot count
with ``classify_slot``.

    count           day tier    slot tier
    0-1             idle        idle
    2-3             idle        normal
    4-6             normal      busy
    7+              busy        busy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from repairshop.config import settings


class OccupancyTier(str, Enum):
    IDLE = "idle"
    NORMAL = "normal"
    BUSY = "busy"


TIER_LABELS: dict[str, str] = {
    OccupancyTier.IDLE.value: "空闲",
    OccupancyTier.NORMAL.value: "一般",
    OccupancyTier.BUSY.value: "繁忙",
}

UNKNOWN_TIER_LABEL = "未知"


@dataclass(frozen=True)
class TierThresholds:
    """``count >= busy_at`` is busy, ``count >= normal_at`` is normal, else idle."""
    busy_at: int
    normal_at: int

    def __post_init__(self) -> None:
        if self.normal_at < 1 or self.busy_at <= self.normal_at:
            raise ValueError(
                f"Thresholds must satisfy busy_at > normal_at >= 1, "
                f"got busy_at={self.busy_at}, normal_at={self.normal_at}"
            )


DAY_THRESHOLDS = TierThresholds(
    busy_at=settings.thresholds.day_busy_at,
    normal_at=settings.thresholds.day_normal_at,
)

SLOT_THRESHOLDS = TierThresholds(
    busy_at=settings.thresholds.slot_busy_at,
    normal_at=settings.thresholds.slot_normal_at,
)


def classify(count: int, thresholds: TierThresholds) -> OccupancyTier:
    if count >= thresholds.busy_at:
        return OccupancyTier.BUSY
    if count >= thresholds.normal_at:
        return OccupancyTier.NORMAL
    return OccupancyTier.IDLE


def classify_day(total: int) -> OccupancyTier:
    """Tier for the number of bookings across a whole business day."""
    return classify(total, DAY_THRESHOLDS)


def classify_slot(count: int) -> OccupancyTier:
    """Tier for the number of bookings inside one one-hour slot."""
    return classify(count, SLOT_THRESHOLDS)


def tier_label(tier: Union[OccupancyTier, str]) -> str:
    value = tier.value if isinstance(tier, OccupancyTier) else tier
    return TIER_LABELS.get(value, UNKNOWN_TIER_LABEL)
