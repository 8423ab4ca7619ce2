from repairshop.scheduling.aggregator import aggregate_day, aggregate_month, partition_orders
from repairshop.scheduling.slot_catalog import (
    ADMIN_HOURS,
    PUBLIC_HOURS,
    BusinessHours,
    generate_time_slots,
    is_workday,
)
from repairshop.scheduling.tiers import OccupancyTier, classify_day, classify_slot

__all__ = [
    "aggregate_day",
    "aggregate_month",
    "partition_orders",
    "ADMIN_HOURS",
    "PUBLIC_HOURS",
    "BusinessHours",
    "generate_time_slots",
    "is_workday",
    "OccupancyTier",
    "classify_day",
    "classify_slot",
]
