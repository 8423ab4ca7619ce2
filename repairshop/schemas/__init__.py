from repairshop.schemas.occupancy_schema import DayOccupancy
from repairshop.schemas.order_schema import (
    GuitarType,
    OrderFilter,
    OrderStatus,
    RepairOrder,
    status_label,
)

__all__ = [
    "DayOccupancy",
    "GuitarType",
    "OrderFilter",
    "OrderStatus",
    "RepairOrder",
    "status_label",
]
