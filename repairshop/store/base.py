"""Record store contract shared by the in-memory and hosted implementations."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from repairshop.schemas.order_schema import OrderFilter, OrderStatus, RepairOrder


class StoreError(Exception):
    """Raised when the record store cannot answer a query."""


@dataclass(frozen=True)
class OrderWriteResult:
    """Outcome of a single insert, status write, or delete."""
    success: bool
    order: Optional[RepairOrder] = None
    error: Optional[str] = None


class OrderStore(Protocol):
    async def query_orders(self, order_filter: OrderFilter) -> list[RepairOrder]:
        """All orders matching the filter. Raises StoreError on failure."""
        ...

    async def create_order(self, fields: dict[str, Any]) -> OrderWriteResult:
        """Insert one order row; ``order`` holds the stored row on success."""
        ...

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_notes: Optional[str] = None,
    ) -> OrderWriteResult:
        ...

    async def delete_order(self, order_id: str) -> OrderWriteResult:
        """Remove one order; ``order`` holds the deleted row on success."""
        ...
