"""
In-memory order store.

Backs the console demo and the test suite. Behaves like the hosted table:
filters on appointment date range and status, newest orders first.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from repairshop.schemas.order_schema import OrderFilter, OrderStatus, RepairOrder
from repairshop.store.base import OrderWriteResult

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(order: RepairOrder) -> datetime:
    created = order.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


class InMemoryOrderStore:
    """Dict-backed store keyed by order id."""

    def __init__(self, orders: Optional[list[RepairOrder]] = None) -> None:
        self._orders: dict[str, RepairOrder] = {}
        for order in orders or []:
            self.add(order)

    def add(self, order: RepairOrder) -> RepairOrder:
        self._orders[order.id] = order
        return order

    def insert(self, **fields) -> RepairOrder:
        """Insert a new order with a generated id, status pending by default."""
        fields.setdefault("id", f"RO-{uuid.uuid4().hex[:8].upper()}")
        fields.setdefault("status", OrderStatus.PENDING)
        fields.setdefault("created_at", datetime.now(timezone.utc))
        order = RepairOrder(**fields)
        logger.info(
            "Repair order created: %s on %s at %s",
            order.id, order.appointment_date, order.appointment_time,
        )
        return self.add(order)

    def get(self, order_id: str) -> Optional[RepairOrder]:
        return self._orders.get(order_id)

    def reset(self) -> None:
        """Clear all orders. Used by test fixtures for isolation."""
        self._orders.clear()

    async def create_order(self, fields: dict[str, Any]) -> OrderWriteResult:
        try:
            order = self.insert(**fields)
        except ValidationError as exc:
            return OrderWriteResult(
                success=False, error=f"Invalid order: {exc.error_count()} error(s)"
            )
        return OrderWriteResult(success=True, order=order.model_copy())

    async def delete_order(self, order_id: str) -> OrderWriteResult:
        order = self._orders.pop(order_id, None)
        if order is None:
            return OrderWriteResult(success=False, error=f"Order {order_id} not found.")
        logger.info("Order %s deleted", order_id)
        return OrderWriteResult(success=True, order=order)

    async def query_orders(self, order_filter: OrderFilter) -> list[RepairOrder]:
        matches = [o for o in self._orders.values() if order_filter.matches(o)]
        matches.sort(key=_created_key, reverse=True)
        return [o.model_copy() for o in matches]

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_notes: Optional[str] = None,
    ) -> OrderWriteResult:
        order = self._orders.get(order_id)
        if order is None:
            return OrderWriteResult(success=False, error=f"Order {order_id} not found.")

        update: dict = {"status": OrderStatus(status)}
        if admin_notes is not None:
            update["admin_notes"] = admin_notes
        updated = order.model_copy(update=update)
        self._orders[order_id] = updated
        logger.info("Order %s status set to %s", order_id, updated.status.value)
        return OrderWriteResult(success=True, order=updated.model_copy())
