"""
Admin order board: the in-memory order list behind the dashboard.

Status changes are optimistic. The board shows the new status at once,
writes it to the store, and rolls back if the write fails. A confirmed
change only refreshes the status counters; calendar occupancy is not
recomputed, so it can lag behind a change to or from ``cancelled`` until
the calendar is reloaded.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from repairshop.orders.status_update import StatusUpdateMachine, StatusUpdateTrigger
from repairshop.schemas.order_schema import OrderFilter, OrderStatus, RepairOrder
from repairshop.store.base import OrderStore, OrderWriteResult

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset({OrderStatus.CONFIRMED, OrderStatus.IN_PROGRESS})


@dataclass(frozen=True)
class StatusDistribution:
    """Dashboard counters. ``active`` covers confirmed and in-progress orders."""
    pending: int = 0
    active: int = 0
    completed: int = 0
    total: int = 0


def count_statuses(orders: list[RepairOrder]) -> StatusDistribution:
    return StatusDistribution(
        pending=sum(1 for o in orders if o.status == OrderStatus.PENDING),
        active=sum(1 for o in orders if o.status in ACTIVE_STATUSES),
        completed=sum(1 for o in orders if o.status == OrderStatus.COMPLETED),
        total=len(orders),
    )


@dataclass(frozen=True)
class StatusChange:
    """Outcome of ``StatusBoard.change_status`` as shown to the admin."""
    order_id: str
    success: bool
    displayed_status: OrderStatus
    error: Optional[str] = None
    machine: Optional[StatusUpdateMachine] = None


@dataclass(frozen=True)
class BatchUpdateReport:
    matched: int = 0
    succeeded: int = 0
    failed: int = 0
    failed_ids: list[str] = field(default_factory=list)


class StatusBoard:
    """Holds the currently listed orders and applies status changes to them."""

    def __init__(self, store: OrderStore, orders: Optional[list[RepairOrder]] = None) -> None:
        self._store = store
        self._orders: dict[str, RepairOrder] = {o.id: o for o in orders or []}
        self._distribution = count_statuses(list(self._orders.values()))

    @property
    def orders(self) -> list[RepairOrder]:
        return list(self._orders.values())

    def get(self, order_id: str) -> Optional[RepairOrder]:
        return self._orders.get(order_id)

    def distribution(self) -> StatusDistribution:
        return self._distribution

    async def reload(self, order_filter: Optional[OrderFilter] = None) -> None:
        """Replace the listed orders with a fresh query. StoreError propagates."""
        orders = await self._store.query_orders(order_filter or OrderFilter())
        self._orders = {o.id: o for o in orders}
        self._distribution = count_statuses(orders)
        logger.info("Order board loaded %d orders", len(orders))

    def filter_by_phone(self, fragment: str) -> list[RepairOrder]:
        """Orders whose phone number contains ``fragment``."""
        fragment = fragment.strip()
        if not fragment:
            return self.orders
        return [o for o in self._orders.values() if fragment in o.customer_phone]

    def _replace(self, order_id: str, **update) -> None:
        """Update a listed order; no-op if a reload has dropped it meanwhile."""
        order = self._orders.get(order_id)
        if order is not None:
            self._orders[order_id] = order.model_copy(update=update)

    def _displayed(self, order_id: str, fallback: OrderStatus) -> OrderStatus:
        order = self._orders.get(order_id)
        return order.status if order is not None else fallback

    async def change_status(
        self,
        order_id: str,
        new_status: str,
        admin_notes: Optional[str] = None,
    ) -> StatusChange:
        """
        Optimistically change one order's status.

        The write is awaited without holding the board, so the order may be
        reloaded away or changed again before the store answers. A failed
        write only rolls back while the board still shows this change's
        value; a later change that has since been applied is left alone.

        Raises:
            KeyError: If the order is not on the board.
            ValueError: If ``new_status`` is not a known status.
        """
        if order_id not in self._orders:
            raise KeyError(f"Order {order_id} is not on the board")
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValueError(f"Invalid status: {new_status!r}") from None

        previous = self._orders[order_id].status
        if target == previous:
            return StatusChange(order_id=order_id, success=True, displayed_status=previous)

        machine = StatusUpdateMachine(order_id, previous, target)
        self._replace(order_id, status=machine.displayed_status)

        try:
            result: OrderWriteResult = await self._store.update_order_status(
                order_id, target, admin_notes
            )
        except Exception as exc:
            logger.exception("Status write for %s raised", order_id)
            result = OrderWriteResult(success=False, error=str(exc))

        if result.success:
            machine.transition(StatusUpdateTrigger.WRITE_SUCCEEDED)
            if admin_notes is not None:
                self._replace(order_id, admin_notes=admin_notes)
        else:
            machine.transition(StatusUpdateTrigger.WRITE_FAILED, error=result.error)
            current = self._orders.get(order_id)
            if current is not None and current.status == target:
                self._replace(order_id, status=machine.displayed_status)
                logger.warning(
                    "Rolled back order %s to %s: %s", order_id, previous.value, result.error
                )
            else:
                logger.warning(
                    "Status write for %s failed; board no longer shows it: %s",
                    order_id, result.error,
                )
        self._distribution = count_statuses(self.orders)

        return StatusChange(
            order_id=order_id,
            success=result.success,
            displayed_status=self._displayed(order_id, machine.displayed_status),
            error=machine.error,
            machine=machine,
        )

    async def delete_order(self, order_id: str) -> OrderWriteResult:
        """
        Delete a cancelled order from the store and the board.

        Raises:
            KeyError: If the order is not on the board.
            ValueError: If the order is not cancelled.
        """
        order = self._orders.get(order_id)
        if order is None:
            raise KeyError(f"Order {order_id} is not on the board")
        if order.status != OrderStatus.CANCELLED:
            raise ValueError(
                f"Only cancelled orders can be deleted, {order_id} is {order.status.value}"
            )

        result = await self._store.delete_order(order_id)
        if result.success:
            self._orders.pop(order_id, None)
            self._distribution = count_statuses(self.orders)
        else:
            logger.warning("Delete of order %s failed: %s", order_id, result.error)
        return result


async def batch_update_status(
    store: OrderStore,
    status_from: str,
    status_to: str,
    day: Optional[date] = None,
) -> BatchUpdateReport:
    """
    Move every order in ``status_from`` (optionally on one date) to ``status_to``.

    Writes are issued one at a time; failures are counted, not retried.
    StoreError from the initial query propagates.
    """
    source, target = OrderStatus(status_from), OrderStatus(status_to)
    if source == target:
        raise ValueError("Batch update needs two different statuses")

    orders = await store.query_orders(
        OrderFilter(status=source, start_date=day, end_date=day)
    )
    succeeded, failed_ids = 0, []
    for order in orders:
        result = await store.update_order_status(order.id, target)
        if result.success:
            succeeded += 1
        else:
            failed_ids.append(order.id)

    logger.info(
        "Batch %s -> %s: %d matched, %d updated, %d failed",
        source.value, target.value, len(orders), succeeded, len(failed_ids),
    )
    return BatchUpdateReport(
        matched=len(orders),
        succeeded=succeeded,
        failed=len(failed_ids),
        failed_ids=failed_ids,
    )
