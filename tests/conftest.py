"""Shared test fixtures and helpers."""

import asyncio
import itertools
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from repairshop.schemas.order_schema import OrderFilter, OrderStatus, RepairOrder
from repairshop.store.base import OrderWriteResult, StoreError
from repairshop.store.memory import InMemoryOrderStore

_ids = itertools.count(1)

SCENARIO_DAY = date(2024, 6, 10)  # a Monday


def make_order(
    appointment_date: Optional[date] = SCENARIO_DAY,
    appointment_time: Optional[str] = "09:00-10:00",
    status: OrderStatus = OrderStatus.PENDING,
    order_id: Optional[str] = None,
    **extra,
) -> RepairOrder:
    """Helper to create a RepairOrder with sensible defaults."""
    return RepairOrder(
        id=order_id or f"RO-{next(_ids)}",
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        status=status,
        customer_phone=extra.pop("customer_phone", "13800138000"),
        created_at=extra.pop("created_at", datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)),
        **extra,
    )


def scenario_orders() -> list[RepairOrder]:
    """Five orders on 2024-06-10, one of them cancelled."""
    return [
        make_order(status=OrderStatus.PENDING, appointment_time="09:00-10:00"),
        make_order(status=OrderStatus.CONFIRMED, appointment_time="09:00-10:00"),
        make_order(status=OrderStatus.CANCELLED, appointment_time="09:00-10:00"),
        make_order(status=OrderStatus.COMPLETED, appointment_time="11:00-12:00"),
        make_order(status=OrderStatus.DELAYED, appointment_time="11:00-12:00"),
    ]


class FailingStore(InMemoryOrderStore):
    """Store whose queries raise and whose writes are rejected."""

    def __init__(self, orders=None, query_error: bool = False, write_error: str = "HTTP 500"):
        super().__init__(orders)
        self.query_error = query_error
        self.write_error = write_error

    async def query_orders(self, order_filter: OrderFilter) -> list[RepairOrder]:
        if self.query_error:
            raise StoreError("connection refused")
        return await super().query_orders(order_filter)

    async def update_order_status(self, order_id, status, admin_notes=None):
        return OrderWriteResult(success=False, error=self.write_error)


class GatedStore(InMemoryOrderStore):
    """Store whose queries block until released, one gate per call."""

    def __init__(self, orders=None):
        super().__init__(orders)
        self.gates: list[asyncio.Event] = []
        self.cancelled = 0

    async def query_orders(self, order_filter: OrderFilter) -> list[RepairOrder]:
        gate = asyncio.Event()
        self.gates.append(gate)
        try:
            await gate.wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return await super().query_orders(order_filter)


@pytest.fixture
def store():
    return InMemoryOrderStore()


@pytest.fixture
def scenario_store():
    return InMemoryOrderStore(scenario_orders())
