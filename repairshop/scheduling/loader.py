"""
Availability loader: fetches orders from the record store and aggregates them.

Calendar navigation can fire several loads in quick succession. Each load
gets a request token; starting a new load cancels the in-flight query, and
any response whose token is no longer the latest comes back marked stale
with no data, so a slow response can never overwrite a newer view.

Usage:
    loader = AvailabilityLoader(store)
    result = await loader.load_month(2024, 6)
    if result.success:
        render(result.days)
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from repairshop.logging_context import get_request_logger, request_scope
from repairshop.scheduling.aggregator import aggregate_day, aggregate_month, month_bounds
from repairshop.schemas.occupancy_schema import DayOccupancy
from repairshop.schemas.order_schema import OrderFilter, RepairOrder
from repairshop.store.base import OrderStore, StoreError

logger = get_request_logger(__name__)


class RequestSequencer:
    """Issues increasing request tokens; only the latest one is current."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def invalidate(self) -> None:
        """Make every token issued so far stale."""
        self._latest += 1

    def is_current(self, token: int) -> bool:
        return token == self._latest


@dataclass(frozen=True)
class OccupancyLoad:
    """Result of one load. ``days`` is empty unless ``success`` is True."""
    token: int
    success: bool
    days: dict[date, DayOccupancy] = field(default_factory=dict)
    error: Optional[str] = None
    stale: bool = False


class AvailabilityLoader:
    """Loads month and day occupancy with request sequencing and cancellation."""

    def __init__(self, store: OrderStore) -> None:
        self._store = store
        self._sequencer = RequestSequencer()
        self._inflight: Optional[asyncio.Future] = None

    @property
    def sequencer(self) -> RequestSequencer:
        return self._sequencer

    async def load_month(self, year: int, month: int) -> OccupancyLoad:
        """Occupancy for every booked day of a month (admin calendar)."""
        start, end = month_bounds(year, month)
        return await self._load(
            OrderFilter(start_date=start, end_date=end),
            lambda orders: aggregate_month(orders, year, month),
        )

    async def load_day(self, day: date) -> OccupancyLoad:
        """Occupancy of a single date (slot picker); ``days`` always holds ``day``."""
        return await self._load(
            OrderFilter(start_date=day, end_date=day),
            lambda orders: {day: aggregate_day(orders, day)},
        )

    def cancel(self) -> None:
        """Abort the in-flight load, e.g. when the user leaves the view."""
        self._sequencer.invalidate()
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            logger.debug("Cancelled in-flight order query")

    async def _load(
        self,
        order_filter: OrderFilter,
        aggregate: Callable[[list[RepairOrder]], dict[date, DayOccupancy]],
    ) -> OccupancyLoad:
        self.cancel()
        token = self._sequencer.issue()
        with request_scope(token):
            return await self._fetch(token, order_filter, aggregate)

    async def _fetch(
        self,
        token: int,
        order_filter: OrderFilter,
        aggregate: Callable[[list[RepairOrder]], dict[date, DayOccupancy]],
    ) -> OccupancyLoad:
        query = asyncio.ensure_future(self._store.query_orders(order_filter))
        self._inflight = query
        logger.debug(
            "Request %d: querying orders %s..%s", token,
            order_filter.start_date, order_filter.end_date,
        )
        try:
            await asyncio.wait({query})
        except asyncio.CancelledError:
            query.cancel()
            raise
        finally:
            if self._inflight is query:
                self._inflight = None

        if query.cancelled() or not self._sequencer.is_current(token):
            if not query.cancelled() and query.exception() is not None:
                logger.debug("Request %d failed after being superseded", token)
            logger.info("Request %d superseded, discarding response", token)
            return OccupancyLoad(token=token, success=False, stale=True)

        exc = query.exception()
        if isinstance(exc, StoreError):
            logger.error("Request %d failed: %s", token, exc)
            return OccupancyLoad(token=token, success=False, error=str(exc))
        if exc is not None:
            raise exc

        return OccupancyLoad(token=token, success=True, days=aggregate(query.result()))
