"""
Hosted order store backed by Supabase's REST (PostgREST) interface.

Reads and writes the ``guitar_repairs`` table directly over HTTPS with the
project's anon key, the same access the booking site has in the browser.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from repairshop.config import StoreConfig, settings
from repairshop.schemas.order_schema import OrderFilter, OrderStatus, RepairOrder
from repairshop.store.base import OrderWriteResult, StoreError
from repairshop.utils import format_date

logger = logging.getLogger(__name__)


def _json_value(value: Any) -> Any:
    """Dates and enums as the strings PostgREST expects."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return format_date(value)
    return value


class SupabaseOrderStore:
    """Order store talking to ``{url}/rest/v1/{table}``."""

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or settings.store
        if not self._config.is_configured:
            raise ValueError("Supabase store requires SUPABASE_URL and SUPABASE_ANON_KEY")
        self._transport = transport

    @property
    def _table_path(self) -> str:
        return f"{self.REST_PATH}/{self._config.orders_table}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers={
                "apikey": self._config.anon_key,
                "Authorization": f"Bearer {self._config.anon_key}",
            },
            timeout=self._config.timeout_sec,
            transport=self._transport,
        )

    @staticmethod
    def _query_params(order_filter: OrderFilter) -> list[tuple[str, str]]:
        params = [("select", "*"), ("order", "created_at.desc")]
        if order_filter.status is not None:
            params.append(("status", f"eq.{order_filter.status.value}"))
        if order_filter.start_date is not None:
            params.append(("appointment_date", f"gte.{format_date(order_filter.start_date)}"))
        if order_filter.end_date is not None:
            params.append(("appointment_date", f"lte.{format_date(order_filter.end_date)}"))
        return params

    @staticmethod
    def _parse_rows(rows: list[dict[str, Any]]) -> list[RepairOrder]:
        orders = []
        for row in rows:
            try:
                orders.append(RepairOrder.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable order row %s: %d validation error(s)",
                    row.get("id"), exc.error_count(),
                )
        return orders

    async def query_orders(self, order_filter: OrderFilter) -> list[RepairOrder]:
        params = self._query_params(order_filter)
        try:
            async with self._client() as client:
                response = await client.get(self._table_path, params=params)
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Order query failed: %s %s", exc.response.status_code, exc.response.text
            )
            raise StoreError(f"Order query failed with HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Order query failed: %s", exc)
            raise StoreError(f"Order query failed: {exc}") from exc
        except ValueError as exc:
            raise StoreError("Order query returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise StoreError("Order query returned an unexpected payload")
        orders = self._parse_rows(rows)
        logger.debug("Fetched %d orders (%d rows)", len(orders), len(rows))
        return orders

    async def _write(
        self, action: str, method: str, **request: Any
    ) -> tuple[Optional[list[RepairOrder]], Optional[str]]:
        """Send one write returning the affected rows, or ``(None, error)``."""
        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    self._table_path,
                    headers={"Prefer": "return=representation"},
                    **request,
                )
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "%s failed: %s %s", action, exc.response.status_code, exc.response.text
            )
            return None, f"HTTP {exc.response.status_code}"
        except httpx.HTTPError as exc:
            logger.error("%s failed: %s", action, exc)
            return None, str(exc)
        except ValueError:
            return None, f"Invalid JSON in {method} response"
        return (self._parse_rows(rows) if isinstance(rows, list) else []), None

    async def create_order(self, fields: dict[str, Any]) -> OrderWriteResult:
        payload = {key: _json_value(value) for key, value in fields.items()}
        payload.setdefault("status", OrderStatus.PENDING.value)
        created, error = await self._write("Order insert", "POST", json=payload)
        if error is not None:
            return OrderWriteResult(success=False, error=error)
        if not created:
            return OrderWriteResult(success=False, error="Order insert returned no row")
        logger.info(
            "Repair order created: %s on %s at %s",
            created[0].id, created[0].appointment_date, created[0].appointment_time,
        )
        return OrderWriteResult(success=True, order=created[0])

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_notes: Optional[str] = None,
    ) -> OrderWriteResult:
        payload: dict[str, Any] = {"status": OrderStatus(status).value}
        if admin_notes is not None:
            payload["admin_notes"] = admin_notes

        updated, error = await self._write(
            f"Status update for {order_id}", "PATCH",
            params={"id": f"eq.{order_id}"}, json=payload,
        )
        if error is not None:
            return OrderWriteResult(success=False, error=error)
        if not updated:
            return OrderWriteResult(success=False, error=f"Order {order_id} not found.")
        logger.info("Order %s status set to %s", order_id, payload["status"])
        return OrderWriteResult(success=True, order=updated[0])

    async def delete_order(self, order_id: str) -> OrderWriteResult:
        deleted, error = await self._write(
            f"Delete of {order_id}", "DELETE", params={"id": f"eq.{order_id}"}
        )
        if error is not None:
            return OrderWriteResult(success=False, error=error)
        if not deleted:
            return OrderWriteResult(success=False, error=f"Order {order_id} not found.")
        logger.info("Order %s deleted", order_id)
        return OrderWriteResult(success=True, order=deleted[0])
