"""Tests for the Supabase REST order store, using httpx's mock transport."""

import json
from datetime import date

import httpx
import pytest

from repairshop.config import StoreConfig
from repairshop.schemas.order_schema import OrderFilter, OrderStatus
from repairshop.store.base import StoreError
from repairshop.store.supabase import SupabaseOrderStore

CONFIG = StoreConfig(url="https://demo.supabase.co/", anon_key="anon-key")

ROW = {
    "id": 17,
    "appointment_date": "2024-06-10",
    "appointment_time": "09:00-10:00",
    "status": "pending",
    "customer_phone": "13800138000",
    "guitar_type": "electric",
    "created_at": "2024-06-01T09:00:00+00:00",
    "customer_name": "extra column",
}


def _store(handler) -> SupabaseOrderStore:
    return SupabaseOrderStore(CONFIG, transport=httpx.MockTransport(handler))


class TestConstruction:
    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            SupabaseOrderStore(StoreConfig(url="", anon_key=""))


class TestQueryOrders:
    @pytest.mark.asyncio
    async def test_sends_filters_and_auth(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=[ROW])

        orders = await _store(handler).query_orders(OrderFilter(
            start_date=date(2024, 6, 1), end_date=date(2024, 6, 30), status=OrderStatus.PENDING,
        ))

        request = seen["request"]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/guitar_repairs"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"
        params = request.url.params
        assert params["order"] == "created_at.desc"
        assert params["status"] == "eq.pending"
        assert params.get_list("appointment_date") == ["gte.2024-06-01", "lte.2024-06-30"]

        assert len(orders) == 1
        assert orders[0].id == "17"
        assert orders[0].appointment_date == date(2024, 6, 10)

    @pytest.mark.asyncio
    async def test_unreadable_rows_skipped(self):
        bad = dict(ROW, id=None)
        orders = await _store(lambda r: httpx.Response(200, json=[ROW, bad])).query_orders(
            OrderFilter()
        )
        assert len(orders) == 1

    @pytest.mark.asyncio
    async def test_blank_appointment_fields_become_missing(self):
        row = dict(ROW, appointment_time="")
        orders = await _store(lambda r: httpx.Response(200, json=[row])).query_orders(
            OrderFilter()
        )
        assert orders[0].appointment_time is None

    @pytest.mark.asyncio
    async def test_http_error_raises_store_error(self):
        store = _store(lambda r: httpx.Response(503, text="unavailable"))
        with pytest.raises(StoreError, match="503"):
            await store.query_orders(OrderFilter())

    @pytest.mark.asyncio
    async def test_network_error_raises_store_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreError):
            await _store(handler).query_orders(OrderFilter())

    @pytest.mark.asyncio
    async def test_invalid_json_raises_store_error(self):
        store = _store(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(StoreError):
            await store.query_orders(OrderFilter())

    @pytest.mark.asyncio
    async def test_non_list_payload_raises_store_error(self):
        store = _store(lambda r: httpx.Response(200, json={"message": "nope"}))
        with pytest.raises(StoreError):
            await store.query_orders(OrderFilter())


class TestUpdateOrderStatus:
    @pytest.mark.asyncio
    async def test_patch_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=[dict(ROW, status="confirmed", admin_notes="ok")])

        result = await _store(handler).update_order_status("17", OrderStatus.CONFIRMED, "ok")

        request = seen["request"]
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.17"
        assert request.headers["prefer"] == "return=representation"
        assert json.loads(request.content) == {"status": "confirmed", "admin_notes": "ok"}
        assert result.success
        assert result.order.status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_http_error_is_failed_result(self):
        result = await _store(lambda r: httpx.Response(500)).update_order_status(
            "17", OrderStatus.CONFIRMED
        )
        assert not result.success
        assert result.error == "HTTP 500"

    @pytest.mark.asyncio
    async def test_no_matching_row(self):
        result = await _store(lambda r: httpx.Response(200, json=[])).update_order_status(
            "99", OrderStatus.CONFIRMED
        )
        assert not result.success
        assert result.error == "Order 99 not found."


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_post_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(201, json=[ROW])

        result = await _store(handler).create_order({
            "customer_phone": "13800138000",
            "appointment_date": date(2024, 6, 10),
            "appointment_time": "09:00-10:00",
            "status": OrderStatus.PENDING,
        })

        request = seen["request"]
        assert request.method == "POST"
        assert request.url.path == "/rest/v1/guitar_repairs"
        assert request.headers["prefer"] == "return=representation"
        assert json.loads(request.content) == {
            "customer_phone": "13800138000",
            "appointment_date": "2024-06-10",
            "appointment_time": "09:00-10:00",
            "status": "pending",
        }
        assert result.success
        assert result.order.id == "17"

    @pytest.mark.asyncio
    async def test_status_defaults_to_pending(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json=[ROW])

        await _store(handler).create_order({"customer_phone": "13800138000"})
        assert seen["body"]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_rejected_insert(self):
        result = await _store(lambda r: httpx.Response(400, text="bad row")).create_order({})
        assert not result.success
        assert result.error == "HTTP 400"

    @pytest.mark.asyncio
    async def test_empty_representation(self):
        result = await _store(lambda r: httpx.Response(201, json=[])).create_order({})
        assert not result.success


class TestDeleteOrder:
    @pytest.mark.asyncio
    async def test_delete_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=[dict(ROW, status="cancelled")])

        result = await _store(handler).delete_order("17")

        request = seen["request"]
        assert request.method == "DELETE"
        assert request.url.params["id"] == "eq.17"
        assert result.success
        assert result.order.status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_no_matching_row(self):
        result = await _store(lambda r: httpx.Response(200, json=[])).delete_order("99")
        assert not result.success
        assert result.error == "Order 99 not found."

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = await _store(handler).delete_order("17")
        assert not result.success
        assert "refused" in result.error
