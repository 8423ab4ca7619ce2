"""Tests for the repair order model, filter, and display labels."""

from datetime import date

import pytest
from pydantic import ValidationError

from repairshop.schemas.order_schema import (
    GuitarType,
    OrderFilter,
    OrderStatus,
    RepairOrder,
    guitar_type_label,
    status_label,
)
from tests.conftest import make_order


class TestLabels:
    def test_status_labels(self):
        assert status_label(OrderStatus.DELAYED) == "已延期"
        assert status_label("in_progress") == "维修中"

    def test_unknown_status_shown_raw(self):
        assert status_label("lost") == "lost"

    def test_guitar_type_labels(self):
        assert guitar_type_label(GuitarType.ELECTRIC) == "电吉他"
        assert guitar_type_label("bass") == "贝斯"

    def test_unknown_guitar_type_shown_raw(self):
        assert guitar_type_label("banjo") == "banjo"


class TestRepairOrder:
    def test_integer_id_coerced(self):
        assert RepairOrder(id=17).id == "17"

    def test_blank_appointment_fields_are_missing(self):
        order = RepairOrder(id="1", appointment_date="", appointment_time="  ")
        assert order.appointment_date is None
        assert order.appointment_time is None

    def test_extra_columns_kept(self):
        order = RepairOrder.model_validate({"id": "1", "customer_name": "Lin"})
        assert order.model_extra == {"customer_name": "Lin"}

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            RepairOrder(id="1", status="lost")


class TestOrderFilter:
    def test_empty_filter_matches_everything(self):
        assert OrderFilter().matches(make_order(appointment_date=None))

    def test_date_range_excludes_undated(self):
        order_filter = OrderFilter(start_date=date(2024, 6, 1))
        assert not order_filter.matches(make_order(appointment_date=None))

    def test_status_and_range(self):
        order_filter = OrderFilter(
            start_date=date(2024, 6, 1), end_date=date(2024, 6, 30), status=OrderStatus.PENDING
        )
        assert order_filter.matches(make_order(appointment_date=date(2024, 6, 30)))
        assert not order_filter.matches(make_order(appointment_date=date(2024, 7, 1)))
        assert not order_filter.matches(make_order(status=OrderStatus.CONFIRMED))
