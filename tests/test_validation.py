"""Tests for repair request form validation."""

from datetime import date

import pytest

from repairshop.orders.validation import MAX_DESCRIPTION_LENGTH, validate_repair_request
from repairshop.scheduling.slot_catalog import ADMIN_HOURS

TODAY = date(2024, 6, 10)  # Monday


def _request(**overrides):
    data = {
        "customer_phone": "138 0013 8000",
        "customer_email": "",
        "guitar_type": "electric",
        "problem_description": "Fret buzz on the low E string",
        "appointment_date": "2024-06-12",
        "appointment_time": "10:00-11:00",
    }
    data.update(overrides)
    return data


def _errors(data, **kwargs):
    return {e.field: e.message for e in validate_repair_request(data, TODAY, window_days=30, **kwargs)}


class TestValidRequest:
    def test_valid_request_has_no_errors(self):
        assert validate_repair_request(_request(), TODAY, window_days=30) == []

    def test_email_is_optional_but_checked(self):
        assert _errors(_request(customer_email="player@example.com")) == {}
        assert "customer_email" in _errors(_request(customer_email="not-an-email"))


class TestCustomerFields:
    @pytest.mark.parametrize("phone", ["", "12345", "23800138000", "1380013800a"])
    def test_bad_phone(self, phone):
        assert "customer_phone" in _errors(_request(customer_phone=phone))

    def test_dashed_phone_accepted(self):
        assert _errors(_request(customer_phone="138-0013-8000")) == {}

    def test_unknown_guitar_type(self):
        assert _errors(_request(guitar_type="banjo")) == {"guitar_type": "无效的吉他类型"}

    def test_missing_guitar_type(self):
        assert "guitar_type" in _errors(_request(guitar_type=None))

    def test_description_required(self):
        assert "problem_description" in _errors(_request(problem_description="   "))

    def test_description_length_limit(self):
        long_text = "x" * (MAX_DESCRIPTION_LENGTH + 1)
        assert "problem_description" in _errors(_request(problem_description=long_text))

    def test_all_errors_reported_together(self):
        errors = _errors(_request(customer_phone="", guitar_type="", problem_description=""))
        assert {"customer_phone", "guitar_type", "problem_description"} <= set(errors)


class TestAppointment:
    def test_weekend_rejected(self):
        errors = _errors(_request(appointment_date="2024-06-15"))
        assert errors == {"appointment_date": "维修店周末不营业，请选择工作日"}

    def test_past_date_rejected(self):
        errors = _errors(_request(appointment_date="2024-06-07"))
        assert errors == {"appointment_date": "不能选择过去的日期"}

    def test_beyond_window_rejected(self):
        errors = _errors(_request(appointment_date="2024-07-15"))
        assert errors == {"appointment_date": "超出可预约的日期范围"}

    def test_unparseable_date(self):
        assert _errors(_request(appointment_date="12/06/2024")) == {
            "appointment_date": "日期格式无效"
        }

    def test_missing_date_and_time(self):
        errors = _errors(_request(appointment_date="", appointment_time=""))
        assert set(errors) == {"appointment_date", "appointment_time"}

    def test_time_outside_catalog(self):
        errors = _errors(_request(appointment_time="18:00-19:00"))
        assert errors == {"appointment_time": "无效的时间段"}

    def test_lunch_slot_rejected_under_admin_hours(self):
        assert _errors(_request(appointment_time="12:00-13:00")) == {}
        errors = _errors(_request(appointment_time="12:00-13:00"), hours=ADMIN_HOURS)
        assert errors == {"appointment_time": "无效的时间段"}
