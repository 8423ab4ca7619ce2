"""
Repair request form validation.

Checks the fields a customer submits before the order is written:
phone, optional email, guitar type, problem description, and the
appointment date/slot, which must be bookable under the public catalog.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from repairshop.scheduling.slot_catalog import (
    PUBLIC_HOURS,
    REJECTION_MESSAGES,
    BusinessHours,
    check_bookable_date,
    generate_time_slots,
)
from repairshop.schemas.order_schema import GuitarType
from repairshop.utils import normalize_phone, parse_date

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_DESCRIPTION_LENGTH = 1000


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


def _validate_phone(value: str) -> Optional[str]:
    if not value.strip():
        return "请输入电话号码"
    if not PHONE_PATTERN.match(normalize_phone(value)):
        return "请输入有效的电话号码"
    return None


def _validate_email(value: str) -> Optional[str]:
    if value.strip() and not EMAIL_PATTERN.match(value.strip()):
        return "请输入有效的邮箱地址"
    return None


def _validate_guitar_type(value: str) -> Optional[str]:
    if not value.strip():
        return "请选择吉他类型"
    if value.strip() not in {t.value for t in GuitarType}:
        return "无效的吉他类型"
    return None


def _validate_description(value: str) -> Optional[str]:
    if not value.strip():
        return "请描述吉他的问题"
    if len(value.strip()) > MAX_DESCRIPTION_LENGTH:
        return f"问题描述不能超过{MAX_DESCRIPTION_LENGTH}字"
    return None


_FIELD_VALIDATORS: list[tuple[str, Callable[[str], Optional[str]]]] = [
    ("customer_phone", _validate_phone),
    ("customer_email", _validate_email),
    ("guitar_type", _validate_guitar_type),
    ("problem_description", _validate_description),
]


def _validate_appointment(
    data: dict[str, Any],
    today: date,
    hours: BusinessHours,
    window_days: Optional[int],
) -> list[FieldError]:
    errors = []
    raw_date = str(data.get("appointment_date") or "").strip()
    raw_time = str(data.get("appointment_time") or "").strip()

    if not raw_date:
        errors.append(FieldError("appointment_date", "请选择日期"))
    else:
        try:
            day = parse_date(raw_date)
        except ValueError:
            errors.append(FieldError("appointment_date", "日期格式无效"))
        else:
            rejection = check_bookable_date(day, today, hours, window_days)
            if rejection is not None:
                errors.append(FieldError("appointment_date", REJECTION_MESSAGES[rejection]))

    if not raw_time:
        errors.append(FieldError("appointment_time", "请选择预约时间段"))
    elif raw_time not in generate_time_slots(hours):
        errors.append(FieldError("appointment_time", "无效的时间段"))
    return errors


def validate_repair_request(
    data: dict[str, Any],
    today: date,
    hours: BusinessHours = PUBLIC_HOURS,
    window_days: Optional[int] = None,
) -> list[FieldError]:
    """Return every field error in a submitted repair request; empty when valid."""
    errors = []
    for name, validator in _FIELD_VALIDATORS:
        message = validator(str(data.get(name) or ""))
        if message:
            errors.append(FieldError(name, message))
    errors.extend(_validate_appointment(data, today, hours, window_days))

    if errors:
        logger.debug("Repair request rejected: %s", [e.field for e in errors])
    return errors
