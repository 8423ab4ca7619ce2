"""
Repair request submission.

The booking form's write path: validate the submitted fields, normalise
them into a ``guitar_repairs`` row, and insert it as a pending order.
Nothing reaches the store unless validation passes.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from repairshop.orders.validation import FieldError, validate_repair_request
from repairshop.scheduling.slot_catalog import PUBLIC_HOURS, BusinessHours
from repairshop.schemas.order_schema import OrderStatus, RepairOrder
from repairshop.store.base import OrderStore
from repairshop.utils import normalize_phone, parse_date

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT_FIELDS = ("customer_email", "guitar_brand", "guitar_model")


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a repair request. ``errors`` lists rejected fields."""
    success: bool
    order: Optional[RepairOrder] = None
    errors: list[FieldError] = field(default_factory=list)
    error: Optional[str] = None


def build_order_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Row for an already validated request; blank optional fields are dropped."""
    row: dict[str, Any] = {
        "customer_phone": normalize_phone(str(data["customer_phone"])),
        "guitar_type": str(data["guitar_type"]).strip(),
        "problem_description": str(data["problem_description"]).strip(),
        "appointment_date": parse_date(str(data["appointment_date"])),
        "appointment_time": str(data["appointment_time"]).strip(),
        "status": OrderStatus.PENDING,
    }
    for name in _OPTIONAL_TEXT_FIELDS:
        value = str(data.get(name) or "").strip()
        if value:
            row[name] = value
    return row


async def submit_repair_request(
    store: OrderStore,
    data: dict[str, Any],
    today: date,
    hours: BusinessHours = PUBLIC_HOURS,
    window_days: Optional[int] = None,
) -> SubmissionResult:
    """Validate ``data`` and insert it as a pending repair order."""
    errors = validate_repair_request(data, today, hours, window_days)
    if errors:
        return SubmissionResult(success=False, errors=errors)

    result = await store.create_order(build_order_fields(data))
    if not result.success:
        logger.warning("Repair request not saved: %s", result.error)
        return SubmissionResult(success=False, error=result.error)
    return SubmissionResult(success=True, order=result.order)
