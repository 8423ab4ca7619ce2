"""Repair order data models as read from the record store."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class OrderStatus(str, Enum):
    """Lifecycle status of a repair order."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    DELAYED = "delayed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class GuitarType(str, Enum):
    ACOUSTIC = "acoustic"
    CLASSICAL = "classical"
    ELECTRIC = "electric"
    BASS = "bass"
    OTHER = "other"


STATUS_LABELS: dict[str, str] = {
    OrderStatus.PENDING.value: "待确认",
    OrderStatus.CONFIRMED.value: "已确认",
    OrderStatus.IN_PROGRESS.value: "维修中",
    OrderStatus.DELAYED.value: "已延期",
    OrderStatus.COMPLETED.value: "已完成",
    OrderStatus.CANCELLED.value: "已取消",
}

GUITAR_TYPE_LABELS: dict[str, str] = {
    GuitarType.ACOUSTIC.value: "木吉他",
    GuitarType.CLASSICAL.value: "古典吉他",
    GuitarType.ELECTRIC.value: "电吉他",
    GuitarType.BASS.value: "贝斯",
    GuitarType.OTHER.value: "其他",
}


def status_label(status: Union[OrderStatus, str]) -> str:
    """Display label for a status; unknown values are shown as-is."""
    value = status.value if isinstance(status, OrderStatus) else status
    return STATUS_LABELS.get(value, value)


def guitar_type_label(guitar_type: Union[GuitarType, str]) -> str:
    value = guitar_type.value if isinstance(guitar_type, GuitarType) else guitar_type
    return GUITAR_TYPE_LABELS.get(value, value)


class RepairOrder(BaseModel):
    """
    Projection of a ``guitar_repairs`` row.

    Only ``appointment_date``, ``appointment_time`` and ``status`` matter to
    occupancy counting. Everything else is payload carried for the admin
    views; unknown columns are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING
    customer_phone: str = ""
    customer_email: Optional[str] = None
    guitar_type: Optional[str] = None
    guitar_brand: Optional[str] = None
    guitar_model: Optional[str] = None
    problem_description: Optional[str] = None
    expected_completion_date: Optional[date] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Store ids are uuids or bigint keys depending on the table setup.
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator(
        "appointment_date", "appointment_time", "expected_completion_date", mode="before"
    )
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class OrderFilter(BaseModel):
    """Query filter accepted by every order store."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[OrderStatus] = None

    def matches(self, order: RepairOrder) -> bool:
        """Apply the filter in memory, the way the hosted store applies it server-side."""
        if self.status is not None and order.status != self.status:
            return False
        if self.start_date is not None or self.end_date is not None:
            if order.appointment_date is None:
                return False
            if self.start_date is not None and order.appointment_date < self.start_date:
                return False
            if self.end_date is not None and order.appointment_date > self.end_date:
                return False
        return True
