from repairshop.orders.board import StatusBoard, StatusDistribution, batch_update_status
from repairshop.orders.intake import SubmissionResult, submit_repair_request
from repairshop.orders.status_update import (
    InvalidTransitionError,
    StatusUpdateMachine,
    StatusUpdateState,
    StatusUpdateTrigger,
)
from repairshop.orders.validation import FieldError, validate_repair_request

__all__ = [
    "StatusBoard",
    "StatusDistribution",
    "batch_update_status",
    "InvalidTransitionError",
    "StatusUpdateMachine",
    "StatusUpdateState",
    "StatusUpdateTrigger",
    "FieldError",
    "validate_repair_request",
    "SubmissionResult",
    "submit_repair_request",
]
