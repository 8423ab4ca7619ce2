"""
State machine for a single optimistic status change.

An admin's status change is shown immediately, before the store confirms
it. The write then either succeeds (the shown value stays) or fails (the
shown value goes back to what it was). The three states and the two
triggers between them are explicit so the rollback path can be driven and
checked on its own.

Usage:
    update = StatusUpdateMachine("RO-1", OrderStatus.PENDING, OrderStatus.CONFIRMED)
    update.displayed_status            # CONFIRMED, applied optimistically
    update.transition(StatusUpdateTrigger.WRITE_FAILED, error="HTTP 500")
    update.displayed_status            # PENDING again
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from repairshop.schemas.order_schema import OrderStatus

logger = logging.getLogger(__name__)


class StatusUpdateState(str, Enum):
    APPLIED_OPTIMISTICALLY = "applied_optimistically"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


class StatusUpdateTrigger(str, Enum):
    WRITE_SUCCEEDED = "write_succeeded"
    WRITE_FAILED = "write_failed"


@dataclass
class Transition:
    from_state: StatusUpdateState
    to_state: StatusUpdateState
    trigger: StatusUpdateTrigger


@dataclass
class StateEntry:
    state: StatusUpdateState
    entered_at: datetime
    trigger: Optional[StatusUpdateTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a trigger is not valid from the current state."""


class StatusUpdateMachine:
    """Tracks one optimistic status change from apply to confirm or rollback."""

    TRANSITIONS: list[Transition] = [
        Transition(StatusUpdateState.APPLIED_OPTIMISTICALLY, StatusUpdateState.CONFIRMED,
                   StatusUpdateTrigger.WRITE_SUCCEEDED),
        Transition(StatusUpdateState.APPLIED_OPTIMISTICALLY, StatusUpdateState.ROLLED_BACK,
                   StatusUpdateTrigger.WRITE_FAILED),
    ]

    def __init__(
        self, order_id: str, previous_status: OrderStatus, new_status: OrderStatus
    ) -> None:
        self.order_id = order_id
        self.previous_status = previous_status
        self.new_status = new_status
        self.error: Optional[str] = None
        self._current_state = StatusUpdateState.APPLIED_OPTIMISTICALLY
        self._history: list[StateEntry] = [
            StateEntry(state=self._current_state, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> StatusUpdateState:
        return self._current_state

    @property
    def displayed_status(self) -> OrderStatus:
        """The status the admin should see right now."""
        if self._current_state == StatusUpdateState.ROLLED_BACK:
            return self.previous_status
        return self.new_status

    def transition(
        self, trigger: StatusUpdateTrigger, error: Optional[str] = None
    ) -> StatusUpdateState:
        """
        Apply a trigger.

        Raises:
            InvalidTransitionError: If the trigger is not valid from the current state.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                if trigger == StatusUpdateTrigger.WRITE_FAILED:
                    self.error = error
                logger.debug(
                    "Order %s update: %s -> %s (trigger: %s)",
                    self.order_id, old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[StatusUpdateTrigger]:
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        return [entry.state.value for entry in self._history]

    def is_settled(self) -> bool:
        """True once the store has answered, either way."""
        return self._current_state != StatusUpdateState.APPLIED_OPTIMISTICALLY
