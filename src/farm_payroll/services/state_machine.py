"""Task lifecycle state machine with transition validation."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from farm_payroll.models import Task


class TaskStatus(str, Enum):
    """Task status values."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskPriority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TaskStateMachine:
    """State machine for task status transitions.

    Allowed transitions (forward only, one step at a time):
    - PENDING → IN_PROGRESS
    - IN_PROGRESS → COMPLETED

    COMPLETED is terminal. Deleting a task is not a transition.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        TaskStatus.PENDING: [TaskStatus.IN_PROGRESS],
        TaskStatus.IN_PROGRESS: [TaskStatus.COMPLETED],
        TaskStatus.COMPLETED: [],  # Terminal state
    }

    # Statuses shown on boards and the calendar
    ACTIVE = {
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if cls.can_transition(from_status, to_status):
            return
        if cls.is_terminal(from_status):
            raise InvalidTransitionError(from_status, to_status, "task is already completed")
        if from_status not in cls.VALID_TRANSITIONS:
            raise InvalidTransitionError(from_status, to_status, "unknown status")
        raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status == TaskStatus.COMPLETED

    @classmethod
    def is_active(cls, status: str) -> bool:
        return status in cls.ACTIVE

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def next_status(cls, current_status: str) -> str | None:
        """The single forward step from ``current_status``, if any."""
        allowed = cls.get_next_statuses(current_status)
        return allowed[0] if allowed else None

    @classmethod
    def apply(cls, task: Task, to_status: str) -> Task:
        """Validate and apply a transition to a task record."""
        cls.validate_transition(task.status, to_status)
        task.status = TaskStatus(to_status).value
        return task
