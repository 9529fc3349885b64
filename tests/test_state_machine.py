"""Tests for task state machine."""

from datetime import date

import pytest

from farm_payroll.models import Task
from farm_payroll.services.state_machine import (
    InvalidTransitionError,
    TaskStateMachine,
    TaskStatus,
)


class TestTaskStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # pending → in progress
        assert TaskStateMachine.can_transition("PENDING", "IN_PROGRESS") is True

        # in progress → completed
        assert TaskStateMachine.can_transition("IN_PROGRESS", "COMPLETED") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip in progress
        assert TaskStateMachine.can_transition("PENDING", "COMPLETED") is False

        # Can't go backwards
        assert TaskStateMachine.can_transition("IN_PROGRESS", "PENDING") is False
        assert TaskStateMachine.can_transition("COMPLETED", "IN_PROGRESS") is False

        # Completed is terminal
        assert TaskStateMachine.can_transition("COMPLETED", "PENDING") is False
        assert TaskStateMachine.can_transition("COMPLETED", "COMPLETED") is False

        # Self transitions are not steps
        assert TaskStateMachine.can_transition("PENDING", "PENDING") is False

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            TaskStateMachine.validate_transition("PENDING", "COMPLETED")

        assert exc_info.value.from_status == "PENDING"
        assert exc_info.value.to_status == "COMPLETED"

    def test_completed_task_reports_reason(self):
        with pytest.raises(InvalidTransitionError, match="already completed") as exc_info:
            TaskStateMachine.validate_transition("COMPLETED", "PENDING")

        assert exc_info.value.reason == "task is already completed"

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidTransitionError, match="unknown status"):
            TaskStateMachine.validate_transition("ARCHIVED", "PENDING")

    def test_unknown_target_rejected(self):
        assert TaskStateMachine.can_transition("PENDING", "ARCHIVED") is False
        with pytest.raises(InvalidTransitionError):
            TaskStateMachine.validate_transition("PENDING", "ARCHIVED")

    def test_is_terminal(self):
        assert TaskStateMachine.is_terminal("COMPLETED") is True
        assert TaskStateMachine.is_terminal("IN_PROGRESS") is False
        assert TaskStateMachine.is_terminal("PENDING") is False

    def test_is_active(self):
        """Test board-visible statuses."""
        assert TaskStateMachine.is_active("PENDING") is True
        assert TaskStateMachine.is_active("IN_PROGRESS") is True
        assert TaskStateMachine.is_active("COMPLETED") is False

    def test_get_next_statuses(self):
        """Test getting valid next statuses."""
        assert TaskStateMachine.get_next_statuses("PENDING") == [TaskStatus.IN_PROGRESS]
        assert TaskStateMachine.get_next_statuses("IN_PROGRESS") == [TaskStatus.COMPLETED]
        assert TaskStateMachine.get_next_statuses("COMPLETED") == []
        assert TaskStateMachine.get_next_statuses("ARCHIVED") == []

    def test_next_status(self):
        assert TaskStateMachine.next_status("PENDING") == "IN_PROGRESS"
        assert TaskStateMachine.next_status("IN_PROGRESS") == "COMPLETED"
        assert TaskStateMachine.next_status("COMPLETED") is None


class TestApplyTransition:
    """Test applying transitions to task records."""

    def _task(self, status: str) -> Task:
        return Task(title="Feed flock A", assignee="John Doe", priority="HIGH", due=date(2024, 3, 1), status=status)

    def test_apply_moves_status_forward(self):
        task = self._task("PENDING")

        TaskStateMachine.apply(task, "IN_PROGRESS")
        assert task.status == "IN_PROGRESS"

        TaskStateMachine.apply(task, TaskStatus.COMPLETED)
        assert task.status == "COMPLETED"

    def test_apply_leaves_task_untouched_on_error(self):
        task = self._task("COMPLETED")

        with pytest.raises(InvalidTransitionError):
            TaskStateMachine.apply(task, "PENDING")
        assert task.status == "COMPLETED"
