"""Task lifecycle tracking and productivity aggregation."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_payroll.models import Task
from farm_payroll.services.state_machine import (
    InvalidTransitionError,
    TaskPriority,
    TaskStateMachine,
    TaskStatus,
)

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when a task id does not exist."""

    def __init__(self, task_id: UUID):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class TaskLike(Protocol):
    assignee: str
    status: str
    due: date


class NamedEmployee(Protocol):
    employee_id: str
    full_name: str


@dataclass
class EmployeeProductivity:
    employee_id: str
    full_name: str
    completed_tasks: int = 0


@dataclass
class ProductivityReport:
    """Completed tasks per roster employee.

    Assignees are matched to employees by exact full name. Completed tasks
    whose assignee matches nobody are counted under ``unmatched``.
    """

    employees: list[EmployeeProductivity] = field(default_factory=list)
    unmatched: dict[str, int] = field(default_factory=dict)

    @property
    def total_completed(self) -> int:
        return sum(e.completed_tasks for e in self.employees) + sum(self.unmatched.values())

    def for_employee(self, employee_id: str) -> int:
        for entry in self.employees:
            if entry.employee_id == employee_id:
                return entry.completed_tasks
        return 0


def productivity_by_assignee(
    tasks: Iterable[TaskLike], roster: Iterable[NamedEmployee]
) -> ProductivityReport:
    """Count COMPLETED tasks per employee, joined on assignee == full_name."""
    completed = Counter(t.assignee for t in tasks if t.status == TaskStatus.COMPLETED)

    report = ProductivityReport()
    matched_names: set[str] = set()
    for employee in roster:
        # Two employees sharing a name both get credited
        report.employees.append(
            EmployeeProductivity(
                employee_id=employee.employee_id,
                full_name=employee.full_name,
                completed_tasks=completed.get(employee.full_name, 0),
            )
        )
        matched_names.add(employee.full_name)

    report.unmatched = {
        name: count for name, count in sorted(completed.items()) if name not in matched_names
    }
    return report


def active_tasks(tasks: Iterable[TaskLike]) -> list[TaskLike]:
    """Tasks that still need work."""
    return [t for t in tasks if TaskStateMachine.is_active(t.status)]


def overdue_tasks(tasks: Iterable[TaskLike], as_of: date) -> list[TaskLike]:
    """Unfinished tasks whose due date has passed."""
    return [t for t in active_tasks(tasks) if t.due < as_of]


class TaskService:
    """Service for managing task records.

    Operations:
    - create_task: assign a new task (always starts PENDING)
    - transition_task: move a task forward through its lifecycle
    - advance_task: move a task one step forward
    - delete_task: remove a task from any state
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_task(
        self,
        title: str,
        due: date,
        assignee: str | None = None,
        priority: str = TaskPriority.MEDIUM,
        flock_id: str | None = None,
        department: str | None = None,
    ) -> Task:
        """Create a task in PENDING status."""
        if not title or not title.strip():
            raise ValueError("Task title is required")

        task = Task(
            title=title.strip(),
            assignee=(assignee or "").strip() or "Unassigned",
            priority=TaskPriority(priority).value,
            due=due,
            status=TaskStatus.PENDING.value,
            flock_id=flock_id,
            department=department,
        )
        self.session.add(task)
        await self.session.flush()
        logger.info("Task %s assigned to %s", task.task_id, task.assignee)
        return task

    async def get_task(self, task_id: UUID) -> Task:
        task = await self.session.get(Task, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list_tasks(self, status: str | None = None) -> list[Task]:
        """List tasks ordered by due date, optionally filtered by status."""
        query = select(Task)
        if status is not None:
            query = query.where(Task.status == TaskStatus(status).value)
        query = query.order_by(Task.due, Task.title)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_overdue(self, as_of: date) -> list[Task]:
        return overdue_tasks(await self.list_tasks(), as_of)

    async def transition_task(self, task_id: UUID, to_status: str) -> Task:
        """Transition a task to a new status.

        Raises InvalidTransitionError if the transition is not allowed.
        """
        task = await self.get_task(task_id)
        from_status = task.status
        TaskStateMachine.apply(task, to_status)
        await self.session.flush()
        logger.info("Task %s: %s -> %s", task.task_id, from_status, task.status)
        return task

    async def advance_task(self, task_id: UUID) -> Task:
        """Move a task one step forward."""
        task = await self.get_task(task_id)
        next_status = TaskStateMachine.next_status(task.status)
        if next_status is None:
            raise InvalidTransitionError(task.status, task.status, "task is already completed")
        return await self.transition_task(task_id, next_status)

    async def delete_task(self, task_id: UUID) -> None:
        """Delete a task regardless of status."""
        task = await self.get_task(task_id)
        await self.session.delete(task)
        await self.session.flush()
        logger.info("Task %s deleted", task_id)

    async def productivity(self, roster: Iterable[NamedEmployee]) -> ProductivityReport:
        return productivity_by_assignee(await self.list_tasks(), roster)
