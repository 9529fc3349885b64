"""Task model."""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from farm_payroll.models.base import Base, TimestampMixin


class Task(Base, TimestampMixin):
    """Operational task assigned to a farm worker."""

    __tablename__ = "task"

    task_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    # Free-text name, not a foreign key to employee
    assignee: Mapped[str] = mapped_column(String, nullable=False, default="Unassigned")
    priority: Mapped[str] = mapped_column(String, nullable=False, default="MEDIUM")
    due: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")
    flock_id: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("priority IN ('HIGH', 'MEDIUM', 'LOW')", name="task_priority_check"),
        CheckConstraint(
            "status IN ('PENDING', 'IN_PROGRESS', 'COMPLETED')",
            name="task_status_check",
        ),
    )
