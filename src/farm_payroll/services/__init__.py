"""Farm payroll services."""

from farm_payroll.services.dashboard_service import DashboardService, PayrollDashboard
from farm_payroll.services.payroll_service import (
    DuplicatePayrollRunError,
    PayrollPreview,
    PayrollProcessingResult,
    PayrollService,
)
from farm_payroll.services.state_machine import (
    InvalidTransitionError,
    TaskPriority,
    TaskStateMachine,
    TaskStatus,
)
from farm_payroll.services.task_service import TaskNotFoundError, TaskService

__all__ = [
    "DashboardService",
    "PayrollDashboard",
    "DuplicatePayrollRunError",
    "PayrollPreview",
    "PayrollProcessingResult",
    "PayrollService",
    "InvalidTransitionError",
    "TaskPriority",
    "TaskStateMachine",
    "TaskStatus",
    "TaskNotFoundError",
    "TaskService",
]
