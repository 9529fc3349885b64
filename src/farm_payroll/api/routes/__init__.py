"""API routes."""

from farm_payroll.api.routes.health import router as health_router
from farm_payroll.api.routes.payroll import router as payroll_router
from farm_payroll.api.routes.tasks import router as tasks_router

__all__ = ["health_router", "payroll_router", "tasks_router"]
