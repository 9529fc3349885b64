"""ORM models."""

from farm_payroll.models.base import Base, TimestampMixin
from farm_payroll.models.employee import Employee
from farm_payroll.models.ledger import LedgerEntry
from farm_payroll.models.payroll import PayrollRunRecord
from farm_payroll.models.task import Task

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "LedgerEntry",
    "PayrollRunRecord",
    "Task",
]
