"""Pydantic schemas for API request/response models."""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class EnumValueModel(BaseModel):
    """Accepts str-valued enums from domain objects and stores their value."""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="before")
    @classmethod
    def _enum_to_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollRunRequest(BaseModel):
    """Schema for triggering payroll for a period."""

    period: str = Field(pattern=PERIOD_PATTERN, examples=["2024-03"])


class PayrollTotalsResponse(BaseModel):
    """Totals for one payroll invocation or one period."""

    model_config = ConfigDict(from_attributes=True)

    net_pay: Decimal
    tax: Decimal
    pension: Decimal
    gross: Decimal
    headcount: int


class PayrollRunResponse(EnumValueModel):
    """Schema for a persisted payroll run."""

    employee_id: str
    period: str
    employee_name: str
    base_pay: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    tax: Decimal
    pension: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    net_pay: Decimal
    status: str
    processed_at: dt.datetime


class PayrollRunListResponse(BaseModel):
    items: list[PayrollRunResponse]
    total: int


class LedgerTransactionResponse(EnumValueModel):
    """Schema for a ledger transaction."""

    transaction_id: UUID
    date: dt.date
    description: str
    amount: Decimal
    type: str
    category: str
    status: str
    period: str | None = None
    reference_id: str | None = None


class LedgerTransactionListResponse(BaseModel):
    items: list[LedgerTransactionResponse]
    total: int


class ProcessPayrollResponse(BaseModel):
    """Outcome of processing payroll, including the no-op cases."""

    period: str
    outcome: str
    is_noop: bool
    processed_count: int
    message: str
    currency: str
    totals: PayrollTotalsResponse
    skipped_employee_ids: list[str]
    runs: list[PayrollRunResponse]
    transactions: list[LedgerTransactionResponse]


class PayrollPreviewLineResponse(PayrollRunResponse):
    """A run that would be written, with the bracket-based tax estimate."""

    suggested_tax: Decimal
    tax_variance: Decimal


class PayrollPreviewResponse(BaseModel):
    """Dry run of payroll processing; nothing is persisted."""

    period: str
    outcome: str
    is_noop: bool
    processed_count: int
    message: str
    currency: str
    totals: PayrollTotalsResponse
    skipped_employee_ids: list[str]
    runs: list[PayrollPreviewLineResponse]


# ============================================================================
# Task schemas
# ============================================================================


class TaskCreate(BaseModel):
    """Schema for assigning a new task."""

    title: str = Field(min_length=1)
    due: dt.date
    assignee: str | None = None
    priority: str = Field(default="MEDIUM", pattern=r"^(HIGH|MEDIUM|LOW)$")
    flock_id: str | None = None
    department: str | None = None


class TaskTransitionRequest(BaseModel):
    status: str = Field(pattern=r"^(PENDING|IN_PROGRESS|COMPLETED)$")


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: UUID
    title: str
    assignee: str
    priority: str
    due: dt.date
    status: str
    flock_id: str | None = None
    department: str | None = None


class TaskListResponse(BaseModel):
    items: list[TaskResponse]
    total: int


class EmployeeProductivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    full_name: str
    completed_tasks: int


class ProductivityResponse(BaseModel):
    employees: list[EmployeeProductivityResponse]
    unmatched: dict[str, int]
    total_completed: int


# ============================================================================
# Dashboard schemas
# ============================================================================


class DashboardResponse(BaseModel):
    period: str
    totals: PayrollTotalsResponse
    monthly_gross_salary: Decimal
    active_headcount: int
    outstanding_liabilities: Decimal
    productivity: ProductivityResponse


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None
