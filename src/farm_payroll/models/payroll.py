"""Payroll run models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from farm_payroll.calculators import types
from farm_payroll.models.base import Base, Money, TimestampMixin


class PayrollRunRecord(Base, TimestampMixin):
    """One employee's pay for one period. Write-once."""

    __tablename__ = "payroll_run"

    payroll_run_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    period: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    base_pay: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_allowances: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(Money, nullable=False)
    tax: Mapped[Decimal] = mapped_column(Money, nullable=False)
    pension: Mapped[Decimal] = mapped_column(Money, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    overtime_pay: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    net_pay: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="PAID")
    processed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "period", name="payroll_run_employee_period_unique"),
        CheckConstraint("status IN ('PAID')", name="payroll_run_status_check"),
    )

    @classmethod
    def from_domain(cls, run: types.PayrollRun) -> PayrollRunRecord:
        return cls(
            employee_id=run.employee_id,
            period=run.period,
            employee_name=run.employee_name,
            base_pay=run.base_pay,
            total_allowances=run.total_allowances,
            total_deductions=run.total_deductions,
            tax=run.tax,
            pension=run.pension,
            overtime_hours=run.overtime_hours,
            overtime_pay=run.overtime_pay,
            net_pay=run.net_pay,
            status=run.status.value,
            processed_at=run.processed_at,
        )

    def to_domain(self) -> types.PayrollRun:
        return types.PayrollRun(
            employee_id=self.employee_id,
            period=self.period,
            employee_name=self.employee_name,
            base_pay=self.base_pay,
            total_allowances=self.total_allowances,
            total_deductions=self.total_deductions,
            tax=self.tax,
            pension=self.pension,
            net_pay=self.net_pay,
            processed_at=self.processed_at,
            overtime_hours=self.overtime_hours,
            overtime_pay=self.overtime_pay,
            status=types.PayrollRunStatus(self.status),
        )
