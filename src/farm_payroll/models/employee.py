"""Employee model (read-only to the payroll core)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from farm_payroll.calculators import types
from farm_payroll.models.base import Base, Money, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record owned by the HR module."""

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String, primary_key=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")
    salary_structure: Mapped[str] = mapped_column(String, nullable=False, default="MONTHLY")
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))

    # Allowances
    housing_allowance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    transport_allowance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    risk_allowance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    other_allowance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))

    # Deductions
    pension_deduction: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    tax_deduction: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    health_insurance_deduction: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'SUSPENDED', 'TERMINATED')",
            name="employee_status_check",
        ),
        CheckConstraint(
            "salary_structure IN ('MONTHLY', 'DAILY')",
            name="employee_salary_structure_check",
        ),
        CheckConstraint(
            "base_salary >= 0 AND housing_allowance >= 0 AND transport_allowance >= 0 "
            "AND risk_allowance >= 0 AND other_allowance >= 0 AND pension_deduction >= 0 "
            "AND tax_deduction >= 0 AND health_insurance_deduction >= 0",
            name="employee_compensation_non_negative",
        ),
    )

    def to_domain(self) -> types.Employee:
        """Convert to the payroll core's Employee."""
        return types.Employee(
            employee_id=self.employee_id,
            full_name=self.full_name,
            base_salary=self.base_salary,
            status=self.status,
            salary_structure=self.salary_structure,
            allowances=types.Allowances(
                housing=self.housing_allowance,
                transport=self.transport_allowance,
                risk=self.risk_allowance,
                other=self.other_allowance,
            ),
            deductions=types.Deductions(
                pension=self.pension_deduction,
                tax=self.tax_deduction,
                health_insurance=self.health_insurance_deduction,
            ),
            role=self.role,
            department=self.department,
        )
