"""Compensation model: gross and net pay from an employee's structure."""

from __future__ import annotations

from decimal import Decimal

from farm_payroll.calculators.types import CompensationValidationError, Employee


def validate_compensation(employee: Employee) -> None:
    """Reject negative compensation amounts.

    Records validate on construction, but an Employee can also be assembled
    from already-built parts, so the calculators check again at their boundary.
    """
    problems: list[str] = []
    if employee.base_salary < 0:
        problems.append(f"base_salary must be >= 0 (got {employee.base_salary})")
    for name, amount in employee.allowances.to_dict().items():
        if amount < 0:
            problems.append(f"allowances.{name} must be >= 0 (got {amount})")
    for name, amount in employee.deductions.to_dict().items():
        if amount < 0:
            problems.append(f"deductions.{name} must be >= 0 (got {amount})")
    if problems:
        raise CompensationValidationError(problems, employee_id=employee.employee_id)


def validate_payable(employee: Employee) -> None:
    """Reject compensation whose deductions exceed gross pay.

    A run may never carry a negative net pay: the net pay ledger row could
    not represent it without understating what the others were paid.
    """
    gross = gross_pay(employee)
    deductions = deduction_total(employee)
    if deductions > gross:
        raise CompensationValidationError(
            [f"deductions ({deductions}) exceed gross pay ({gross})"],
            employee_id=employee.employee_id,
        )


def allowance_total(employee: Employee) -> Decimal:
    return employee.allowances.total()


def deduction_total(employee: Employee) -> Decimal:
    return employee.deductions.total()


def gross_pay(employee: Employee) -> Decimal:
    """Base salary plus all allowances."""
    validate_compensation(employee)
    return employee.base_salary + allowance_total(employee)


def net_pay(employee: Employee) -> Decimal:
    """Net pay = (base salary + allowances) - deductions.

    Exact decimal arithmetic; no rounding is applied. Raises
    CompensationValidationError instead of returning a negative amount.
    """
    validate_payable(employee)
    return gross_pay(employee) - deduction_total(employee)
