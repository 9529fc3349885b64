"""Payroll calculation engine."""

from farm_payroll.calculators.compensation import (
    allowance_total,
    deduction_total,
    gross_pay,
    net_pay,
    validate_compensation,
    validate_payable,
)
from farm_payroll.calculators.engine import PayrollEngine, run_payroll
from farm_payroll.calculators.ledger import (
    LedgerImbalanceError,
    post_payroll_ledger,
    post_run_result,
)
from farm_payroll.calculators.tax_calculator import TaxCalculator

__all__ = [
    "PayrollEngine",
    "run_payroll",
    "post_payroll_ledger",
    "post_run_result",
    "LedgerImbalanceError",
    "TaxCalculator",
    "allowance_total",
    "deduction_total",
    "gross_pay",
    "net_pay",
    "validate_compensation",
    "validate_payable",
]
