"""Progressive income tax estimation from bracket tables."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from farm_payroll.calculators.compensation import gross_pay
from farm_payroll.calculators.types import (
    DEFAULT_TAX_BRACKETS,
    ZERO,
    Employee,
    TaxBracket,
)


class TaxCalculator:
    """Estimates monthly income tax using progressive brackets.

    The payroll run always uses the tax amount recorded on the employee's
    deductions; this calculator only suggests what that amount should be.
    """

    def __init__(self, brackets: Iterable[TaxBracket] = DEFAULT_TAX_BRACKETS):
        self.brackets = sorted(brackets, key=lambda b: b.min_amount)

    def calculate(self, wages: Decimal) -> Decimal:
        """Calculate tax using progressive brackets."""
        if wages <= 0:
            return Decimal("0.00")

        total_tax = ZERO
        remaining = wages

        for bracket in self.brackets:
            if remaining <= 0:
                break

            bracket_min = bracket.min_amount
            bracket_max = bracket.max_amount if bracket.max_amount is not None else wages + 1

            if wages < bracket_min:
                continue

            taxable_in_bracket = min(remaining, bracket_max - bracket_min)
            if taxable_in_bracket > 0:
                total_tax += bracket.flat_amount + (taxable_in_bracket * bracket.rate)
                remaining -= taxable_in_bracket

        return total_tax.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def suggest_tax_deduction(self, employee: Employee) -> Decimal:
        """Suggested monthly tax withholding on the employee's gross pay."""
        return self.calculate(gross_pay(employee))
