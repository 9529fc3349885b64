"""Ledger posting for payroll runs.

Turns one payroll run invocation into at most three append-only ledger
transactions: the net pay cash outflow, the tax liability and the pension
liability.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from farm_payroll.calculators.types import (
    ZERO,
    LedgerTransaction,
    PayrollConfig,
    PayrollRun,
    PayrollRunResult,
    PayrollTotals,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)


class LedgerImbalanceError(Exception):
    """Raised when posted totals do not equal the exact sums of the runs."""

    def __init__(self, field_name: str, expected: Decimal, actual: Decimal):
        self.field_name = field_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Ledger total '{field_name}' is {actual}, "
            f"but the payroll runs sum to {expected}"
        )


def payroll_reference(period: str) -> str:
    """Reference shared by every ledger row of a period's payroll."""
    return f"PAYROLL-{period}"


def reconcile_totals(runs: list[PayrollRun], totals: PayrollTotals) -> None:
    """Verify totals are the exact sums of the per-employee components."""
    expected = {
        "net_pay": sum((r.net_pay for r in runs), ZERO),
        "tax": sum((r.tax for r in runs), ZERO),
        "pension": sum((r.pension for r in runs), ZERO),
    }
    for name, amount in expected.items():
        actual = getattr(totals, name)
        if actual != amount:
            raise LedgerImbalanceError(name, amount, actual)


def post_payroll_ledger(
    new_runs: list[PayrollRun],
    totals: PayrollTotals,
    period: str,
    config: PayrollConfig | None = None,
) -> list[LedgerTransaction]:
    """Build the ledger transactions for one payroll run invocation.

    Each transaction is emitted only when its total is strictly positive.
    Returns an empty list for a no-op run.
    """
    config = config or PayrollConfig()
    reconcile_totals(new_runs, totals)

    if not new_runs:
        return []

    posted_on = config.clock().date()
    reference = payroll_reference(period)
    transactions: list[LedgerTransaction] = []

    if totals.net_pay > 0:
        transactions.append(
            LedgerTransaction(
                date=posted_on,
                description=f"Payroll Run: {period} ({len(new_runs)} Staff)",
                amount=totals.net_pay,
                type=TransactionType.EXPENSE,
                category=TransactionCategory.LABOR,
                status=TransactionStatus.COMPLETED,
                period=period,
                reference_id=reference,
            )
        )

    if totals.tax > 0:
        transactions.append(
            LedgerTransaction(
                date=posted_on,
                description=f"Income Tax Liability: {period}",
                amount=totals.tax,
                type=TransactionType.EXPENSE,
                category=TransactionCategory.OTHER,
                status=TransactionStatus.PENDING,
                period=period,
                reference_id=reference,
            )
        )

    if totals.pension > 0:
        transactions.append(
            LedgerTransaction(
                date=posted_on,
                description=f"Pension Liability: {period}",
                amount=totals.pension,
                type=TransactionType.EXPENSE,
                category=TransactionCategory.OTHER,
                status=TransactionStatus.PENDING,
                period=period,
                reference_id=reference,
            )
        )

    logger.info(
        "Posted %d ledger transaction(s) for payroll %s", len(transactions), period
    )
    return transactions


def post_run_result(
    result: PayrollRunResult, config: PayrollConfig | None = None
) -> list[LedgerTransaction]:
    """Post the ledger for a PayrollRunResult."""
    return post_payroll_ledger(result.new_runs, result.totals, result.period, config)
