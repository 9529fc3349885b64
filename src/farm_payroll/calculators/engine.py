"""Payroll run engine - decides who to pay and computes each breakdown."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from farm_payroll.calculators.compensation import (
    allowance_total,
    deduction_total,
    net_pay,
    validate_payable,
)
from farm_payroll.calculators.types import (
    Employee,
    PayrollConfig,
    PayrollOutcome,
    PayrollRun,
    PayrollRunResult,
    PayrollTotals,
)

logger = logging.getLogger(__name__)


class PayrollEngine:
    """Pure payroll calculation over already-loaded inputs.

    Pipeline for one invocation:
    1) Keep only ACTIVE employees from the roster
    2) Skip anyone who already has a run for the period
    3) Validate compensation for everyone left; negative amounts or deductions
       above gross pay fail the whole batch
    4) Compute net pay and snapshot a PayrollRun per employee
    5) Accumulate net pay, tax and pension totals

    Re-running a period whose runs are already in ``existing_runs`` produces
    no new runs and zero totals.
    """

    def __init__(self, config: PayrollConfig | None = None):
        self.config = config or PayrollConfig()

    def run_payroll(
        self,
        period: str,
        roster: Iterable[Employee],
        existing_runs: Iterable[PayrollRun],
    ) -> PayrollRunResult:
        """Process payroll for ``period``.

        Args:
            period: Opaque period key (canonically YYYY-MM); compared by equality only
            roster: Full employee set, any status
            existing_runs: Every previously persisted run, any period

        Returns:
            PayrollRunResult with the new runs, totals and the outcome
        """
        processed = {run.employee_id for run in existing_runs if run.period == period}

        active = [e for e in roster if e.is_active]
        if not active:
            logger.info("Payroll %s: no active employees", period)
            return self._noop(period, PayrollOutcome.NO_ACTIVE_EMPLOYEES, [])

        pending: list[Employee] = []
        skipped: list[str] = []
        seen: set[str] = set()
        for employee in active:
            if employee.employee_id in seen:
                logger.warning(
                    "Payroll %s: employee %s listed twice in roster; ignoring duplicate",
                    period,
                    employee.employee_id,
                )
                continue
            seen.add(employee.employee_id)
            if employee.employee_id in processed:
                skipped.append(employee.employee_id)
                continue
            pending.append(employee)

        if not pending:
            logger.info(
                "Payroll %s: all %d active employee(s) already processed", period, len(skipped)
            )
            return self._noop(period, PayrollOutcome.ALREADY_PROCESSED, skipped)

        # Reject the whole batch before producing anything
        for employee in pending:
            validate_payable(employee)

        processed_at = self.config.clock()
        totals = PayrollTotals()
        new_runs: list[PayrollRun] = []

        for employee in pending:
            run = self._build_run(employee, period, processed_at)
            new_runs.append(run)
            totals.add(run)

        logger.info(
            "Payroll %s: processed %d employee(s), skipped %d; net=%s tax=%s pension=%s",
            period,
            len(new_runs),
            len(skipped),
            totals.net_pay,
            totals.tax,
            totals.pension,
        )

        return PayrollRunResult(
            period=period,
            outcome=PayrollOutcome.PROCESSED,
            new_runs=new_runs,
            totals=totals,
            skipped_employee_ids=skipped,
        )

    def _build_run(self, employee: Employee, period: str, processed_at) -> PayrollRun:
        """Snapshot one employee's pay for the period."""
        return PayrollRun(
            employee_id=employee.employee_id,
            period=period,
            employee_name=employee.full_name,
            base_pay=employee.base_salary,
            total_allowances=allowance_total(employee),
            total_deductions=deduction_total(employee),
            tax=employee.deductions.tax,
            pension=employee.deductions.pension,
            net_pay=net_pay(employee),
            processed_at=processed_at,
        )

    @staticmethod
    def _noop(period: str, outcome: PayrollOutcome, skipped: list[str]) -> PayrollRunResult:
        return PayrollRunResult(
            period=period,
            outcome=outcome,
            new_runs=[],
            totals=PayrollTotals(),
            skipped_employee_ids=skipped,
        )


def run_payroll(
    period: str,
    roster: Iterable[Employee],
    existing_runs: Iterable[PayrollRun],
    config: PayrollConfig | None = None,
) -> PayrollRunResult:
    """Convenience wrapper around PayrollEngine.run_payroll."""
    return PayrollEngine(config).run_payroll(period, roster, existing_runs)
