"""Payroll service - loads inputs, runs the engine and persists the batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from farm_payroll.calculators.engine import PayrollEngine
from farm_payroll.calculators.ledger import post_run_result
from farm_payroll.calculators.tax_calculator import TaxCalculator
from farm_payroll.calculators.types import (
    Employee as RosterEmployee,
    LedgerTransaction,
    PayrollConfig,
    PayrollRun,
    PayrollRunResult,
)
from farm_payroll.database import acquire_advisory_xact_lock, supports_advisory_locks
from farm_payroll.models import Employee, LedgerEntry, PayrollRunRecord

logger = logging.getLogger(__name__)


class DuplicatePayrollRunError(Exception):
    """Raised when another writer persisted runs for the same period first."""

    def __init__(self, period: str):
        self.period = period
        super().__init__(
            f"Payroll for {period} was written concurrently; the batch was rolled back. "
            "Retry to pick up the remaining employees."
        )


def _is_duplicate_run(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "payroll_run_employee_period_unique" in message or (
        "unique" in message and "payroll_run" in message
    )


@dataclass
class PayrollProcessingResult:
    """What process_payroll did, ready to show an operator."""

    run_result: PayrollRunResult
    transactions: list[LedgerTransaction]

    @property
    def is_noop(self) -> bool:
        return self.run_result.is_noop

    @property
    def message(self) -> str:
        return self.run_result.message


@dataclass
class PayrollPreview:
    """What process_payroll would do, with a bracket-based tax estimate per run.

    ``suggested_tax`` is advisory only; runs always use the recorded tax.
    """

    run_result: PayrollRunResult
    currency: str
    suggested_tax: dict[str, Decimal] = field(default_factory=dict)

    def tax_variance(self, employee_id: str) -> Decimal:
        """Recorded tax minus suggested tax for one previewed employee."""
        run = next(r for r in self.run_result.new_runs if r.employee_id == employee_id)
        return run.tax - self.suggested_tax[employee_id]


class PayrollService:
    """Service for processing payroll against the database.

    The engine and ledger poster are pure; this service owns reading the
    roster and run history and writing runs plus ledger rows in one
    transaction. Key invariants:
    1. History is read inside the same transaction that writes
    2. On PostgreSQL, a transaction-scoped advisory lock serialises a period
    3. The (employee_id, period) unique constraint is the final guard
    """

    def __init__(self, session: AsyncSession, config: PayrollConfig | None = None):
        self.session = session
        self.config = config or PayrollConfig()
        self.engine = PayrollEngine(self.config)
        self.tax_calculator = TaxCalculator(self.config.tax_brackets)

    async def load_roster(self) -> list[RosterEmployee]:
        result = await self.session.execute(select(Employee).order_by(Employee.employee_id))
        return [row.to_domain() for row in result.scalars().all()]

    async def load_runs(self, period: str | None = None) -> list[PayrollRun]:
        query = select(PayrollRunRecord)
        if period is not None:
            query = query.where(PayrollRunRecord.period == period)
        query = query.order_by(PayrollRunRecord.period, PayrollRunRecord.employee_id)
        result = await self.session.execute(query)
        return [row.to_domain() for row in result.scalars().all()]

    async def list_transactions(
        self, period: str | None = None, status: str | None = None
    ) -> list[LedgerEntry]:
        query = select(LedgerEntry)
        if period is not None:
            query = query.where(LedgerEntry.period == period)
        if status is not None:
            query = query.where(LedgerEntry.status == status)
        query = query.order_by(LedgerEntry.date, LedgerEntry.category, LedgerEntry.status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def preview_payroll(self, period: str) -> PayrollPreview:
        """Compute what process_payroll would do, without writing."""
        roster = await self.load_roster()
        existing = await self.load_runs(period)
        run_result = self.engine.run_payroll(period, roster, existing)

        by_id = {e.employee_id: e for e in roster}
        suggested = {
            run.employee_id: self.tax_calculator.suggest_tax_deduction(by_id[run.employee_id])
            for run in run_result.new_runs
        }
        return PayrollPreview(
            run_result=run_result,
            currency=self.config.currency,
            suggested_tax=suggested,
        )

    async def process_payroll(self, period: str) -> PayrollProcessingResult:
        """Process payroll for a period and commit runs plus ledger rows.

        Safe to retry: employees already paid for the period are skipped.
        """
        if supports_advisory_locks(self.session):
            await acquire_advisory_xact_lock(self.session, f"payroll:{period}")

        roster = await self.load_roster()
        # The engine only matches on the requested period
        existing = await self.load_runs(period)

        run_result = self.engine.run_payroll(period, roster, existing)
        if run_result.is_noop:
            logger.info("Payroll %s: %s", period, run_result.message)
            return PayrollProcessingResult(run_result=run_result, transactions=[])

        transactions = post_run_result(run_result, self.config)

        self.session.add_all(PayrollRunRecord.from_domain(run) for run in run_result.new_runs)
        self.session.add_all(LedgerEntry.from_domain(txn) for txn in transactions)

        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if not _is_duplicate_run(exc):
                raise
            logger.warning("Payroll %s: concurrent write detected, batch rolled back", period)
            raise DuplicatePayrollRunError(period) from exc

        logger.info("Payroll %s: %s", period, run_result.message)
        return PayrollProcessingResult(run_result=run_result, transactions=transactions)
