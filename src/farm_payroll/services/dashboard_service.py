"""Payroll dashboard aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_payroll.calculators.types import PayrollTotals, TransactionStatus
from farm_payroll.models import LedgerEntry
from farm_payroll.services.payroll_service import PayrollService
from farm_payroll.services.task_service import ProductivityReport, TaskService


@dataclass
class PayrollDashboard:
    period: str
    totals: PayrollTotals
    monthly_gross_salary: Decimal
    active_headcount: int
    outstanding_liabilities: Decimal
    productivity: ProductivityReport


class DashboardService:
    """Builds the payroll dashboard from persisted runs, ledger rows and tasks."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.payroll = PayrollService(session)
        self.tasks = TaskService(session)

    async def outstanding_liabilities(self) -> Decimal:
        """Sum of PENDING ledger rows (owed but not yet paid)."""
        result = await self.session.execute(
            select(LedgerEntry.amount).where(
                LedgerEntry.status == TransactionStatus.PENDING.value
            )
        )
        return sum(result.scalars().all(), Decimal("0"))

    async def build(self, period: str) -> PayrollDashboard:
        roster = await self.payroll.load_roster()
        runs = await self.payroll.load_runs(period)
        active = [e for e in roster if e.is_active]

        return PayrollDashboard(
            period=period,
            totals=PayrollTotals.from_runs(runs),
            monthly_gross_salary=sum((e.base_salary for e in active), Decimal("0")),
            active_headcount=len(active),
            outstanding_liabilities=await self.outstanding_liabilities(),
            productivity=await self.tasks.productivity(roster),
        )
