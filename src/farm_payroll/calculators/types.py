"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

ZERO = Decimal("0")


class CompensationValidationError(ValueError):
    """Raised when compensation data is malformed, negative or exceeds gross pay."""

    def __init__(self, problems: list[str], employee_id: str | None = None):
        self.problems = problems
        self.employee_id = employee_id
        prefix = f"Employee '{employee_id}': " if employee_id else ""
        super().__init__(prefix + "; ".join(problems))


class EmploymentStatus(str, Enum):
    """Employment status values."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


class SalaryStructure(str, Enum):
    """How the base salary is quoted."""

    MONTHLY = "MONTHLY"
    DAILY = "DAILY"


class PayrollRunStatus(str, Enum):
    """Payroll run status values. Only PAID is produced by a run."""

    PAID = "PAID"


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionCategory(str, Enum):
    LABOR = "LABOR"
    OTHER = "OTHER"


class TransactionStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"


class PayrollOutcome(str, Enum):
    """What a payroll run invocation actually did."""

    PROCESSED = "PROCESSED"
    NO_ACTIVE_EMPLOYEES = "NO_ACTIVE_EMPLOYEES"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"


def _to_decimal(value: Any, name: str) -> Decimal:
    """Coerce an amount to Decimal; missing is zero, junk and NaN/Infinity are rejected."""
    if value is None:
        return ZERO
    try:
        if isinstance(value, float):
            # Route through str so 0.1 stays 0.1
            amount = Decimal(str(value))
        else:
            amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise CompensationValidationError(
            [f"{name} is not a valid amount (got {value!r})"]
        ) from exc
    if not amount.is_finite():
        raise CompensationValidationError([f"{name} must be a finite amount (got {value!r})"])
    return amount


class _MoneyRecord:
    """Closed record of named, non-negative money fields."""

    def __post_init__(self) -> None:
        prefix = type(self).__name__.lower()
        problems = []
        for f in fields(self):
            try:
                amount = _to_decimal(getattr(self, f.name), f"{prefix}.{f.name}")
            except CompensationValidationError as exc:
                problems.extend(exc.problems)
                continue
            object.__setattr__(self, f.name, amount)
            if amount < 0:
                problems.append(f"{prefix}.{f.name} must be >= 0 (got {amount})")
        if problems:
            raise CompensationValidationError(problems)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None):
        """Build from a mapping; absent keys are zero, unknown keys are rejected."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise CompensationValidationError(
                [f"unknown {cls.__name__.lower()} field(s): {', '.join(unknown)}"]
            )
        return cls(**data)

    def values(self) -> list[Decimal]:
        return [getattr(self, f.name) for f in fields(self)]

    def total(self) -> Decimal:
        return sum(self.values(), ZERO)

    def to_dict(self) -> dict[str, Decimal]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Allowances(_MoneyRecord):
    """Monthly allowances paid on top of base salary."""

    housing: Decimal = ZERO
    transport: Decimal = ZERO
    risk: Decimal = ZERO
    other: Decimal = ZERO


@dataclass(frozen=True)
class Deductions(_MoneyRecord):
    """Monthly deductions withheld from pay."""

    pension: Decimal = ZERO
    tax: Decimal = ZERO
    health_insurance: Decimal = ZERO


@dataclass(frozen=True)
class Employee:
    """Roster entry as seen by the payroll core."""

    employee_id: str
    full_name: str
    base_salary: Decimal = ZERO
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    salary_structure: SalaryStructure = SalaryStructure.MONTHLY
    allowances: Allowances = field(default_factory=Allowances)
    deductions: Deductions = field(default_factory=Deductions)
    role: str | None = None
    department: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", EmploymentStatus(self.status))
        object.__setattr__(self, "salary_structure", SalaryStructure(self.salary_structure))
        try:
            object.__setattr__(self, "base_salary", _to_decimal(self.base_salary, "base_salary"))
            if isinstance(self.allowances, Mapping):
                object.__setattr__(self, "allowances", Allowances.from_mapping(self.allowances))
            if isinstance(self.deductions, Mapping):
                object.__setattr__(self, "deductions", Deductions.from_mapping(self.deductions))
        except CompensationValidationError as exc:
            raise CompensationValidationError(exc.problems, employee_id=self.employee_id) from exc
        if self.base_salary < 0:
            raise CompensationValidationError(
                [f"base_salary must be >= 0 (got {self.base_salary})"],
                employee_id=self.employee_id,
            )

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.ACTIVE


@dataclass(frozen=True)
class PayrollRun:
    """Snapshot of one employee's pay for one period.

    The logical key is (period, employee_id); persistence picks its own id.
    """

    employee_id: str
    period: str
    employee_name: str
    base_pay: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    tax: Decimal
    pension: Decimal
    net_pay: Decimal
    processed_at: datetime
    overtime_hours: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    status: PayrollRunStatus = PayrollRunStatus.PAID

    @property
    def key(self) -> tuple[str, str]:
        return (self.period, self.employee_id)

    @property
    def gross_pay(self) -> Decimal:
        return self.base_pay + self.total_allowances


@dataclass
class PayrollTotals:
    """Running totals accumulated across one payroll run invocation."""

    net_pay: Decimal = ZERO
    tax: Decimal = ZERO
    pension: Decimal = ZERO
    gross: Decimal = ZERO
    headcount: int = 0

    def add(self, run: PayrollRun) -> None:
        self.net_pay += run.net_pay
        self.tax += run.tax
        self.pension += run.pension
        self.gross += run.gross_pay
        self.headcount += 1

    @classmethod
    def from_runs(cls, runs: list[PayrollRun]) -> PayrollTotals:
        totals = cls()
        for run in runs:
            totals.add(run)
        return totals

    @property
    def is_zero(self) -> bool:
        return self.net_pay == 0 and self.tax == 0 and self.pension == 0


@dataclass
class PayrollRunResult:
    """Result of a payroll run invocation."""

    period: str
    outcome: PayrollOutcome
    new_runs: list[PayrollRun]
    totals: PayrollTotals
    skipped_employee_ids: list[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return self.outcome != PayrollOutcome.PROCESSED

    @property
    def processed_count(self) -> int:
        return len(self.new_runs)

    @property
    def message(self) -> str:
        """Operator-facing summary of what happened."""
        if self.outcome == PayrollOutcome.NO_ACTIVE_EMPLOYEES:
            return f"No active employees to pay for {self.period}; nothing was processed"
        if self.outcome == PayrollOutcome.ALREADY_PROCESSED:
            return f"Payroll for {self.period} was already processed; nothing was processed"
        return (
            f"Processed payroll for {self.processed_count} employee(s) in {self.period}. "
            f"Net payout: {self.totals.net_pay} | Tax: {self.totals.tax} | "
            f"Pension: {self.totals.pension}"
        )


@dataclass(frozen=True)
class LedgerTransaction:
    """Append-only ledger row produced by payroll posting."""

    date: date
    description: str
    amount: Decimal
    category: TransactionCategory
    status: TransactionStatus
    period: str
    type: TransactionType = TransactionType.EXPENSE
    reference_id: str | None = None
    transaction_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation."""

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.15 for 15%
    flat_amount: Decimal = ZERO


# Monthly income tax bands used by the farm (0% / 15% / 20% / 25% / 30% / 35%)
DEFAULT_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("2000"), Decimal("0")),
    TaxBracket(Decimal("2000"), Decimal("4000"), Decimal("0.15")),
    TaxBracket(Decimal("4000"), Decimal("7000"), Decimal("0.20")),
    TaxBracket(Decimal("7000"), Decimal("10000"), Decimal("0.25")),
    TaxBracket(Decimal("10000"), Decimal("14000"), Decimal("0.30")),
    TaxBracket(Decimal("14000"), None, Decimal("0.35")),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PayrollConfig:
    """Explicit configuration passed into a payroll run.

    The calculators never read process state; whatever they need arrives
    through this value.
    """

    currency: str = "USD"
    clock: Callable[[], datetime] = _utcnow
    tax_brackets: tuple[TaxBracket, ...] = DEFAULT_TAX_BRACKETS
