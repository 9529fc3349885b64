"""Pytest fixtures for farm payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from farm_payroll.calculators.types import (
    Allowances,
    Deductions,
    Employee,
    PayrollConfig,
)
from farm_payroll.models import Base
from farm_payroll.models import Employee as EmployeeRecord

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2024, 3, 31, 17, 0, tzinfo=timezone.utc)
FIXED_DATE = date(2024, 3, 31)


def make_employee(
    employee_id: str = "E1",
    full_name: str = "John Doe",
    base_salary: Any = "1000",
    status: str = "ACTIVE",
    allowances: dict[str, Any] | None = None,
    deductions: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Employee:
    """Build a roster employee; amounts may be given as strings."""
    return Employee(
        employee_id=employee_id,
        full_name=full_name,
        base_salary=Decimal(str(base_salary)),
        status=status,
        allowances=Allowances(**{k: Decimal(str(v)) for k, v in (allowances or {}).items()}),
        deductions=Deductions(**{k: Decimal(str(v)) for k, v in (deductions or {}).items()}),
        **kwargs,
    )


def make_employee_record(
    employee_id: str = "E1",
    full_name: str = "John Doe",
    base_salary: str = "1000",
    status: str = "ACTIVE",
    **amounts: str,
) -> EmployeeRecord:
    """Build an employee ORM row; keyword amounts map to column names."""
    return EmployeeRecord(
        employee_id=employee_id,
        full_name=full_name,
        status=status,
        salary_structure="MONTHLY",
        base_salary=Decimal(base_salary),
        housing_allowance=Decimal(amounts.get("housing_allowance", "0")),
        transport_allowance=Decimal(amounts.get("transport_allowance", "0")),
        risk_allowance=Decimal(amounts.get("risk_allowance", "0")),
        other_allowance=Decimal(amounts.get("other_allowance", "0")),
        pension_deduction=Decimal(amounts.get("pension_deduction", "0")),
        tax_deduction=Decimal(amounts.get("tax_deduction", "0")),
        health_insurance_deduction=Decimal(amounts.get("health_insurance_deduction", "0")),
    )


@pytest.fixture
def config() -> PayrollConfig:
    """Payroll config with a frozen clock."""
    return PayrollConfig(currency="USD", clock=lambda: FIXED_NOW)


@pytest.fixture
def reference_employee() -> Employee:
    """The worked example: 1000 base, 150 allowances, 120 deductions."""
    return make_employee(
        employee_id="E1",
        full_name="John Doe",
        base_salary="1000",
        allowances={"housing": "100", "transport": "50", "risk": "0", "other": "0"},
        deductions={"tax": "80", "pension": "40", "health_insurance": "0"},
    )


@pytest_asyncio.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_roster(session: AsyncSession) -> list[EmployeeRecord]:
    """Three active employees, one suspended and one terminated."""
    rows = [
        make_employee_record(
            "E1", "John Doe", "1000",
            housing_allowance="100", transport_allowance="50",
            tax_deduction="80", pension_deduction="40",
        ),
        make_employee_record(
            "E2", "Ama Mensah", "800",
            risk_allowance="25.50", tax_deduction="60.25", pension_deduction="32",
            health_insurance_deduction="10",
        ),
        make_employee_record("E3", "Sarah Boateng", "500", other_allowance="20"),
        make_employee_record("E4", "Kwame Osei", "350", status="SUSPENDED", tax_deduction="5"),
        make_employee_record("E5", "Yaw Asare", "180", status="TERMINATED"),
    ]
    session.add_all(rows)
    await session.commit()
    return rows
