#!/usr/bin/env python
"""Create the farm payroll tables and optionally seed a demo roster.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url sqlite+aiosqlite:///farm.db --seed
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from farm_payroll.config import get_settings
from farm_payroll.models import Base, Employee, Task

DEMO_EMPLOYEES = [
    # id, name, role, status, base, housing, transport, tax, pension
    ("E001", "John Doe", "Farm Manager", "ACTIVE", "15000", "1500", "500", "3200", "825"),
    ("E002", "Ama Mensah", "Veterinarian", "ACTIVE", "8000", "800", "300", "1150", "440"),
    ("E003", "Kwame Osei", "Farm Hand", "SUSPENDED", "3500", "200", "150", "225", "192.50"),
    ("E004", "Sarah Boateng", "Accountant", "ACTIVE", "5000", "400", "200", "500", "275"),
    ("E005", "Yaw Asare", "Security", "ACTIVE", "1800", "0", "100", "0", "99"),
]


def demo_roster() -> list[Employee]:
    return [
        Employee(
            employee_id=emp_id,
            full_name=name,
            role=role,
            status=status,
            salary_structure="MONTHLY",
            base_salary=Decimal(base),
            housing_allowance=Decimal(housing),
            transport_allowance=Decimal(transport),
            tax_deduction=Decimal(tax),
            pension_deduction=Decimal(pension),
        )
        for emp_id, name, role, status, base, housing, transport, tax, pension in DEMO_EMPLOYEES
    ]


def demo_tasks() -> list[Task]:
    today = date.today()
    return [
        Task(title="Vaccinate House B broilers", assignee="Ama Mensah", priority="HIGH",
             due=today + timedelta(days=1), status="PENDING", flock_id="F002"),
        Task(title="Repair feeder line", assignee="Kwame Osei", priority="MEDIUM",
             due=today - timedelta(days=2), status="IN_PROGRESS"),
        Task(title="Monthly stock count", assignee="Sarah Boateng", priority="LOW",
             due=today - timedelta(days=5), status="COMPLETED"),
    ]


async def init_db(database_url: str, seed: bool) -> None:
    engine = create_async_engine(database_url, echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("Tables created")

        if seed:
            async with AsyncSession(engine) as session:
                session.add_all(demo_roster())
                session.add_all(demo_tasks())
                await session.commit()
            print(f"Seeded {len(DEMO_EMPLOYEES)} employees")
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create farm payroll tables")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    parser.add_argument("--seed", action="store_true", help="Insert a demo roster and tasks")
    args = parser.parse_args()

    asyncio.run(init_db(args.database_url or get_settings().database_url, args.seed))


if __name__ == "__main__":
    main()
