"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farm_payroll.calculators.types import PayrollConfig
from farm_payroll.config import get_settings
from farm_payroll.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_payroll_config() -> PayrollConfig:
    """Payroll config derived from settings, passed explicitly into the engine."""
    return get_settings().payroll_config()


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Config = Annotated[PayrollConfig, Depends(get_payroll_config)]
