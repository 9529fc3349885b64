"""Integration test fixtures: the FastAPI app wired to the test database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from farm_payroll.api.app import create_app
from farm_payroll.api.dependencies import get_db_session, get_payroll_config
from farm_payroll.calculators.types import PayrollConfig


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    config: PayrollConfig,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing.

    Each request gets its own session on the in-memory database and the
    payroll config with the frozen clock.
    """
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_payroll_config] = lambda: config

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
