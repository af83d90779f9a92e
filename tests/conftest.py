"""Pytest fixtures for staff payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from staff_payroll.api.app import create_app
from staff_payroll.api.dependencies import get_db_session, get_part_time_rates
from staff_payroll.config import PartTimeRates
from staff_payroll.models import Base, StaffMember

# One in-memory SQLite database per test, shared across sessions via StaticPool
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine():
    """Create test database engine."""
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


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def rates() -> PartTimeRates:
    return PartTimeRates(weekday_rate=Decimal("350"), sunday_rate=Decimal("400"))


@pytest.fixture
async def client(session_factory, rates) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against an app wired to the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_part_time_rates] = lambda: rates

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def big_shop_staff(session: AsyncSession) -> StaffMember:
    """A full-time staff member at Big Shop."""
    member = StaffMember(
        name="Kumar",
        location="Big Shop",
        employment_type="full-time",
        is_active=True,
        joined_date=date(2023, 6, 1),
        basic_salary=Decimal("13000"),
        incentive=Decimal("2600"),
        hra=Decimal("1000"),
        meal_allowance=Decimal("0"),
        salary_supplements={},
    )
    session.add(member)
    await session.flush()
    return member
