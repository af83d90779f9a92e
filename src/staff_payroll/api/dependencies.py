"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.config import PartTimeRates, get_settings
from staff_payroll.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def get_part_time_rates() -> PartTimeRates:
    """Part-time pay rates from settings."""
    return get_settings().part_time_rates


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Rates = Annotated[PartTimeRates, Depends(get_part_time_rates)]
