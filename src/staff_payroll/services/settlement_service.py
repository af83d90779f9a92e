"""Settlement service - weekly settled flags for part-time staff."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.ledger import (
    SettlementStatus,
    plan_toggle,
    settlement_key,
    settlement_status,
    weekly_keys_for_month,
    weekly_keys_for_range,
)
from staff_payroll.database import upsert
from staff_payroll.models import PartTimeSettlement

logger = logging.getLogger(__name__)


class SettlementService:
    """Service for part-time settlement flags.

    Only weekly keys are stored. Month and date-range status is
    aggregated from the weekly keys they cover, and toggling a month or
    range toggles each of those weeks.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_settled_keys(self) -> set[str]:
        result = await self.session.execute(
            select(PartTimeSettlement.settlement_key).where(
                PartTimeSettlement.is_settled.is_(True)
            )
        )
        return set(result.scalars().all())

    async def _set(self, key: str, staff_name: str, location: str, settled: bool) -> None:
        values = {
            "is_settled": settled,
            "settled_at": datetime.now(timezone.utc) if settled else None,
        }
        stmt = upsert(self.session, PartTimeSettlement).values(
            settlement_key=key, staff_name=staff_name.strip(), location=location, **values
        )
        await self.session.execute(
            stmt.on_conflict_do_update(index_elements=["settlement_key"], set_=values)
        )

    async def toggle(
        self, staff_name: str, location: str, year: int, month: int, week_number: int
    ) -> bool:
        """Flip one week's settled flag. Returns the new state."""
        key = settlement_key(staff_name, location, year, month, week_number)
        settled = key not in await self.load_settled_keys()
        await self._set(key, staff_name, location, settled)
        logger.info("Settlement %s -> %s", key, "settled" if settled else "unsettled")
        return settled

    async def bulk_toggle(self, staff_name: str, location: str, keys: Sequence[str]) -> bool:
        """Set every key to the inverse of "all settled". Returns the target state."""
        plan = plan_toggle(keys, await self.load_settled_keys())
        for key, target in plan:
            await self._set(key, staff_name, location, target)

        target = plan[0][1] if plan else False
        logger.info(
            "Settlement %s@%s: %d weeks -> %s",
            staff_name,
            location,
            len(plan),
            "settled" if target else "unsettled",
        )
        return target

    async def week_status(
        self, staff_name: str, location: str, year: int, month: int, week_number: int
    ) -> SettlementStatus:
        key = settlement_key(staff_name, location, year, month, week_number)
        return settlement_status([key], await self.load_settled_keys())

    async def month_status(
        self, staff_name: str, location: str, year: int, month: int
    ) -> SettlementStatus:
        keys = weekly_keys_for_month(staff_name, location, year, month)
        return settlement_status(keys, await self.load_settled_keys())

    async def range_status(
        self, staff_name: str, location: str, start: date, end: date
    ) -> SettlementStatus:
        keys = weekly_keys_for_range(staff_name, location, start, end)
        return settlement_status(keys, await self.load_settled_keys())

    async def toggle_month(self, staff_name: str, location: str, year: int, month: int) -> bool:
        return await self.bulk_toggle(
            staff_name, location, weekly_keys_for_month(staff_name, location, year, month)
        )

    async def toggle_range(self, staff_name: str, location: str, start: date, end: date) -> bool:
        return await self.bulk_toggle(
            staff_name, location, weekly_keys_for_range(staff_name, location, start, end)
        )
