"""Integration tests for part-time settlement flags."""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.ledger import settlement_key
from staff_payroll.services import SettlementService


@pytest.fixture
def service(session: AsyncSession) -> SettlementService:
    return SettlementService(session)


class TestWeekToggle:
    async def test_toggle_flips(self, service: SettlementService):
        assert await service.toggle("Ravi", "Big Shop", 2025, 1, 2) is True
        assert (await service.week_status("ravi", "Big Shop", 2025, 1, 2)).is_fully_settled

        assert await service.toggle("Ravi", "Big Shop", 2025, 1, 2) is False
        assert not (await service.week_status("Ravi", "Big Shop", 2025, 1, 2)).is_fully_settled

    async def test_keys_are_scoped_by_location(self, service: SettlementService):
        await service.toggle("Ravi", "Big Shop", 2025, 1, 0)

        assert await service.load_settled_keys() == {
            settlement_key("Ravi", "Big Shop", 2025, 1, 0)
        }
        status = await service.week_status("Ravi", "Small Shop", 2025, 1, 0)
        assert not status.is_fully_settled


class TestBulkToggle:
    """Test month and range aggregation over weekly flags."""

    async def test_partial_month_settles_then_unsettles(self, service: SettlementService):
        await service.toggle("Ravi", "Big Shop", 2025, 1, 1)
        partial = await service.month_status("Ravi", "Big Shop", 2025, 1)
        assert partial.is_partially_settled
        assert partial.settled_count == 1

        assert await service.toggle_month("Ravi", "Big Shop", 2025, 1) is True
        full = await service.month_status("Ravi", "Big Shop", 2025, 1)
        assert full.is_fully_settled
        assert full.settled_count == 5

        assert await service.toggle_month("Ravi", "Big Shop", 2025, 1) is False
        cleared = await service.month_status("Ravi", "Big Shop", 2025, 1)
        assert cleared.settled_count == 0
        assert not cleared.is_partially_settled

    async def test_range(self, service: SettlementService):
        start, end = date(2025, 1, 27), date(2025, 2, 9)

        assert await service.toggle_range("Ravi", "Big Shop", start, end) is True

        status = await service.range_status("Ravi", "Big Shop", start, end)
        assert status.is_fully_settled
        assert status.settled_count == 4

        # The range covered February's first two weeks only
        february = await service.month_status("Ravi", "Big Shop", 2025, 2)
        assert february.is_partially_settled
        assert february.settled_count == 2
