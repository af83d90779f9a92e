"""Integration tests for part-time earnings and the weekly advance ledger."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.part_time import ReportPeriod
from staff_payroll.exceptions import InputIntegrityError
from staff_payroll.services import AttendanceService, PartTimeService


@pytest.fixture
def service(session: AsyncSession, rates) -> PartTimeService:
    return PartTimeService(session, rates)


@pytest.fixture
async def ravi_first_week(session: AsyncSession, rates):
    """Ravi works three weekdays and a Sunday in the first week of January."""
    attendance = AttendanceService(session, rates)
    for day in (1, 2, 3, 5):
        await attendance.add_part_time("Ravi", date(2025, 1, day), "Big Shop")


class TestPartTimeSalaries:
    async def test_monthly_report(self, service: PartTimeService, ravi_first_week):
        details = await service.salaries(ReportPeriod.for_month(2025, 1))

        assert len(details) == 1
        assert details[0].staff_name == "Ravi"
        assert details[0].total_days == 4
        assert details[0].total_earnings == Decimal("1450")

    async def test_week_without_work(self, service: PartTimeService, ravi_first_week):
        detail = await service.salary_for("Ravi", "Big Shop", ReportPeriod.for_week(2025, 1, 1))

        assert detail.total_days == 0
        assert detail.total_earnings == Decimal("0")


class TestAdvanceLedger:
    """Test weekly settlement and carry-forward of advances."""

    async def test_advance_exceeding_earnings_carries(
        self, service: PartTimeService, ravi_first_week
    ):
        week0 = await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("2000")
        )

        assert week0.week_start_date == date(2025, 1, 1)
        assert week0.opening_balance == Decimal("0")
        assert week0.earnings == Decimal("1450")
        assert week0.adjustment == Decimal("1450")
        assert week0.pending_salary == Decimal("0")
        assert week0.closing_balance == Decimal("550")

        week1 = await service.upsert_advance_record("Ravi", "Big Shop", 2025, 1, 1)

        assert week1.week_start_date == date(2025, 1, 8)
        assert week1.opening_balance == Decimal("550")
        assert week1.closing_balance == Decimal("550")
        assert week1.pending_salary == Decimal("0")

    async def test_rerun_replaces_week(self, service: PartTimeService, ravi_first_week):
        first = await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("2000")
        )
        rerun = await service.upsert_advance_record(
            "ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("1000")
        )

        assert rerun.record_id == first.record_id
        assert rerun.closing_balance == Decimal("0")
        assert rerun.pending_salary == Decimal("450")
        assert rerun.adjustment == Decimal("1000")
        assert len(await service.load_advance_records("Ravi", "Big Shop")) == 1

    async def test_balance_carries_across_months(
        self, service: PartTimeService, ravi_first_week
    ):
        await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("2000")
        )

        february = await service.upsert_advance_record("Ravi", "Big Shop", 2025, 2, 0)

        assert february.opening_balance == Decimal("550")
        assert february.closing_balance == Decimal("550")

    async def test_locations_keep_separate_ledgers(self, service: PartTimeService):
        await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("500"), earnings=Decimal("0")
        )

        other = await service.upsert_advance_record(
            "Ravi", "Small Shop", 2025, 1, 1, earnings=Decimal("0")
        )

        assert other.opening_balance == Decimal("0")

    async def test_explicit_earnings(self, service: PartTimeService, ravi_first_week):
        record = await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("300"), earnings=Decimal("1000")
        )

        assert record.earnings == Decimal("1000")
        assert record.pending_salary == Decimal("700")

    async def test_week_out_of_range(self, service: PartTimeService):
        with pytest.raises(InputIntegrityError):
            await service.upsert_advance_record("Ravi", "Big Shop", 2025, 2, 4)

    async def test_negative_advance(self, service: PartTimeService):
        with pytest.raises(InputIntegrityError):
            await service.upsert_advance_record(
                "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("-5")
            )

    async def test_advance_report(self, service: PartTimeService, ravi_first_week):
        await service.upsert_advance_record(
            "Ravi", "Big Shop", 2025, 1, 0, advance_given=Decimal("2000")
        )
        await service.upsert_advance_record("Ravi", "Big Shop", 2025, 1, 1)
        await service.upsert_advance_record("Ravi", "Big Shop", 2025, 2, 0)
        await service.upsert_advance_record(
            "Mani", "Godown", 2025, 1, 2, advance_given=Decimal("100")
        )

        january = await service.advance_report(date(2025, 1, 1), date(2025, 1, 31))
        ravi_only = await service.advance_report(
            date(2025, 1, 1), date(2025, 1, 31), staff_name="RAVI"
        )

        assert [r.week_start_date for r in january] == [
            date(2025, 1, 1),
            date(2025, 1, 8),
            date(2025, 1, 15),
        ]
        assert [(r.month, r.week_number) for r in ravi_only] == [(1, 0), (1, 1)]

    async def test_ledger_counts_only_its_location(
        self, session: AsyncSession, service: PartTimeService, rates
    ):
        attendance = AttendanceService(session, rates)
        await attendance.add_part_time("Ravi", date(2025, 1, 2), "Big Shop")
        await attendance.add_part_time("Ravi", date(2025, 1, 3), "Small Shop")

        big = await service.upsert_advance_record("Ravi", "Big Shop", 2025, 1, 0)
        small = await service.upsert_advance_record("Ravi", "Small Shop", 2025, 1, 0)
        report = await service.salary_for("Ravi", "Big Shop", ReportPeriod.for_week(2025, 1, 0))

        assert big.earnings == Decimal("350")
        assert small.earnings == Decimal("350")
        assert big.earnings + small.earnings == report.total_earnings
