"""Part-time service - earnings reports and the weekly advance ledger."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.ledger import resolve_opening_balance, settle_week
from staff_payroll.calculators.part_time import (
    PartTimeSalaryCalculator,
    ReportPeriod,
    normalize_name,
)
from staff_payroll.calculators.types import PartTimeSalaryDetail
from staff_payroll.config import PartTimeRates, get_settings
from staff_payroll.database import upsert
from staff_payroll.exceptions import InputIntegrityError
from staff_payroll.models import PartTimeAdvanceRecord
from staff_payroll.services.attendance_service import AttendanceService

logger = logging.getLogger(__name__)


class PartTimeService:
    """Service for name-keyed part-time staff.

    Ledger upsert pipeline (per staff name, location and week):
    1) Resolve the week window from weeks_in_month
    2) Earnings default to the calculated earnings of that window
    3) Opening balance carries forward from the previous ledger week
    4) Settle the week and store the result under its natural key
    """

    def __init__(self, session: AsyncSession, rates: PartTimeRates | None = None):
        self.session = session
        self.rates = rates or get_settings().part_time_rates
        self.calculator = PartTimeSalaryCalculator(self.rates)

    async def salaries(self, period: ReportPeriod) -> list[PartTimeSalaryDetail]:
        """Earnings of every part-time name that worked in the period."""
        entries = await AttendanceService(self.session, self.rates).load_entries(
            period.start, period.end
        )
        return self.calculator.calculate_all(entries, period)

    async def salary_for(
        self,
        staff_name: str,
        location: str,
        period: ReportPeriod,
        match_location: bool = False,
    ) -> PartTimeSalaryDetail:
        entries = await AttendanceService(self.session, self.rates).load_entries(
            period.start, period.end
        )
        return self.calculator.calculate(
            staff_name, location, entries, period, match_location=match_location
        )

    async def load_advance_records(
        self, staff_name: str | None = None, location: str | None = None
    ) -> list[PartTimeAdvanceRecord]:
        query = select(PartTimeAdvanceRecord).order_by(
            PartTimeAdvanceRecord.year,
            PartTimeAdvanceRecord.month,
            PartTimeAdvanceRecord.week_number,
        )
        if staff_name is not None:
            query = query.where(
                func.lower(PartTimeAdvanceRecord.staff_name) == normalize_name(staff_name)
            )
        if location is not None:
            query = query.where(PartTimeAdvanceRecord.location == location)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def upsert_advance_record(
        self,
        staff_name: str,
        location: str,
        year: int,
        month: int,
        week_number: int,
        advance_given: Decimal = Decimal("0"),
        earnings: Decimal | None = None,
        notes: str | None = None,
    ) -> PartTimeAdvanceRecord:
        """Settle one ledger week and store it; reruns replace the stored week."""
        if not staff_name or not staff_name.strip():
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "Part-time staff name is required"
            )
        if advance_given < 0 or (earnings is not None and earnings < 0):
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE, "Advance and earnings must not be negative"
            )
        try:
            period = ReportPeriod.for_week(year, month, week_number)
        except ValueError as e:
            raise InputIntegrityError(InputIntegrityError.INVALID_VALUE, str(e))

        staff_name = staff_name.strip()
        if earnings is None:
            detail = await self.salary_for(staff_name, location, period, match_location=True)
            earnings = detail.total_earnings

        history = await self.load_advance_records(staff_name, location)
        opening = resolve_opening_balance(history, staff_name, location, year, month, week_number)
        settlement = settle_week(opening, advance_given, earnings)

        # Reruns keep the name as first stored so the natural key matches
        stored_name = next(
            (
                r.staff_name
                for r in history
                if (r.year, r.month, r.week_number) == (year, month, week_number)
            ),
            staff_name,
        )
        values = {
            "week_start_date": period.start,
            "opening_balance": settlement.opening_balance,
            "advance_given": settlement.advance_given,
            "earnings": settlement.earnings,
            "adjustment": settlement.adjustment,
            "pending_salary": settlement.pending_salary,
            "closing_balance": settlement.closing_balance,
            "notes": notes,
        }
        stmt = upsert(self.session, PartTimeAdvanceRecord).values(
            staff_name=stored_name,
            location=location,
            year=year,
            month=month,
            week_number=week_number,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["staff_name", "location", "year", "month", "week_number"],
            set_=values,
        ).returning(PartTimeAdvanceRecord)
        record = await self.session.scalar(
            stmt, execution_options={"populate_existing": True}
        )

        logger.info(
            "Ledger %s@%s %04d-%02d W%d: opening=%s advance=%s earnings=%s closing=%s pending=%s",
            staff_name,
            location,
            year,
            month,
            week_number,
            settlement.opening_balance,
            advance_given,
            earnings,
            settlement.closing_balance,
            settlement.pending_salary,
        )
        return record

    async def advance_report(
        self, start: date, end: date, staff_name: str | None = None
    ) -> list[PartTimeAdvanceRecord]:
        """Ledger weeks starting within [start, end], oldest first."""
        query = (
            select(PartTimeAdvanceRecord)
            .where(
                PartTimeAdvanceRecord.week_start_date >= start,
                PartTimeAdvanceRecord.week_start_date <= end,
            )
            .order_by(
                PartTimeAdvanceRecord.week_start_date,
                PartTimeAdvanceRecord.staff_name,
                PartTimeAdvanceRecord.location,
            )
        )
        if staff_name is not None:
            query = query.where(
                func.lower(PartTimeAdvanceRecord.staff_name) == normalize_name(staff_name)
            )
        result = await self.session.execute(query)
        return list(result.scalars().all())

