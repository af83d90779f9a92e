"""Salary service - monthly full-time salary sheet, advances and overrides."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.dates import month_bounds, round_to_nearest_10
from staff_payroll.calculators.full_time import FullTimeSalaryCalculator, find_previous_advance
from staff_payroll.calculators.types import AdvanceEntry, SalaryDetail, SalaryOverrideValues
from staff_payroll.database import upsert
from staff_payroll.exceptions import InputIntegrityError
from staff_payroll.models import AdvanceDeduction, SalaryOverride
from staff_payroll.models.staff import supplements_to_json
from staff_payroll.services.attendance_service import AttendanceService
from staff_payroll.services.staff_service import StaffService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _check_period(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise InputIntegrityError(InputIntegrityError.INVALID_VALUE, f"Invalid month: {month}")
    if year < 1:
        raise InputIntegrityError(InputIntegrityError.INVALID_VALUE, f"Invalid year: {year}")


class SalaryService:
    """Service for full-time monthly salaries.

    Salary details are derived on every call from staff, attendance,
    advances and overrides; nothing derived is stored.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.calculator = FullTimeSalaryCalculator()

    async def load_advances(self, staff_id: UUID | None = None) -> list[AdvanceEntry]:
        query = select(AdvanceDeduction).order_by(AdvanceDeduction.year, AdvanceDeduction.month)
        if staff_id is not None:
            query = query.where(AdvanceDeduction.staff_id == staff_id)
        result = await self.session.execute(query)
        return [r.to_entry() for r in result.scalars().all()]

    async def load_overrides(self, year: int, month: int) -> list[SalaryOverrideValues]:
        result = await self.session.execute(
            select(SalaryOverride).where(
                SalaryOverride.year == year, SalaryOverride.month == month
            )
        )
        return [r.to_values() for r in result.scalars().all()]

    async def salary_sheet(self, year: int, month: int) -> list[SalaryDetail]:
        """Salary details of every active full-time staff member for a month."""
        _check_period(year, month)
        staff = await StaffService(self.session).list_staff()
        start, end = month_bounds(year, month)
        entries = await AttendanceService(self.session).load_entries(start, end)
        return self.calculator.salary_sheet(
            [s.to_profile() for s in staff],
            entries,
            await self.load_advances(),
            await self.load_overrides(year, month),
            year,
            month,
        )

    async def save_advance(
        self,
        staff_id: UUID,
        year: int,
        month: int,
        current_advance: Decimal = ZERO,
        deduction: Decimal = ZERO,
        old_advance: Decimal | None = None,
        notes: str | None = None,
    ) -> AdvanceDeduction:
        """Upsert the advance record of a staff member for a month.

        old_advance defaults to the carried-forward balance of the most
        recent earlier month, also when given as 0. new_advance is always
        recomputed.
        """
        _check_period(year, month)
        if current_advance < 0 or deduction < 0:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE, "Advance and deduction must not be negative"
            )
        await StaffService(self.session).get_staff(staff_id)

        if not old_advance:
            old_advance = find_previous_advance(
                staff_id, await self.load_advances(staff_id), year, month
            )

        values = {
            "old_advance": old_advance,
            "current_advance": current_advance,
            "deduction": deduction,
            "new_advance": round_to_nearest_10(old_advance + current_advance - deduction),
            "notes": notes,
        }
        stmt = upsert(self.session, AdvanceDeduction).values(
            staff_id=staff_id, year=year, month=month, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["staff_id", "year", "month"], set_=values
        ).returning(AdvanceDeduction)
        record = await self.session.scalar(
            stmt, execution_options={"populate_existing": True}
        )

        logger.info(
            "Saved advance for %s %04d-%02d: old=%s current=%s deduction=%s new=%s",
            staff_id,
            year,
            month,
            record.old_advance,
            record.current_advance,
            record.deduction,
            record.new_advance,
        )
        return record

    async def upsert_override(
        self,
        staff_id: UUID,
        year: int,
        month: int,
        basic: Decimal | None = None,
        incentive: Decimal | None = None,
        hra: Decimal | None = None,
        meal_allowance: Decimal | None = None,
        sunday_penalty: Decimal | None = None,
        salary_supplements: dict[str, Decimal] | None = None,
    ) -> SalaryOverride:
        """Store manual component values; None keeps the computed value."""
        _check_period(year, month)
        await StaffService(self.session).get_staff(staff_id)

        values = {
            "basic_override": basic,
            "incentive_override": incentive,
            "hra_override": hra,
            "meal_allowance_override": meal_allowance,
            "sunday_penalty_override": sunday_penalty,
            "salary_supplements_override": supplements_to_json(salary_supplements),
        }
        stmt = upsert(self.session, SalaryOverride).values(
            staff_id=staff_id, year=year, month=month, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["staff_id", "year", "month"], set_=values
        ).returning(SalaryOverride)
        record = await self.session.scalar(
            stmt, execution_options={"populate_existing": True}
        )

        logger.info("Saved salary override for %s %04d-%02d", staff_id, year, month)
        return record
