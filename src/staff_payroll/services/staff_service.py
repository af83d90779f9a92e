"""Staff service - roster, archive/rejoin lifecycle and salary hikes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.dates import round_to_nearest_10
from staff_payroll.calculators.types import EmploymentType
from staff_payroll.exceptions import InputIntegrityError, RecordNotFoundError, StaffNotFoundError
from staff_payroll.models import AdvanceDeduction, OldStaffRecord, SalaryHike, StaffMember
from staff_payroll.models.staff import supplements_to_json

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "location",
        "employment_type",
        "joined_date",
        "basic_salary",
        "incentive",
        "hra",
        "meal_allowance",
        "salary_supplements",
        "sunday_penalty_enabled",
        "salary_calculation_days",
        "contact_number",
        "address",
        "display_order",
    }
)


class _Joined(Protocol):
    staff_id: UUID
    joined_date: date
    is_active: bool


class _Hike(Protocol):
    staff_id: UUID
    hike_date: date


def one_year_before(today: date) -> date:
    """Same calendar day one year earlier (Feb 29 falls back to Feb 28)."""
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        return today.replace(year=today.year - 1, day=28)


def staff_due_for_hike(
    staff: Iterable[_Joined],
    hikes: Iterable[_Hike],
    today: date | None = None,
) -> list[_Joined]:
    """Active staff who joined at least a year ago with no hike in the last year."""
    cutoff = one_year_before(today or date.today())
    recently_hiked = {h.staff_id for h in hikes if h.hike_date > cutoff}
    return [
        s
        for s in staff
        if s.is_active and s.joined_date <= cutoff and s.staff_id not in recently_hiked
    ]


def _validate_fields(fields: dict[str, Any]) -> None:
    for required in ("name", "location"):
        if required in fields and not str(fields[required] or "").strip():
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, f"Staff {required} is required"
            )
    if "employment_type" in fields:
        try:
            fields["employment_type"] = EmploymentType(fields["employment_type"]).value
        except ValueError:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE,
                f"Invalid employment type: {fields['employment_type']}",
            )
    for money in ("basic_salary", "incentive", "hra", "meal_allowance"):
        if money in fields and Decimal(fields[money]) < 0:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE, f"{money} must not be negative"
            )


class StaffService:
    """Service for the staff roster.

    Operations:
    - list_staff / get_staff: Read the roster
    - create_staff / update_staff: Maintain compensation templates
    - archive_staff: Soft-delete with an immutable snapshot
    - rejoin_staff: Restore an archived member as a new active staff member
    - record_hike: Change compensation and keep the hike history
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_staff(self, include_inactive: bool = False) -> list[StaffMember]:
        query = select(StaffMember).order_by(StaffMember.display_order, StaffMember.name)
        if not include_inactive:
            query = query.where(StaffMember.is_active.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_staff(self, staff_id: UUID) -> StaffMember:
        member = await self.session.get(StaffMember, staff_id)
        if member is None:
            raise StaffNotFoundError(staff_id)
        return member

    async def create_staff(self, **fields: Any) -> StaffMember:
        """Add a staff member. name and location are required."""
        for required in ("name", "location"):
            fields.setdefault(required, None)
        _validate_fields(fields)

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE,
                f"Unknown staff fields: {', '.join(sorted(unknown))}",
            )

        fields["name"] = fields["name"].strip()
        if "salary_supplements" in fields:
            fields["salary_supplements"] = supplements_to_json(fields["salary_supplements"])

        member = StaffMember(**fields)
        member.is_active = True
        member.joined_date = fields.get("joined_date") or date.today()
        self.session.add(member)
        await self.session.flush()
        member.initial_salary = member.total_salary

        logger.info("Added staff %s (%s) at %s", member.name, member.staff_id, member.location)
        return member

    async def update_staff(self, staff_id: UUID, **changes: Any) -> StaffMember:
        member = await self.get_staff(staff_id)
        _validate_fields(changes)

        for key, value in changes.items():
            if key not in EDITABLE_FIELDS:
                raise InputIntegrityError(
                    InputIntegrityError.INVALID_VALUE, f"Field {key} cannot be edited"
                )
            if key == "salary_supplements":
                value = supplements_to_json(value)
            setattr(member, key, value)

        await self.session.flush()
        return member

    async def latest_advance(self, staff_id: UUID) -> AdvanceDeduction | None:
        """Most recent advance record by (year, month)."""
        result = await self.session.execute(
            select(AdvanceDeduction)
            .where(AdvanceDeduction.staff_id == staff_id)
            .order_by(AdvanceDeduction.year.desc(), AdvanceDeduction.month.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def archive_staff(
        self,
        staff_id: UUID,
        reason: str,
        left_date: date | None = None,
    ) -> OldStaffRecord:
        """Snapshot a leaving staff member and deactivate them.

        The outstanding advance is the new_advance of the latest advance
        record, and that record is stored alongside the snapshot.
        """
        if not reason or not reason.strip():
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "A reason is required to archive staff"
            )

        member = await self.get_staff(staff_id)
        latest = await self.latest_advance(staff_id)
        outstanding = Decimal(latest.new_advance) if latest is not None else Decimal("0")
        last_advance_data = None
        if latest is not None:
            last_advance_data = {
                "year": latest.year,
                "month": latest.month,
                "old_advance": str(latest.old_advance),
                "current_advance": str(latest.current_advance),
                "deduction": str(latest.deduction),
                "new_advance": str(latest.new_advance),
                "notes": latest.notes,
            }

        record = OldStaffRecord(
            original_staff_id=member.staff_id,
            name=member.name,
            location=member.location,
            employment_type=member.employment_type,
            joined_date=member.joined_date,
            left_date=left_date or date.today(),
            reason=reason.strip(),
            basic_salary=member.basic_salary,
            incentive=member.incentive,
            hra=member.hra,
            meal_allowance=member.meal_allowance,
            salary_supplements=dict(member.salary_supplements or {}),
            total_salary=member.total_salary,
            sunday_penalty_enabled=member.sunday_penalty_enabled,
            contact_number=member.contact_number,
            address=member.address,
            total_advance_outstanding=outstanding,
            last_advance_data=last_advance_data,
        )
        self.session.add(record)
        member.is_active = False
        await self.session.flush()

        logger.info(
            "Archived staff %s (%s): %s, outstanding advance %s",
            member.name,
            member.staff_id,
            record.reason,
            outstanding,
        )
        return record

    async def list_old_staff(self) -> list[OldStaffRecord]:
        result = await self.session.execute(
            select(OldStaffRecord).order_by(OldStaffRecord.left_date.desc())
        )
        return list(result.scalars().all())

    async def rejoin_staff(self, record_id: UUID, today: date | None = None) -> StaffMember:
        """Bring an archived staff member back as a new active member.

        An outstanding advance is restored as this month's opening advance.
        The archive record is removed.
        """
        record = await self.session.get(OldStaffRecord, record_id)
        if record is None:
            raise RecordNotFoundError("Old staff record", record_id)

        today = today or date.today()
        member = StaffMember(
            name=record.name,
            location=record.location,
            employment_type=record.employment_type,
            is_active=True,
            joined_date=today,
            basic_salary=record.basic_salary,
            incentive=record.incentive,
            hra=record.hra,
            meal_allowance=record.meal_allowance,
            salary_supplements=dict(record.salary_supplements or {}),
            sunday_penalty_enabled=record.sunday_penalty_enabled,
            contact_number=record.contact_number,
            address=record.address,
        )
        self.session.add(member)
        await self.session.flush()
        member.initial_salary = member.total_salary

        outstanding = Decimal(record.total_advance_outstanding)
        if outstanding > 0:
            self.session.add(
                AdvanceDeduction(
                    staff_id=member.staff_id,
                    year=today.year,
                    month=today.month,
                    old_advance=outstanding,
                    current_advance=Decimal("0"),
                    deduction=Decimal("0"),
                    new_advance=round_to_nearest_10(outstanding),
                    notes="Restored on rejoin",
                )
            )

        await self.session.delete(record)
        await self.session.flush()

        logger.info(
            "Rejoined staff %s as %s, restored advance %s",
            member.name,
            member.staff_id,
            outstanding,
        )
        return member

    async def record_hike(
        self,
        staff_id: UUID,
        hike_date: date | None = None,
        reason: str | None = None,
        **components: Decimal,
    ) -> SalaryHike:
        """Apply new compensation components and log the hike.

        components may carry basic_salary, incentive, hra, meal_allowance
        and salary_supplements.
        """
        allowed = {"basic_salary", "incentive", "hra", "meal_allowance", "salary_supplements"}
        unknown = set(components) - allowed
        if unknown:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE,
                f"Unknown salary components: {', '.join(sorted(unknown))}",
            )

        member = await self.get_staff(staff_id)
        old_salary = member.total_salary
        await self.update_staff(staff_id, **components)
        new_salary = member.total_salary

        hike = SalaryHike(
            staff_id=staff_id,
            old_salary=old_salary,
            new_salary=new_salary,
            hike_date=hike_date or date.today(),
            reason=reason,
        )
        self.session.add(hike)
        await self.session.flush()

        logger.info(
            "Salary hike for %s (%s): %s -> %s", member.name, staff_id, old_salary, new_salary
        )
        return hike

    async def list_hikes(self, staff_id: UUID | None = None) -> list[SalaryHike]:
        query = select(SalaryHike).order_by(SalaryHike.hike_date.desc())
        if staff_id is not None:
            query = query.where(SalaryHike.staff_id == staff_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def due_for_hike(self, today: date | None = None) -> list[StaffMember]:
        staff = await self.list_staff()
        hikes = await self.list_hikes()
        return staff_due_for_hike(staff, hikes, today)
