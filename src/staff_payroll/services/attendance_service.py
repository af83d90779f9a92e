"""Attendance service - daily marking for full-time and part-time staff."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_payroll.calculators.attendance import LocationSummary, location_summary
from staff_payroll.calculators.part_time import default_daily_salary, normalize_name
from staff_payroll.calculators.types import (
    AttendanceEntry,
    AttendanceStatus,
    EmploymentType,
    PartTimeAttendance,
    Shift,
)
from staff_payroll.config import PartTimeRates, get_settings
from staff_payroll.exceptions import InputIntegrityError, RecordNotFoundError
from staff_payroll.models import AttendanceRecord, StaffMember
from staff_payroll.services.staff_service import StaffService

logger = logging.getLogger(__name__)

MORNING_LEAVING_TIME = "15:00"
EVENING_LEAVING_TIME = "21:30"


def parse_status(value: str | AttendanceStatus) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise InputIntegrityError(
            InputIntegrityError.INVALID_VALUE, f"Invalid attendance status: {value}"
        )


def parse_shift(value: str | Shift | None) -> Shift | None:
    if value is None:
        return None
    try:
        return Shift(value)
    except ValueError:
        raise InputIntegrityError(InputIntegrityError.INVALID_VALUE, f"Invalid shift: {value}")


def default_leaving_time(shift: Shift) -> str:
    return MORNING_LEAVING_TIME if shift == Shift.MORNING else EVENING_LEAVING_TIME


def _shifts_clash(a: Shift, b: Shift) -> bool:
    return a == b or Shift.BOTH in (a, b)


def check_part_time_entry(
    staff_name: str,
    day: date,
    location: str,
    shift: Shift,
    existing: Iterable[PartTimeAttendance],
    full_time_names: Iterable[str],
) -> None:
    """Reject a part-time entry that would duplicate or shadow another record.

    Rejected when the name belongs to an active full-time staff member,
    when the same name already has a clashing shift at the same location on
    that day, or when the same name is recorded at another location on
    that day. Morning and Evening shifts at one location do not clash.
    """
    key = normalize_name(staff_name)

    if key in {normalize_name(n) for n in full_time_names}:
        logger.warning("Rejected part-time entry for %s: full-time staff name", staff_name)
        raise InputIntegrityError(
            InputIntegrityError.FULL_TIME_NAME,
            f"{staff_name} is already a full-time staff member. Cannot add as part-time.",
        )

    for entry in existing:
        if entry.date != day or normalize_name(entry.staff_name) != key:
            continue
        if entry.location != location:
            logger.warning(
                "Rejected part-time entry for %s on %s: already at %s",
                staff_name,
                day,
                entry.location,
            )
            raise InputIntegrityError(
                InputIntegrityError.OTHER_LOCATION,
                f"{staff_name} is already recorded at {entry.location} on {day}.",
            )
        if _shifts_clash(entry.shift, shift):
            logger.warning(
                "Rejected part-time entry for %s on %s: duplicate %s shift",
                staff_name,
                day,
                shift.value,
            )
            raise InputIntegrityError(
                InputIntegrityError.DUPLICATE_SHIFT,
                f"{staff_name} is already added as part-time staff today.",
            )


class AttendanceService:
    """Service for recording and reading attendance.

    Operations:
    - upsert_full_time / mark_all: One record per full-time staff member and day
    - add_part_time / edit_part_time / delete_part_time: Name-keyed shifts
    - list_attendance / load_entries: Reads for reports and calculators
    """

    def __init__(self, session: AsyncSession, rates: PartTimeRates | None = None):
        self.session = session
        self.rates = rates or get_settings().part_time_rates

    async def list_attendance(
        self,
        start: date | None = None,
        end: date | None = None,
        location: str | None = None,
        part_time: bool | None = None,
    ) -> list[AttendanceRecord]:
        query = select(AttendanceRecord).order_by(
            AttendanceRecord.date, AttendanceRecord.created_at
        )
        if start is not None:
            query = query.where(AttendanceRecord.date >= start)
        if end is not None:
            query = query.where(AttendanceRecord.date <= end)
        if location is not None:
            query = query.where(AttendanceRecord.location == location)
        if part_time is not None:
            query = query.where(AttendanceRecord.is_part_time.is_(part_time))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def load_entries(
        self, start: date | None = None, end: date | None = None
    ) -> list[AttendanceEntry]:
        """Calculator view of the attendance in [start, end]."""
        return [r.to_entry() for r in await self.list_attendance(start, end)]

    async def get_record(self, attendance_id: UUID) -> AttendanceRecord:
        record = await self.session.get(AttendanceRecord, attendance_id)
        if record is None:
            raise RecordNotFoundError("Attendance", attendance_id)
        return record

    # ===== Full-time =====

    async def upsert_full_time(
        self,
        staff_id: UUID,
        day: date,
        status: str | AttendanceStatus,
        shift: str | Shift | None = None,
        location: str | None = None,
    ) -> AttendanceRecord:
        """Record a full-time day; a second mark for the same day replaces the first."""
        parsed_status = parse_status(status)
        parsed_shift = parse_shift(shift)
        await StaffService(self.session).get_staff(staff_id)

        result = await self.session.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.staff_id == staff_id,
                AttendanceRecord.date == day,
                AttendanceRecord.is_part_time.is_(False),
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            record = AttendanceRecord(staff_id=staff_id, date=day, is_part_time=False)
            self.session.add(record)

        record.status = parsed_status.value
        record.attendance_value = parsed_status.attendance_value
        record.shift = parsed_shift.value if parsed_shift else None
        record.location = location
        await self.session.flush()
        return record

    async def mark_all(
        self,
        day: date,
        status: str | AttendanceStatus,
        location: str | None = None,
    ) -> list[AttendanceRecord]:
        """Mark every active full-time staff member, optionally at one location."""
        parsed_status = parse_status(status)
        staff = await StaffService(self.session).list_staff()
        records = [
            await self.upsert_full_time(member.staff_id, day, parsed_status)
            for member in staff
            if member.employment_type == EmploymentType.FULL_TIME.value
            and (location is None or member.location == location)
        ]
        logger.info(
            "Marked %d staff %s on %s%s",
            len(records),
            parsed_status.value,
            day,
            f" at {location}" if location else "",
        )
        return records

    # ===== Part-time =====

    async def _full_time_names(self) -> list[str]:
        result = await self.session.execute(
            select(StaffMember.name).where(
                StaffMember.is_active.is_(True),
                StaffMember.employment_type == EmploymentType.FULL_TIME.value,
            )
        )
        return list(result.scalars().all())

    async def _part_time_on(
        self, day: date, exclude: UUID | None = None
    ) -> list[PartTimeAttendance]:
        records = await self.list_attendance(day, day, part_time=True)
        return [r.to_entry() for r in records if r.attendance_id != exclude]

    async def add_part_time(
        self,
        staff_name: str,
        day: date,
        location: str,
        shift: str | Shift = Shift.BOTH,
        status: str | AttendanceStatus = AttendanceStatus.PRESENT,
        salary: Decimal | None = None,
        arrival_time: str | None = None,
        leaving_time: str | None = None,
    ) -> AttendanceRecord:
        """Add a part-time shift, priced at the default rate unless salary is given."""
        if not staff_name or not staff_name.strip():
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "Part-time staff name is required"
            )
        if not location:
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "Part-time location is required"
            )
        parsed_status = parse_status(status)
        parsed_shift = parse_shift(shift) or Shift.BOTH
        if salary is not None and salary < 0:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE, "Salary must not be negative"
            )

        staff_name = staff_name.strip()
        check_part_time_entry(
            staff_name,
            day,
            location,
            parsed_shift,
            await self._part_time_on(day),
            await self._full_time_names(),
        )

        record = AttendanceRecord(
            date=day,
            status=parsed_status.value,
            attendance_value=parsed_status.attendance_value,
            shift=parsed_shift.value,
            location=location,
            is_part_time=True,
            staff_name=staff_name,
            salary=(
                salary
                if salary is not None
                else default_daily_salary(day, parsed_shift, self.rates)
            ),
            salary_override=salary is not None,
            arrival_time=arrival_time or datetime.now().strftime("%H:%M"),
            leaving_time=leaving_time or default_leaving_time(parsed_shift),
        )
        self.session.add(record)
        await self.session.flush()

        logger.info(
            "Added part-time %s at %s on %s (%s, %s)",
            staff_name,
            location,
            day,
            parsed_shift.value,
            record.salary,
        )
        return record

    async def edit_part_time(
        self,
        attendance_id: UUID,
        status: str | AttendanceStatus | None = None,
        shift: str | Shift | None = None,
        salary: Decimal | None = None,
        arrival_time: str | None = None,
        leaving_time: str | None = None,
        staff_name: str | None = None,
        location: str | None = None,
    ) -> AttendanceRecord:
        """Edit a part-time record. An explicit salary becomes a manual override.

        A changed name, location or shift is checked against the day's other
        part-time entries; a changed name is also checked against active
        full-time staff.
        """
        record = await self.get_record(attendance_id)
        if not record.is_part_time:
            raise RecordNotFoundError("Part-time attendance", attendance_id)

        if staff_name is not None and not staff_name.strip():
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "Part-time staff name is required"
            )
        if location is not None and not location:
            raise InputIntegrityError(
                InputIntegrityError.MISSING_FIELD, "Part-time location is required"
            )
        if salary is not None and salary < 0:
            raise InputIntegrityError(
                InputIntegrityError.INVALID_VALUE, "Salary must not be negative"
            )

        parsed_status = parse_status(status) if status is not None else None
        parsed_shift = parse_shift(shift)
        new_name = staff_name.strip() if staff_name is not None else record.staff_name
        new_location = location if location is not None else record.location
        new_shift = parsed_shift or Shift(record.shift or Shift.BOTH.value)
        renamed = normalize_name(new_name) != normalize_name(record.staff_name)

        if renamed or new_location != record.location or new_shift.value != record.shift:
            check_part_time_entry(
                new_name,
                record.date,
                new_location,
                new_shift,
                await self._part_time_on(record.date, exclude=record.attendance_id),
                await self._full_time_names() if renamed else [],
            )
        if parsed_status is not None:
            record.status = parsed_status.value
            record.attendance_value = parsed_status.attendance_value
        if new_shift.value != record.shift and not record.salary_override:
            record.salary = default_daily_salary(record.date, new_shift, self.rates)
        record.staff_name = new_name
        record.location = new_location
        record.shift = new_shift.value

        if salary is not None:
            record.salary = salary
            record.salary_override = True

        if arrival_time is not None:
            record.arrival_time = arrival_time
        if leaving_time is not None:
            record.leaving_time = leaving_time

        await self.session.flush()
        return record

    async def delete_part_time(self, attendance_id: UUID) -> None:
        record = await self.get_record(attendance_id)
        if not record.is_part_time:
            raise RecordNotFoundError("Part-time attendance", attendance_id)
        await self.session.delete(record)
        await self.session.flush()
        logger.info("Deleted part-time %s on %s", record.staff_name, record.date)

    # ===== Summaries =====

    async def location_summary(self, day: date, location: str) -> LocationSummary:
        staff = await StaffService(self.session).list_staff()
        entries = await self.load_entries(day, day)
        return location_summary([s.to_profile() for s in staff], entries, day, location)
