"""Attendance aggregation for full-time payroll and daily summaries."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from staff_payroll.calculators.dates import days_in_month, is_sunday
from staff_payroll.calculators.types import (
    AttendanceEntry,
    AttendanceMetrics,
    AttendanceStatus,
    FullTimeAttendance,
    PartTimeAttendance,
    StaffProfile,
)

HALF = Decimal("0.5")


def monthly_full_time_entries(
    staff_id: UUID,
    entries: Iterable[AttendanceEntry],
    year: int,
    month: int,
) -> list[FullTimeAttendance]:
    """Full-time entries of one staff member within a month."""
    return [
        e
        for e in entries
        if isinstance(e, FullTimeAttendance)
        and e.staff_id == staff_id
        and e.date.year == year
        and e.date.month == month
    ]


def calculate_attendance_metrics(
    staff_id: UUID,
    entries: Iterable[AttendanceEntry],
    year: int,
    month: int,
) -> AttendanceMetrics:
    """Reduce attendance to monthly payroll metrics.

    Any day not marked Present or Half Day, recorded or not, counts as
    leave.
    """
    monthly = monthly_full_time_entries(staff_id, entries, year, month)

    present_days = sum(1 for e in monthly if e.status == AttendanceStatus.PRESENT)
    half_days = sum(1 for e in monthly if e.status == AttendanceStatus.HALF_DAY)
    total_present_days = Decimal(present_days) + Decimal(half_days) * HALF

    sunday_absents = sum(
        1 for e in monthly if e.status == AttendanceStatus.ABSENT and is_sunday(e.date)
    )

    month_days = days_in_month(year, month)
    return AttendanceMetrics(
        present_days=present_days,
        half_days=half_days,
        total_present_days=total_present_days,
        leave_days=month_days - math.floor(total_present_days),
        sunday_absents=sunday_absents,
        days_in_month=month_days,
    )


def count_sunday_half_days(
    staff_id: UUID,
    entries: Iterable[AttendanceEntry],
    year: int,
    month: int,
) -> int:
    monthly = monthly_full_time_entries(staff_id, entries, year, month)
    return sum(
        1 for e in monthly if e.status == AttendanceStatus.HALF_DAY and is_sunday(e.date)
    )


@dataclass
class LocationSummary:
    """Attendance counts for one location on one day."""

    location: str
    day: date
    total: int = 0
    present: int = 0
    half_day: int = 0
    absent: int = 0
    total_present_value: Decimal = Decimal("0")
    present_names: list[str] = field(default_factory=list)
    half_day_names: list[str] = field(default_factory=list)
    absent_names: list[str] = field(default_factory=list)


def location_summary(
    staff: Sequence[StaffProfile],
    entries: Iterable[AttendanceEntry],
    day: date,
    location: str,
) -> LocationSummary:
    """Summarise one day's attendance at a location.

    A full-time record counts at its day override location when set,
    otherwise at the staff member's home location.
    """
    by_id = {s.staff_id: s for s in staff}
    summary = LocationSummary(
        location=location,
        day=day,
        total=sum(1 for s in staff if s.location == location and s.is_active),
    )

    for entry in entries:
        if entry.date != day:
            continue
        if isinstance(entry, PartTimeAttendance):
            if entry.location != location:
                continue
            name = f"{entry.staff_name} ({entry.shift.value})"
        else:
            member = by_id.get(entry.staff_id)
            if member is None:
                continue
            if (entry.location or member.location) != location:
                continue
            name = member.name

        if entry.status == AttendanceStatus.PRESENT:
            summary.present += 1
            summary.present_names.append(name)
        elif entry.status == AttendanceStatus.HALF_DAY:
            summary.half_day += 1
            summary.half_day_names.append(name)
        else:
            summary.absent += 1
            summary.absent_names.append(name)

    value = Decimal(summary.present) + Decimal(summary.half_day) * HALF
    summary.total_present_value = value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return summary
