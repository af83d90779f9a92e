"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union
from uuid import UUID


class AttendanceStatus(str, Enum):
    """Daily attendance status values."""

    PRESENT = "Present"
    HALF_DAY = "Half Day"
    ABSENT = "Absent"

    @property
    def attendance_value(self) -> Decimal:
        """Informational day value (1 / 0.5 / 0)."""
        return {
            AttendanceStatus.PRESENT: Decimal("1"),
            AttendanceStatus.HALF_DAY: Decimal("0.5"),
            AttendanceStatus.ABSENT: Decimal("0"),
        }[self]


class Shift(str, Enum):
    """Working shifts."""

    MORNING = "Morning"
    EVENING = "Evening"
    BOTH = "Both"

    @property
    def is_half_shift(self) -> bool:
        return self in (Shift.MORNING, Shift.EVENING)


class EmploymentType(str, Enum):
    """Staff employment types."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"


class Granularity(str, Enum):
    """Part-time report granularities."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DATE_RANGE = "dateRange"


# ===== Attendance (tagged union) =====


@dataclass(frozen=True)
class FullTimeAttendance:
    """One (staff, date) observation for a full-time staff member."""

    staff_id: UUID
    date: date
    status: AttendanceStatus
    shift: Shift | None = None
    location: str | None = None  # Day-only location override

    is_part_time = False


@dataclass(frozen=True)
class PartTimeAttendance:
    """One part-time shift worked by a name-keyed staff member."""

    staff_name: str
    date: date
    status: AttendanceStatus
    shift: Shift = Shift.BOTH
    location: str | None = None
    salary: Decimal | None = None  # Resolved daily pay, possibly manual
    salary_override: bool = False
    arrival_time: str | None = None
    leaving_time: str | None = None

    is_part_time = True


AttendanceEntry = Union[FullTimeAttendance, PartTimeAttendance]


# ===== Staff & ledger inputs =====


@dataclass(frozen=True)
class StaffProfile:
    """Compensation template of a staff member as seen by the calculators."""

    staff_id: UUID
    name: str
    location: str
    basic_salary: Decimal
    incentive: Decimal = Decimal("0")
    hra: Decimal = Decimal("0")
    meal_allowance: Decimal = Decimal("0")
    salary_supplements: dict[str, Decimal] = field(default_factory=dict)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    is_active: bool = True
    sunday_penalty_enabled: bool = True
    salary_calculation_days: int = 26

    @property
    def total_salary(self) -> Decimal:
        """Sum of all compensation components."""
        return (
            self.basic_salary
            + self.incentive
            + self.hra
            + self.meal_allowance
            + sum(self.salary_supplements.values(), Decimal("0"))
        )


@dataclass(frozen=True)
class AdvanceEntry:
    """Advance/deduction ledger entry for one staff member and month."""

    staff_id: UUID
    year: int
    month: int
    old_advance: Decimal = Decimal("0")
    current_advance: Decimal = Decimal("0")
    deduction: Decimal = Decimal("0")
    new_advance: Decimal = Decimal("0")

    @property
    def period(self) -> tuple[int, int]:
        return (self.year, self.month)


@dataclass(frozen=True)
class SalaryOverrideValues:
    """Manual replacement values; None means "use the computed value"."""

    staff_id: UUID
    year: int
    month: int
    basic: Decimal | None = None
    incentive: Decimal | None = None
    hra: Decimal | None = None
    meal_allowance: Decimal | None = None
    sunday_penalty: Decimal | None = None
    salary_supplements: dict[str, Decimal] = field(default_factory=dict)


# ===== Derived outputs =====


@dataclass(frozen=True)
class AttendanceMetrics:
    """Monthly attendance metrics for one full-time staff member."""

    present_days: int
    half_days: int
    total_present_days: Decimal
    leave_days: int
    sunday_absents: int
    days_in_month: int


@dataclass(frozen=True)
class SalaryDetail:
    """Computed salary for one staff member and month. Never persisted."""

    staff_id: UUID
    year: int
    month: int
    present_days: int
    half_days: int
    leave_days: int
    sunday_absents: int
    sunday_half_days: int
    old_adv: Decimal
    cur_adv: Decimal
    deduction: Decimal
    new_adv: Decimal
    basic_earned: Decimal
    incentive_earned: Decimal
    hra_earned: Decimal
    meal_allowance: Decimal
    sunday_penalty: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    salary_supplements: dict[str, Decimal] = field(default_factory=dict)
    is_overridden: bool = False


@dataclass(frozen=True)
class DailySalary:
    """Pay for one part-time day."""

    date: date
    day_of_week: str
    is_sunday: bool
    salary: Decimal
    is_override: bool


@dataclass(frozen=True)
class WeeklySalary:
    """Part-time earnings for one display week."""

    week: int
    days: list[DailySalary]
    week_total: Decimal


@dataclass(frozen=True)
class PartTimeSalaryDetail:
    """Part-time earnings for one staff name over a report period."""

    staff_name: str
    location: str
    total_days: int
    total_earnings: Decimal
    weekly_breakdown: list[WeeklySalary]
    period_start: date
    period_end: date


@dataclass(frozen=True)
class WeekWindow:
    """A fixed 7-day window anchored to day 1 of a month."""

    week_number: int  # 0-based
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start
