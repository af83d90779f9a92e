"""Part-time salary calculation with weekly breakdown."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from staff_payroll.calculators.dates import (
    is_sunday,
    month_bounds,
    round_half_up,
    week_bucket,
    weeks_in_month,
)
from staff_payroll.calculators.types import (
    AttendanceEntry,
    AttendanceStatus,
    DailySalary,
    Granularity,
    PartTimeAttendance,
    PartTimeSalaryDetail,
    Shift,
    WeeklySalary,
)
from staff_payroll.config import PartTimeRates

ZERO = Decimal("0")


def normalize_name(name: str) -> str:
    """Join key for name-identified part-time staff."""
    return name.strip().lower()


@dataclass(frozen=True)
class ReportPeriod:
    """An inclusive date span selected at one of three granularities."""

    granularity: Granularity
    start: date
    end: date

    @classmethod
    def for_month(cls, year: int, month: int) -> ReportPeriod:
        start, end = month_bounds(year, month)
        return cls(Granularity.MONTHLY, start, end)

    @classmethod
    def for_week(cls, year: int, month: int, week_number: int) -> ReportPeriod:
        """The week_number-th (0-based) 7-day window of the month."""
        windows = weeks_in_month(year, month)
        if not 0 <= week_number < len(windows):
            raise ValueError(
                f"Week {week_number} out of range for {year}-{month:02d} "
                f"({len(windows)} weeks)"
            )
        window = windows[week_number]
        return cls(Granularity.WEEKLY, window.start_date, window.end_date)

    @classmethod
    def for_range(cls, start: date, end: date) -> ReportPeriod:
        if end < start:
            raise ValueError(f"Range end {end} is before start {start}")
        return cls(Granularity.DATE_RANGE, start, end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class PartTimeStaffKey:
    """A part-time staff member as projected from attendance."""

    normalized_name: str
    staff_name: str
    location: str  # Comma-joined when the name worked at several locations


def default_daily_salary(day: date, shift: Shift | None, rates: PartTimeRates) -> Decimal:
    """Default pay for a day: Sunday or weekday rate, halved for half shifts."""
    rate = rates.sunday_rate if is_sunday(day) else rates.weekday_rate
    if shift is not None and shift.is_half_shift:
        return round_half_up(rate / 2)
    return rate


def _present_part_time(
    entries: Iterable[AttendanceEntry], period: ReportPeriod
) -> list[PartTimeAttendance]:
    return [
        e
        for e in entries
        if isinstance(e, PartTimeAttendance)
        and e.status == AttendanceStatus.PRESENT
        and period.contains(e.date)
    ]


def group_part_time_staff(
    entries: Iterable[AttendanceEntry], period: ReportPeriod
) -> list[PartTimeStaffKey]:
    """Distinct part-time staff who worked in the period, by normalized name."""
    names: dict[str, str] = {}
    locations: dict[str, list[str]] = defaultdict(list)
    for entry in sorted(_present_part_time(entries, period), key=lambda e: e.date):
        key = normalize_name(entry.staff_name)
        names.setdefault(key, entry.staff_name.strip())
        location = entry.location or "Unknown"
        if location not in locations[key]:
            locations[key].append(location)

    return [
        PartTimeStaffKey(
            normalized_name=key,
            staff_name=names[key],
            location=", ".join(locations[key]),
        )
        for key in sorted(names)
    ]


class PartTimeSalaryCalculator:
    """Earnings for name-keyed part-time staff.

    Day pay resolution:
    1. A stored salary on the record wins (manual override or the priced
       default written at entry time)
    2. Otherwise the Sunday/weekday rate, halved for Morning/Evening shifts
    """

    def __init__(self, rates: PartTimeRates):
        self.rates = rates

    def resolve_daily_salary(self, entry: PartTimeAttendance) -> Decimal:
        if entry.salary is not None:
            return entry.salary
        return default_daily_salary(entry.date, entry.shift, self.rates)

    def calculate(
        self,
        staff_name: str,
        location: str,
        entries: Iterable[AttendanceEntry],
        period: ReportPeriod,
        match_location: bool = False,
    ) -> PartTimeSalaryDetail:
        """Earnings of one name over the period.

        Reports match on name only. The advance ledger is kept per name and
        location, so it passes match_location to count only that location's
        days.
        """
        key = normalize_name(staff_name)
        matched = sorted(
            (
                e
                for e in _present_part_time(entries, period)
                if normalize_name(e.staff_name) == key
                and (not match_location or e.location == location)
            ),
            key=lambda e: e.date,
        )

        buckets: dict[int, list[DailySalary]] = defaultdict(list)
        for entry in matched:
            buckets[week_bucket(entry.date)].append(
                DailySalary(
                    date=entry.date,
                    day_of_week=entry.date.strftime("%A"),
                    is_sunday=is_sunday(entry.date),
                    salary=self.resolve_daily_salary(entry),
                    is_override=entry.salary_override,
                )
            )

        weekly = [
            WeeklySalary(
                week=week,
                days=days,
                week_total=sum((d.salary for d in days), ZERO),
            )
            for week, days in sorted(buckets.items())
        ]

        return PartTimeSalaryDetail(
            staff_name=staff_name,
            location=location,
            total_days=len(matched),
            total_earnings=sum((w.week_total for w in weekly), ZERO),
            weekly_breakdown=weekly,
            period_start=period.start,
            period_end=period.end,
        )

    def calculate_all(
        self, entries: Iterable[AttendanceEntry], period: ReportPeriod
    ) -> list[PartTimeSalaryDetail]:
        """One detail per distinct part-time staff name in the period."""
        entries = list(entries)
        return [
            self.calculate(key.staff_name, key.location, entries, period)
            for key in group_part_time_staff(entries, period)
        ]
