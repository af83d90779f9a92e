"""Full-time salary calculation and manual override reconciliation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal
from uuid import UUID

from staff_payroll.calculators.attendance import (
    calculate_attendance_metrics,
    count_sunday_half_days,
)
from staff_payroll.calculators.dates import round_to_nearest_10
from staff_payroll.calculators.types import (
    AdvanceEntry,
    AttendanceEntry,
    AttendanceMetrics,
    EmploymentType,
    SalaryDetail,
    SalaryOverrideValues,
    StaffProfile,
)

# Payroll policy constants.
PRORATION_BASE_DAYS = Decimal("26")
NEAR_FULL_MONTH_DAYS = Decimal("25")
SUNDAY_ABSENT_PENALTY = Decimal("500")
SUNDAY_HALF_DAY_PENALTY = Decimal("250")

ZERO = Decimal("0")
HALF = Decimal("0.5")


def find_previous_advance(
    staff_id: UUID,
    advances: Iterable[AdvanceEntry],
    year: int,
    month: int,
) -> Decimal:
    """Carry-forward: new_advance of the most recent month before (year, month).

    Months without a record are skipped. Returns 0 when no earlier record
    exists.
    """
    prior = [
        a for a in advances if a.staff_id == staff_id and a.period < (year, month)
    ]
    if not prior:
        return ZERO
    return max(prior, key=lambda a: a.period).new_advance


def sunday_penalty(sunday_absents: int, sunday_half_days: int) -> Decimal:
    """Flat penalty per absent Sunday, half of it per Sunday half day."""
    return (
        SUNDAY_ABSENT_PENALTY * sunday_absents
        + SUNDAY_HALF_DAY_PENALTY * sunday_half_days
    )


def apply_override(detail: SalaryDetail, override: SalaryOverrideValues | None) -> SalaryDetail:
    """Reconcile a computed salary with manual component overrides.

    Each override field that is set replaces the computed component; gross
    and net are then recomputed from the resulting components. Applying the
    same override again yields the same result.
    """
    if override is None:
        return detail

    basic = override.basic if override.basic is not None else detail.basic_earned
    incentive = (
        override.incentive if override.incentive is not None else detail.incentive_earned
    )
    hra = override.hra if override.hra is not None else detail.hra_earned
    meal = (
        override.meal_allowance
        if override.meal_allowance is not None
        else detail.meal_allowance
    )
    penalty = (
        override.sunday_penalty
        if override.sunday_penalty is not None
        else detail.sunday_penalty
    )
    supplements = {**detail.salary_supplements, **override.salary_supplements}

    gross = round_to_nearest_10(basic + incentive + hra + meal)
    net = max(ZERO, round_to_nearest_10(gross - detail.deduction - penalty))

    return replace(
        detail,
        basic_earned=basic,
        incentive_earned=incentive,
        hra_earned=hra,
        meal_allowance=meal,
        sunday_penalty=penalty,
        salary_supplements=supplements,
        gross_salary=gross,
        net_salary=net,
        is_overridden=True,
    )


class FullTimeSalaryCalculator:
    """Monthly salary for full-time staff.

    Calculation pipeline (per staff member):
    1) Total present days = present + half days x 0.5
    2) Tiered pro-ration of basic/incentive against a 26-day month;
       HRA is always paid in full. Earned components are rounded to 10
    3) Sunday penalty from absent and half-day Sundays
    4) Gross = basic + incentive + hra (rounded to 10)
    5) Advance ledger: old (carried forward), current, deduction, new
    6) Net = gross - current advance - deduction - penalty, floored at 0
    """

    def calculate(
        self,
        staff: StaffProfile,
        metrics: AttendanceMetrics,
        advance: AdvanceEntry | None,
        advance_history: Sequence[AdvanceEntry],
        entries: Iterable[AttendanceEntry],
        year: int,
        month: int,
    ) -> SalaryDetail:
        total_present = Decimal(metrics.present_days) + Decimal(metrics.half_days) * HALF
        basic, incentive, hra = self._prorate(staff, total_present)

        sunday_half_days = count_sunday_half_days(staff.staff_id, entries, year, month)
        if staff.sunday_penalty_enabled:
            penalty = sunday_penalty(metrics.sunday_absents, sunday_half_days)
        else:
            penalty = ZERO

        gross = round_to_nearest_10(basic + incentive + hra)

        if advance is not None:
            # A zero old balance on the month's record still carries forward
            old_adv = advance.old_advance or find_previous_advance(
                staff.staff_id, advance_history, year, month
            )
            cur_adv = advance.current_advance
            deduction = advance.deduction
        else:
            old_adv = find_previous_advance(staff.staff_id, advance_history, year, month)
            cur_adv = ZERO
            deduction = ZERO

        new_adv = round_to_nearest_10(old_adv + cur_adv - deduction)
        net = max(ZERO, round_to_nearest_10(gross - cur_adv - deduction - penalty))

        return SalaryDetail(
            staff_id=staff.staff_id,
            year=year,
            month=month,
            present_days=metrics.present_days,
            half_days=metrics.half_days,
            leave_days=metrics.leave_days,
            sunday_absents=metrics.sunday_absents,
            sunday_half_days=sunday_half_days,
            old_adv=round_to_nearest_10(old_adv),
            cur_adv=round_to_nearest_10(cur_adv),
            deduction=round_to_nearest_10(deduction),
            new_adv=new_adv,
            basic_earned=basic,
            incentive_earned=incentive,
            hra_earned=hra,
            meal_allowance=staff.meal_allowance,
            salary_supplements=dict(staff.salary_supplements),
            sunday_penalty=round_to_nearest_10(penalty),
            gross_salary=gross,
            net_salary=net,
        )

    def salary_sheet(
        self,
        staff: Sequence[StaffProfile],
        entries: Sequence[AttendanceEntry],
        advances: Sequence[AdvanceEntry],
        overrides: Sequence[SalaryOverrideValues],
        year: int,
        month: int,
    ) -> list[SalaryDetail]:
        """Salary details for every active full-time staff member."""
        current = {a.staff_id: a for a in advances if a.period == (year, month)}
        by_staff = {
            o.staff_id: o for o in overrides if (o.year, o.month) == (year, month)
        }

        details: list[SalaryDetail] = []
        for member in staff:
            if not member.is_active or member.employment_type != EmploymentType.FULL_TIME:
                continue
            metrics = calculate_attendance_metrics(member.staff_id, entries, year, month)
            detail = self.calculate(
                member,
                metrics,
                current.get(member.staff_id),
                advances,
                entries,
                year,
                month,
            )
            details.append(apply_override(detail, by_staff.get(member.staff_id)))
        return details

    @staticmethod
    def _prorate(
        staff: StaffProfile, total_present: Decimal
    ) -> tuple[Decimal, Decimal, Decimal]:
        """Earned (basic, incentive, hra) for the month's attendance, each rounded to 10."""
        hra = round_to_nearest_10(staff.hra)
        if total_present == PRORATION_BASE_DAYS:
            basic = round_to_nearest_10(staff.basic_salary)
            return basic, round_to_nearest_10(staff.incentive), hra

        basic = round_to_nearest_10(staff.basic_salary / PRORATION_BASE_DAYS * total_present)
        if total_present >= NEAR_FULL_MONTH_DAYS:
            return basic, round_to_nearest_10(staff.incentive), hra

        incentive = round_to_nearest_10(staff.incentive / PRORATION_BASE_DAYS * total_present)
        return basic, incentive, hra
