"""Unit tests for the part-time salary calculator."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from staff_payroll.calculators.part_time import (
    PartTimeSalaryCalculator,
    ReportPeriod,
    default_daily_salary,
    group_part_time_staff,
    normalize_name,
)
from staff_payroll.calculators.types import (
    AttendanceStatus,
    FullTimeAttendance,
    Granularity,
    PartTimeAttendance,
    Shift,
)
from staff_payroll.config import PartTimeRates


def pt(
    name,
    day,
    shift=Shift.BOTH,
    location="Big Shop",
    salary=None,
    status=AttendanceStatus.PRESENT,
):
    return PartTimeAttendance(
        staff_name=name,
        date=day,
        status=status,
        shift=shift,
        location=location,
        salary=salary,
        salary_override=salary is not None,
    )


@pytest.fixture
def calculator(rates) -> PartTimeSalaryCalculator:
    return PartTimeSalaryCalculator(rates)


@pytest.fixture
def january_entries():
    return [
        pt("Ravi", date(2025, 1, 3), Shift.MORNING),
        pt("Ravi", date(2025, 1, 3), Shift.EVENING),
        pt("Ravi", date(2025, 1, 5)),  # Sunday
        pt("Ravi", date(2025, 1, 9), salary=Decimal("500")),
        pt("Ravi", date(2025, 1, 10), status=AttendanceStatus.ABSENT),
        pt("ravi ", date(2025, 1, 15)),
        pt("Mani", date(2025, 1, 4), location=None),
    ]


class TestDefaultDailySalary:
    """Test default pricing of a part-time day."""

    def test_weekday_and_sunday(self, rates):
        assert default_daily_salary(date(2025, 1, 6), Shift.BOTH, rates) == Decimal("350")
        assert default_daily_salary(date(2025, 1, 5), Shift.BOTH, rates) == Decimal("400")

    def test_half_shifts(self, rates):
        assert default_daily_salary(date(2025, 1, 6), Shift.MORNING, rates) == Decimal("175")
        assert default_daily_salary(date(2025, 1, 5), Shift.EVENING, rates) == Decimal("200")

    def test_half_shift_rounds_half_up(self):
        rates = PartTimeRates(weekday_rate=Decimal("325"), sunday_rate=Decimal("400"))
        assert default_daily_salary(date(2025, 1, 6), Shift.MORNING, rates) == Decimal("163")

    def test_negative_rates_rejected(self):
        with pytest.raises(ValueError):
            PartTimeRates(weekday_rate=Decimal("-1"))


class TestReportPeriod:
    """Test the three report granularities."""

    def test_month(self):
        period = ReportPeriod.for_month(2025, 2)
        assert period.granularity == Granularity.MONTHLY
        assert (period.start, period.end) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_week_uses_spilling_window(self):
        period = ReportPeriod.for_week(2025, 1, 4)
        assert (period.start, period.end) == (date(2025, 1, 29), date(2025, 2, 4))

    def test_week_out_of_range(self):
        with pytest.raises(ValueError):
            ReportPeriod.for_week(2025, 1, 5)

    def test_range_must_be_ordered(self):
        with pytest.raises(ValueError):
            ReportPeriod.for_range(date(2025, 1, 10), date(2025, 1, 1))


class TestPartTimeSalary:
    """Test part-time earnings and weekly breakdown."""

    def test_monthly_breakdown(self, calculator, january_entries):
        detail = calculator.calculate(
            "Ravi", "Big Shop", january_entries, ReportPeriod.for_month(2025, 1)
        )

        assert detail.total_days == 5
        assert [w.week for w in detail.weekly_breakdown] == [1, 2, 3]
        assert [w.week_total for w in detail.weekly_breakdown] == [
            Decimal("750"),
            Decimal("500"),
            Decimal("350"),
        ]
        assert detail.total_earnings == Decimal("1600")

    def test_daily_details(self, calculator, january_entries):
        detail = calculator.calculate(
            "Ravi", "Big Shop", january_entries, ReportPeriod.for_month(2025, 1)
        )
        first_week = detail.weekly_breakdown[0].days

        assert [d.salary for d in first_week] == [Decimal("175"), Decimal("175"), Decimal("400")]
        assert first_week[2].is_sunday
        assert first_week[2].day_of_week == "Sunday"
        assert detail.weekly_breakdown[1].days[0].is_override

    def test_name_match_is_case_insensitive(self, calculator, january_entries):
        detail = calculator.calculate(
            "RAVI", "Big Shop", january_entries, ReportPeriod.for_month(2025, 1)
        )
        assert detail.total_days == 5

    def test_match_location(self, calculator):
        entries = [
            pt("Ravi", date(2025, 1, 2)),
            pt("Ravi", date(2025, 1, 3), location="Small Shop"),
        ]
        period = ReportPeriod.for_week(2025, 1, 0)

        by_name = calculator.calculate("Ravi", "Big Shop", entries, period)
        big_shop = calculator.calculate("Ravi", "Big Shop", entries, period, match_location=True)

        assert by_name.total_earnings == Decimal("700")
        assert big_shop.total_earnings == Decimal("350")
        assert [d.date for d in big_shop.weekly_breakdown[0].days] == [date(2025, 1, 2)]

    def test_ignores_full_time_entries(self, calculator):
        entries = [
            FullTimeAttendance(
                staff_id=uuid4(), date=date(2025, 1, 3), status=AttendanceStatus.PRESENT
            )
        ]
        detail = calculator.calculate("Ravi", "Big Shop", entries, ReportPeriod.for_month(2025, 1))
        assert detail.total_days == 0
        assert detail.total_earnings == Decimal("0")
        assert detail.weekly_breakdown == []

    def test_weekly_period(self, calculator, january_entries):
        detail = calculator.calculate(
            "Ravi", "Big Shop", january_entries, ReportPeriod.for_week(2025, 1, 1)
        )
        assert detail.total_days == 1
        assert detail.total_earnings == Decimal("500")

    def test_calculate_all_groups_by_name(self, calculator, january_entries):
        details = calculator.calculate_all(january_entries, ReportPeriod.for_month(2025, 1))

        assert [(d.staff_name, d.location) for d in details] == [
            ("Mani", "Unknown"),
            ("Ravi", "Big Shop"),
        ]
        assert details[1].total_earnings == Decimal("1600")


class TestGrouping:
    def test_locations_are_joined_in_date_order(self):
        entries = [
            pt("Ravi", date(2025, 1, 7), location="Small Shop"),
            pt("Ravi", date(2025, 1, 6), location="Big Shop"),
            pt("ravi", date(2025, 1, 8), location="Big Shop"),
        ]

        groups = group_part_time_staff(entries, ReportPeriod.for_month(2025, 1))

        assert len(groups) == 1
        assert groups[0].normalized_name == normalize_name("Ravi")
        assert groups[0].location == "Big Shop, Small Shop"
