"""Unit tests for attendance aggregation."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from staff_payroll.calculators.attendance import (
    calculate_attendance_metrics,
    count_sunday_half_days,
    location_summary,
)
from staff_payroll.calculators.types import (
    AttendanceStatus,
    FullTimeAttendance,
    PartTimeAttendance,
    Shift,
    StaffProfile,
)

PRESENT = AttendanceStatus.PRESENT
HALF = AttendanceStatus.HALF_DAY
ABSENT = AttendanceStatus.ABSENT


def ft(staff_id, day, status, location=None):
    return FullTimeAttendance(staff_id=staff_id, date=day, status=status, location=location)


class TestAttendanceMetrics:
    """Test monthly metrics for full-time staff."""

    def test_empty_month(self):
        metrics = calculate_attendance_metrics(uuid4(), [], 2025, 1)

        assert metrics.present_days == 0
        assert metrics.half_days == 0
        assert metrics.total_present_days == Decimal("0")
        assert metrics.sunday_absents == 0
        assert metrics.leave_days == 31
        assert metrics.days_in_month == 31

    def test_counts_present_half_and_leave(self):
        staff_id = uuid4()
        entries = [ft(staff_id, date(2025, 1, d), PRESENT) for d in range(1, 21)]
        entries += [ft(staff_id, date(2025, 1, d), HALF) for d in (21, 22, 23)]
        entries.append(ft(staff_id, date(2025, 1, 24), ABSENT))

        metrics = calculate_attendance_metrics(staff_id, entries, 2025, 1)

        assert metrics.present_days == 20
        assert metrics.half_days == 3
        assert metrics.total_present_days == Decimal("21.5")
        # 31 - floor(21.5)
        assert metrics.leave_days == 10

    def test_sunday_absents(self):
        staff_id = uuid4()
        entries = [
            ft(staff_id, date(2025, 1, 5), ABSENT),  # Sunday
            ft(staff_id, date(2025, 1, 12), ABSENT),  # Sunday
            ft(staff_id, date(2025, 1, 13), ABSENT),  # Monday
            ft(staff_id, date(2025, 1, 19), HALF),  # Sunday
        ]

        metrics = calculate_attendance_metrics(staff_id, entries, 2025, 1)

        assert metrics.sunday_absents == 2
        assert count_sunday_half_days(staff_id, entries, 2025, 1) == 1

    def test_ignores_other_staff_months_and_part_time(self):
        staff_id = uuid4()
        entries = [
            ft(staff_id, date(2025, 1, 2), PRESENT),
            ft(uuid4(), date(2025, 1, 2), PRESENT),
            ft(staff_id, date(2025, 2, 2), PRESENT),
            PartTimeAttendance(staff_name="Ravi", date=date(2025, 1, 2), status=PRESENT),
        ]

        metrics = calculate_attendance_metrics(staff_id, entries, 2025, 1)

        assert metrics.present_days == 1


class TestLocationSummary:
    """Test per-location daily summaries."""

    def test_summary_counts_and_names(self):
        day = date(2025, 1, 3)
        kumar = StaffProfile(uuid4(), "Kumar", "Big Shop", Decimal("13000"))
        priya = StaffProfile(uuid4(), "Priya", "Big Shop", Decimal("12000"))
        anand = StaffProfile(uuid4(), "Anand", "Godown", Decimal("11000"))
        entries = [
            ft(kumar.staff_id, day, PRESENT),
            ft(priya.staff_id, day, HALF),
            # Working at Big Shop for the day
            ft(anand.staff_id, day, PRESENT, location="Big Shop"),
            PartTimeAttendance(
                staff_name="Ravi",
                date=day,
                status=PRESENT,
                shift=Shift.MORNING,
                location="Big Shop",
            ),
            PartTimeAttendance(
                staff_name="Mani", date=day, status=PRESENT, location="Small Shop"
            ),
        ]

        summary = location_summary([kumar, priya, anand], entries, day, "Big Shop")

        assert summary.total == 2
        assert summary.present == 3
        assert summary.half_day == 1
        assert summary.absent == 0
        assert summary.total_present_value == Decimal("3.5")
        assert summary.present_names == ["Kumar", "Anand", "Ravi (Morning)"]
        assert summary.half_day_names == ["Priya"]

    def test_override_location_moves_staff_out(self):
        day = date(2025, 1, 3)
        anand = StaffProfile(uuid4(), "Anand", "Godown", Decimal("11000"))
        entries = [ft(anand.staff_id, day, PRESENT, location="Big Shop")]

        summary = location_summary([anand], entries, day, "Godown")

        assert summary.present == 0
        assert summary.total == 1
