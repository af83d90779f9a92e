"""Payroll calculation engine."""

from staff_payroll.calculators.attendance import (
    calculate_attendance_metrics,
    count_sunday_half_days,
    location_summary,
)
from staff_payroll.calculators.full_time import FullTimeSalaryCalculator, apply_override
from staff_payroll.calculators.ledger import (
    plan_toggle,
    resolve_opening_balance,
    settle_week,
    settlement_status,
)
from staff_payroll.calculators.part_time import PartTimeSalaryCalculator, ReportPeriod

__all__ = [
    "FullTimeSalaryCalculator",
    "PartTimeSalaryCalculator",
    "ReportPeriod",
    "apply_override",
    "calculate_attendance_metrics",
    "count_sunday_half_days",
    "location_summary",
    "plan_toggle",
    "resolve_opening_balance",
    "settle_week",
    "settlement_status",
]
