"""Staff payroll services."""

from staff_payroll.services.attendance_service import AttendanceService, check_part_time_entry
from staff_payroll.services.part_time_service import PartTimeService
from staff_payroll.services.salary_service import SalaryService
from staff_payroll.services.settlement_service import SettlementService
from staff_payroll.services.staff_service import StaffService, staff_due_for_hike

__all__ = [
    "AttendanceService",
    "PartTimeService",
    "SalaryService",
    "SettlementService",
    "StaffService",
    "check_part_time_entry",
    "staff_due_for_hike",
]
