"""SQLAlchemy ORM models for staff payroll."""

from staff_payroll.models.attendance import AttendanceRecord
from staff_payroll.models.base import Base, TimestampMixin
from staff_payroll.models.ledger import (
    AdvanceDeduction,
    PartTimeAdvanceRecord,
    PartTimeSettlement,
    SalaryOverride,
)
from staff_payroll.models.staff import OldStaffRecord, SalaryHike, StaffMember

__all__ = [
    "AdvanceDeduction",
    "AttendanceRecord",
    "Base",
    "OldStaffRecord",
    "PartTimeAdvanceRecord",
    "PartTimeSettlement",
    "SalaryHike",
    "SalaryOverride",
    "StaffMember",
    "TimestampMixin",
]
