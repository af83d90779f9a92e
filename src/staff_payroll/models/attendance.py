"""Attendance record model."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from staff_payroll.calculators.types import (
    AttendanceEntry,
    AttendanceStatus,
    FullTimeAttendance,
    PartTimeAttendance,
    Shift,
)
from staff_payroll.models.base import Base, TimestampMixin


class AttendanceRecord(Base, TimestampMixin):
    """One attendance observation.

    Full-time rows reference a staff member by id; part-time rows are keyed
    by free-text staff_name and may carry a resolved daily salary.
    """

    __tablename__ = "attendance"

    attendance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    attendance_value: Mapped[Decimal] = mapped_column(Numeric(3, 1), nullable=False)
    shift: Mapped[str | None] = mapped_column(String, nullable=True)
    location: Mapped[str | None] = mapped_column(String, nullable=True)
    is_part_time: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Full-time
    staff_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("staff.staff_id", ondelete="CASCADE"),
        nullable=True,
    )

    # Part-time
    staff_name: Mapped[str | None] = mapped_column(String, nullable=True)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    salary_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    arrival_time: Mapped[str | None] = mapped_column(String, nullable=True)
    leaving_time: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Present', 'Half Day', 'Absent')",
            name="attendance_status_check",
        ),
        CheckConstraint(
            "shift IS NULL OR shift IN ('Morning', 'Evening', 'Both')",
            name="attendance_shift_check",
        ),
        CheckConstraint(
            "(is_part_time AND staff_name IS NOT NULL) "
            "OR (NOT is_part_time AND staff_id IS NOT NULL)",
            name="attendance_identity_check",
        ),
        Index(
            "attendance_full_time_day_unique",
            "staff_id",
            "date",
            unique=True,
            postgresql_where=text("NOT is_part_time"),
            sqlite_where=text("NOT is_part_time"),
        ),
        Index("attendance_date_idx", "date"),
    )

    def to_entry(self) -> AttendanceEntry:
        """Calculator view: the full-time or part-time variant."""
        status = AttendanceStatus(self.status)
        if self.is_part_time:
            return PartTimeAttendance(
                staff_name=self.staff_name or "",
                date=self.date,
                status=status,
                shift=Shift(self.shift) if self.shift else Shift.BOTH,
                location=self.location,
                salary=Decimal(self.salary) if self.salary is not None else None,
                salary_override=self.salary_override,
                arrival_time=self.arrival_time,
                leaving_time=self.leaving_time,
            )
        return FullTimeAttendance(
            staff_id=self.staff_id,
            date=self.date,
            status=status,
            shift=Shift(self.shift) if self.shift else None,
            location=self.location,
        )
