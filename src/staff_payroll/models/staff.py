"""Staff, archive and salary hike models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from staff_payroll.calculators.types import EmploymentType, StaffProfile
from staff_payroll.models.base import Base, TimestampMixin

MONEY = Numeric(12, 2)


def supplements_to_decimal(raw: dict[str, Any] | None) -> dict[str, Decimal]:
    """JSON supplement map (numbers or strings) to Decimal amounts."""
    return {key: Decimal(str(value)) for key, value in (raw or {}).items()}


def supplements_to_json(values: dict[str, Decimal] | None) -> dict[str, str]:
    return {key: str(value) for key, value in (values or {}).items()}


class StaffMember(Base, TimestampMixin):
    """A staff member and their monthly compensation template."""

    __tablename__ = "staff"

    staff_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    employment_type: Mapped[str] = mapped_column(
        String, nullable=False, default=EmploymentType.FULL_TIME.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    joined_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    basic_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    incentive: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    hra: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    meal_allowance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    salary_supplements: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    initial_salary: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)

    sunday_penalty_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    salary_calculation_days: Mapped[int] = mapped_column(Integer, nullable=False, default=26)

    contact_number: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "employment_type IN ('full-time', 'part-time')",
            name="staff_employment_type_check",
        ),
    )

    @property
    def total_salary(self) -> Decimal:
        return self.to_profile().total_salary

    def to_profile(self) -> StaffProfile:
        """Calculator view of this staff member."""
        return StaffProfile(
            staff_id=self.staff_id,
            name=self.name,
            location=self.location,
            basic_salary=Decimal(self.basic_salary),
            incentive=Decimal(self.incentive),
            hra=Decimal(self.hra),
            meal_allowance=Decimal(self.meal_allowance),
            salary_supplements=supplements_to_decimal(self.salary_supplements),
            employment_type=EmploymentType(self.employment_type),
            is_active=self.is_active,
            sunday_penalty_enabled=self.sunday_penalty_enabled,
            salary_calculation_days=self.salary_calculation_days,
        )


class OldStaffRecord(Base, TimestampMixin):
    """Immutable snapshot of a staff member taken when they leave."""

    __tablename__ = "old_staff_record"

    record_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    original_staff_id: Mapped[UUID] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    employment_type: Mapped[str] = mapped_column(String, nullable=False)
    joined_date: Mapped[date] = mapped_column(Date, nullable=False)
    left_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String, nullable=False)

    basic_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    incentive: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    hra: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    meal_allowance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    salary_supplements: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    total_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    sunday_penalty_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    contact_number: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)

    total_advance_outstanding: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )
    last_advance_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class SalaryHike(Base, TimestampMixin):
    """A recorded change of a staff member's total salary."""

    __tablename__ = "salary_hike"

    hike_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.staff_id", ondelete="CASCADE"),
        nullable=False,
    )
    old_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    new_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    hike_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(String, nullable=True)
