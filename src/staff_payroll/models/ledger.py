"""Advance, override, part-time ledger and settlement models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from staff_payroll.calculators.types import AdvanceEntry, SalaryOverrideValues
from staff_payroll.models.base import Base, TimestampMixin
from staff_payroll.models.staff import supplements_to_decimal

MONEY = Numeric(12, 2)


def _decimal_or_none(value: Decimal | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


class AdvanceDeduction(Base, TimestampMixin):
    """Monthly advance/deduction ledger row for a full-time staff member."""

    __tablename__ = "advance_deduction"

    advance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.staff_id", ondelete="CASCADE"),
        nullable=False,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    old_advance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    current_advance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    deduction: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    new_advance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("staff_id", "year", "month", name="advance_staff_month_unique"),
        CheckConstraint("month BETWEEN 1 AND 12", name="advance_month_check"),
    )

    def to_entry(self) -> AdvanceEntry:
        return AdvanceEntry(
            staff_id=self.staff_id,
            year=self.year,
            month=self.month,
            old_advance=Decimal(self.old_advance),
            current_advance=Decimal(self.current_advance),
            deduction=Decimal(self.deduction),
            new_advance=Decimal(self.new_advance),
        )


class SalaryOverride(Base, TimestampMixin):
    """Manual salary component replacements for one staff member and month."""

    __tablename__ = "salary_override"

    override_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("staff.staff_id", ondelete="CASCADE"),
        nullable=False,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    basic_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    incentive_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    hra_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    meal_allowance_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    sunday_penalty_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    salary_supplements_override: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    __table_args__ = (
        UniqueConstraint("staff_id", "year", "month", name="salary_override_staff_month_unique"),
        CheckConstraint("month BETWEEN 1 AND 12", name="salary_override_month_check"),
    )

    def to_values(self) -> SalaryOverrideValues:
        return SalaryOverrideValues(
            staff_id=self.staff_id,
            year=self.year,
            month=self.month,
            basic=_decimal_or_none(self.basic_override),
            incentive=_decimal_or_none(self.incentive_override),
            hra=_decimal_or_none(self.hra_override),
            meal_allowance=_decimal_or_none(self.meal_allowance_override),
            sunday_penalty=_decimal_or_none(self.sunday_penalty_override),
            salary_supplements=supplements_to_decimal(self.salary_supplements_override),
        )


class PartTimeAdvanceRecord(Base, TimestampMixin):
    """One settled ledger week of a name-keyed part-time staff member."""

    __tablename__ = "part_time_advance"

    record_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    staff_name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    opening_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    advance_given: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    earnings: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    adjustment: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    pending_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    closing_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "staff_name",
            "location",
            "year",
            "month",
            "week_number",
            name="part_time_advance_week_unique",
        ),
        CheckConstraint("week_number >= 0", name="part_time_advance_week_check"),
        CheckConstraint("month BETWEEN 1 AND 12", name="part_time_advance_month_check"),
    )


class PartTimeSettlement(Base, TimestampMixin):
    """Settled flag for one part-time ledger week."""

    __tablename__ = "part_time_settlement"

    settlement_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    settlement_key: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    staff_name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    is_settled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    settled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
