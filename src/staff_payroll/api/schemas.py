"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from staff_payroll.calculators.dates import experience_label
from staff_payroll.calculators.types import Granularity


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None


# ============================================================================
# Staff schemas
# ============================================================================


class StaffCreate(BaseModel):
    """Schema for adding a staff member."""

    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    employment_type: str = "full-time"
    joined_date: date | None = None
    basic_salary: Decimal = Field(default=Decimal("0"), ge=0)
    incentive: Decimal = Field(default=Decimal("0"), ge=0)
    hra: Decimal = Field(default=Decimal("0"), ge=0)
    meal_allowance: Decimal = Field(default=Decimal("0"), ge=0)
    salary_supplements: dict[str, Decimal] = Field(default_factory=dict)
    sunday_penalty_enabled: bool = True
    salary_calculation_days: int = Field(default=26, ge=1, le=31)
    contact_number: str | None = None
    address: str | None = None
    display_order: int = 0


class StaffUpdate(BaseModel):
    """Schema for editing a staff member; only sent fields change."""

    name: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    employment_type: str | None = None
    joined_date: date | None = None
    basic_salary: Decimal | None = Field(default=None, ge=0)
    incentive: Decimal | None = Field(default=None, ge=0)
    hra: Decimal | None = Field(default=None, ge=0)
    meal_allowance: Decimal | None = Field(default=None, ge=0)
    salary_supplements: dict[str, Decimal] | None = None
    sunday_penalty_enabled: bool | None = None
    salary_calculation_days: int | None = Field(default=None, ge=1, le=31)
    contact_number: str | None = None
    address: str | None = None
    display_order: int | None = None


class StaffResponse(BaseModel):
    """Schema for staff member response."""

    model_config = ConfigDict(from_attributes=True)

    staff_id: UUID
    name: str
    location: str
    employment_type: str
    is_active: bool
    joined_date: date
    basic_salary: Decimal
    incentive: Decimal
    hra: Decimal
    meal_allowance: Decimal
    salary_supplements: dict[str, Decimal]
    total_salary: Decimal
    initial_salary: Decimal | None = None
    sunday_penalty_enabled: bool
    salary_calculation_days: int
    contact_number: str | None = None
    address: str | None = None
    display_order: int

    @computed_field
    @property
    def experience(self) -> str:
        return experience_label(self.joined_date)


class ArchiveRequest(BaseModel):
    """Schema for archiving a leaving staff member."""

    reason: str = Field(min_length=1)
    left_date: date | None = None


class OldStaffResponse(BaseModel):
    """Schema for archived staff response."""

    model_config = ConfigDict(from_attributes=True)

    record_id: UUID
    original_staff_id: UUID
    name: str
    location: str
    employment_type: str
    joined_date: date
    left_date: date
    reason: str
    total_salary: Decimal
    total_advance_outstanding: Decimal
    last_advance_data: dict[str, Any] | None = None


class HikeRequest(BaseModel):
    """Schema for recording a salary hike; only sent components change."""

    basic_salary: Decimal | None = Field(default=None, ge=0)
    incentive: Decimal | None = Field(default=None, ge=0)
    hra: Decimal | None = Field(default=None, ge=0)
    meal_allowance: Decimal | None = Field(default=None, ge=0)
    salary_supplements: dict[str, Decimal] | None = None
    hike_date: date | None = None
    reason: str | None = None


class HikeResponse(BaseModel):
    """Schema for salary hike response."""

    model_config = ConfigDict(from_attributes=True)

    hike_id: UUID
    staff_id: UUID
    old_salary: Decimal
    new_salary: Decimal
    hike_date: date
    reason: str | None = None


# ============================================================================
# Attendance schemas
# ============================================================================


class FullTimeAttendanceRequest(BaseModel):
    """Schema for marking a full-time staff member."""

    staff_id: UUID
    date: date
    status: str
    shift: str | None = None
    location: str | None = None


class BulkMarkRequest(BaseModel):
    """Schema for marking every active full-time staff member."""

    date: date
    status: str
    location: str | None = None


class PartTimeAddRequest(BaseModel):
    """Schema for adding a part-time shift."""

    staff_name: str = Field(min_length=1)
    date: date
    location: str = Field(min_length=1)
    shift: str = "Both"
    status: str = "Present"
    salary: Decimal | None = Field(default=None, ge=0)
    arrival_time: str | None = None
    leaving_time: str | None = None


class PartTimeEditRequest(BaseModel):
    """Schema for editing a part-time shift."""

    staff_name: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    status: str | None = None
    shift: str | None = None
    salary: Decimal | None = Field(default=None, ge=0)
    arrival_time: str | None = None
    leaving_time: str | None = None


class AttendanceResponse(BaseModel):
    """Schema for attendance record response."""

    model_config = ConfigDict(from_attributes=True)

    attendance_id: UUID
    date: date
    status: str
    attendance_value: Decimal
    shift: str | None = None
    location: str | None = None
    is_part_time: bool
    staff_id: UUID | None = None
    staff_name: str | None = None
    salary: Decimal | None = None
    salary_override: bool = False
    arrival_time: str | None = None
    leaving_time: str | None = None


class LocationSummaryResponse(BaseModel):
    """Schema for a location's daily attendance summary."""

    model_config = ConfigDict(from_attributes=True)

    location: str
    day: date
    total: int
    present: int
    half_day: int
    absent: int
    total_present_value: Decimal
    present_names: list[str]
    half_day_names: list[str]
    absent_names: list[str]


# ============================================================================
# Salary schemas
# ============================================================================


class SalaryDetailResponse(BaseModel):
    """Schema for a computed monthly salary."""

    model_config = ConfigDict(from_attributes=True)

    staff_id: UUID
    year: int
    month: int
    present_days: int
    half_days: int
    leave_days: int
    sunday_absents: int
    sunday_half_days: int
    old_adv: Decimal
    cur_adv: Decimal
    deduction: Decimal
    new_adv: Decimal
    basic_earned: Decimal
    incentive_earned: Decimal
    hra_earned: Decimal
    meal_allowance: Decimal
    salary_supplements: dict[str, Decimal]
    sunday_penalty: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    is_overridden: bool


class AdvanceRequest(BaseModel):
    """Schema for saving a monthly advance record."""

    staff_id: UUID
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    current_advance: Decimal = Field(default=Decimal("0"), ge=0)
    deduction: Decimal = Field(default=Decimal("0"), ge=0)
    old_advance: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class AdvanceResponse(BaseModel):
    """Schema for advance record response."""

    model_config = ConfigDict(from_attributes=True)

    advance_id: UUID
    staff_id: UUID
    year: int
    month: int
    old_advance: Decimal
    current_advance: Decimal
    deduction: Decimal
    new_advance: Decimal
    notes: str | None = None


class OverrideRequest(BaseModel):
    """Schema for manual salary component overrides."""

    staff_id: UUID
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    basic: Decimal | None = None
    incentive: Decimal | None = None
    hra: Decimal | None = None
    meal_allowance: Decimal | None = None
    sunday_penalty: Decimal | None = None
    salary_supplements: dict[str, Decimal] = Field(default_factory=dict)


class OverrideResponse(BaseModel):
    """Schema for salary override response."""

    model_config = ConfigDict(from_attributes=True)

    override_id: UUID
    staff_id: UUID
    year: int
    month: int
    basic_override: Decimal | None = None
    incentive_override: Decimal | None = None
    hra_override: Decimal | None = None
    meal_allowance_override: Decimal | None = None
    sunday_penalty_override: Decimal | None = None
    salary_supplements_override: dict[str, Decimal]


# ============================================================================
# Part-time schemas
# ============================================================================


class DailySalaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    day_of_week: str
    is_sunday: bool
    salary: Decimal
    is_override: bool


class WeeklySalaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    week: int
    days: list[DailySalaryResponse]
    week_total: Decimal


class PartTimeSalaryResponse(BaseModel):
    """Schema for a part-time staff member's earnings over a period."""

    model_config = ConfigDict(from_attributes=True)

    staff_name: str
    location: str
    total_days: int
    total_earnings: Decimal
    weekly_breakdown: list[WeeklySalaryResponse]
    period_start: date
    period_end: date


class LedgerRequest(BaseModel):
    """Schema for settling one part-time ledger week."""

    staff_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    week_number: int = Field(ge=0)
    advance_given: Decimal = Field(default=Decimal("0"), ge=0)
    earnings: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class LedgerResponse(BaseModel):
    """Schema for a stored part-time ledger week."""

    model_config = ConfigDict(from_attributes=True)

    record_id: UUID
    staff_name: str
    location: str
    year: int
    month: int
    week_number: int
    week_start_date: date
    opening_balance: Decimal
    advance_given: Decimal
    earnings: Decimal
    adjustment: Decimal
    pending_salary: Decimal
    closing_balance: Decimal
    notes: str | None = None


class SettlementStatusResponse(BaseModel):
    """Schema for aggregated settlement status."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    settled_count: int
    is_fully_settled: bool
    is_partially_settled: bool


class SettlementToggleRequest(BaseModel):
    """Schema for toggling settlement over a week, month or date range."""

    staff_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    granularity: Granularity = Granularity.WEEKLY
    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    week_number: int | None = Field(default=None, ge=0)
    start: date | None = None
    end: date | None = None


class SettlementToggleResponse(BaseModel):
    is_settled: bool
