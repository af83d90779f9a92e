"""Attendance endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from staff_payroll.api.dependencies import DbSession, Rates
from staff_payroll.api.schemas import (
    AttendanceResponse,
    BulkMarkRequest,
    ErrorResponse,
    FullTimeAttendanceRequest,
    LocationSummaryResponse,
    PartTimeAddRequest,
    PartTimeEditRequest,
)
from staff_payroll.services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("", response_model=list[AttendanceResponse])
async def list_attendance(
    db: DbSession,
    rates: Rates,
    start: date | None = None,
    end: date | None = None,
    location: str | None = None,
) -> list[AttendanceResponse]:
    records = await AttendanceService(db, rates).list_attendance(start, end, location)
    return [AttendanceResponse.model_validate(r) for r in records]


@router.get("/summary", response_model=LocationSummaryResponse)
async def location_summary(
    db: DbSession,
    rates: Rates,
    day: Annotated[date, Query(alias="date")],
    location: str,
) -> LocationSummaryResponse:
    """Present/half-day/absent counts and names for one location and day."""
    summary = await AttendanceService(db, rates).location_summary(day, location)
    return LocationSummaryResponse.model_validate(summary)


@router.put(
    "/full-time",
    response_model=AttendanceResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def mark_full_time(
    db: DbSession, rates: Rates, payload: FullTimeAttendanceRequest
) -> AttendanceResponse:
    record = await AttendanceService(db, rates).upsert_full_time(
        payload.staff_id, payload.date, payload.status, payload.shift, payload.location
    )
    await db.commit()
    return AttendanceResponse.model_validate(record)


@router.post(
    "/mark-all",
    response_model=list[AttendanceResponse],
    responses={422: {"model": ErrorResponse}},
)
async def mark_all(
    db: DbSession, rates: Rates, payload: BulkMarkRequest
) -> list[AttendanceResponse]:
    """Mark every active full-time staff member, optionally at one location."""
    records = await AttendanceService(db, rates).mark_all(
        payload.date, payload.status, payload.location
    )
    await db.commit()
    return [AttendanceResponse.model_validate(r) for r in records]


@router.post(
    "/part-time",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def add_part_time(
    db: DbSession, rates: Rates, payload: PartTimeAddRequest
) -> AttendanceResponse:
    fields = payload.model_dump()
    fields["day"] = fields.pop("date")
    record = await AttendanceService(db, rates).add_part_time(**fields)
    await db.commit()
    return AttendanceResponse.model_validate(record)


@router.patch(
    "/part-time/{attendance_id}",
    response_model=AttendanceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def edit_part_time(
    db: DbSession,
    rates: Rates,
    attendance_id: Annotated[UUID, Path()],
    payload: PartTimeEditRequest,
) -> AttendanceResponse:
    record = await AttendanceService(db, rates).edit_part_time(
        attendance_id, **payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return AttendanceResponse.model_validate(record)


@router.delete(
    "/part-time/{attendance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_part_time(
    db: DbSession, rates: Rates, attendance_id: Annotated[UUID, Path()]
) -> None:
    await AttendanceService(db, rates).delete_part_time(attendance_id)
    await db.commit()
