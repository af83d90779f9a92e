"""Full-time salary endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from staff_payroll.api.dependencies import DbSession
from staff_payroll.api.schemas import (
    AdvanceRequest,
    AdvanceResponse,
    ErrorResponse,
    OverrideRequest,
    OverrideResponse,
    SalaryDetailResponse,
)
from staff_payroll.services.salary_service import SalaryService

router = APIRouter(prefix="/salary", tags=["salary"])


@router.get(
    "/{year}/{month}",
    response_model=list[SalaryDetailResponse],
    responses={422: {"model": ErrorResponse}},
)
async def salary_sheet(
    db: DbSession,
    year: Annotated[int, Path(ge=1)],
    month: Annotated[int, Path(ge=1, le=12)],
) -> list[SalaryDetailResponse]:
    """Monthly salary of every active full-time staff member."""
    details = await SalaryService(db).salary_sheet(year, month)
    return [SalaryDetailResponse.model_validate(d) for d in details]


@router.put(
    "/advances",
    response_model=AdvanceResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def save_advance(db: DbSession, payload: AdvanceRequest) -> AdvanceResponse:
    record = await SalaryService(db).save_advance(**payload.model_dump())
    await db.commit()
    return AdvanceResponse.model_validate(record)


@router.put(
    "/overrides",
    response_model=OverrideResponse,
    responses={404: {"model": ErrorResponse}},
)
async def upsert_override(db: DbSession, payload: OverrideRequest) -> OverrideResponse:
    record = await SalaryService(db).upsert_override(**payload.model_dump())
    await db.commit()
    return OverrideResponse.model_validate(record)
