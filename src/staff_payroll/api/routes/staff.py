"""Staff roster endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from staff_payroll.api.dependencies import DbSession
from staff_payroll.api.schemas import (
    ArchiveRequest,
    ErrorResponse,
    HikeRequest,
    HikeResponse,
    OldStaffResponse,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
)
from staff_payroll.services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=list[StaffResponse])
async def list_staff(db: DbSession, include_inactive: bool = False) -> list[StaffResponse]:
    """List the roster, active staff only unless asked otherwise."""
    staff = await StaffService(db).list_staff(include_inactive=include_inactive)
    return [StaffResponse.model_validate(s) for s in staff]


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_staff(db: DbSession, payload: StaffCreate) -> StaffResponse:
    member = await StaffService(db).create_staff(**payload.model_dump(exclude_none=True))
    await db.commit()
    return StaffResponse.model_validate(member)


@router.get("/old", response_model=list[OldStaffResponse])
async def list_old_staff(db: DbSession) -> list[OldStaffResponse]:
    records = await StaffService(db).list_old_staff()
    return [OldStaffResponse.model_validate(r) for r in records]


@router.post(
    "/old/{record_id}/rejoin",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def rejoin_staff(
    db: DbSession, record_id: Annotated[UUID, Path()]
) -> StaffResponse:
    """Bring an archived staff member back."""
    member = await StaffService(db).rejoin_staff(record_id)
    await db.commit()
    return StaffResponse.model_validate(member)


@router.get("/hikes/due", response_model=list[StaffResponse])
async def staff_due_for_hike(db: DbSession) -> list[StaffResponse]:
    """Active staff with a year of service and no hike in the last year."""
    staff = await StaffService(db).due_for_hike()
    return [StaffResponse.model_validate(s) for s in staff]


@router.get(
    "/{staff_id}",
    response_model=StaffResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_staff(db: DbSession, staff_id: Annotated[UUID, Path()]) -> StaffResponse:
    return StaffResponse.model_validate(await StaffService(db).get_staff(staff_id))


@router.patch(
    "/{staff_id}",
    response_model=StaffResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_staff(
    db: DbSession, staff_id: Annotated[UUID, Path()], payload: StaffUpdate
) -> StaffResponse:
    member = await StaffService(db).update_staff(
        staff_id, **payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return StaffResponse.model_validate(member)


@router.post(
    "/{staff_id}/archive",
    response_model=OldStaffResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def archive_staff(
    db: DbSession, staff_id: Annotated[UUID, Path()], payload: ArchiveRequest
) -> OldStaffResponse:
    """Archive a leaving staff member with their outstanding advance."""
    record = await StaffService(db).archive_staff(staff_id, payload.reason, payload.left_date)
    await db.commit()
    return OldStaffResponse.model_validate(record)


@router.get("/{staff_id}/hikes", response_model=list[HikeResponse])
async def list_hikes(db: DbSession, staff_id: Annotated[UUID, Path()]) -> list[HikeResponse]:
    hikes = await StaffService(db).list_hikes(staff_id)
    return [HikeResponse.model_validate(h) for h in hikes]


@router.post(
    "/{staff_id}/hikes",
    response_model=HikeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_hike(
    db: DbSession, staff_id: Annotated[UUID, Path()], payload: HikeRequest
) -> HikeResponse:
    components = payload.model_dump(exclude_none=True, exclude={"hike_date", "reason"})
    hike = await StaffService(db).record_hike(
        staff_id, hike_date=payload.hike_date, reason=payload.reason, **components
    )
    await db.commit()
    return HikeResponse.model_validate(hike)
