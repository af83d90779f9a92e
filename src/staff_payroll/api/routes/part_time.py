"""Part-time earnings, ledger and settlement endpoints."""

from datetime import date

from fastapi import APIRouter, HTTPException, status

from staff_payroll.api.dependencies import DbSession, Rates
from staff_payroll.api.schemas import (
    ErrorResponse,
    LedgerRequest,
    LedgerResponse,
    PartTimeSalaryResponse,
    SettlementStatusResponse,
    SettlementToggleRequest,
    SettlementToggleResponse,
)
from staff_payroll.calculators.ledger import (
    settlement_key,
    weekly_keys_for_month,
    weekly_keys_for_range,
)
from staff_payroll.calculators.part_time import ReportPeriod
from staff_payroll.calculators.types import Granularity
from staff_payroll.services.part_time_service import PartTimeService
from staff_payroll.services.settlement_service import SettlementService

router = APIRouter(prefix="/part-time", tags=["part-time"])


def _invalid(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message)


def build_period(
    granularity: Granularity,
    year: int | None = None,
    month: int | None = None,
    week_number: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> ReportPeriod:
    """Resolve query parameters into a report period."""
    try:
        if granularity == Granularity.DATE_RANGE:
            if start is None or end is None:
                raise _invalid("start and end are required for a date range")
            return ReportPeriod.for_range(start, end)
        if year is None or month is None:
            raise _invalid("year and month are required")
        if granularity == Granularity.WEEKLY:
            if week_number is None:
                raise _invalid("week_number is required for a weekly period")
            return ReportPeriod.for_week(year, month, week_number)
        return ReportPeriod.for_month(year, month)
    except ValueError as e:
        raise _invalid(str(e))


def settlement_keys(
    staff_name: str,
    location: str,
    granularity: Granularity,
    year: int | None = None,
    month: int | None = None,
    week_number: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[str]:
    """Weekly settlement keys covered by a week, month or date range."""
    period = build_period(granularity, year, month, week_number, start, end)
    if granularity == Granularity.WEEKLY:
        return [settlement_key(staff_name, location, year, month, week_number)]
    if granularity == Granularity.MONTHLY:
        return weekly_keys_for_month(staff_name, location, year, month)
    return weekly_keys_for_range(staff_name, location, period.start, period.end)


@router.get(
    "/salaries",
    response_model=list[PartTimeSalaryResponse],
    responses={422: {"model": ErrorResponse}},
)
async def part_time_salaries(
    db: DbSession,
    rates: Rates,
    granularity: Granularity = Granularity.MONTHLY,
    year: int | None = None,
    month: int | None = None,
    week_number: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[PartTimeSalaryResponse]:
    """Earnings per part-time name for a month, ledger week or date range."""
    period = build_period(granularity, year, month, week_number, start, end)
    details = await PartTimeService(db, rates).salaries(period)
    return [PartTimeSalaryResponse.model_validate(d) for d in details]


@router.put(
    "/advances",
    response_model=LedgerResponse,
    responses={422: {"model": ErrorResponse}},
)
async def upsert_advance(db: DbSession, rates: Rates, payload: LedgerRequest) -> LedgerResponse:
    """Settle one ledger week; earnings default to the calculated week earnings."""
    record = await PartTimeService(db, rates).upsert_advance_record(**payload.model_dump())
    await db.commit()
    return LedgerResponse.model_validate(record)


@router.get("/advances/report", response_model=list[LedgerResponse])
async def advance_report(
    db: DbSession,
    rates: Rates,
    start: date,
    end: date,
    staff_name: str | None = None,
) -> list[LedgerResponse]:
    records = await PartTimeService(db, rates).advance_report(start, end, staff_name)
    return [LedgerResponse.model_validate(r) for r in records]


@router.get(
    "/settlements/status",
    response_model=SettlementStatusResponse,
    responses={422: {"model": ErrorResponse}},
)
async def settlement_status(
    db: DbSession,
    staff_name: str,
    location: str,
    granularity: Granularity = Granularity.WEEKLY,
    year: int | None = None,
    month: int | None = None,
    week_number: int | None = None,
    start: date | None = None,
    end: date | None = None,
) -> SettlementStatusResponse:
    service = SettlementService(db)
    if granularity == Granularity.WEEKLY:
        build_period(granularity, year, month, week_number)
        result = await service.week_status(staff_name, location, year, month, week_number)
    elif granularity == Granularity.MONTHLY:
        build_period(granularity, year, month)
        result = await service.month_status(staff_name, location, year, month)
    else:
        period = build_period(granularity, start=start, end=end)
        result = await service.range_status(staff_name, location, period.start, period.end)
    return SettlementStatusResponse.model_validate(result)


@router.post(
    "/settlements/toggle",
    response_model=SettlementToggleResponse,
    responses={422: {"model": ErrorResponse}},
)
async def toggle_settlement(
    db: DbSession, payload: SettlementToggleRequest
) -> SettlementToggleResponse:
    """Toggle a week, or every week of a month or date range."""
    keys = settlement_keys(
        payload.staff_name,
        payload.location,
        payload.granularity,
        payload.year,
        payload.month,
        payload.week_number,
        payload.start,
        payload.end,
    )
    settled = await SettlementService(db).bulk_toggle(payload.staff_name, payload.location, keys)
    await db.commit()
    return SettlementToggleResponse(is_settled=settled)
