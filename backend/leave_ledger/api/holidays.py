# ruff: noqa: B008, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Path, Query

from leave_ledger.schemas.holiday import BusinessDaysResponse, HolidayListResponse, HolidayResponse
from leave_ledger.services import holiday as holiday_service

holidays_router = APIRouter(
    prefix="/holidays",
    tags=["holidays"],
)


@holidays_router.get("/business-days", response_model=BusinessDaysResponse)
async def count_business_days(
    start: date = Query(),
    end: date = Query(),
) -> BusinessDaysResponse:
    """Count working days in an inclusive range, skipping weekends and French holidays."""
    return BusinessDaysResponse(
        start=start,
        end=end,
        business_days=holiday_service.count_business_days(start, end),
        holidays_on_weekdays=holiday_service.count_holidays_in_period(start, end),
    )


@holidays_router.get("/{year}", response_model=HolidayListResponse)
async def list_holidays(
    year: int = Path(ge=1583, le=9999),
) -> HolidayListResponse:
    """List the eleven French public holidays of a year."""
    items = [HolidayResponse(date=h.date, name=h.name) for h in holiday_service.french_holidays(year)]
    return HolidayListResponse(year=year, items=items, total=len(items))
