# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class HolidayResponse(BaseModel):
    """A French public holiday."""

    date: date
    name: str


class HolidayListResponse(BaseModel):
    """All holidays of a year."""

    year: int
    items: list[HolidayResponse]
    total: int


class BusinessDaysResponse(BaseModel):
    """Business-day count for an inclusive date range."""

    start: date
    end: date
    business_days: int
    holidays_on_weekdays: int
