# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from leave_ledger.models.enums import DayPeriod, DayType, LeaveType, RequestStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeaveRequestPayload(BaseModel):
    """Request body for submitting a new leave request.

    The date range is checked by the service so that a backwards range
    surfaces as InvalidDateRangeError rather than a generic validation error.
    """

    employee_id: uuid.UUID
    start_date: date
    end_date: date
    type: LeaveType
    day_type: DayType = DayType.FULL
    period: DayPeriod | None = None
    reason: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _validate_period(self) -> Self:
        if self.day_type == DayType.HALF and self.period is None:
            msg = "period is required for half-day requests"
            raise ValueError(msg)
        if self.day_type == DayType.FULL:
            self.period = None
        return self


class RejectPayload(BaseModel):
    """Request body for rejecting a pending request."""

    reason: str = Field(min_length=1, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    type: LeaveType
    day_type: DayType
    period: DayPeriod | None
    reason: str | None
    status: RequestStatus
    rejection_reason: str | None
    decided_at: datetime | None
    created_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
