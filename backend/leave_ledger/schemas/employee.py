# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Self

from pydantic import BaseModel, Field, model_validator

Days = Annotated[Decimal, Field(ge=0, max_digits=6, decimal_places=2)]


class CreateEmployeeRequest(BaseModel):
    """Request body for onboarding an employee with optional opening balances."""

    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    active: bool = True
    current_year_vacation_days: Days = Decimal(0)
    current_year_used_days: Days = Decimal(0)
    previous_year_vacation_days: Days = Decimal(0)
    previous_year_used_days: Days = Decimal(0)

    @model_validator(mode="after")
    def _validate_balances(self) -> Self:
        if self.current_year_used_days > self.current_year_vacation_days:
            msg = "current_year_used_days cannot exceed current_year_vacation_days"
            raise ValueError(msg)
        if self.previous_year_used_days > self.previous_year_vacation_days:
            msg = "previous_year_used_days cannot exceed previous_year_vacation_days"
            raise ValueError(msg)
        return self


class EmployeeResponse(BaseModel):
    """Response schema for an employee and the raw ledger columns."""

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    active: bool
    current_year_vacation_days: Decimal
    current_year_used_days: Decimal
    previous_year_vacation_days: Decimal
    previous_year_used_days: Decimal
    last_vacation_credit_date: date | None
    last_transition_year: int | None
    last_expiration_year: int | None
    version: int
    created_at: datetime


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int


class BalanceResponse(BaseModel):
    """Remaining vacation days split by allowance year."""

    employee_id: uuid.UUID
    previous_year_remaining: Decimal
    current_year_remaining: Decimal
    total_available: Decimal
