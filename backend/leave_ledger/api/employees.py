# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leave_ledger.api.deps import AuthDep, HrDep
from leave_ledger.db import SessionDep
from leave_ledger.schemas.employee import (
    BalanceResponse,
    CreateEmployeeRequest,
    EmployeeListResponse,
    EmployeeResponse,
)
from leave_ledger.schemas.history import HistoryListResponse
from leave_ledger.services import employee as employee_service
from leave_ledger.services.balance import build_balance_response
from leave_ledger.services.history import list_history

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: CreateEmployeeRequest,
    session: SessionDep,
    auth: HrDep,
) -> EmployeeResponse:
    """Onboard an employee with optional opening balances (HR only)."""
    return await employee_service.create_employee(session, payload)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    auth: AuthDep,
    active: bool | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> EmployeeListResponse:
    """List employees, optionally only active or inactive ones."""
    return await employee_service.list_employees(session, active, offset, limit)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get an employee with the raw ledger columns."""
    employee = await employee_service.get_employee_or_404(session, employee_id)
    return employee_service.build_employee_response(employee)


@employees_router.get("/{employee_id}/balance", response_model=BalanceResponse)
async def get_employee_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> BalanceResponse:
    """Get the remaining vacation days of an employee."""
    employee = await employee_service.get_employee_or_404(session, employee_id)
    return build_balance_response(employee)


@employees_router.get("/{employee_id}/history", response_model=HistoryListResponse)
async def get_employee_history(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HistoryListResponse:
    """Get the vacation history of an employee, newest first."""
    await employee_service.get_employee_or_404(session, employee_id)
    return await list_history(session, employee_id, year, offset, limit)
