from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leave_ledger.exceptions import AppError, NotFoundError
from leave_ledger.models.employee import Employee
from leave_ledger.schemas.employee import EmployeeListResponse, EmployeeResponse

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.schemas.employee import CreateEmployeeRequest


def build_employee_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse.model_validate(employee, from_attributes=True)


async def get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    """Load an employee with fresh ledger values.

    ``populate_existing`` overwrites any copy already held by the session so
    balance computations never run on stale numbers.
    """
    result = await session.execute(
        select(Employee).where(col(Employee.id) == employee_id).execution_options(populate_existing=True)
    )
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def create_employee(session: AsyncSession, payload: CreateEmployeeRequest) -> EmployeeResponse:
    """Create an employee, seeding the ledger with the opening balances."""
    employee = Employee(**payload.model_dump())
    session.add(employee)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("An employee with this email already exists", status_code=409) from None

    await session.commit()
    await session.refresh(employee)
    return build_employee_response(employee)


async def list_employees(
    session: AsyncSession,
    active: bool | None = None,
    offset: int = 0,
    limit: int = 50,
) -> EmployeeListResponse:
    """List employees ordered by name."""
    base_filter = []
    if active is not None:
        base_filter.append(col(Employee.active) == active)

    count_result = await session.execute(select(func.count()).select_from(Employee).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Employee)
        .where(*base_filter)
        .order_by(col(Employee.last_name), col(Employee.first_name))
        .offset(offset)
        .limit(limit)
    )
    employees = list(result.scalars().all())

    return EmployeeListResponse(
        items=[build_employee_response(e) for e in employees],
        total=total,
    )
