# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlmodel import col

from leave_ledger.exceptions import InvalidStateTransitionError, NotFoundError
from leave_ledger.models.enums import DayPeriod, DayType, HistoryAction, LeaveType, RequestStatus
from leave_ledger.models.request import LeaveRequest
from leave_ledger.schemas.request import LeaveRequestListResponse, LeaveRequestResponse
from leave_ledger.services.balance import ensure_sufficient_balance, plan_deduction, write_ledger
from leave_ledger.services.duration import calculate_days_to_deduct, validate_date_range
from leave_ledger.services.employee import get_employee_or_404
from leave_ledger.services.history import append_history

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.schemas.request import RejectPayload, SubmitLeaveRequestPayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        start_date=request.start_date,
        end_date=request.end_date,
        type=LeaveType(request.type),
        day_type=DayType(request.day_type),
        period=DayPeriod(request.period) if request.period else None,
        reason=request.reason,
        status=RequestStatus(request.status),
        rejection_reason=request.rejection_reason,
        decided_at=request.decided_at,
        created_at=request.created_at,
    )


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    result = await session.execute(
        select(LeaveRequest).where(col(LeaveRequest.id) == request_id).execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Leave request not found")
    return request


def _ensure_pending(request: LeaveRequest, target: RequestStatus) -> None:
    if request.status != RequestStatus.PENDING.value:
        raise InvalidStateTransitionError(request.status, target.value)


async def _decide(
    session: AsyncSession,
    request_id: uuid.UUID,
    target: RequestStatus,
    **values: Any,
) -> None:
    """Move a request out of pending with a conditional UPDATE.

    The row only changes if it is still pending in the database. Otherwise
    another decision was committed after this one read the request: the
    transaction is rolled back and InvalidStateTransitionError raised.
    """
    result = await session.execute(
        update(LeaveRequest)
        .where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.status) == RequestStatus.PENDING.value,
        )
        .values(status=target.value, **values)
    )
    if result.rowcount == 1:  # type: ignore[attr-defined]
        return

    await session.rollback()
    current = await session.execute(select(col(LeaveRequest.status)).where(col(LeaveRequest.id) == request_id))
    raise InvalidStateTransitionError(current.scalar_one(), target.value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_leave_request(
    session: AsyncSession,
    payload: SubmitLeaveRequestPayload,
) -> LeaveRequestResponse:
    """Submit a leave request after checking the employee can cover it.

    1. Reject a backwards date range.
    2. Compute the days it would consume (business days, halved for half days).
    3. Compare against previous-year + current-year remaining.
    4. Insert the request as pending. The ledger is untouched until approval.
    """
    validate_date_range(payload.start_date, payload.end_date)
    days_to_deduct = calculate_days_to_deduct(payload.start_date, payload.end_date, payload.day_type)

    employee = await get_employee_or_404(session, payload.employee_id)
    ensure_sufficient_balance(employee, days_to_deduct)

    leave_request = LeaveRequest(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        type=payload.type.value,
        day_type=payload.day_type.value,
        period=payload.period.value if payload.period else None,
        reason=payload.reason,
        status=RequestStatus.PENDING.value,
    )
    session.add(leave_request)

    await session.commit()
    await session.refresh(leave_request)
    logger.info(
        "Leave request %s submitted for employee=%s days=%s",
        leave_request.id,
        leave_request.employee_id,
        days_to_deduct,
    )
    return _build_request_response(leave_request)


async def approve_leave_request(
    session: AsyncSession,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Approve a pending request and deduct its days from the ledger.

    1. Fetch the request; it must be pending.
    2. Recompute days from the stored dates and day type.
    3. Split the days previous year first, then current year.
    4. Move the request to approved, conditional on it still being pending.
    5. Conditional ledger write on the employee version.
    6. Append a request_deduction history entry and commit all of it at once.
    """
    leave_request = await _get_request_or_404(session, request_id)
    _ensure_pending(leave_request, RequestStatus.APPROVED)

    days_to_deduct = calculate_days_to_deduct(leave_request.start_date, leave_request.end_date, leave_request.day_type)
    details = {
        "request_id": leave_request.id,
        "start_date": leave_request.start_date,
        "end_date": leave_request.end_date,
        "day_type": leave_request.day_type,
    }

    employee = await get_employee_or_404(session, leave_request.employee_id)
    deduction = plan_deduction(employee, days_to_deduct)

    now = datetime.now(UTC)
    await _decide(session, request_id, RequestStatus.APPROVED, decided_at=now)
    await write_ledger(session, employee, deduction.changes)

    await append_history(
        session,
        employee_id=employee.id,
        year=now.year,
        action=HistoryAction.REQUEST_DEDUCTION,
        days_affected=days_to_deduct,
        details={
            **details,
            "from_previous_year": deduction.from_previous_year,
            "from_current_year": deduction.from_current_year,
        },
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info(
        "Leave request %s approved: previous_year=%s current_year=%s",
        leave_request.id,
        deduction.from_previous_year,
        deduction.from_current_year,
    )
    return _build_request_response(leave_request)


async def reject_leave_request(
    session: AsyncSession,
    request_id: uuid.UUID,
    payload: RejectPayload,
) -> LeaveRequestResponse:
    """Reject a pending request. No ledger change and no history entry."""
    leave_request = await _get_request_or_404(session, request_id)
    _ensure_pending(leave_request, RequestStatus.REJECTED)

    await _decide(
        session,
        request_id,
        RequestStatus.REJECTED,
        rejection_reason=payload.reason,
        decided_at=datetime.now(UTC),
    )

    await session.commit()
    await session.refresh(leave_request)
    return _build_request_response(leave_request)


async def get_leave_request(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequestResponse:
    """Get a single request by ID."""
    leave_request = await _get_request_or_404(session, request_id)
    return _build_request_response(leave_request)


async def list_leave_requests(
    session: AsyncSession,
    status_filter: RequestStatus | None = None,
    employee_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List requests with optional filters, ordered by created_at DESC."""
    base_filters = []

    if status_filter is not None:
        base_filters.append(col(LeaveRequest.status) == status_filter.value)
    if employee_id is not None:
        base_filters.append(col(LeaveRequest.employee_id) == employee_id)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return LeaveRequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=total,
    )
