from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leave_ledger.models.history import VacationHistory
from leave_ledger.schemas.history import HistoryEntryResponse, HistoryListResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.models.enums import HistoryAction


def to_json_safe(details: dict[str, Any]) -> dict[str, Any]:
    """Convert UUIDs, dates and decimals to strings so the dict fits a JSON column."""
    data: dict[str, Any] = {}
    for key, value in details.items():
        if isinstance(value, (uuid.UUID, Decimal)):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        else:
            data[key] = value
    return data


async def append_history(
    session: AsyncSession,
    *,
    employee_id: uuid.UUID,
    year: int,
    action: HistoryAction,
    days_affected: Decimal,
    details: dict[str, Any] | None = None,
) -> VacationHistory:
    """Add a vacation history entry within the caller's transaction."""
    entry = VacationHistory(
        employee_id=employee_id,
        year=year,
        action_type=action.value,
        days_affected=days_affected,
        details=to_json_safe(details) if details is not None else None,
    )
    session.add(entry)
    return entry


def _build_history_response(entry: VacationHistory) -> HistoryEntryResponse:
    return HistoryEntryResponse(
        id=entry.id,
        employee_id=entry.employee_id,
        year=entry.year,
        action_type=entry.action_type,
        days_affected=entry.days_affected,
        details=entry.details,
        created_at=entry.created_at,
    )


async def list_history(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HistoryListResponse:
    """List an employee's history entries, newest first."""
    base_filter = [col(VacationHistory.employee_id) == employee_id]
    if year is not None:
        base_filter.append(col(VacationHistory.year) == year)

    count_result = await session.execute(select(func.count()).select_from(VacationHistory).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(VacationHistory)
        .where(*base_filter)
        .order_by(col(VacationHistory.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    entries = list(result.scalars().all())

    return HistoryListResponse(
        items=[_build_history_response(e) for e in entries],
        total=total,
    )
