"""Scheduled vacation ledger jobs: monthly credit, year transition, previous-year expiration.

Each job is a pure rule mapping one employee to a LedgerChange (or None when
the employee is already done for the period). ``run_maintenance`` fetches the
eligible employees, maps the rule and persists each change on its own
commit, so a failure midway leaves earlier employees updated.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from functools import partial
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from leave_ledger.config import get_settings
from leave_ledger.models.employee import Employee
from leave_ledger.models.enums import HistoryAction, MaintenanceAction
from leave_ledger.services.balance import current_year_remaining, previous_year_remaining, write_ledger
from leave_ledger.services.employee import get_employee_or_404
from leave_ledger.services.history import append_history

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.config import Settings

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)
_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class LedgerChange:
    """Ledger columns to write for one employee and the history entry describing it."""

    changes: dict[str, Any]
    action: HistoryAction
    year: int
    days_affected: Decimal
    details: dict[str, Any]


MaintenanceRule = Callable[[Employee, datetime], LedgerChange | None]


@dataclass
class MaintenanceRunResult:
    """Summary of a maintenance run."""

    action: MaintenanceAction
    run_at: datetime
    processed: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0


# ---------------------------------------------------------------------------
# Pure rules (no DB)
# ---------------------------------------------------------------------------


def apply_monthly_credit(
    employee: Employee,
    now: datetime,
    credit_days: Decimal = Decimal("2.5"),
) -> LedgerChange | None:
    """Grant the monthly allowance unless it was already granted this calendar month."""
    last_credit = employee.last_vacation_credit_date
    if last_credit is not None and (last_credit.year, last_credit.month) == (now.year, now.month):
        return None

    return LedgerChange(
        changes={
            "current_year_vacation_days": employee.current_year_vacation_days + credit_days,
            "last_vacation_credit_date": now.date(),
        },
        action=HistoryAction.MONTHLY_CREDIT,
        year=now.year,
        days_affected=credit_days,
        details={"month": now.month},
    )


def apply_year_transition(employee: Employee, now: datetime) -> LedgerChange | None:
    """Carry the unused current-year balance into the previous-year slot.

    Any previous-year remainder still unused at this point is replaced.
    Runs at most once per calendar year per employee.
    """
    if employee.last_transition_year == now.year:
        return None

    old_balance = current_year_remaining(employee)
    return LedgerChange(
        changes={
            "previous_year_vacation_days": old_balance,
            "previous_year_used_days": _ZERO,
            "current_year_vacation_days": _ZERO,
            "current_year_used_days": _ZERO,
            "last_transition_year": now.year,
        },
        action=HistoryAction.YEAR_TRANSITION,
        year=now.year - 1,
        days_affected=old_balance,
        details={
            "previous_balance": old_balance,
            "transferred_to_year": now.year,
            "replaced_previous_year_remaining": previous_year_remaining(employee),
        },
    )


def apply_previous_year_expiration(employee: Employee, now: datetime) -> LedgerChange | None:
    """Drop whatever is left of the carried-over allowance."""
    if employee.previous_year_vacation_days <= 0 or employee.last_expiration_year == now.year:
        return None

    expired = previous_year_remaining(employee)
    return LedgerChange(
        changes={
            "previous_year_vacation_days": _ZERO,
            "previous_year_used_days": _ZERO,
            "last_expiration_year": now.year,
        },
        action=HistoryAction.EXPIRED,
        year=now.year - 1,
        days_affected=expired,
        details={"expired_date": now, "previous_year": now.year - 1},
    )


def get_rule(action: MaintenanceAction, settings: Settings | None = None) -> MaintenanceRule:
    """Return the per-employee rule implementing ``action``."""
    settings = settings or get_settings()
    rules: dict[MaintenanceAction, MaintenanceRule] = {
        MaintenanceAction.MONTHLY_CREDIT: partial(apply_monthly_credit, credit_days=settings.monthly_credit_days),
        MaintenanceAction.YEAR_TRANSITION: apply_year_transition,
        MaintenanceAction.EXPIRE_PREVIOUS_YEAR: apply_previous_year_expiration,
    }
    return rules[action]


def _eligibility_filters(action: MaintenanceAction) -> list[Any]:
    if action == MaintenanceAction.MONTHLY_CREDIT:
        return [col(Employee.active).is_(True)]
    if action == MaintenanceAction.EXPIRE_PREVIOUS_YEAR:
        return [col(Employee.previous_year_vacation_days) > 0]
    return []


def due_actions(today: date, settings: Settings | None = None) -> list[MaintenanceAction]:
    """Actions the scheduler should run on ``today``.

    Monthly credit on the last day of each month, year transition on
    January 1st, previous-year expiration on the configured day (June 1st).
    """
    settings = settings or get_settings()
    actions: list[MaintenanceAction] = []
    if today.month == 1 and today.day == 1:
        actions.append(MaintenanceAction.YEAR_TRANSITION)
    if today.month == settings.expiration_month and today.day == settings.expiration_day:
        actions.append(MaintenanceAction.EXPIRE_PREVIOUS_YEAR)
    if (today + _ONE_DAY).month != today.month:
        actions.append(MaintenanceAction.MONTHLY_CREDIT)
    return actions


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


async def _persist_change(session: AsyncSession, employee: Employee, change: LedgerChange) -> None:
    await write_ledger(session, employee, change.changes)
    await append_history(
        session,
        employee_id=employee.id,
        year=change.year,
        action=change.action,
        days_affected=change.days_affected,
        details=change.details,
    )
    await session.commit()


async def run_maintenance(
    session: AsyncSession,
    action: MaintenanceAction,
    now: datetime | None = None,
    *,
    settings: Settings | None = None,
) -> MaintenanceRunResult:
    """Run one maintenance action over every eligible employee.

    Employees are independent: each one is read, mapped through the rule and
    committed on its own. Failures are logged and counted, and the loop moves
    on to the next employee.
    """
    if now is None:
        now = datetime.now(UTC)

    rule = get_rule(action, settings)
    result = MaintenanceRunResult(action=action, run_at=now)

    ids_result = await session.execute(
        select(col(Employee.id)).where(*_eligibility_filters(action)).order_by(col(Employee.id))
    )
    employee_ids: list[uuid.UUID] = list(ids_result.scalars().all())

    for employee_id in employee_ids:
        result.processed += 1
        try:
            employee = await get_employee_or_404(session, employee_id)
            change = rule(employee, now)
            if change is None:
                result.skipped += 1
                continue

            await _persist_change(session, employee, change)
            result.updated += 1

        except Exception:
            await session.rollback()
            logger.exception("Maintenance %s failed for employee=%s", action.value, employee_id)
            result.errors += 1

    logger.info(
        "Maintenance %s complete: processed=%d updated=%d skipped=%d errors=%d",
        action.value,
        result.processed,
        result.updated,
        result.skipped,
        result.errors,
    )
    return result
