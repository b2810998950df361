"""Vacation balance ledger: remaining-day arithmetic, deduction precedence and guarded writes."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import update
from sqlmodel import col

from leave_ledger.exceptions import ConcurrentLedgerUpdateError, InsufficientBalanceError
from leave_ledger.models.employee import Employee
from leave_ledger.schemas.employee import BalanceResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.ext.asyncio import AsyncSession

_ZERO = Decimal(0)

LEDGER_FIELDS = frozenset(
    {
        "current_year_vacation_days",
        "current_year_used_days",
        "previous_year_vacation_days",
        "previous_year_used_days",
        "last_vacation_credit_date",
        "last_transition_year",
        "last_expiration_year",
    }
)


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def previous_year_remaining(employee: Employee) -> Decimal:
    return employee.previous_year_vacation_days - employee.previous_year_used_days


def current_year_remaining(employee: Employee) -> Decimal:
    return employee.current_year_vacation_days - employee.current_year_used_days


def total_available(employee: Employee) -> Decimal:
    return previous_year_remaining(employee) + current_year_remaining(employee)


def ensure_sufficient_balance(employee: Employee, days: Decimal) -> None:
    """Raise InsufficientBalanceError when ``days`` exceeds both allowances combined."""
    available = total_available(employee)
    if days > available:
        raise InsufficientBalanceError(days, available)


@dataclass(frozen=True)
class Deduction:
    """How a number of days is split across the two allowance years."""

    from_previous_year: Decimal
    from_current_year: Decimal
    changes: dict[str, Decimal]

    @property
    def total(self) -> Decimal:
        return self.from_previous_year + self.from_current_year


def plan_deduction(employee: Employee, days: Decimal) -> Deduction:
    """Split ``days`` across the ledger, previous year first.

    The previous-year remainder is consumed before any current-year day.
    Raises InsufficientBalanceError if the result would use more current-year
    days than were granted; nothing is clamped. Approval calls this against
    the current ledger rather than relying on the check made at submission.
    """
    previous_remaining = previous_year_remaining(employee)

    if previous_remaining >= days:
        deduction = Deduction(
            from_previous_year=days,
            from_current_year=_ZERO,
            changes={"previous_year_used_days": employee.previous_year_used_days + days},
        )
    elif previous_remaining > 0:
        spill = days - previous_remaining
        deduction = Deduction(
            from_previous_year=previous_remaining,
            from_current_year=spill,
            changes={
                "previous_year_used_days": employee.previous_year_vacation_days,
                "current_year_used_days": employee.current_year_used_days + spill,
            },
        )
    else:
        deduction = Deduction(
            from_previous_year=_ZERO,
            from_current_year=days,
            changes={"current_year_used_days": employee.current_year_used_days + days},
        )

    new_current_used = deduction.changes.get("current_year_used_days", employee.current_year_used_days)
    if new_current_used > employee.current_year_vacation_days:
        raise InsufficientBalanceError(days, total_available(employee))

    return deduction


def build_balance_response(employee: Employee) -> BalanceResponse:
    return BalanceResponse(
        employee_id=employee.id,
        previous_year_remaining=previous_year_remaining(employee),
        current_year_remaining=current_year_remaining(employee),
        total_available=total_available(employee),
    )


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def write_ledger(
    session: AsyncSession,
    employee: Employee,
    changes: Mapping[str, Any],
) -> None:
    """Apply ``changes`` to the employee ledger as a compare-and-swap on ``version``.

    The UPDATE only matches if the row still carries the version that was read;
    otherwise another writer got there first and ConcurrentLedgerUpdateError is
    raised with nothing written. The caller owns the commit.
    """
    unknown = set(changes) - LEDGER_FIELDS
    if unknown:
        msg = f"Not a ledger field: {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    expected_version = employee.version
    result = await session.execute(
        update(Employee)
        .where(
            col(Employee.id) == employee.id,
            col(Employee.version) == expected_version,
        )
        .values(**changes, version=expected_version + 1)
    )
    if result.rowcount != 1:  # type: ignore[attr-defined]
        raise ConcurrentLedgerUpdateError(employee.id)
