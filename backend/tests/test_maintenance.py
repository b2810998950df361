"""Tests for the scheduled ledger jobs: monthly credit, year transition and expiration."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import select
from sqlmodel import col

from leave_ledger import worker
from leave_ledger.config import Settings
from leave_ledger.exceptions import ConcurrentLedgerUpdateError
from leave_ledger.models import Employee, VacationHistory
from leave_ledger.models.enums import HistoryAction, MaintenanceAction
from leave_ledger.services import maintenance as maintenance_service
from leave_ledger.services.employee import get_employee_or_404
from leave_ledger.services.maintenance import (
    apply_monthly_credit,
    apply_previous_year_expiration,
    apply_year_transition,
    due_actions,
    run_maintenance,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

MAY_END = datetime(2024, 5, 31, 1, 0, tzinfo=UTC)
NEW_YEAR = datetime(2025, 1, 1, 1, 0, tzinfo=UTC)
JUNE_FIRST = datetime(2025, 6, 1, 1, 0, tzinfo=UTC)


def _employee(**overrides: Any) -> Employee:
    fields: dict[str, Any] = {"first_name": "Hugo", "last_name": "Petit", "email": "hugo@example.fr"}
    for key, value in overrides.items():
        fields[key] = Decimal(value) if key.endswith("_days") else value
    return Employee(**fields)


async def _history(session: AsyncSession, action: HistoryAction) -> list[VacationHistory]:
    result = await session.execute(
        select(VacationHistory)
        .where(col(VacationHistory.action_type) == action.value)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


def test_monthly_credit_first_time() -> None:
    change = apply_monthly_credit(_employee(current_year_vacation_days="5"), MAY_END)
    assert change is not None
    assert change.changes == {
        "current_year_vacation_days": Decimal("7.5"),
        "last_vacation_credit_date": date(2024, 5, 31),
    }
    assert change.action == HistoryAction.MONTHLY_CREDIT
    assert change.year == 2024
    assert change.details == {"month": 5}


def test_monthly_credit_already_granted_this_month() -> None:
    employee = _employee(current_year_vacation_days="5", last_vacation_credit_date=date(2024, 5, 2))
    assert apply_monthly_credit(employee, MAY_END) is None


def test_monthly_credit_same_month_last_year_is_not_a_duplicate() -> None:
    employee = _employee(last_vacation_credit_date=date(2023, 5, 31))
    change = apply_monthly_credit(employee, MAY_END)
    assert change is not None
    assert change.days_affected == Decimal("2.5")


def test_monthly_credit_uses_given_amount() -> None:
    change = apply_monthly_credit(_employee(), MAY_END, credit_days=Decimal("2.08"))
    assert change is not None
    assert change.changes["current_year_vacation_days"] == Decimal("2.08")


def test_year_transition_moves_unused_days() -> None:
    employee = _employee(
        current_year_vacation_days="25",
        current_year_used_days="10",
        previous_year_vacation_days="4",
        previous_year_used_days="1",
    )
    change = apply_year_transition(employee, NEW_YEAR)
    assert change is not None
    assert change.changes == {
        "previous_year_vacation_days": Decimal(15),
        "previous_year_used_days": Decimal(0),
        "current_year_vacation_days": Decimal(0),
        "current_year_used_days": Decimal(0),
        "last_transition_year": 2025,
    }
    assert change.year == 2024
    assert change.days_affected == Decimal(15)
    assert change.details["transferred_to_year"] == 2025
    assert change.details["replaced_previous_year_remaining"] == Decimal(3)


def test_year_transition_once_per_year() -> None:
    assert apply_year_transition(_employee(last_transition_year=2025), NEW_YEAR) is None


def test_expiration_drops_remainder() -> None:
    employee = _employee(previous_year_vacation_days="6", previous_year_used_days="2")
    change = apply_previous_year_expiration(employee, JUNE_FIRST)
    assert change is not None
    assert change.changes == {
        "previous_year_vacation_days": Decimal(0),
        "previous_year_used_days": Decimal(0),
        "last_expiration_year": 2025,
    }
    assert change.days_affected == Decimal(4)
    assert change.year == 2024
    assert change.details["previous_year"] == 2024


def test_expiration_skips_empty_or_done() -> None:
    assert apply_previous_year_expiration(_employee(), JUNE_FIRST) is None
    employee = _employee(previous_year_vacation_days="3", last_expiration_year=2025)
    assert apply_previous_year_expiration(employee, JUNE_FIRST) is None


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("today", "expected"),
    [
        (date(2024, 2, 28), []),
        (date(2024, 2, 29), [MaintenanceAction.MONTHLY_CREDIT]),
        (date(2025, 1, 1), [MaintenanceAction.YEAR_TRANSITION]),
        (date(2025, 6, 1), [MaintenanceAction.EXPIRE_PREVIOUS_YEAR]),
        (date(2025, 12, 31), [MaintenanceAction.MONTHLY_CREDIT]),
    ],
)
def test_due_actions(today: date, expected: list[MaintenanceAction]) -> None:
    assert due_actions(today, Settings()) == expected


def test_due_actions_custom_expiration_day() -> None:
    settings = Settings(expiration_month=3, expiration_day=31)
    assert due_actions(date(2025, 3, 31), settings) == [
        MaintenanceAction.EXPIRE_PREVIOUS_YEAR,
        MaintenanceAction.MONTHLY_CREDIT,
    ]


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


async def test_monthly_credit_run_is_idempotent_within_month(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    employee = await make_employee(current_year_vacation_days="10")

    first = await run_maintenance(db_session, MaintenanceAction.MONTHLY_CREDIT, MAY_END)
    assert (first.processed, first.updated, first.skipped, first.errors) == (1, 1, 0, 0)

    second = await run_maintenance(db_session, MaintenanceAction.MONTHLY_CREDIT, MAY_END)
    assert (second.processed, second.updated, second.skipped) == (1, 0, 1)

    reloaded = await get_employee_or_404(db_session, employee.id)
    assert reloaded.current_year_vacation_days == Decimal("12.5")
    assert reloaded.last_vacation_credit_date == date(2024, 5, 31)
    assert len(await _history(db_session, HistoryAction.MONTHLY_CREDIT)) == 1


async def test_monthly_credit_skips_inactive_employees(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    active = await make_employee()
    inactive = await make_employee(active=False)

    result = await run_maintenance(db_session, MaintenanceAction.MONTHLY_CREDIT, MAY_END)
    assert result.processed == 1

    assert (await get_employee_or_404(db_session, active.id)).current_year_vacation_days == Decimal("2.5")
    assert (await get_employee_or_404(db_session, inactive.id)).current_year_vacation_days == Decimal(0)


async def test_year_transition_run(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    employee = await make_employee(
        current_year_vacation_days="30",
        current_year_used_days="12",
        active=False,
    )

    result = await run_maintenance(db_session, MaintenanceAction.YEAR_TRANSITION, NEW_YEAR)
    assert result.updated == 1

    reloaded = await get_employee_or_404(db_session, employee.id)
    assert reloaded.previous_year_vacation_days == Decimal(18)
    assert reloaded.current_year_vacation_days == Decimal(0)
    assert reloaded.last_transition_year == 2025

    rerun = await run_maintenance(db_session, MaintenanceAction.YEAR_TRANSITION, NEW_YEAR)
    assert (rerun.updated, rerun.skipped) == (0, 1)
    assert (await get_employee_or_404(db_session, employee.id)).previous_year_vacation_days == Decimal(18)

    entries = await _history(db_session, HistoryAction.YEAR_TRANSITION)
    assert len(entries) == 1
    assert entries[0].year == 2024
    assert entries[0].details is not None
    assert Decimal(entries[0].details["previous_balance"]) == Decimal(18)


async def test_expiration_run(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    employee = await make_employee(previous_year_vacation_days="6", previous_year_used_days="2")
    await make_employee(current_year_vacation_days="10")

    result = await run_maintenance(db_session, MaintenanceAction.EXPIRE_PREVIOUS_YEAR, JUNE_FIRST)
    assert (result.processed, result.updated) == (1, 1)

    reloaded = await get_employee_or_404(db_session, employee.id)
    assert reloaded.previous_year_vacation_days == Decimal(0)
    assert reloaded.previous_year_used_days == Decimal(0)
    assert reloaded.last_expiration_year == 2025

    rerun = await run_maintenance(db_session, MaintenanceAction.EXPIRE_PREVIOUS_YEAR, JUNE_FIRST)
    assert rerun.processed == 0

    entries = await _history(db_session, HistoryAction.EXPIRED)
    assert len(entries) == 1
    assert entries[0].days_affected == Decimal(4)


async def test_failed_employee_does_not_stop_the_batch(
    db_session: AsyncSession,
    make_employee: Callable[..., Awaitable[Employee]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken_id = (await make_employee()).id
    healthy_id = (await make_employee()).id
    original_write = maintenance_service.write_ledger

    async def _flaky_write(session: AsyncSession, employee: Employee, changes: dict[str, Any]) -> None:
        if employee.id == broken_id:
            raise ConcurrentLedgerUpdateError(employee.id)
        await original_write(session, employee, changes)

    monkeypatch.setattr(maintenance_service, "write_ledger", _flaky_write)

    result = await run_maintenance(db_session, MaintenanceAction.MONTHLY_CREDIT, MAY_END)
    assert (result.processed, result.updated, result.errors) == (2, 1, 1)

    assert (await get_employee_or_404(db_session, healthy_id)).current_year_vacation_days == Decimal("2.5")
    assert (await get_employee_or_404(db_session, broken_id)).current_year_vacation_days == Decimal(0)
    assert len(await _history(db_session, HistoryAction.MONTHLY_CREDIT)) == 1


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


async def test_maintenance_endpoint(
    async_client: AsyncClient,
    make_employee: Callable[..., Awaitable[Employee]],
) -> None:
    await make_employee()
    await make_employee()

    resp = await async_client.post("/maintenance", json={"action": "monthly-credit"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["action"] == "monthly-credit"
    assert data["processed"] == 2
    assert data["updated"] == 2


async def test_maintenance_endpoint_unknown_action(async_client: AsyncClient) -> None:
    resp = await async_client.post("/maintenance", json={"action": "reset-everything"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "ValidationError"


async def test_maintenance_endpoint_reports_failures(
    async_client: AsyncClient,
    make_employee: Callable[..., Awaitable[Employee]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await make_employee()

    async def _always_conflict(session: AsyncSession, employee: Employee, changes: dict[str, Any]) -> None:
        raise ConcurrentLedgerUpdateError(employee.id)

    monkeypatch.setattr(maintenance_service, "write_ledger", _always_conflict)

    resp = await async_client.post("/maintenance", json={"action": "year-transition"})
    assert resp.status_code == 503
    data = resp.json()
    assert data["error"] == "PersistenceFailureError"
    assert "1 of 1" in data["detail"]


# ---------------------------------------------------------------------------
# Worker
# ---------------------------------------------------------------------------


async def test_worker_runs_due_actions(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    make_employee: Callable[..., Awaitable[Employee]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    employee = await make_employee(current_year_vacation_days="20", current_year_used_days="5")
    monkeypatch.setattr(worker, "get_session_factory", lambda: session_factory)

    # 31 December: monthly credit only
    await worker.run_scheduled_actions(datetime(2024, 12, 31, 2, 0, tzinfo=UTC))
    reloaded = await get_employee_or_404(db_session, employee.id)
    assert reloaded.current_year_vacation_days == Decimal("22.5")

    # 1 January: year transition
    await worker.run_scheduled_actions(NEW_YEAR)
    reloaded = await get_employee_or_404(db_session, employee.id)
    assert reloaded.previous_year_vacation_days == Decimal("17.5")
    assert reloaded.current_year_vacation_days == Decimal(0)
