from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from leave_ledger.models import Employee, LeaveRequest, SQLModel, VacationHistory
from leave_ledger.models.enums import DayType, LeaveType, RequestStatus

EXPECTED_TABLES = {"employee", "leave_request", "vacation_history"}


def test_all_tables_registered() -> None:
    assert set(SQLModel.metadata.tables.keys()) == EXPECTED_TABLES


def test_employee_defaults() -> None:
    employee = Employee(first_name="Louis", last_name="Roux", email="louis@example.fr")
    assert employee.active is True
    assert employee.current_year_vacation_days == Decimal(0)
    assert employee.previous_year_used_days == Decimal(0)
    assert employee.last_vacation_credit_date is None
    assert employee.last_transition_year is None
    assert employee.version == 1
    assert employee.id is not None


def test_leave_request_defaults() -> None:
    request = LeaveRequest(
        employee_id=uuid.uuid4(),
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 14),
        type=LeaveType.RTT,
    )
    assert request.status == RequestStatus.PENDING
    assert request.day_type == DayType.FULL
    assert request.period is None
    assert request.decided_at is None


def test_vacation_history_instantiation() -> None:
    entry = VacationHistory(
        employee_id=uuid.uuid4(),
        year=2024,
        action_type="monthly_credit",
        days_affected=Decimal("2.5"),
        details={"month": 5},
    )
    assert entry.days_affected == Decimal("2.5")
    assert entry.details == {"month": 5}


def test_leave_type_wire_values() -> None:
    assert LeaveType.SICK_CHILD == "sickChild"
    assert LeaveType.FAMILY_EVENT == "familyEvent"
    assert len(LeaveType) == 10
