from sqlmodel import SQLModel

from leave_ledger.models.base import TimestampMixin, UUIDBase
from leave_ledger.models.employee import Employee
from leave_ledger.models.enums import (
    DayPeriod,
    DayType,
    HistoryAction,
    LeaveType,
    MaintenanceAction,
    RequestStatus,
)
from leave_ledger.models.history import VacationHistory
from leave_ledger.models.request import LeaveRequest

__all__ = [
    "DayPeriod",
    "DayType",
    "Employee",
    "HistoryAction",
    "LeaveRequest",
    "LeaveType",
    "MaintenanceAction",
    "RequestStatus",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "VacationHistory",
]
