from __future__ import annotations

import enum


class RequestStatus(enum.StrEnum):
    """Lifecycle of a leave request. Only PENDING may transition."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(enum.StrEnum):
    """Category of leave requested by an employee."""

    VACATION = "vacation"
    ANNUAL = "annual"
    PATERNITY = "paternity"
    MATERNITY = "maternity"
    SICK_CHILD = "sickChild"
    UNPAID_UNEXCUSED = "unpaidUnexcused"
    UNPAID_EXCUSED = "unpaidExcused"
    UNPAID = "unpaid"
    RTT = "rtt"
    FAMILY_EVENT = "familyEvent"


class DayType(enum.StrEnum):
    """Whether each business day of the request is taken in full or by half."""

    FULL = "full"
    HALF = "half"


class DayPeriod(enum.StrEnum):
    """Half of the day taken off for half-day requests."""

    MORNING = "morning"
    AFTERNOON = "afternoon"


class HistoryAction(enum.StrEnum):
    """Ledger mutation recorded in the vacation history."""

    MONTHLY_CREDIT = "monthly_credit"
    YEAR_TRANSITION = "year_transition"
    EXPIRED = "expired"
    REQUEST_DEDUCTION = "request_deduction"


class MaintenanceAction(enum.StrEnum):
    """Scheduled ledger jobs accepted by the maintenance entry point."""

    MONTHLY_CREDIT = "monthly-credit"
    YEAR_TRANSITION = "year-transition"
    EXPIRE_PREVIOUS_YEAR = "expire-previous-year"
