from __future__ import annotations

from datetime import date
from decimal import Decimal

from leave_ledger.exceptions import InvalidDateRangeError
from leave_ledger.models.enums import DayType
from leave_ledger.services.holiday import count_business_days

_HALF_DAY = Decimal("0.5")


def validate_date_range(start_date: date, end_date: date) -> None:
    """Raise InvalidDateRangeError when the range runs backwards."""
    if end_date < start_date:
        raise InvalidDateRangeError(
            f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}"
        )


def calculate_days_to_deduct(start_date: date, end_date: date, day_type: DayType | str) -> Decimal:
    """Number of vacation days a request consumes.

    Business days exclude weekends and French public holidays; half-day
    requests count each business day as 0.5. Zero is a valid result.
    """
    validate_date_range(start_date, end_date)
    business_days = Decimal(count_business_days(start_date, end_date))
    if DayType(day_type) == DayType.HALF:
        return business_days * _HALF_DAY
    return business_days
