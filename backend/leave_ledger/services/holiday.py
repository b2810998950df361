"""French public holiday calendar and business-day counting.

Eight fixed-date holidays plus three that move with Easter (Easter Monday,
Ascension, Whit Monday). Everything here is pure and deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import lru_cache

_FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Jour de l'an"),
    (5, 1, "Fête du Travail"),
    (5, 8, "Victoire 1945"),
    (7, 14, "Fête nationale"),
    (8, 15, "Assomption"),
    (11, 1, "Toussaint"),
    (11, 11, "Armistice 1918"),
    (12, 25, "Noël"),
)

# Offsets in days from Easter Sunday.
_EASTER_HOLIDAYS: tuple[tuple[int, str], ...] = (
    (1, "Lundi de Pâques"),
    (39, "Ascension"),
    (50, "Lundi de Pentecôte"),
)

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class FrenchHoliday:
    """A public holiday and its French name."""

    date: date
    name: str


def _as_date(value: date | datetime) -> date:
    """Drop the time of day, keeping the local calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_easter_date(year: int) -> date:
    """Return Easter Sunday of ``year`` in the Gregorian calendar.

    Anonymous Gregorian algorithm (Meeus/Jones/Butcher).
    """
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


@lru_cache(maxsize=64)
def french_holidays(year: int) -> tuple[FrenchHoliday, ...]:
    """Return the eleven French public holidays of ``year`` in date order."""
    easter = compute_easter_date(year)
    holidays = [FrenchHoliday(date(year, month, day), name) for month, day, name in _FIXED_HOLIDAYS]
    holidays.extend(FrenchHoliday(easter + timedelta(days=offset), name) for offset, name in _EASTER_HOLIDAYS)
    return tuple(sorted(holidays, key=lambda h: h.date))


def holidays_for_year(year: int) -> frozenset[date]:
    """Return the set of holiday dates for ``year``."""
    return frozenset(h.date for h in french_holidays(year))


def holidays_between(start: date, end: date) -> frozenset[date]:
    """Union of the holiday sets of every year touched by [start, end]."""
    dates: set[date] = set()
    for year in range(start.year, end.year + 1):
        dates |= holidays_for_year(year)
    return frozenset(dates)


def holidays_for_month(year: int, month: int) -> list[FrenchHoliday]:
    """Holidays falling in the given month."""
    return [h for h in french_holidays(year) if h.date.month == month]


def is_weekend(day: date | datetime) -> bool:
    """True for Saturday and Sunday."""
    return _as_date(day).weekday() >= 5


def is_holiday(day: date | datetime) -> bool:
    """True if ``day`` is a French public holiday."""
    day = _as_date(day)
    return day in holidays_for_year(day.year)


def count_business_days(start: date | datetime, end: date | datetime) -> int:
    """Count days in [start, end] that are neither weekend days nor holidays.

    Returns 0 when ``end`` is before ``start``.
    """
    start_date = _as_date(start)
    end_date = _as_date(end)
    if end_date < start_date:
        return 0

    holiday_dates = holidays_between(start_date, end_date)

    business_days = 0
    current = start_date
    while current <= end_date:
        if current.weekday() < 5 and current not in holiday_dates:
            business_days += 1
        current += _ONE_DAY

    return business_days


def count_holidays_in_period(start: date | datetime, end: date | datetime) -> int:
    """Count holidays in [start, end] that fall on a weekday."""
    start_date = _as_date(start)
    end_date = _as_date(end)
    if end_date < start_date:
        return 0
    return sum(
        1 for day in holidays_between(start_date, end_date) if start_date <= day <= end_date and day.weekday() < 5
    )
