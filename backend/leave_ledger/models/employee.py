# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leave_ledger.models.base import TimestampMixin, UUIDBase, days_field


class Employee(UUIDBase, TimestampMixin, table=True):
    """Employee record and the vacation ledger it owns.

    The ledger columns are only written through the request accounting and
    maintenance services, each write guarded by ``version``.
    """

    __tablename__ = "employee"

    first_name: str = Field(max_length=255)
    last_name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True)
    active: bool = Field(default=True, index=True, sa_column_kwargs={"server_default": sa.true()})

    current_year_vacation_days: Decimal = days_field()
    current_year_used_days: Decimal = days_field()
    previous_year_vacation_days: Decimal = days_field()
    previous_year_used_days: Decimal = days_field()

    last_vacation_credit_date: date | None = None
    last_transition_year: int | None = None
    last_expiration_year: int | None = None

    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
