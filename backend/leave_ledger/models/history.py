# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from leave_ledger.models.base import DAYS_PRECISION, DAYS_SCALE, TimestampMixin, UUIDBase


class VacationHistory(UUIDBase, TimestampMixin, table=True):
    """Append-only record of every vacation ledger mutation."""

    __tablename__ = "vacation_history"
    __table_args__ = (sa.Index("ix_vacation_history_employee_year", "employee_id", "year"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    year: int
    action_type: str = Field(max_length=50)
    days_affected: Decimal = Field(sa_type=sa.Numeric(DAYS_PRECISION, DAYS_SCALE))  # ty: ignore[invalid-argument-type]
    details: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
