from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

# Day quantities are whole or half days; two decimals leave room for manual corrections.
DAYS_PRECISION = 6
DAYS_SCALE = 2


def now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


def days_field(**kwargs: Any) -> Any:
    """Column for a quantity of vacation days, defaulting to zero."""
    return Field(
        default=Decimal(0),
        sa_type=sa.Numeric(DAYS_PRECISION, DAYS_SCALE),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": "0", "nullable": False},
        **kwargs,
    )


class UUIDBase(SQLModel):
    """Base model with UUID primary key."""

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_type=sa.Uuid,
    )


class TimestampMixin(SQLModel):
    """Mixin that adds a created_at timestamp."""

    created_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
