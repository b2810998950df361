# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from leave_ledger.models.enums import HistoryAction


class HistoryEntryResponse(BaseModel):
    """A single vacation history entry."""

    id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    action_type: HistoryAction
    days_affected: Decimal
    details: dict[str, Any] | None
    created_at: datetime


class HistoryListResponse(BaseModel):
    """Paginated vacation history."""

    items: list[HistoryEntryResponse]
    total: int
