# ruff: noqa: TC001
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from leave_ledger.models.enums import MaintenanceAction


class MaintenanceTriggerPayload(BaseModel):
    """Payload sent by the job scheduler to run one maintenance action."""

    action: MaintenanceAction


class MaintenanceRunResponse(BaseModel):
    """Successful maintenance run."""

    success: Literal[True] = True
    action: MaintenanceAction
    processed: int
    updated: int
    skipped: int
