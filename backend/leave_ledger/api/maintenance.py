# ruff: noqa: TC001
"""API endpoint for the scheduled ledger maintenance jobs."""

from __future__ import annotations

from fastapi import APIRouter

from leave_ledger.db import SessionDep
from leave_ledger.exceptions import PersistenceFailureError
from leave_ledger.schemas.maintenance import MaintenanceRunResponse, MaintenanceTriggerPayload
from leave_ledger.services.maintenance import run_maintenance

# ---------------------------------------------------------------------------
# Scheduler trigger: POST /maintenance
# ---------------------------------------------------------------------------

maintenance_router = APIRouter(
    prefix="/maintenance",
    tags=["maintenance"],
)


@maintenance_router.post("", response_model=MaintenanceRunResponse)
async def trigger_maintenance(
    session: SessionDep,
    payload: MaintenanceTriggerPayload,
) -> MaintenanceRunResponse:
    """Run one maintenance action over all eligible employees.

    Called by the job scheduler, so no caller identity is required. Every
    employee is committed independently; if any of them failed the whole
    run is reported as an error once the batch has finished.
    """
    result = await run_maintenance(session, payload.action)
    if result.errors:
        msg = (
            f"{payload.action.value} failed for {result.errors} of {result.processed} employee(s); "
            f"{result.updated} were updated before or after the failures"
        )
        raise PersistenceFailureError(msg)

    return MaintenanceRunResponse(
        action=result.action,
        processed=result.processed,
        updated=result.updated,
        skipped=result.skipped,
    )
