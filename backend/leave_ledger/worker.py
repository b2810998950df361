"""Worker process for the scheduled vacation ledger jobs.

Wakes up once a day and runs whatever maintenance actions fall on that date:
monthly credit on the last day of the month, year transition on January 1st
and previous-year expiration on the configured expiration day.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from leave_ledger.config import get_settings
from leave_ledger.db import get_session_factory
from leave_ledger.services.maintenance import due_actions, run_maintenance

logger = logging.getLogger(__name__)


async def run_scheduled_actions(now: datetime) -> None:
    """Run every maintenance action due on ``now``, each in its own session."""
    session_factory = get_session_factory()

    for action in due_actions(now.date()):
        logger.info("Running %s for %s", action.value, now.date())
        try:
            async with session_factory() as session:
                result = await run_maintenance(session, action, now)
            if result.errors:
                logger.error("%s finished with %d failed employees", action.value, result.errors)
        except Exception:
            logger.exception("%s run failed for %s", action.value, now.date())


async def run_maintenance_loop() -> None:
    """Main worker loop."""
    settings = get_settings()
    logger.info("Maintenance worker started")

    while True:
        await run_scheduled_actions(datetime.now(UTC))
        await asyncio.sleep(settings.worker_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_maintenance_loop())


if __name__ == "__main__":
    main()
