"""Worker process for the scheduler tick.

Runs an asyncio loop that completes approved requests whose leave period
has passed (APPROVED_FINAL -> COMPLETED) across all companies.
"""

from __future__ import annotations

import asyncio
import logging

from vacation_engine.config import configure_logging, get_settings
from vacation_engine.db import get_session_factory
from vacation_engine.services.context import build_context

logger = logging.getLogger(__name__)


async def run_elapse_tick() -> int:
    """Run one elapse sweep and return the number of completed requests."""
    from vacation_engine.services.request import complete_elapsed_requests

    ctx = build_context()
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await complete_elapsed_requests(session, ctx)
    logger.info("Elapse run complete for %s: completed=%d", ctx.today, result.completed)
    return result.completed


async def run_elapse_loop() -> None:
    """Main worker loop: one elapse sweep per configured interval."""
    interval = get_settings().worker_interval_seconds
    logger.info("Elapse worker started (interval=%ds)", interval)

    while True:
        try:
            await run_elapse_tick()
        except Exception:
            logger.exception("Elapse run failed")

        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    configure_logging(get_settings())
    asyncio.run(run_elapse_loop())


if __name__ == "__main__":
    main()
