"""Worker process for the clock-session sweep.

Runs an asyncio loop that force-closes clock sessions left open past the
staleness cap. The same loop also runs inside the API process when
``clock_sweep_enabled`` is set.
"""

from __future__ import annotations

import asyncio
import logging

from timesheet.config import get_settings
from timesheet.db import get_session_factory
from timesheet.services.clock import SweepResult, auto_close_stale_sessions

logger = logging.getLogger(__name__)


async def run_clock_sweep_once() -> SweepResult:
    """Run a single sweep with its own session."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        return await auto_close_stale_sessions(session)


async def run_clock_sweep_loop(interval_seconds: int | None = None) -> None:
    """Main worker loop that sweeps stale clock sessions on a fixed interval."""
    if interval_seconds is None:
        interval_seconds = get_settings().clock_sweep_interval_seconds

    logger.info("Clock sweep worker started (interval=%ds)", interval_seconds)

    while True:
        try:
            result = await run_clock_sweep_once()
            logger.info(
                "Clock sweep complete: closed=%d skipped=%d errors=%d",
                result.closed,
                result.skipped,
                result.errors,
            )
        except Exception:
            logger.exception("Clock sweep failed")

        await asyncio.sleep(interval_seconds)


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main() -> None:
    """Entry point for the worker process."""
    configure_logging()
    asyncio.run(run_clock_sweep_loop())


if __name__ == "__main__":
    main()
