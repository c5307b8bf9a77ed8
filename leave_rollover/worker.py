"""Worker process for the scheduled year-end leave balance reset.

Runs an asyncio loop that waits for the configured instant (Dec 31 23:30
UTC by default) and then rolls every current-year balance over into the next
year.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from leave_rollover.config import Settings, get_settings
from leave_rollover.db import get_session_factory
from leave_rollover.services.rollover import RolloverResult, process_year_end_reset

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

WAKE_INTERVAL_SECONDS = 3600  # 1 hour


def next_run_at(settings: Settings, now: datetime) -> datetime:
    """Return the first scheduled reset instant strictly after ``now``."""
    year = now.year
    while True:
        candidate = datetime(
            year,
            settings.year_end_reset_month,
            settings.year_end_reset_day,
            settings.year_end_reset_hour,
            settings.year_end_reset_minute,
            tzinfo=UTC,
        )
        if candidate > now:
            return candidate
        year += 1


async def run_scheduled_year_end_reset(
    session_factory: async_sessionmaker[AsyncSession],
    notify_employees: bool,
    scheduled_for: datetime | None = None,
) -> RolloverResult | None:
    """Run one scheduled reset. Errors are logged and swallowed.

    ``scheduled_for`` fixes the year being rolled over, so a run that starts
    after midnight still archives the year it was scheduled in.
    """
    year = scheduled_for.year if scheduled_for is not None else None
    logger.info("Starting scheduled year-end leave balance reset")
    try:
        async with session_factory() as session:
            result = await process_year_end_reset(session, notify_employees, year=year)
    except Exception:
        logger.exception("Error during scheduled year-end leave balance reset")
        return None

    logger.info(
        "Year-end leave balance reset completed: archived=%d reset=%d at %s",
        result.archived_count,
        result.reset_count,
        result.timestamp.isoformat(),
    )
    return result


def _utcnow() -> datetime:
    return datetime.now(UTC)


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def run_reset_loop(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> None:
    """Main worker loop that fires the year-end reset once a year.

    Sleeps at most ``WAKE_INTERVAL_SECONDS`` at a time and re-reads the wall
    clock on every wake-up.
    """
    settings = settings or get_settings()
    notify = settings.year_end_notifications_enabled
    session_factory = session_factory or get_session_factory()

    logger.info("Rollover worker started (notifications=%s)", notify)

    fire_at = next_run_at(settings, _utcnow())
    while True:
        logger.info("Next year-end reset scheduled for %s", fire_at.isoformat())
        now = _utcnow()
        while now < fire_at:
            await _sleep(min((fire_at - now).total_seconds(), WAKE_INTERVAL_SECONDS))
            now = _utcnow()

        if now - fire_at > timedelta(seconds=WAKE_INTERVAL_SECONDS):
            logger.warning(
                "Year-end reset running late: scheduled for %s, now %s",
                fire_at.isoformat(),
                now.isoformat(),
            )
        await run_scheduled_year_end_reset(session_factory, notify, scheduled_for=fire_at)
        fire_at = next_run_at(settings, fire_at)


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run_reset_loop())


if __name__ == "__main__":
    main()
