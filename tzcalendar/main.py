"""Startup routine and command-line entry point."""

import logging
import sys
from datetime import datetime, UTC

from . import agenda
from .api import events, world_clock
from .api.timezones import ensure_default_timezone
from .config import settings
from .convert import local_zone_id, resolve_zone
from .db import init_db
from .exceptions import TZCalendarError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings.log_level."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def initialize_database() -> None:
    """Initialize database on startup."""
    try:
        if init_db():
            logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


def startup(local_zone: str | None = None):
    """Run every launch: schema, then exactly one default timezone profile.

    Idempotent.

    Returns:
        The default TimezoneResponse
    """
    initialize_database()
    return ensure_default_timezone(local_zone or local_zone_id())


def main() -> int:
    """Print the world clock and today's agenda."""
    configure_logging()
    zone = local_zone_id()
    try:
        startup(zone)
        now = datetime.now(UTC)
        for row in world_clock.world_clock(now, zone):
            print(f"{row.profile.name:<24} {row.time}  {row.date:<12} {row.offset}")
        print()
        today = now.astimezone(resolve_zone(None, zone)).date()
        for occurrence in events.events_for_day(today, zone):
            label = occurrence.event.timezone_name or "Local"
            time = agenda.display_time(occurrence.event, occurrence.start, zone)
            print(f"{time}  {occurrence.event.title} ({label})")
    except TZCalendarError as e:
        logger.error(f"{e.__class__.__name__}: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
