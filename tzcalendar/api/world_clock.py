"""World clock for presentation code.

The caller owns the refresh timer and passes a fresh `now` on every tick.
"""

from datetime import datetime

from .. import agenda, convert
from .timezones import list_timezones


def world_clock(now: datetime, local_zone: str | None = None) -> list[agenda.ClockRow]:
    """Clock rows for every profile at `now`."""
    zone = local_zone or convert.local_zone_id()
    return agenda.clock_rows(list_timezones(), now, zone)
