"""Timezone conversion between named IANA zones.

An instant is an aware datetime. Offsets are always resolved at that
specific instant, so daylight-saving transitions are honoured.

SHIFTED INSTANTS:
shift_to_zone() moves an instant by the offset difference between two
zones. The result is a display value, not a real point in time: rendering it
in the viewer's local zone reproduces the wall clock of the destination zone.
Always format shifted instants with the local zone, never with the
destination zone, or the offset is applied twice.

FALLBACK POLICY:
Unknown or malformed identifiers silently resolve to the viewer's local zone.
Nothing in this module raises for a bad zone name.
"""

import logging
import os
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import settings
from .utils.isodatetime import ensure_aware

logger = logging.getLogger(__name__)

# str.format templates rendered against ``dt``
EVENT_PATTERN = "{dt:%b} {dt.day}, {dt:%H:%M}"
CLOCK_TIME_PATTERN = "{dt:%H:%M}"
CLOCK_DATE_PATTERN = "{dt:%a}, {dt:%b} {dt.day}"
ROW_TIME_PATTERN = "{dt:%H:%M}"

_ZONEINFO_MARKER = "zoneinfo/"


def local_zone_id() -> str:
    """Return the viewer's IANA zone identifier.

    Resolution order: settings.local_timezone, the TZ environment variable,
    the /etc/localtime link, then "UTC".
    """
    if settings.local_timezone:
        return settings.local_timezone

    env_tz = os.environ.get("TZ", "").lstrip(":")
    if env_tz:
        return env_tz

    localtime = Path("/etc/localtime")
    if localtime.is_symlink():
        target = str(localtime.resolve())
        if _ZONEINFO_MARKER in target:
            return target.split(_ZONEINFO_MARKER, 1)[1]

    return "UTC"


def _load(identifier: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(identifier)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        return None


def _local(local_zone: str | tzinfo | None) -> tzinfo:
    if isinstance(local_zone, tzinfo):
        return local_zone
    return _load(local_zone or local_zone_id()) or ZoneInfo("UTC")


def resolve_zone(identifier: str | None, local_zone: str | tzinfo | None = None) -> tzinfo:
    """Resolve an IANA identifier, falling back to the local zone.

    Args:
        identifier: IANA zone id, or None for "local zone"
        local_zone: Viewer's zone (identifier or tzinfo). Defaults to
                    local_zone_id().

    Returns:
        A tzinfo. Never raises for unknown identifiers.
    """
    local = _local(local_zone)
    if not identifier:
        return local

    zone = _load(identifier)
    if zone is None:
        logger.debug(f"Unknown timezone '{identifier}', falling back to local zone")
        return local
    return zone


def offset_seconds(instant: datetime, zone: tzinfo) -> int:
    """UTC offset of zone at instant, in seconds."""
    offset = ensure_aware(instant).astimezone(zone).utcoffset()
    return int(offset.total_seconds()) if offset is not None else 0


def offset_difference_seconds(
    instant: datetime,
    from_zone_id: str | None,
    to_zone_id: str | None,
    local_zone: str | tzinfo | None = None,
) -> int:
    """Return to_offset - from_offset at instant.

    A None or unknown identifier on either side means the local zone.
    """
    source = resolve_zone(from_zone_id, local_zone)
    destination = resolve_zone(to_zone_id, local_zone)
    return offset_seconds(instant, destination) - offset_seconds(instant, source)


def shift_to_zone(
    instant: datetime,
    from_zone_id: str | None,
    to_zone_id: str | None,
    local_zone: str | tzinfo | None = None,
) -> datetime:
    """Shift instant so the local zone displays to_zone_id's wall clock."""
    difference = offset_difference_seconds(instant, from_zone_id, to_zone_id, local_zone)
    return ensure_aware(instant) + timedelta(seconds=difference)


def render(instant: datetime, zone: tzinfo, pattern: str) -> str:
    """Render instant in zone with a str.format pattern over ``dt``."""
    return pattern.format(dt=ensure_aware(instant).astimezone(zone))


def format_shifted(
    instant: datetime,
    from_zone_id: str | None,
    to_zone_id: str | None,
    pattern: str = EVENT_PATTERN,
    local_zone: str | tzinfo | None = None,
) -> str:
    """Shift instant into to_zone_id and render it in the local zone.

    Example:
        >>> format_shifted(dt, None, "Asia/Tokyo", local_zone="Europe/Prague")
        'Jan 1, 18:00'
    """
    shifted = shift_to_zone(instant, from_zone_id, to_zone_id, local_zone)
    return render(shifted, _local(local_zone), pattern)


def local_wall_clock(
    instant: datetime,
    source_zone_id: str | None,
    local_zone: str | tzinfo | None = None,
) -> datetime:
    """Shift an event instant from its source zone into the local zone.

    Events without a source zone are already local and come back unchanged.
    """
    if source_zone_id is None:
        return ensure_aware(instant)
    return shift_to_zone(instant, source_zone_id, None, local_zone)


def format_in_zone(
    instant: datetime,
    zone_id: str | None,
    pattern: str,
    local_zone: str | tzinfo | None = None,
) -> str:
    """Render a true instant natively in zone_id (world clock display)."""
    return render(instant, resolve_zone(zone_id, local_zone), pattern)


def time_offset_label(
    instant: datetime,
    zone_id: str | None,
    local_zone: str | tzinfo | None = None,
) -> str:
    """Describe zone_id relative to the local zone: "Same time", "+5h", "-3h".

    Whole hours only, truncated toward zero.
    """
    difference = offset_difference_seconds(instant, None, zone_id, local_zone)
    hours = int(difference / 3600)
    if hours == 0:
        return "Same time"
    if hours > 0:
        return f"+{hours}h"
    return f"{hours}h"
