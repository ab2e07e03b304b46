"""ISO 8601 datetime conversion utilities.

Instants are stored as UTC timestamp strings ("2025-01-01T10:00:00Z").
Naive datetimes are treated as UTC everywhere in tzcalendar.
"""

from datetime import datetime, UTC


def ensure_aware(dt: datetime) -> datetime:
    """Return dt with tzinfo, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def to_timestamp(dt: datetime, timespec: str = "auto") -> str:
    """Convert datetime to ISO 8601 UTC timestamp string.

    Args:
        dt: Aware or naive (treated as UTC) datetime
        timespec: Passed to datetime.isoformat(). Stored instants use
                  "microseconds" so that string order matches time order.
    """
    dt = ensure_aware(dt).astimezone(UTC)
    return dt.isoformat(timespec=timespec).replace("+00:00", "Z")


def to_stored(dt: datetime) -> str:
    """Timestamp string with fixed precision, for instants kept in the store."""
    return to_timestamp(dt, timespec="microseconds")


def to_datetime(timestamp: str) -> datetime:
    """Convert ISO 8601 UTC timestamp string to an aware datetime."""
    return ensure_aware(datetime.fromisoformat(timestamp.replace('Z', '+00:00')))


def now() -> str:
    """Get current UTC timestamp as ISO 8601 string."""
    return to_timestamp(datetime.now(UTC))

