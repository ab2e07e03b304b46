"""Pydantic schemas for timezone profiles and calendar events."""

from .event import (
    EventBase,
    EventCreate,
    EventResponse,
    EventUpdate,
)
from .timezone import (
    TimezoneBase,
    TimezoneCreate,
    TimezoneResponse,
    TimezoneUpdate,
)

__all__ = [
    "TimezoneBase",
    "TimezoneCreate",
    "TimezoneUpdate",
    "TimezoneResponse",
    "EventBase",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
]
