"""In-process API for tzcalendar presentation code.

Each function opens its own Core, so callers never handle connections:

    from tzcalendar.api import events, timezones, world_clock

    timezones.ensure_default_timezone("Europe/Prague")
    events.save_event({"title": "Standup", "anchor": start})
    today = events.events_for_day(date.today(), local_zone="Europe/Prague")
"""

from . import events, timezones, world_clock

__all__ = ["events", "timezones", "world_clock"]
