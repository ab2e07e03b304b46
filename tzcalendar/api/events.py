"""Calendar event operations for presentation code.

- save_event(data, event_id=None)          - Create or fully replace an event
- update_event(id, data)                   - Partial update
- get_event(id) / delete_event(id)         - Single event
- list_events(filters)                     - Stored events by anchor
- events_for_day(day)                      - Day view (repeats expanded)
- upcoming_events(now)                     - Next 7 days
- upcoming_events_for_timezone(id, now)    - Next 24 hours of one profile
- event_display(id)                        - Detail view strings

The viewer's local zone and "now" are explicit parameters; a local_zone of
None means convert.local_zone_id().
"""

import sqlite3
from datetime import date, datetime, timedelta
from typing import Any, NamedTuple

from .. import agenda, convert
from ..config import settings
from ..db import get_core
from ..db.event import recurrence_from_row
from ..recurrence import CountScope
from ..schemas import EventCreate, EventResponse, EventUpdate
from ..utils import isodatetime
from .timezones import list_timezones
from .validation import validate, validate_request


class EventDisplay(NamedTuple):
    """Detail view of one event."""

    event: EventResponse
    date: str
    time: str
    conversions: list[tuple[str, str]]


def row_to_event_response(row: sqlite3.Row) -> EventResponse:
    """Convert an events_view row to EventResponse."""
    return EventResponse(
        id=row["id"],
        title=row["title"],
        anchor=isodatetime.to_datetime(row["anchor"]),
        timezone_id=row["timezone_id"],
        description=row["description"],
        recurrence=recurrence_from_row(row),
        timezone_identifier=row["timezone_identifier"],
        timezone_name=row["timezone_name"],
        timezone_color=row["timezone_color"],
        created_at=isodatetime.to_datetime(row["created_at"]),
        updated_at=isodatetime.to_datetime(row["updated_at"]),
    )


def get_event(event_id: str) -> EventResponse:
    core = get_core()
    try:
        return row_to_event_response(core.event.get_by_id(event_id))
    finally:
        core.close()


def list_events(filters: dict[str, Any] | None = None) -> list[EventResponse]:
    """Stored events ordered by anchor (see EventOperations.list for filters)."""
    core = get_core()
    try:
        return [row_to_event_response(row) for row in core.event.list(filters)]
    finally:
        core.close()


@validate_request
def save_event(
    data: EventCreate,
    event_id: str | None = None,
    local_zone: str | None = None,
) -> EventResponse:
    """
    Create a new event, or replace every field of an existing one.

    Without a timezone_id the event is attached to the default profile; if
    no default profile exists yet, one is created from the local zone.

    Raises:
        ValidationError: Empty title, end date before anchor, ...
        ResourceNotFound: Unknown event_id or timezone_id
    """
    with get_core(atomic=True) as core:
        timezone_id = data.timezone_id
        if timezone_id is None:
            timezone_id = core.timezone.ensure_default(
                identifier=local_zone or convert.local_zone_id(),
                name=settings.default_timezone_name,
                color_hex=settings.default_timezone_color,
            )

        if event_id is None:
            event_id = core.event.create(
                title=data.title,
                anchor=data.anchor,
                timezone_id=timezone_id,
                description=data.description,
                recurrence=data.recurrence,
            )
        else:
            core.event.update(event_id, {
                "title": data.title,
                "anchor": data.anchor,
                "timezone_id": timezone_id,
                "description": data.description,
                "recurrence": data.recurrence,
            })

    return get_event(event_id)


@validate_request
def update_event(event_id: str, data: EventUpdate) -> EventResponse:
    """Partial update; only provided fields change.

    Raises:
        ValidationError: If the resulting end date precedes the anchor
    """
    update_data = data.model_dump(exclude_unset=True)
    if "recurrence" in update_data:
        update_data["recurrence"] = data.recurrence

    with get_core(atomic=True) as core:
        current = row_to_event_response(core.event.get_by_id(event_id))
        # Re-check the combined result against the create rules
        merged = current.model_dump(include=set(EventCreate.model_fields))
        merged.update({k: v for k, v in update_data.items() if v is not None})
        validate(EventCreate, merged)
        core.event.update(event_id, update_data)

    return get_event(event_id)


def delete_event(event_id: str) -> None:
    with get_core(atomic=True) as core:
        core.event.delete(event_id)


def events_for_day(
    day: date,
    local_zone: str | None = None,
    count_scope: CountScope = CountScope.WINDOW,
) -> list[agenda.Occurrence]:
    """Occurrences on a local calendar day, repeats expanded."""
    zone = local_zone or convert.local_zone_id()
    return agenda.events_for_day(list_events(), day, zone, count_scope)


def upcoming_events(
    now: datetime,
    local_zone: str | None = None,
    horizon: timedelta = timedelta(days=7),
    count_scope: CountScope = CountScope.WINDOW,
) -> list[agenda.Occurrence]:
    zone = local_zone or convert.local_zone_id()
    return agenda.upcoming(list_events(), now, zone, horizon, count_scope)


def upcoming_events_for_timezone(
    timezone_id: str,
    now: datetime,
    local_zone: str | None = None,
    horizon: timedelta = timedelta(hours=24),
    count_scope: CountScope = CountScope.WINDOW,
) -> list[agenda.Occurrence]:
    zone = local_zone or convert.local_zone_id()
    events = list_events({"timezone_id": timezone_id})
    return agenda.upcoming_for_profile(events, timezone_id, now, zone, horizon, count_scope)


def event_display(event_id: str, local_zone: str | None = None) -> EventDisplay:
    """Date, time and per-profile conversions for the event detail view."""
    zone = local_zone or convert.local_zone_id()
    event = get_event(event_id)
    local = convert.local_wall_clock(event.anchor, event.timezone_identifier, zone)
    local_tz = convert.resolve_zone(None, zone)

    conversions = [
        (
            profile.name,
            convert.format_shifted(
                event.anchor, event.timezone_identifier, profile.identifier,
                local_zone=zone,
            ),
        )
        for profile in list_timezones()
    ]

    return EventDisplay(
        event=event,
        date=convert.render(local, local_tz, "{dt:%b} {dt.day}, {dt.year}"),
        time=convert.render(local, local_tz, convert.ROW_TIME_PATTERN),
        conversions=conversions,
    )
