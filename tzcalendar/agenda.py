"""Day views, upcoming lists and world clock rows.

Pure functions over already-loaded events and profiles. The viewer's local
zone and the current instant are always parameters; nothing here reads the
clock or the store.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, NamedTuple

from . import convert
from .recurrence import CountScope, iter_occurrences
from .schemas import EventResponse, TimezoneResponse
from .utils.isodatetime import ensure_aware


class Occurrence(NamedTuple):
    """One concrete instance of an event. start is a true instant."""

    event: EventResponse
    start: datetime


class ClockRow(NamedTuple):
    """World clock line for one timezone profile."""

    profile: TimezoneResponse
    time: str
    date: str
    offset: str


def _zone(local_zone: str | tzinfo | None) -> tzinfo:
    if isinstance(local_zone, tzinfo):
        return local_zone
    return convert.resolve_zone(None, local_zone)


def _sort_key(occurrence: Occurrence):
    return (occurrence.start, occurrence.event.title)


def day_bounds(day: date, local_zone: str | tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open bounds [start, end) of a calendar day in the local zone."""
    zone = _zone(local_zone)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start, end


def is_anchored_on(event: EventResponse, day: date, local_zone: str | tzinfo | None = None) -> bool:
    """True if the event's anchor falls on day in the local zone."""
    return ensure_aware(event.anchor).astimezone(_zone(local_zone)).date() == day


def occurrences_on_day(
    event: EventResponse,
    day: date,
    local_zone: str | tzinfo | None = None,
    count_scope: CountScope = CountScope.WINDOW,
) -> list[datetime]:
    """Occurrence instants of one event on a local calendar day."""
    if is_anchored_on(event, day, local_zone):
        return [event.anchor]

    zone = _zone(local_zone)
    start, end = day_bounds(day, zone)
    return [
        occurrence
        for occurrence in iter_occurrences(
            event.anchor, event.recurrence, start, end,
            zone=zone, count_scope=count_scope,
        )
        if occurrence < end
    ]


def events_for_day(
    events: Iterable[EventResponse],
    day: date,
    local_zone: str | tzinfo | None = None,
    count_scope: CountScope = CountScope.WINDOW,
) -> list[Occurrence]:
    """Everything happening on day: native anchors plus expanded repeats."""
    occurrences = [
        Occurrence(event, start)
        for event in events
        for start in occurrences_on_day(event, day, local_zone, count_scope)
    ]
    return sorted(occurrences, key=_sort_key)


def upcoming(
    events: Iterable[EventResponse],
    now: datetime,
    local_zone: str | tzinfo | None = None,
    horizon: timedelta = timedelta(days=7),
    count_scope: CountScope = CountScope.WINDOW,
) -> list[Occurrence]:
    """Occurrences in [now, now + horizon], soonest first."""
    zone = _zone(local_zone)
    now = ensure_aware(now)
    occurrences = [
        Occurrence(event, start)
        for event in events
        for start in iter_occurrences(
            event.anchor, event.recurrence, now, now + horizon,
            zone=zone, count_scope=count_scope,
        )
    ]
    return sorted(occurrences, key=_sort_key)


def upcoming_for_profile(
    events: Iterable[EventResponse],
    profile_id: str,
    now: datetime,
    local_zone: str | tzinfo | None = None,
    horizon: timedelta = timedelta(hours=24),
    count_scope: CountScope = CountScope.WINDOW,
) -> list[Occurrence]:
    """upcoming() restricted to events anchored to one timezone profile."""
    return upcoming(
        (event for event in events if event.timezone_id == profile_id),
        now, local_zone, horizon, count_scope,
    )


def display_time(
    event: EventResponse,
    start: datetime,
    local_zone: str | tzinfo | None = None,
    pattern: str = convert.ROW_TIME_PATTERN,
) -> str:
    """Row label for an occurrence: the source zone's wall clock, shown locally."""
    zone = _zone(local_zone)
    shifted = convert.local_wall_clock(start, event.timezone_identifier, zone)
    return convert.render(shifted, zone, pattern)


def clock_rows(
    profiles: Iterable[TimezoneResponse],
    now: datetime,
    local_zone: str | tzinfo | None = None,
) -> list[ClockRow]:
    """World clock rows, default profile first, then by name."""
    zone = _zone(local_zone)
    ordered = sorted(profiles, key=lambda p: (not p.is_default, p.name))
    return [
        ClockRow(
            profile=profile,
            time=convert.format_in_zone(now, profile.identifier, convert.CLOCK_TIME_PATTERN, zone),
            date=convert.format_in_zone(now, profile.identifier, convert.CLOCK_DATE_PATTERN, zone),
            offset=convert.time_offset_label(now, profile.identifier, zone),
        )
        for profile in ordered
    ]
