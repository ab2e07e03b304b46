"""Recurrence rules and occurrence expansion.

An event stores one anchor instant plus a RecurrenceRule. Occurrences are
never materialised; every query re-runs the walk below over its own window.

WALK:
Each candidate is the previous one moved one step forward on the wall clock
of the viewer's zone (relativedelta, so a 10:00 event stays at 10:00 across
DST changes). A monthly step clamps to the end of a short month, and the
clamped day carries over to later months:

    Jan 31 -> Feb 28 -> Mar 28 -> Apr 28

The window is closed: [window_start, window_end].

COUNT SCOPE:
CountScope.WINDOW (default) counts only occurrences found inside the queried
window, so a later window can yield up to `count` occurrences of its own.
CountScope.SERIES counts occurrences since the anchor, so every window sees
the same finite series.
"""

import logging
from datetime import datetime, tzinfo, UTC
from enum import Enum
from typing import Iterator

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .config import settings
from .convert import resolve_zone
from .utils.isodatetime import ensure_aware

logger = logging.getLogger(__name__)


class Frequency(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EndCondition(str, Enum):
    NEVER = "never"
    ON_DATE = "on_date"
    AFTER_COUNT = "after_count"


class CountScope(str, Enum):
    SERIES = "series"
    WINDOW = "window"


_STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
}


class RecurrenceRule(BaseModel):
    """Repeat pattern of a calendar event.

    At most one end condition applies: end_date or count. A count of zero
    or less means "no count limit" and is normalised to None.
    """

    model_config = ConfigDict(frozen=True)

    frequency: Frequency = Frequency.NONE
    end_date: datetime | None = None
    count: int | None = None

    @field_validator("end_date")
    @classmethod
    def _aware_end_date(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @field_validator("count")
    @classmethod
    def _normalise_count(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            return None
        return value

    @model_validator(mode="after")
    def _single_end_condition(self) -> "RecurrenceRule":
        if self.end_date is not None and self.count is not None:
            raise ValueError("Recurrence may end on a date or after a count, not both")
        return self

    @classmethod
    def once(cls) -> "RecurrenceRule":
        return cls()

    @classmethod
    def never(cls, frequency: Frequency) -> "RecurrenceRule":
        return cls(frequency=frequency)

    @classmethod
    def on_date(cls, frequency: Frequency, end_date: datetime) -> "RecurrenceRule":
        return cls(frequency=frequency, end_date=end_date)

    @classmethod
    def after_count(cls, frequency: Frequency, count: int) -> "RecurrenceRule":
        return cls(frequency=frequency, count=count)

    @property
    def is_recurring(self) -> bool:
        return self.frequency != Frequency.NONE

    @property
    def end_condition(self) -> EndCondition:
        if self.end_date is not None:
            return EndCondition.ON_DATE
        if self.count is not None:
            return EndCondition.AFTER_COUNT
        return EndCondition.NEVER


def _instant(wall_clock: datetime, zone: tzinfo) -> datetime:
    """Naive wall clock in zone, as a UTC instant."""
    return wall_clock.replace(tzinfo=zone).astimezone(UTC)


def _first_index(local_anchor: datetime, frequency: Frequency, local_start: datetime) -> int:
    """Index of a step at or before local_start, so the walk can skip ahead.

    Both arguments are naive wall clocks in the stepping zone. Errs early;
    the walk filters the rest.
    """
    if local_start <= local_anchor:
        return 0
    if frequency == Frequency.DAILY:
        return max(0, (local_start - local_anchor).days - 1)
    if frequency == Frequency.WEEKLY:
        return max(0, (local_start - local_anchor).days // 7 - 1)
    if local_anchor.day > 28:
        # Clamping can shift the day, so every month depends on the one before
        return 0
    months = (local_start.year - local_anchor.year) * 12 + (local_start.month - local_anchor.month)
    return max(0, months - 1)


def iter_occurrences(
    anchor: datetime,
    rule: RecurrenceRule,
    window_start: datetime,
    window_end: datetime,
    zone: str | tzinfo | None = None,
    count_scope: CountScope = CountScope.WINDOW,
    max_steps: int | None = None,
) -> Iterator[datetime]:
    """Yield occurrence instants of a rule inside [window_start, window_end].

    Args:
        anchor: The event's anchor instant (occurrence zero)
        rule: Recurrence rule of the event
        window_start: Inclusive window start
        window_end: Inclusive window end
        zone: Zone whose wall clock steps are taken in (identifier or
              tzinfo). Defaults to the viewer's local zone.
        count_scope: How rule.count is consumed (see module docstring)
        max_steps: Candidates examined before giving up. Defaults to
                   settings.max_recurrence_steps.

    Yields:
        Aware datetimes in ascending order. Occurrence zero is the anchor
        exactly as given; later occurrences are in UTC.
    """
    anchor = ensure_aware(anchor)
    window_start = ensure_aware(window_start)
    window_end = ensure_aware(window_end)

    if not rule.is_recurring:
        if window_start <= anchor <= window_end:
            yield anchor
        return

    if max_steps is None:
        max_steps = settings.max_recurrence_steps

    if not isinstance(zone, tzinfo):
        zone = resolve_zone(zone)
    local_anchor = anchor.astimezone(zone).replace(tzinfo=None)
    local_start = window_start.astimezone(zone).replace(tzinfo=None)
    step = _STEPS[rule.frequency]

    emitted = 0
    start_index = _first_index(local_anchor, rule.frequency, local_start)
    wall_clock = local_anchor + step * start_index
    for index in range(start_index, start_index + max_steps):
        if rule.count is not None and count_scope == CountScope.SERIES and index >= rule.count:
            return

        candidate = anchor if index == 0 else _instant(wall_clock, zone)

        if candidate > window_end:
            return
        if index > 0 and rule.end_date is not None and candidate > rule.end_date:
            return

        if candidate >= window_start:
            yield candidate
            emitted += 1
            if rule.count is not None and count_scope == CountScope.WINDOW and emitted >= rule.count:
                return

        wall_clock += step

    logger.warning(
        f"Recurrence walk stopped after {max_steps} steps "
        f"(anchor={anchor.isoformat()}, frequency={rule.frequency.value})"
    )


def expand(
    anchor: datetime,
    rule: RecurrenceRule,
    window_start: datetime,
    window_end: datetime,
    zone: str | tzinfo | None = None,
    count_scope: CountScope = CountScope.WINDOW,
    max_steps: int | None = None,
) -> list[datetime]:
    """List form of iter_occurrences()."""
    return list(iter_occurrences(
        anchor, rule, window_start, window_end,
        zone=zone, count_scope=count_scope, max_steps=max_steps,
    ))
