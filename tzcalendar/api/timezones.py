"""Timezone profile management for presentation code.

- list_timezones()                 - All profiles, default first
- get_timezone(id)                 - Single profile
- create_timezone(data)            - Create profile
- update_timezone(id, data)        - Partial update
- delete_timezone(id)              - Delete (refused for the default)
- set_default_timezone(id)         - Move the default flag
- ensure_default_timezone(zone)    - Startup self-heal
"""

import sqlite3

from ..config import settings
from ..convert import local_zone_id
from ..db import get_core
from ..schemas import TimezoneCreate, TimezoneResponse, TimezoneUpdate
from ..utils import isodatetime
from .validation import validate_request


def row_to_timezone_response(row: sqlite3.Row) -> TimezoneResponse:
    """Convert a timezones row to TimezoneResponse."""
    return TimezoneResponse(
        id=row["id"],
        name=row["name"],
        identifier=row["identifier"],
        color_hex=row["color_hex"],
        is_default=bool(row["is_default"]),
        created_at=isodatetime.to_datetime(row["created_at"]),
        updated_at=isodatetime.to_datetime(row["updated_at"]),
    )


def list_timezones() -> list[TimezoneResponse]:
    core = get_core()
    try:
        return [row_to_timezone_response(row) for row in core.timezone.list()]
    finally:
        core.close()


def get_timezone(timezone_id: str) -> TimezoneResponse:
    core = get_core()
    try:
        return row_to_timezone_response(core.timezone.get_by_id(timezone_id))
    finally:
        core.close()


@validate_request
def create_timezone(data: TimezoneCreate) -> TimezoneResponse:
    """
    Create a timezone profile.

    Raises:
        ValidationError: Invalid input, or a second default profile
    """
    with get_core(atomic=True) as core:
        timezone_id = core.timezone.create(
            name=data.name,
            identifier=data.identifier,
            color_hex=data.color_hex,
            is_default=data.is_default,
        )
    return get_timezone(timezone_id)


@validate_request
def update_timezone(timezone_id: str, data: TimezoneUpdate) -> TimezoneResponse:
    """Update a profile; only provided fields change."""
    update_data = data.model_dump(exclude_unset=True)
    with get_core(atomic=True) as core:
        core.timezone.update(timezone_id, update_data)
    return get_timezone(timezone_id)


def delete_timezone(timezone_id: str) -> None:
    """
    Delete a profile and the events anchored to it.

    Raises:
        DefaultTimezoneProtected: For the default profile (nothing is removed)
        ResourceNotFound: Unknown profile
    """
    with get_core(atomic=True) as core:
        core.timezone.delete(timezone_id)


def set_default_timezone(timezone_id: str) -> TimezoneResponse:
    with get_core(atomic=True) as core:
        core.timezone.set_default(timezone_id)
    return get_timezone(timezone_id)


def ensure_default_timezone(local_zone: str | None = None) -> TimezoneResponse:
    """Return the default profile, creating it from local_zone if missing."""
    identifier = local_zone or local_zone_id()
    with get_core(atomic=True) as core:
        timezone_id = core.timezone.ensure_default(
            identifier=identifier,
            name=settings.default_timezone_name,
            color_hex=settings.default_timezone_color,
        )
    return get_timezone(timezone_id)
