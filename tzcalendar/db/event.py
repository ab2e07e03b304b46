"""Calendar event operations.

IMPORT CONVENTION:
- Core accesses these through core.event property

Rows are read from events_view, which joins each event with its optional
source timezone profile (timezone_identifier, timezone_name, timezone_color).
Anchors and recurrence end dates are stored with fixed precision
(isodatetime.to_stored), so range filters compare strings directly.
"""

import sqlite3
from datetime import datetime
from typing import Any, TYPE_CHECKING

from . import query
from .errors import translate_errors
from ..exceptions import ResourceNotFound
from ..recurrence import RecurrenceRule
from ..utils import isodatetime, uid

if TYPE_CHECKING:
    from . import Core

_MAX_ID_RETRIES = 3


def recurrence_columns(rule: RecurrenceRule) -> dict[str, Any]:
    """Storage columns for a recurrence rule."""
    return {
        "frequency": rule.frequency.value,
        "recurrence_end_date": isodatetime.to_stored(rule.end_date) if rule.end_date else None,
        "recurrence_count": rule.count,
    }


def recurrence_from_row(row: sqlite3.Row) -> RecurrenceRule:
    """Rebuild the recurrence rule stored on an event row."""
    end_date = row["recurrence_end_date"]
    return RecurrenceRule(
        frequency=row["frequency"],
        end_date=isodatetime.to_datetime(end_date) if end_date else None,
        count=row["recurrence_count"],
    )


class EventOperations:
    """Calendar event operations."""

    def __init__(self, conn: sqlite3.Connection, core: "Core | None" = None):
        """Initialize event operations.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            core: Core reference, used to check timezone references on write
        """
        self._conn = conn
        self._core = core

    def get_by_id(self, event_id: str) -> sqlite3.Row:
        """Get event by ID.

        Returns:
            sqlite3.Row with event data from events_view

        Raises:
            ResourceNotFound: If event_id doesn't exist
        """
        with translate_errors("event.get_by_id"):
            row = self._conn.execute(
                "SELECT * FROM events_view WHERE id = ?",
                (event_id,)
            ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"Event '{event_id}' not found",
                {"event_id": event_id}
            )

        return row

    def _check_timezone(self, timezone_id: str | None) -> None:
        if timezone_id is None:
            return
        if self._core is not None:
            self._core.timezone.get_by_id(timezone_id)
            return
        with translate_errors("event.check_timezone"):
            row = self._conn.execute(
                "SELECT id FROM timezones WHERE id = ?", (timezone_id,)
            ).fetchone()
        if not row:
            raise ResourceNotFound(
                f"Timezone '{timezone_id}' not found",
                {"timezone_id": timezone_id}
            )

    def create(
        self,
        title: str,
        anchor: datetime,
        timezone_id: str | None = None,
        description: str = "",
        recurrence: RecurrenceRule | None = None
    ) -> str:
        """Create an event with an auto-generated UUID.

        Args:
            title: Non-empty title
            anchor: Instant of the first occurrence (naive means UTC)
            timezone_id: Optional source timezone profile
            description: Free text
            recurrence: Repeat pattern (default: does not repeat)

        Returns:
            The new event ID

        Raises:
            ResourceNotFound: If timezone_id doesn't reference a profile
        """
        self._check_timezone(timezone_id)
        columns = recurrence_columns(recurrence or RecurrenceRule())
        anchor_str = isodatetime.to_stored(anchor)

        with translate_errors("event.create"):
            for attempt in range(_MAX_ID_RETRIES):
                event_id = uid.generate_uuid()
                now = isodatetime.now()
                try:
                    self._conn.execute(
                        """INSERT INTO events
                           (id, title, anchor, timezone_id, description, frequency,
                            recurrence_end_date, recurrence_count, created_at, updated_at)
                           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                        (event_id, title, anchor_str, timezone_id, description,
                         columns["frequency"], columns["recurrence_end_date"],
                         columns["recurrence_count"], now, now)
                    )
                    return event_id
                except sqlite3.IntegrityError:
                    # UUID collision - retry with new UUID
                    if attempt == _MAX_ID_RETRIES - 1:
                        raise

        raise RuntimeError("Failed to generate unique UUID after retries")

    def list(
        self,
        filters: dict[str, Any] | None = None
    ) -> list[sqlite3.Row]:
        """List events ordered by anchor.

        Args:
            filters: Dictionary of filter conditions:
                - timezone_id: Only events of this profile
                - start: Anchor at or after this datetime
                - end: Anchor at or before this datetime
                - recurring: True for repeating events only, False for one-offs

        Note:
            start/end filter on the anchor only. Repeating events whose
            anchor is earlier can still occur in the range; use
            recurrence.expand() or agenda for occurrence queries.
        """
        filters = filters or {}
        param_map = {
            "timezone_id": "timezone_id = ?",
            "start": "anchor >= ?",
            "end": "anchor <= ?",
        }
        conditions = {
            "timezone_id": filters.get("timezone_id"),
            "start": isodatetime.to_stored(filters["start"]) if filters.get("start") else None,
            "end": isodatetime.to_stored(filters["end"]) if filters.get("end") else None,
        }
        where_clause, params = query.build_where_clause(conditions, param_map)

        recurring = filters.get("recurring")
        if recurring is not None:
            where_clause += " AND frequency != 'none'" if recurring else " AND frequency = 'none'"

        with translate_errors("event.list"):
            return self._conn.execute(
                f"""SELECT * FROM events_view
                    WHERE {where_clause}
                    ORDER BY anchor, title""",
                params
            ).fetchall()

    def update(self, event_id: str, data: dict[str, Any]) -> None:
        """Update event with partial data.

        Args:
            event_id: The UUID of the event to update
            data: Field names to new values. 'recurrence' (RecurrenceRule)
                  replaces the whole rule, including clearing an end date.

        Note:
            - Other fields with None values are skipped
            - 'id' is never written
            - updated_at is refreshed only when something changed
        """
        self.get_by_id(event_id)
        data = dict(data)

        if data.get("timezone_id") is not None:
            self._check_timezone(data["timezone_id"])
        if data.get("anchor") is not None:
            data["anchor"] = isodatetime.to_stored(data["anchor"])

        recurrence = data.pop("recurrence", None)
        if isinstance(recurrence, dict):
            recurrence = RecurrenceRule(**recurrence)
        update_clause, params = query.build_update_clause(
            data,
            exclude={"id", "created_at", "updated_at"}
        )

        if recurrence is not None:
            columns = recurrence_columns(recurrence)
            fragments = [update_clause] if update_clause else []
            fragments.extend(f"{key} = ?" for key in columns)
            update_clause = ", ".join(fragments)
            params.extend(columns.values())

        if not update_clause:
            return

        params.extend([isodatetime.now(), event_id])
        with translate_errors("event.update"):
            self._conn.execute(
                f"UPDATE events SET {update_clause}, updated_at = ? WHERE id = ?",
                params
            )

    def delete(self, event_id: str) -> None:
        """Delete an event.

        Raises:
            ResourceNotFound: If event_id doesn't exist
        """
        with translate_errors("event.delete"):
            cursor = self._conn.execute("DELETE FROM events WHERE id = ?", (event_id,))

        if cursor.rowcount == 0:
            raise ResourceNotFound(
                f"Event '{event_id}' not found",
                {"event_id": event_id}
            )
