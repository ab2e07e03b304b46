"""Timezone profile operations.

IMPORT CONVENTION:
- Core accesses these through core.timezone property

DEFAULT PROFILE:
At most one profile carries is_default = 1 (partial unique index in
schema.sql). The default profile cannot be deleted; set_default() moves
the flag. ensure_default() is the idempotent startup self-heal.
"""

import logging
import sqlite3
from typing import Any, TYPE_CHECKING

from . import query
from .errors import translate_errors
from ..exceptions import DefaultTimezoneProtected, ResourceNotFound, ValidationError
from ..utils import isodatetime, uid
from ..utils.color import DEFAULT_HEX

if TYPE_CHECKING:
    from . import Core

logger = logging.getLogger(__name__)

_MAX_ID_RETRIES = 3


class TimezoneOperations:
    """Timezone profile operations."""

    def __init__(self, conn: sqlite3.Connection, core: "Core | None" = None):
        """Initialize timezone operations.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            core: Optional Core reference
        """
        self._conn = conn
        self._core = core

    def get_by_id(self, timezone_id: str) -> sqlite3.Row:
        """Get timezone profile by ID.

        Raises:
            ResourceNotFound: If timezone_id doesn't exist
        """
        with translate_errors("timezone.get_by_id"):
            row = self._conn.execute(
                "SELECT * FROM timezones WHERE id = ?",
                (timezone_id,)
            ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"Timezone '{timezone_id}' not found",
                {"timezone_id": timezone_id}
            )

        return row

    def get_default(self) -> sqlite3.Row | None:
        """Return the default profile, or None if there is none."""
        with translate_errors("timezone.get_default"):
            return self._conn.execute(
                "SELECT * FROM timezones WHERE is_default = 1"
            ).fetchone()

    def list(self) -> list[sqlite3.Row]:
        """List all profiles, default first, then by name."""
        with translate_errors("timezone.list"):
            return self._conn.execute(
                "SELECT * FROM timezones ORDER BY is_default DESC, name, created_at"
            ).fetchall()

    def create(
        self,
        name: str,
        identifier: str,
        color_hex: str = DEFAULT_HEX,
        is_default: bool = False
    ) -> str:
        """Create a timezone profile with an auto-generated UUID.

        Args:
            name: Display label
            identifier: IANA zone id
            color_hex: "#RRGGBB" colour tag
            is_default: Whether this is the default profile

        Returns:
            The new profile ID

        Raises:
            ValidationError: If is_default and a default profile already exists
        """
        if is_default and self.get_default() is not None:
            raise ValidationError(
                "A default timezone already exists",
                {"field": "is_default"}
            )

        with translate_errors("timezone.create"):
            for attempt in range(_MAX_ID_RETRIES):
                timezone_id = uid.generate_uuid()
                now = isodatetime.now()
                try:
                    self._conn.execute(
                        """INSERT INTO timezones
                           (id, name, identifier, color_hex, is_default, created_at, updated_at)
                           VALUES (?, ?, ?, ?, ?, ?, ?)""",
                        (timezone_id, name, identifier, color_hex, int(is_default), now, now)
                    )
                    return timezone_id
                except sqlite3.IntegrityError:
                    # UUID collision - retry with new UUID
                    if attempt == _MAX_ID_RETRIES - 1:
                        raise

        raise RuntimeError("Failed to generate unique UUID after retries")

    def update(self, timezone_id: str, data: dict[str, Any]) -> None:
        """Update profile with partial data.

        Note:
            - Only non-None fields are updated
            - 'id' and 'is_default' are never written here
        """
        self.get_by_id(timezone_id)

        update_clause, params = query.build_update_clause(
            data,
            exclude={"id", "is_default", "created_at", "updated_at"}
        )
        if not update_clause:
            return

        params.extend([isodatetime.now(), timezone_id])
        with translate_errors("timezone.update"):
            self._conn.execute(
                f"UPDATE timezones SET {update_clause}, updated_at = ? WHERE id = ?",
                params
            )

    def set_default(self, timezone_id: str) -> None:
        """Make timezone_id the single default profile."""
        self.get_by_id(timezone_id)

        now = isodatetime.now()
        with translate_errors("timezone.set_default"):
            self._conn.execute(
                "UPDATE timezones SET is_default = 0, updated_at = ? WHERE is_default = 1 AND id != ?",
                (now, timezone_id)
            )
            self._conn.execute(
                "UPDATE timezones SET is_default = 1, updated_at = ? WHERE id = ?",
                (now, timezone_id)
            )

    def delete(self, timezone_id: str) -> None:
        """Delete a profile and, by cascade, its events.

        Raises:
            ResourceNotFound: If timezone_id doesn't exist
            DefaultTimezoneProtected: If the profile is the default one.
                The store is left unchanged.
        """
        row = self.get_by_id(timezone_id)
        if row["is_default"]:
            raise DefaultTimezoneProtected(
                "The default timezone cannot be deleted",
                {"timezone_id": timezone_id}
            )

        with translate_errors("timezone.delete"):
            self._conn.execute("DELETE FROM timezones WHERE id = ?", (timezone_id,))

    def ensure_default(
        self,
        identifier: str,
        name: str,
        color_hex: str = DEFAULT_HEX
    ) -> str:
        """Return the default profile ID, creating it if none exists.

        Idempotent: safe to call at every launch.
        """
        existing = self.get_default()
        if existing is not None:
            return existing["id"]

        timezone_id = self.create(
            name=name,
            identifier=identifier,
            color_hex=color_hex,
            is_default=True
        )
        logger.info(f"Created default timezone '{name}' ({identifier})")
        return timezone_id
