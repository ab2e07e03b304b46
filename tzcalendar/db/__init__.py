"""Database module for tzcalendar.

This module provides the Core API over the local SQLite store.
Core owns its connection and gives access to per-table operations.

ARCHITECTURE:
- Core owns its connection
- atomic=True: Core MUST be used as a context manager; commits on success,
  rolls back on exception, closes on exit
- atomic=False: every statement commits on its own (sqlite autocommit)
- Each table gets an encapsulated operations class

RELATIONS:
Events reference timezone profiles by id (events.timezone_id). There are no
live object back-pointers: "events of a profile" is a query, and the
profile -> events cascade is a foreign key rule in schema.sql.

    with get_core(atomic=True) as core:
        tz_id = core.timezone.create(name="Tokyo", identifier="Asia/Tokyo")
        core.event.create(title="Standup", anchor=start, timezone_id=tz_id)
"""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import settings
from ..schema import SCHEMA_PATH
from .errors import translate_errors

if TYPE_CHECKING:
    from .event import EventOperations
    from .timezone import TimezoneOperations

logger = logging.getLogger(__name__)


class Core:
    """
    Database Core with timezone and event operations.

    Connection Lifecycle:
    - atomic=True: Connection closes on __exit__ from context manager
    - atomic=False: Connection closes when the Core is garbage collected
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, Core has autocommit semantics.
        """
        self._conn = connection
        self._atomic = atomic
        self._timezone_ops = None
        self._event_ops = None

    @property
    def timezone(self) -> "TimezoneOperations":
        """Timezone profile operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._timezone_ops is None:
            from .timezone import TimezoneOperations
            self._timezone_ops = TimezoneOperations(self._conn, core=self)
        return self._timezone_ops

    @property
    def event(self) -> "EventOperations":
        """Calendar event operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._event_ops is None:
            from .event import EventOperations
            self._event_ops = EventOperations(self._conn, core=self)
        return self._event_ops

    def __enter__(self) -> "Core":
        """Enter context manager for atomic transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with get_core(atomic=True) as core:"
            )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()


def _create_connection(autocommit: bool = False) -> sqlite3.Connection:
    """Create a fresh database connection.

    Args:
        autocommit: If True, every statement commits immediately.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    if autocommit:
        conn.isolation_level = None
    # Required for ON DELETE CASCADE on events.timezone_id
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(atomic: bool = False) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                Use for multi-operation writes that must commit together.
                If False (default), each statement commits independently.

    Examples:
        Read:
        >>> core = get_core()
        >>> profiles = core.timezone.list()

        Atomic write:
        >>> with get_core(atomic=True) as core:
        ...     core.timezone.set_default(profile_id)
    """
    conn = _create_connection(autocommit=not atomic)
    return Core(conn, atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def apply_schema(conn: sqlite3.Connection) -> bool:
    """Apply schema.sql to conn unless it is already initialized.

    Returns:
        True if the schema was applied, False if it was already present.
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
    )
    if cursor.fetchone():
        return False

    conn.executescript(SCHEMA_PATH.read_text())
    conn.commit()
    return True


def init_db() -> bool:
    """Initialize the database at settings.database_path if needed.

    Returns:
        True if a fresh schema was applied.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        with translate_errors("init_db"):
            applied = apply_schema(conn)
            logger.debug(f"Database {db_path} at schema version {get_schema_version(conn)}")
            return applied
    finally:
        conn.close()


def get_schema_version(conn: sqlite3.Connection) -> str:
    """Return the schema version recorded in _schema_metadata."""
    row = conn.execute(
        "SELECT value FROM _schema_metadata WHERE key = 'version'"
    ).fetchone()
    return row[0] if row else "unknown"
