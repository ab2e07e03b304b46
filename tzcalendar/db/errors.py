"""Translation of sqlite3 failures into tzcalendar errors."""

import logging
import sqlite3
from contextlib import contextmanager

from ..exceptions import DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def translate_errors(operation: str):
    """Re-raise any sqlite3.Error inside the block as DatabaseError.

    Args:
        operation: Short label for the failing operation, e.g. "event.create"
    """
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Database error during {operation}: {e}")
        raise DatabaseError(
            f"Database error during {operation}",
            {"operation": operation, "reason": str(e)}
        ) from e
