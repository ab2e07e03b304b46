"""Database schema for tzcalendar.

schema.sql is the source of truth for the stored data model.
"""

from pathlib import Path

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

__all__ = ["SCHEMA_PATH"]
