"""Shared test fixtures for tzcalendar."""

import os
import sqlite3
import tempfile

import pytest

from tzcalendar.config import settings
from tzcalendar.db import Core, init_db
from tzcalendar.schema import SCHEMA_PATH


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row

    # Enable foreign key constraints (required for SQLite)
    db.execute("PRAGMA foreign_keys = ON")

    db.executescript(SCHEMA_PATH.read_text())
    db.commit()

    yield db

    db.close()


@pytest.fixture
def core(test_db):
    """Core over the in-memory database, autocommit semantics."""
    return Core(test_db, atomic=False)


@pytest.fixture
def temp_database():
    """Point settings.database_path at a fresh temp file.

    Used by API-level tests, where every call opens its own connection.
    Yields the database path.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(db_path)

    original_db_path = settings.database_path
    settings.database_path = db_path
    try:
        init_db()
        yield db_path
    finally:
        settings.database_path = original_db_path
        if os.path.exists(db_path):
            os.unlink(db_path)
