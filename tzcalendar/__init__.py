"""tzcalendar: timezone-aware calendar core.

Recurrence expansion and timezone conversion over a local SQLite store.
"""

__version__ = "0.1.0"
