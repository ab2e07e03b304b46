"""Custom exceptions for tzcalendar.

Every error carries a human-readable message and an optional details dict
so presentation code can show an alert without parsing strings.
"""


class TZCalendarError(Exception):
    """Base exception for all tzcalendar errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ResourceNotFound(TZCalendarError):
    """Raised when a timezone profile or event does not exist."""


class ValidationError(TZCalendarError):
    """Raised when input fails validation at the form boundary."""


class DefaultTimezoneProtected(ValidationError):
    """Raised on an attempt to delete the default timezone profile."""


class DatabaseError(TZCalendarError):
    """Raised when the local store fails to read or write."""
