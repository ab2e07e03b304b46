"""Utility functions for tzcalendar.

Import convention: use module-level imports for clarity.

    from tzcalendar.utils import isodatetime, uid, color
    timestamp = isodatetime.to_timestamp(some_datetime)
    profile_id = uid.generate_uuid()
    rgb = color.to_rgb("#FF9500")
"""

from . import color, isodatetime, uid

__all__ = ["color", "isodatetime", "uid"]
