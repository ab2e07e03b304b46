"""Hex colour helpers for timezone profile tags."""

import re

DEFAULT_HEX = "#007AFF"
DEFAULT_RGB = (0, 122, 255)

HEX_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def to_rgb(hex_string: str | None) -> tuple[int, int, int]:
    """Parse "#RRGGBB" (leading '#' and whitespace optional) into an RGB tuple.

    Empty or unparseable input yields the default blue.
    """
    if not hex_string:
        return DEFAULT_RGB
    sanitized = hex_string.strip().replace("#", "")
    try:
        value = int(sanitized, 16)
    except ValueError:
        return DEFAULT_RGB
    return ((value & 0xFF0000) >> 16, (value & 0x00FF00) >> 8, value & 0x0000FF)

