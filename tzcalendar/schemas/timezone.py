"""Timezone profile schemas.

The IANA identifier is stored as given and not checked against the tz
database: unknown identifiers resolve to the local zone at display time.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..utils import color
from ..utils.color import DEFAULT_HEX, HEX_PATTERN


class TimezoneBase(BaseModel):
    """Fields shared by every timezone profile schema."""

    name: str = Field(..., min_length=1, description="Display label")
    identifier: str = Field(..., min_length=1, description="IANA zone id, e.g. 'Asia/Tokyo'")
    color_hex: str = Field(default=DEFAULT_HEX, pattern=HEX_PATTERN.pattern)


class TimezoneCreate(TimezoneBase):
    """Schema for creating a timezone profile."""

    is_default: bool = False


class TimezoneUpdate(BaseModel):
    """Schema for editing a timezone profile. All fields optional.

    The default flag is moved with set_default, not edited here.
    """

    name: str | None = Field(default=None, min_length=1)
    identifier: str | None = Field(default=None, min_length=1)
    color_hex: str | None = Field(default=None, pattern=HEX_PATTERN.pattern)


class TimezoneResponse(TimezoneBase):
    """Timezone profile as read from the store."""

    id: str
    is_default: bool
    created_at: datetime
    updated_at: datetime

    @property
    def rgb(self) -> tuple[int, int, int]:
        return color.to_rgb(self.color_hex)
