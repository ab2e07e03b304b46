"""Calendar event schemas.

Validation here is the form boundary: an event with an empty title or an
end date before its anchor never reaches the store.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from ..recurrence import RecurrenceRule
from ..utils.isodatetime import ensure_aware


class EventBase(BaseModel):
    """Fields shared by every event schema."""

    title: str = Field(..., min_length=1)
    anchor: datetime = Field(..., description="Absolute instant of the first occurrence")
    timezone_id: str | None = Field(
        default=None,
        description="Source timezone profile; None means the viewer's local zone",
    )
    description: str = ""
    recurrence: RecurrenceRule = Field(default_factory=RecurrenceRule)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("anchor")
    @classmethod
    def _aware_anchor(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class EventCreate(EventBase):
    """Schema for creating an event."""

    @model_validator(mode="after")
    def _end_date_not_before_anchor(self) -> "EventCreate":
        end_date = self.recurrence.end_date
        if end_date is not None and end_date < self.anchor:
            raise ValueError("Recurrence end date is before the event start")
        return self


class EventUpdate(BaseModel):
    """Schema for editing an event. All fields optional.

    timezone_id cannot be cleared through an update; None means "unchanged".
    """

    title: str | None = Field(default=None, min_length=1)
    anchor: datetime | None = None
    timezone_id: str | None = None
    description: str | None = None
    recurrence: RecurrenceRule | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("anchor")
    @classmethod
    def _aware_anchor(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @model_validator(mode="after")
    def _end_date_not_before_anchor(self) -> "EventUpdate":
        if self.anchor is None or self.recurrence is None:
            return self
        end_date = self.recurrence.end_date
        if end_date is not None and end_date < self.anchor:
            raise ValueError("Recurrence end date is before the event start")
        return self


class EventResponse(EventBase):
    """Event as read from the store, joined with its timezone profile."""

    id: str
    timezone_identifier: str | None = None
    timezone_name: str | None = None
    timezone_color: str | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring
