"""Tests for EventOperations."""

from datetime import datetime, timedelta, UTC
from zoneinfo import ZoneInfo

import pytest

from tzcalendar.db.event import EventOperations, recurrence_columns, recurrence_from_row
from tzcalendar.exceptions import ResourceNotFound
from tzcalendar.recurrence import Frequency, RecurrenceRule

ANCHOR = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


@pytest.fixture
def tokyo(core):
    return core.timezone.create(name="Tokyo", identifier="Asia/Tokyo", color_hex="#FF9500")


class TestCreate:
    """Tests for EventOperations.create()."""

    def test_create_local_event(self, core):
        """create() should store an event with no profile as local."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR)
        row = core.event.get_by_id(event_id)
        assert row["title"] == "Standup"
        assert row["anchor"] == "2025-01-06T09:00:00.000000Z"
        assert row["timezone_id"] is None
        assert row["timezone_identifier"] is None
        assert row["frequency"] == "none"
        assert row["description"] == ""

    def test_anchor_stored_as_utc(self, core):
        """create() should store the anchor in UTC."""
        anchor = datetime(2025, 1, 6, 18, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
        event_id = core.event.create(title="Call", anchor=anchor)
        assert core.event.get_by_id(event_id)["anchor"] == "2025-01-06T09:00:00.000000Z"

    def test_row_joins_profile(self, core, tokyo):
        """Event rows should carry the profile's identifier, name and colour."""
        event_id = core.event.create(title="Call", anchor=ANCHOR, timezone_id=tokyo)
        row = core.event.get_by_id(event_id)
        assert row["timezone_identifier"] == "Asia/Tokyo"
        assert row["timezone_name"] == "Tokyo"
        assert row["timezone_color"] == "#FF9500"

    def test_recurrence_round_trip(self, core):
        """A stored rule should read back unchanged."""
        rule = RecurrenceRule.on_date(Frequency.WEEKLY, ANCHOR + timedelta(weeks=4))
        event_id = core.event.create(title="Standup", anchor=ANCHOR, recurrence=rule)
        assert recurrence_from_row(core.event.get_by_id(event_id)) == rule

    def test_unknown_timezone(self, core):
        """create() should reject a missing profile."""
        with pytest.raises(ResourceNotFound) as exc_info:
            core.event.create(title="Call", anchor=ANCHOR, timezone_id="missing")
        assert exc_info.value.details == {"timezone_id": "missing"}

    def test_unknown_timezone_without_core(self, test_db):
        """EventOperations should work on a bare connection."""
        operations = EventOperations(test_db)
        with pytest.raises(ResourceNotFound):
            operations.create(title="Call", anchor=ANCHOR, timezone_id="missing")


def test_recurrence_columns():
    """recurrence_columns() should flatten a rule into table columns."""
    rule = RecurrenceRule.after_count(Frequency.MONTHLY, 3)
    assert recurrence_columns(rule) == {
        "frequency": "monthly",
        "recurrence_end_date": None,
        "recurrence_count": 3,
    }


class TestList:
    """Tests for EventOperations.list()."""

    def test_ordered_by_anchor_then_title(self, core):
        """list() should order rows by anchor, then title."""
        later = core.event.create(title="A", anchor=ANCHOR + timedelta(hours=1))
        second = core.event.create(title="C", anchor=ANCHOR)
        first = core.event.create(title="B", anchor=ANCHOR)
        assert [row["id"] for row in core.event.list()] == [first, second, later]

    def test_filter_by_timezone(self, core, tokyo):
        """list() should filter by profile."""
        call = core.event.create(title="Call", anchor=ANCHOR, timezone_id=tokyo)
        core.event.create(title="Local", anchor=ANCHOR)
        assert [row["id"] for row in core.event.list({"timezone_id": tokyo})] == [call]

    def test_filter_by_anchor_range(self, core):
        """list() should filter by anchor range."""
        core.event.create(title="Before", anchor=ANCHOR - timedelta(days=1))
        inside = core.event.create(title="Inside", anchor=ANCHOR)
        core.event.create(title="After", anchor=ANCHOR + timedelta(days=1))
        rows = core.event.list({"start": ANCHOR, "end": ANCHOR + timedelta(hours=1)})
        assert [row["id"] for row in rows] == [inside]

    def test_filter_recurring(self, core):
        """list() should split recurring from one-off events."""
        once = core.event.create(title="Once", anchor=ANCHOR)
        daily = core.event.create(
            title="Daily", anchor=ANCHOR, recurrence=RecurrenceRule.never(Frequency.DAILY)
        )
        assert [row["id"] for row in core.event.list({"recurring": True})] == [daily]
        assert [row["id"] for row in core.event.list({"recurring": False})] == [once]


class TestUpdate:
    """Tests for EventOperations.update()."""

    def test_partial_update(self, core):
        """update() should ignore None values."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR, description="Daily sync")
        core.event.update(event_id, {"title": "Sync", "description": None})
        row = core.event.get_by_id(event_id)
        assert row["title"] == "Sync"
        assert row["description"] == "Daily sync"

    def test_update_anchor(self, core):
        """update() should store a new anchor in UTC."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR)
        core.event.update(event_id, {"anchor": ANCHOR + timedelta(hours=2)})
        assert core.event.get_by_id(event_id)["anchor"] == "2025-01-06T11:00:00.000000Z"

    def test_recurrence_replaces_all_columns(self, core):
        """A new rule should replace every recurrence column."""
        rule = RecurrenceRule.on_date(Frequency.DAILY, ANCHOR + timedelta(days=3))
        event_id = core.event.create(title="Standup", anchor=ANCHOR, recurrence=rule)

        core.event.update(event_id, {"recurrence": RecurrenceRule.after_count(Frequency.WEEKLY, 2)})

        row = core.event.get_by_id(event_id)
        assert row["frequency"] == "weekly"
        assert row["recurrence_end_date"] is None
        assert row["recurrence_count"] == 2

    def test_recurrence_from_dict(self, core):
        """update() should accept a rule as a dict."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR)
        core.event.update(event_id, {"recurrence": {"frequency": "monthly"}})
        assert core.event.get_by_id(event_id)["frequency"] == "monthly"

    def test_move_to_other_profile(self, core, tokyo):
        """update() should move an event to another profile."""
        event_id = core.event.create(title="Call", anchor=ANCHOR)
        core.event.update(event_id, {"timezone_id": tokyo})
        assert core.event.get_by_id(event_id)["timezone_name"] == "Tokyo"

    def test_unknown_timezone(self, core):
        """update() should reject a missing profile."""
        event_id = core.event.create(title="Call", anchor=ANCHOR)
        with pytest.raises(ResourceNotFound):
            core.event.update(event_id, {"timezone_id": "missing"})

    def test_empty_update_keeps_timestamp(self, core):
        """An empty update should leave updated_at alone."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR)
        before = core.event.get_by_id(event_id)["updated_at"]
        core.event.update(event_id, {})
        assert core.event.get_by_id(event_id)["updated_at"] == before

    def test_unknown_id(self, core):
        """update() should raise ResourceNotFound for a missing event."""
        with pytest.raises(ResourceNotFound):
            core.event.update("missing", {"title": "X"})


class TestDelete:
    """Tests for EventOperations.delete()."""

    def test_delete(self, core):
        """delete() should remove the event."""
        event_id = core.event.create(title="Standup", anchor=ANCHOR)
        core.event.delete(event_id)
        with pytest.raises(ResourceNotFound):
            core.event.get_by_id(event_id)

    def test_unknown_id(self, core):
        """delete() should raise ResourceNotFound for a missing event."""
        with pytest.raises(ResourceNotFound) as exc_info:
            core.event.delete("missing")
        assert exc_info.value.details == {"event_id": "missing"}
