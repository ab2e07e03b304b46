"""Tests for db/query.py query builders."""

from tzcalendar.db.query import build_update_clause, build_where_clause


class TestBuildWhereClause:
    """Tests for build_where_clause function."""

    def test_empty_dict_returns_default_clause(self):
        """No filters should give the always-true clause."""
        clause, params = build_where_clause({})
        assert clause == "1=1"
        assert params == []

    def test_multiple_conditions_joined_with_and(self):
        """Conditions should be joined with AND."""
        clause, params = build_where_clause({"timezone_id": "tz-1", "frequency": "daily"})
        assert clause == "timezone_id = ? AND frequency = ?"
        assert params == ["tz-1", "daily"]

    def test_none_values_excluded(self):
        """Unset filters don't constrain the query."""
        clause, params = build_where_clause({"timezone_id": "tz-1", "start": None})
        assert clause == "timezone_id = ?"
        assert params == ["tz-1"]

    def test_param_map_fragments(self):
        clause, params = build_where_clause(
            {"start": "2025-01-01T00:00:00.000000Z", "end": "2025-02-01T00:00:00.000000Z"},
            param_map={"start": "anchor >= ?", "end": "anchor <= ?"}
        )
        assert clause == "anchor >= ? AND anchor <= ?"
        assert params == ["2025-01-01T00:00:00.000000Z", "2025-02-01T00:00:00.000000Z"]

    def test_mixed_param_map_and_default(self):
        clause, params = build_where_clause(
            {"start": "x", "timezone_id": "tz-1"},
            param_map={"start": "anchor >= ?"}
        )
        assert clause == "anchor >= ? AND timezone_id = ?"
        assert params == ["x", "tz-1"]

    def test_special_characters_in_values(self):
        """Values are parameterized, never interpolated."""
        clause, params = build_where_clause({"name": "O'Brien"})
        assert clause == "name = ?"
        assert params == ["O'Brien"]


class TestBuildUpdateClause:
    """Tests for build_update_clause function."""

    def test_empty_dict_returns_empty_clause(self):
        clause, params = build_update_clause({})
        assert clause == ""
        assert params == []

    def test_multiple_fields_joined_with_comma(self):
        """Fields should be joined with commas."""
        clause, params = build_update_clause({"name": "Tokyo", "identifier": "Asia/Tokyo"})
        assert clause == "name = ?, identifier = ?"
        assert params == ["Tokyo", "Asia/Tokyo"]

    def test_none_values_excluded(self):
        clause, params = build_update_clause({"name": "Tokyo", "color_hex": None})
        assert clause == "name = ?"
        assert params == ["Tokyo"]

    def test_exclude_fields(self):
        """Excluded fields should be left out of the SET clause."""
        clause, params = build_update_clause(
            {"name": "Tokyo", "id": "x", "is_default": 1},
            exclude={"id", "is_default"}
        )
        assert clause == "name = ?"
        assert params == ["Tokyo"]

    def test_none_exclude_treated_as_empty_set(self):
        clause, params = build_update_clause({"name": "Tokyo"}, exclude=None)
        assert clause == "name = ?"
        assert params == ["Tokyo"]
