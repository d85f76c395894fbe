"""Unit tests for the JSON habit store."""

import json

import pytest

from habit_analytics.models import GroupHabit, HabitType
from habit_analytics.store import HabitDataError, JsonHabitStore, load_server_analytics_file


class TestJsonHabitStore:
    """Test loading habits and groups from disk."""

    def test_list_habits(self, habit_data_file):
        """Personal habits are parsed with their types."""
        habits = JsonHabitStore(habit_data_file).list_habits()
        assert [h.id for h in habits] == ["h-read", "h-water"]
        assert habits[1].type == HabitType.NUMERIC
        assert habits[1].config.goal == 8

    def test_list_groups(self, habit_data_file):
        """Groups carry members and shared habits."""
        groups = JsonHabitStore(habit_data_file).list_groups()
        assert groups[0].name == "Runners"
        assert [m.id for m in groups[0].member_details] == ["u1", "u2"]
        assert groups[0].member_details[0].is_admin is True

    def test_combined_habits(self, habit_data_file):
        """Group habits follow personal ones."""
        combined = JsonHabitStore(habit_data_file).combined_habits()
        assert [h.id for h in combined] == ["h-read", "h-water", "gh-run"]
        assert isinstance(combined[-1], GroupHabit)

    def test_get_habit(self, habit_data_file):
        """Lookup covers group habits too."""
        store = JsonHabitStore(habit_data_file)
        assert store.get_habit("gh-run").name == "Run"
        assert store.get_habit("missing") is None

    def test_reload(self, habit_data_file, habit_payload):
        """reload picks up changes on disk."""
        store = JsonHabitStore(habit_data_file)
        assert len(store.list_habits()) == 2

        habit_payload["habits"] = habit_payload["habits"][:1]
        habit_data_file.write_text(json.dumps(habit_payload))
        assert len(store.list_habits()) == 2

        store.reload()
        assert len(store.list_habits()) == 1

    def test_missing_sections_are_empty(self, tmp_path):
        """A file without groups has no groups."""
        path = tmp_path / "habits.json"
        path.write_text(json.dumps({"habits": []}))
        store = JsonHabitStore(path)
        assert store.list_habits() == []
        assert store.list_groups() == []


class TestStoreErrors:
    """Test HabitDataError handling."""

    def test_missing_file(self, tmp_path):
        """A missing file raises HabitDataError with the path."""
        path = tmp_path / "nope.json"
        with pytest.raises(HabitDataError, match="not found") as exc_info:
            JsonHabitStore(path).list_habits()
        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path):
        """Broken JSON is reported."""
        path = tmp_path / "habits.json"
        path.write_text("{habits")
        with pytest.raises(HabitDataError, match="Could not read"):
            JsonHabitStore(path).list_habits()

    def test_not_an_object(self, tmp_path):
        """Top-level arrays are rejected."""
        path = tmp_path / "habits.json"
        path.write_text("[]")
        with pytest.raises(HabitDataError, match="JSON object"):
            JsonHabitStore(path).list_habits()

    def test_malformed_habit(self, tmp_path):
        """A habit missing its id is malformed."""
        path = tmp_path / "habits.json"
        path.write_text(json.dumps({"habits": [{"name": "No id"}]}))
        with pytest.raises(HabitDataError, match="Malformed"):
            JsonHabitStore(path).list_habits()


class TestServerAnalyticsFile:
    """Test reading server analytics payloads."""

    def test_load(self, tmp_path, analytics_payload):
        """The payload is returned as-is."""
        path = tmp_path / "insights.json"
        path.write_text(json.dumps(analytics_payload))
        assert load_server_analytics_file(path) == analytics_payload

    def test_missing(self, tmp_path):
        """A missing file raises HabitDataError."""
        with pytest.raises(HabitDataError):
            load_server_analytics_file(tmp_path / "missing.json")
