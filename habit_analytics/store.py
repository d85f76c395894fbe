"""
Habit data access.

The engine never fetches data itself. Callers hand it habits obtained from
something that satisfies ``HabitRepository``; ``JsonHabitStore`` is the
file-backed implementation used by the CLI and tests.

File layout::

    {
      "habits": [{"id": "h1", "name": "Read", "type": "boolean",
                  "completions": {"2024-01-01": true}}],
      "groups": [{"id": "g1", "name": "Runners", "memberDetails": [...],
                  "habits": [{"id": "gh1", "completions":
                              [{"userId": "u1", "date": "2024-01-01"}]}]}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from .models import (
    AnyHabit,
    Group,
    Habit,
    group_from_dict,
    habit_from_dict,
)

logger = logging.getLogger(__name__)


class HabitDataError(Exception):
    """Raised when habit data cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)


class HabitRepository(Protocol):
    """Interface for habit data sources."""

    def list_habits(self) -> List[Habit]:
        """List personal habits."""
        ...

    def list_groups(self) -> List[Group]:
        """List groups with their shared habits."""
        ...

    def get_habit(self, habit_id: str) -> Optional[AnyHabit]:
        """Find a personal or group habit by id."""
        ...


class JsonHabitStore:
    """Habit repository backed by a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._habits: Optional[List[Habit]] = None
        self._groups: Optional[List[Group]] = None

    def _load(self) -> None:
        if self._habits is not None:
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise HabitDataError("Habit file not found", self.path) from None
        except (OSError, json.JSONDecodeError) as e:
            raise HabitDataError(f"Could not read habit file: {e}", self.path) from e

        if not isinstance(raw, dict):
            raise HabitDataError("Habit file must contain a JSON object", self.path)

        try:
            habits = [habit_from_dict(h) for h in raw.get("habits") or []]
            groups = [group_from_dict(g) for g in raw.get("groups") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise HabitDataError(f"Malformed habit data: {e}", self.path) from e

        self._habits = habits
        self._groups = groups
        logger.debug(
            "Loaded %d habits and %d groups from %s", len(habits), len(groups), self.path
        )

    def list_habits(self) -> List[Habit]:
        """List personal habits."""
        self._load()
        return list(self._habits)

    def list_groups(self) -> List[Group]:
        """List groups with their shared habits."""
        self._load()
        return list(self._groups)

    def get_habit(self, habit_id: str) -> Optional[AnyHabit]:
        """Find a personal or group habit by id."""
        for habit in self.combined_habits():
            if habit.id == habit_id:
                return habit
        return None

    def combined_habits(self) -> List[AnyHabit]:
        """Personal habits followed by every group's habits."""
        self._load()
        combined: List[AnyHabit] = list(self._habits)
        for group in self._groups:
            combined.extend(group.habits)
        return combined

    def reload(self) -> None:
        """Drop loaded data so the next call re-reads the file."""
        self._habits = None
        self._groups = None


def load_server_analytics_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a server analytics payload from disk.

    Raises:
        HabitDataError: If the file is missing or not a JSON object
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise HabitDataError("Insights file not found", path) from None
    except (OSError, json.JSONDecodeError) as e:
        raise HabitDataError(f"Could not read insights file: {e}", path) from e
    if not isinstance(payload, dict):
        raise HabitDataError("Insights file must contain a JSON object", path)
    return payload
