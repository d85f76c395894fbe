"""
Pytest configuration and shared fixtures for habit analytics tests.
"""

import json
from datetime import date, timedelta
from pathlib import Path
import sys

import pytest


# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from habit_analytics.models import (  # noqa: E402
    Group,
    GroupHabit,
    GroupHabitCompletion,
    GroupMember,
    Habit,
    HabitType,
    NumericHabitConfig,
    RatingHabitConfig,
)


def iso_days(start: date, count: int, skip=()):
    """ISO date strings for ``count`` consecutive days, minus offsets in ``skip``."""
    return [
        (start + timedelta(days=offset)).isoformat()
        for offset in range(count)
        if offset not in skip
    ]


@pytest.fixture
def today():
    """Fixed reference date used across tests."""
    return date(2024, 1, 10)


@pytest.fixture
def reading_habit():
    """Boolean habit done Jan 1-5 and Jan 7-10 2024, missed Jan 6."""
    completions = {day: True for day in iso_days(date(2024, 1, 1), 10, skip={5})}
    completions["2024-01-06"] = False
    return Habit(id="h-read", name="Read", emoji="📚", category="Learning", completions=completions)


@pytest.fixture
def water_habit():
    """Numeric habit: 8 glasses a day goal."""
    return Habit(
        id="h-water",
        name="Water",
        emoji="💧",
        type=HabitType.NUMERIC,
        config=NumericHabitConfig(goal=8, unit="glasses"),
        category="Health",
        completions={
            "2024-01-01": 8,
            "2024-01-02": 6,
            "2024-01-03": 10,
            "2024-01-04": 5,
        },
    )


@pytest.fixture
def mood_habit():
    """Rating habit on a 1-5 scale with goal 4."""
    return Habit(
        id="h-mood",
        name="Mood",
        emoji="🙂",
        type=HabitType.RATING,
        config=RatingHabitConfig(goal=4, min=1, max=5),
        category="Wellbeing",
        completions={
            "2024-01-01": 4,
            "2024-01-02": 3,
            "2024-01-03": 5,
            "2024-01-04": 4,
        },
    )


@pytest.fixture
def running_group():
    """Group of two members sharing one boolean habit."""
    completions = []
    for day in iso_days(date(2024, 1, 6), 5):
        completions.append(GroupHabitCompletion(user_id="u1", date=day, completed=True))
        completions.append(GroupHabitCompletion(user_id="u2", date=f"{day}T07:30:00Z", completed=True))
    # u2 missed Jan 7
    completions = [
        c for c in completions if not (c.user_id == "u2" and c.date.startswith("2024-01-07"))
    ]
    habit = GroupHabit(
        id="gh-run",
        name="Run",
        emoji="🏃",
        category="Fitness",
        completions=completions,
        group_id="g-run",
        group_name="Runners",
    )
    return Group(
        id="g-run",
        name="Runners",
        emoji="🏁",
        habits=[habit],
        member_details=[GroupMember(id="u1", name="Ana", is_admin=True), GroupMember(id="u2", name="Ben")],
    )


@pytest.fixture
def habit_payload():
    """Wire-format habit file contents."""
    return {
        "habits": [
            {
                "id": "h-read",
                "name": "Read",
                "emoji": "📚",
                "type": "boolean",
                "category": "Learning",
                "completions": {day: True for day in iso_days(date(2024, 1, 1), 10, skip={5})},
            },
            {
                "id": "h-water",
                "name": "Water",
                "type": "numeric",
                "category": "Health",
                "config": {"goal": 8, "unit": "glasses", "higherIsBetter": True},
                "completions": {"2024-01-08": 9, "2024-01-09": 7, "2024-01-10": 8},
            },
        ],
        "groups": [
            {
                "id": "g-run",
                "name": "Runners",
                "emoji": "🏁",
                "memberDetails": [
                    {"id": "u1", "name": "Ana", "isAdmin": True},
                    {"id": "u2", "name": "Ben"},
                ],
                "habits": [
                    {
                        "id": "gh-run",
                        "name": "Run",
                        "type": "boolean",
                        "category": "Fitness",
                        "completions": [
                            {"userId": "u1", "date": "2024-01-09", "completed": True},
                            {"userId": "u2", "date": "2024-01-09T06:00:00Z", "completed": True},
                            {"userId": "u1", "date": "2024-01-10", "completed": True},
                            {"userId": "u2", "date": "2024-01-10", "completed": True},
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def habit_data_file(tmp_path, habit_payload):
    """Habit payload written to a temporary JSON file."""
    path = tmp_path / "habits.json"
    path.write_text(json.dumps(habit_payload), encoding="utf-8")
    return path


@pytest.fixture
def analytics_payload():
    """Server analytics payload with two published batches."""
    return {
        "analytics": [
            {"publishedAt": "2024-01-01T00:00:00Z", "keyInsights": {"insights": [{"title": "Old", "score": 99}]}},
            {
                "publishedAt": "2024-01-09T00:00:00Z",
                "keyInsights": {
                    "insights": [
                        {"title": "Mornings work", "description": "Most habits land before 9am", "score": 40},
                        {"title": "Weekend dip", "description": "Saturdays lag", "score": 85},
                    ]
                },
                "individualHabitKeyInsights": {
                    "Read": {"insights": [{"title": "Reading streak", "score": 70}]},
                },
                "correlationInsights": {
                    "Read": {
                        "correlations": [
                            {
                                "correlating_habit": "Water",
                                "insights": ["Hydrated days are reading days"],
                                "recommendations": ["Keep a glass by your book"],
                            }
                        ]
                    }
                },
            },
        ]
    }
