"""Data models for the habit analytics engine.

This module defines the habit records consumed by the analyzers (personal
habits, group habits and groups) and the structured results they produce:
streak analyses, correlations, synergy, regression fits and the secondary
dashboard statistics.
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union


CompletionValue = Union[bool, float, int]


class HabitType(Enum):
    """Supported habit variants."""
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    RATING = "rating"


class CompletionStatus(Enum):
    """How a single day's value relates to the habit goal."""
    COMPLETE = "complete"
    PARTIAL = "partial"
    INCOMPLETE = "incomplete"
    UNTRACKED = "untracked"


class RiskLevel(Enum):
    """Burnout risk levels."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass
class NumericHabitConfig:
    """Goal configuration for quantity habits (glasses of water, cigarettes)."""
    goal: float
    unit: str = ""
    higher_is_better: bool = True


@dataclass
class RatingHabitConfig:
    """Goal configuration for rating habits scored on a bounded integer scale."""
    goal: int
    min: int = 1
    max: int = 5

    def __post_init__(self):
        """Validate the goal lies inside the scale."""
        if self.min > self.max:
            raise ValueError("Rating min must not exceed max")
        if not self.min <= self.goal <= self.max:
            raise ValueError(
                f"Rating goal {self.goal} must be between {self.min} and {self.max}"
            )


HabitConfig = Union[NumericHabitConfig, RatingHabitConfig]


@dataclass
class Habit:
    """Personal habit with a date-keyed completion map.

    Keys of ``completions`` are ISO dates (``YYYY-MM-DD``). Values are
    ``True``/``False`` for boolean habits and numbers for numeric/rating habits.
    """
    id: str
    name: str
    emoji: str = ""
    type: HabitType = HabitType.BOOLEAN
    config: Optional[HabitConfig] = None
    color: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[str] = None
    completions: Dict[str, CompletionValue] = field(default_factory=dict)

    def __post_init__(self):
        """Check the config matches the habit type."""
        _validate_config(self.type, self.config)


@dataclass
class GroupHabitCompletion:
    """One member's completion of a group habit on one date."""
    user_id: str
    date: str  # ISO date, may carry a time suffix
    completed: CompletionValue


@dataclass
class GroupHabit:
    """Habit shared by a group; every member completes it independently."""
    id: str
    name: str
    emoji: str = ""
    type: HabitType = HabitType.BOOLEAN
    config: Optional[HabitConfig] = None
    color: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[str] = None
    completions: List[GroupHabitCompletion] = field(default_factory=list)
    group_id: Optional[str] = None
    group_name: Optional[str] = None

    def __post_init__(self):
        """Check the config matches the habit type."""
        _validate_config(self.type, self.config)


AnyHabit = Union[Habit, GroupHabit]


@dataclass
class GroupMember:
    """Member of a group."""
    id: str
    name: str
    is_admin: bool = False


@dataclass
class Group:
    """Group of members tracking a shared set of habits."""
    id: str
    name: str
    emoji: str = ""
    habits: List[GroupHabit] = field(default_factory=list)
    member_details: List[GroupMember] = field(default_factory=list)
    created_at: Optional[str] = None


@dataclass
class CompletionEntry:
    """Uniform ``{date, value}`` record produced for either habit variant."""
    date: date
    value: CompletionValue


@dataclass
class DailyRate:
    """Derived per-day sample feeding the statistical analyzers.

    ``rate`` is a 0-100 percentage for completion series, or the raw value
    for numeric/rating value series.
    """
    date: date
    rate: float
    completed_count: int = 0
    has_data: bool = True


@dataclass
class StreakAnalysis:
    """Streak and recovery behaviour derived from satisfied dates.

    Examples:
        - "Current streak 4 days, best 5 days"
        - "Recovered after 3 of 4 breaks (75%)"
    """
    current_streak: int = 0
    best_streak: int = 0
    break_count: int = 0
    recovery_count: int = 0
    recovery_rate: float = 100.0
    last_date: Optional[date] = None
    score: int = 0
    streak_quality: str = "No data yet"
    recommendation: str = "Start your first streak!"

    def __post_init__(self):
        """Validate rates."""
        if not 0.0 <= self.recovery_rate <= 100.0:
            raise ValueError("Recovery rate must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["last_date"] = self.last_date.isoformat() if self.last_date else None
        return data


@dataclass
class CorrelationResult:
    """Same-day agreement between a target habit and one other habit."""
    habit_id: str
    correlation_score: float  # -100 to 100
    success_rate: float  # % of days both were completed
    conflict_rate: float  # % of days exactly one was completed
    time_proximity: Optional[float] = None  # mean days to nearest co-completion
    habit_name: str = ""
    emoji: str = ""
    total_days: int = 0
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate scores."""
        if not -100.0 <= self.correlation_score <= 100.0:
            raise ValueError("Correlation score must be between -100 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class SynergyResult:
    """Corpus-wide synergy across all habit pairs."""
    score: float
    complementary_habits: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class RegressionResult:
    """Ordinary least-squares fit ``y = slope * x + intercept``."""
    slope: float
    intercept: float
    r_squared: Optional[float] = None
    n: int = 0

    def predict(self, x: float) -> float:
        """Evaluate the fitted line at ``x``."""
        return self.slope * x + self.intercept

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class BurnoutRisk:
    """Risk of burning out, from recent stability and trend."""
    level: RiskLevel
    recommendation: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"level": self.level.value, "recommendation": self.recommendation, "score": self.score}


@dataclass
class HabitDiversity:
    """How many life areas the habit set covers."""
    score: float
    categories: int
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class CompletionRate:
    """Completion rate over a named period."""
    rate: float
    label: str
    days: int = 0
    completions: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class TimePattern:
    """Weekday pattern of completions."""
    optimal_day: str = "Unknown"
    day_success_rate: int = 0
    completion_rate: int = 0
    consistency: str = "Not enough data"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class PerformanceStats:
    """Average and best values for numeric and rating habits."""
    average: float
    best: float
    unit: str = ""
    goal_met: bool = False
    details: str = ""
    sample_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class CategoryStats:
    """Completion rate for one habit category."""
    category: str
    completion_rate: float
    tracked_days: int
    completed_days: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class GoalProgress:
    """Progress of a habit's completion rate against a target rate."""
    completion_rate: float
    goal_rate: float
    achieved: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class GroupStats:
    """Headline statistics for a group."""
    completion_rate: int
    current_streak: int
    total_completions: int
    active_members: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class MemberStanding:
    """One member's row on a group leaderboard."""
    member_id: str
    name: str
    completion_rate: int  # 0-100, last 30 days
    streak: int
    total_completions: int
    last_active: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["last_active"] = self.last_active.isoformat() if self.last_active else None
        return data


class AchievementCategory(Enum):
    """What a group achievement rewards."""
    STREAK = "streak"
    COMPLETION = "completion"
    COLLABORATION = "collaboration"


@dataclass
class Achievement:
    """Group milestone and progress towards it."""
    id: int
    title: str
    description: str
    icon: str
    progress: int
    target: int
    unlocked: bool
    category: AchievementCategory

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["category"] = self.category.value
        return data


@dataclass
class KeyInsight:
    """Server-generated insight. Opaque to the engine apart from sorting."""
    title: str
    description: str = ""
    explanation: str = ""
    score: float = 0.0
    impact_score: float = 0.0
    confidence: float = 0.0
    polarity: str = "neutral"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class CorrelationInsight:
    """Server-generated notes about one correlating habit."""
    correlating_habit: str
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ServerAnalytics:
    """One published batch of server-side analytics."""
    published_at: Optional[str] = None
    key_insights: List[KeyInsight] = field(default_factory=list)
    habit_key_insights: Dict[str, List[KeyInsight]] = field(default_factory=dict)
    correlation_insights: Dict[str, List[CorrelationInsight]] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)


def _validate_config(habit_type: HabitType, config: Optional[HabitConfig]) -> None:
    if habit_type == HabitType.NUMERIC and not isinstance(config, NumericHabitConfig):
        raise ValueError("Numeric habits require a NumericHabitConfig")
    if habit_type == HabitType.RATING and not isinstance(config, RatingHabitConfig):
        raise ValueError("Rating habits require a RatingHabitConfig")


# ============================================================================
# Wire-format parsing
# ============================================================================

def _parse_type(raw: Any) -> HabitType:
    try:
        return HabitType(raw or HabitType.BOOLEAN.value)
    except ValueError:
        raise ValueError(f"Unknown habit type: {raw!r}") from None


def _parse_config(habit_type: HabitType, raw: Optional[Dict[str, Any]]) -> Optional[HabitConfig]:
    if habit_type == HabitType.NUMERIC:
        raw = raw or {}
        if "goal" not in raw:
            raise ValueError("Numeric habit config requires a goal")
        return NumericHabitConfig(
            goal=float(raw["goal"]),
            unit=raw.get("unit", ""),
            higher_is_better=bool(raw.get("higherIsBetter", raw.get("higher_is_better", True))),
        )
    if habit_type == HabitType.RATING:
        raw = raw or {}
        if "goal" not in raw:
            raise ValueError("Rating habit config requires a goal")
        return RatingHabitConfig(
            goal=int(raw["goal"]),
            min=int(raw.get("min", 1)),
            max=int(raw.get("max", 5)),
        )
    return None


def habit_from_dict(data: Dict[str, Any]) -> Habit:
    """Build a personal Habit from its JSON representation."""
    habit_type = _parse_type(data.get("type"))
    return Habit(
        id=str(data["id"]),
        name=data["name"],
        emoji=data.get("emoji", ""),
        type=habit_type,
        config=_parse_config(habit_type, data.get("config")),
        color=data.get("color"),
        category=data.get("category"),
        created_at=data.get("createdAt", data.get("created_at")),
        completions=dict(data.get("completions") or {}),
    )


def group_habit_from_dict(
    data: Dict[str, Any],
    group_id: Optional[str] = None,
    group_name: Optional[str] = None,
) -> GroupHabit:
    """Build a GroupHabit from its JSON representation."""
    habit_type = _parse_type(data.get("type"))
    completions = [
        GroupHabitCompletion(
            user_id=str(c.get("userId", c.get("user_id"))),
            date=c["date"],
            completed=c.get("completed", True),
        )
        for c in data.get("completions") or []
    ]
    return GroupHabit(
        id=str(data["id"]),
        name=data["name"],
        emoji=data.get("emoji", ""),
        type=habit_type,
        config=_parse_config(habit_type, data.get("config")),
        color=data.get("color"),
        category=data.get("category"),
        created_at=data.get("createdAt", data.get("created_at")),
        completions=completions,
        group_id=group_id,
        group_name=group_name,
    )


def group_from_dict(data: Dict[str, Any]) -> Group:
    """Build a Group, its habits and members from JSON."""
    group_id = str(data["id"])
    name = data["name"]
    members = [
        GroupMember(
            id=str(m["id"]),
            name=m.get("name", ""),
            is_admin=bool(m.get("isAdmin", m.get("is_admin", False))),
        )
        for m in data.get("memberDetails", data.get("member_details")) or []
    ]
    return Group(
        id=group_id,
        name=name,
        emoji=data.get("emoji", ""),
        habits=[group_habit_from_dict(h, group_id, name) for h in data.get("habits") or []],
        member_details=members,
        created_at=data.get("createdAt", data.get("created_at")),
    )


def key_insight_from_dict(data: Dict[str, Any]) -> KeyInsight:
    """Build a KeyInsight from the server payload."""
    return KeyInsight(
        title=data.get("title", ""),
        description=data.get("description", ""),
        explanation=data.get("explanation", ""),
        score=float(data.get("score", 0.0)),
        impact_score=float(data.get("impact_score", 0.0)),
        confidence=float(data.get("confidence", 0.0)),
        polarity=data.get("polarity", "neutral"),
    )


def server_analytics_from_dict(data: Dict[str, Any]) -> ServerAnalytics:
    """Parse one published analytics batch from the server payload."""
    habit_insights = {
        name: [key_insight_from_dict(i) for i in (entry or {}).get("insights", [])]
        for name, entry in (data.get("individualHabitKeyInsights") or {}).items()
    }
    correlations = {
        name: [
            CorrelationInsight(
                correlating_habit=c.get("correlating_habit", ""),
                insights=list(c.get("insights", [])),
                recommendations=list(c.get("recommendations", [])),
            )
            for c in (entry or {}).get("correlations", [])
        ]
        for name, entry in (data.get("correlationInsights") or {}).items()
    }
    return ServerAnalytics(
        published_at=data.get("publishedAt"),
        key_insights=[
            key_insight_from_dict(i)
            for i in (data.get("keyInsights") or {}).get("insights", [])
        ],
        habit_key_insights=habit_insights,
        correlation_insights=correlations,
        raw=data,
    )
