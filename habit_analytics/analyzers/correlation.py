"""Habit correlation analyzer.

Measures how often two habits succeed or fail on the same day, ranks every
other habit against a target habit, and scores corpus-wide synergy.
"""

import bisect
import logging
from datetime import date
from typing import List, Optional, Sequence

from ..models import AnyHabit, CorrelationResult, ServerAnalytics, SynergyResult
from ..normalizer import completion_map, is_satisfied, satisfied_dates
from ..windows import date_range, months_back
from .utils import safe_mean

logger = logging.getLogger(__name__)

CORRELATION_MONTHS = 3
SYNERGY_THRESHOLD = 0.7


def correlate_habits(
    target: AnyHabit,
    other: AnyHabit,
    days: Sequence[date],
    user_id: Optional[str] = None
) -> CorrelationResult:
    """Same-day agreement correlation between two habits.

    A day where both habits were satisfied, or neither was, is an agreement.
    A day where exactly one was satisfied is a disagreement.

    Args:
        target: Habit being explained
        other: Candidate correlating habit
        days: Dates to compare
        user_id: Member to read for group habits

    Returns:
        CorrelationResult with score in [-100, 100]; all zeros for no days

    Examples:
        "Meditation agrees with Journaling on 80% of days (score 60)"
    """
    target_values = completion_map(target, user_id)
    other_values = completion_map(other, user_id)

    agreements = 0
    disagreements = 0
    both_done = 0
    for day in days:
        target_done = is_satisfied(target, target_values.get(day))
        other_done = is_satisfied(other, other_values.get(day))
        if target_done == other_done:
            agreements += 1
            if target_done:
                both_done += 1
        else:
            disagreements += 1

    total_days = len(days)
    if total_days == 0:
        logger.debug("No days to correlate %s with %s", target.name, other.name)
        return CorrelationResult(
            habit_id=other.id,
            habit_name=other.name,
            emoji=other.emoji,
            correlation_score=0.0,
            success_rate=0.0,
            conflict_rate=0.0,
        )

    return CorrelationResult(
        habit_id=other.id,
        habit_name=other.name,
        emoji=other.emoji,
        correlation_score=((agreements - disagreements) / total_days) * 100,
        success_rate=(both_done / total_days) * 100,
        conflict_rate=(disagreements / total_days) * 100,
        time_proximity=calculate_time_proximity(
            _dates_within(satisfied_dates(target, user_id), days),
            _dates_within(satisfied_dates(other, user_id), days),
        ),
        total_days=total_days,
    )


def calculate_time_proximity(
    target_dates: Sequence[date],
    other_dates: Sequence[date]
) -> Optional[float]:
    """Mean distance in days from each target date to the nearest other date.

    0 means every target completion was matched on the same day. None when
    either side has no completions.
    """
    if not target_dates or not other_dates:
        return None

    others = sorted(set(other_dates))
    distances = []
    for day in target_dates:
        position = bisect.bisect_left(others, day)
        candidates = others[max(0, position - 1):position + 1]
        distances.append(min(abs((day - candidate).days) for candidate in candidates))
    return safe_mean(distances)


def rank_correlations(
    target: AnyHabit,
    habits: Sequence[AnyHabit],
    anchor: Optional[date] = None,
    user_id: Optional[str] = None,
    months: int = CORRELATION_MONTHS,
    server_analytics: Optional[ServerAnalytics] = None
) -> List[CorrelationResult]:
    """
    Correlate every other habit with the target over the last few months.

    Args:
        target: Habit being explained
        habits: All habits; the target itself is skipped
        anchor: Last date of the look-back (defaults to today)
        user_id: Member to read for group habits
        months: Calendar months to look back (default: 3)
        server_analytics: Latest server batch supplying insight text

    Returns:
        Results sorted by absolute correlation score, strongest first
    """
    anchor = anchor or date.today()
    days = date_range(months_back(anchor, months), anchor)

    server_notes = {}
    if server_analytics is not None:
        for note in server_analytics.correlation_insights.get(target.name, []):
            server_notes[note.correlating_habit] = note

    results = []
    for habit in habits:
        if habit.id == target.id:
            continue
        result = correlate_habits(target, habit, days, user_id)
        note = server_notes.get(habit.name)
        if note is not None:
            result.insights = list(note.insights)
            result.recommendations = list(note.recommendations)
        results.append(result)

    results.sort(key=lambda r: abs(r.correlation_score), reverse=True)
    logger.debug("Ranked %d correlations for %s", len(results), target.name)
    return results


def calculate_pair_synergy(
    first: AnyHabit,
    second: AnyHabit,
    user_id: Optional[str] = None
) -> float:
    """
    Fraction of jointly tracked days on which both habits were satisfied.

    Looks at the union of both habits' recorded dates and keeps only those
    where both have a record. Returns 0.0 when no such day exists.
    """
    first_values = completion_map(first, user_id)
    second_values = completion_map(second, user_id)

    shared_days = set(first_values) & set(second_values)
    if not shared_days:
        return 0.0

    both = sum(
        1 for day in shared_days
        if is_satisfied(first, first_values[day]) and is_satisfied(second, second_values[day])
    )
    return both / len(shared_days)


def calculate_habit_synergy(
    habits: Sequence[AnyHabit],
    user_id: Optional[str] = None,
    threshold: float = SYNERGY_THRESHOLD
) -> SynergyResult:
    """
    Synergy across every habit pair.

    Pairs whose synergy exceeds ``threshold`` are complementary. The score is
    their mean synergy as a percentage, capped at 100.

    Args:
        habits: All habits to pair up
        user_id: Member to read for group habits
        threshold: Minimum pair synergy counted as complementary (default: 0.7)

    Returns:
        SynergyResult; score 0 when no pair is complementary
    """
    max_pairs = len(habits) * (len(habits) - 1) // 2

    complementary = []
    for i, first in enumerate(habits):
        for second in habits[i + 1:]:
            synergy = calculate_pair_synergy(first, second, user_id)
            if synergy > threshold:
                complementary.append(synergy)

    score = min(100.0, safe_mean(complementary) * 100)
    return SynergyResult(score=score, complementary_habits=min(len(complementary), max_pairs))


def _dates_within(dates: Sequence[date], days: Sequence[date]) -> List[date]:
    if not days:
        return []
    first, last = min(days), max(days)
    return [d for d in dates if first <= d <= last]
