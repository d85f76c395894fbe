"""
Rich terminal output for habit analytics.

Renders overview and per-habit summaries, correlation rankings and group
pages (statistics, leaderboard, achievements, trends) as rich tables.

Usage:
    from habit_analytics.formatter import render_overview, render_habit_summary

    render_overview(build_overview(habits))
    render_habit_summary(build_habit_summary(habit), out=Console(stderr=True))
"""

from typing import List, Optional, Sequence

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analyzers.momentum import format_momentum
from .models import Achievement, CorrelationResult, GroupStats, KeyInsight, MemberStanding, RiskLevel
from .summary import GroupChart, GroupSummary, HabitSummary, OverviewSummary

console = Console()

RISK_STYLES = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
}


def get_score_style(score: float, thresholds: tuple = (50, 75)) -> str:
    """
    Color for a 0-100 score.

    Args:
        score: Score to evaluate
        thresholds: (low, high); at or above high is green, below low is red

    Returns:
        Style string for rich
    """
    low, high = thresholds
    if score >= high:
        return "green"
    elif score >= low:
        return "yellow"
    else:
        return "red"


def _styled(value: str, style: str) -> str:
    return f"[{style}]{value}[/{style}]"


def _momentum_cell(momentum: Optional[float]) -> str:
    text = format_momentum(momentum)
    if momentum is None:
        return _styled(text, "dim")
    return _styled(text, "green" if momentum > 0 else "red")


def _insights_panel(insights: Sequence[KeyInsight], limit: int = 3) -> Optional[Panel]:
    if not insights:
        return None
    lines = []
    for insight in insights[:limit]:
        lines.append(f"[bold]{insight.title}[/bold]")
        if insight.description:
            lines.append(f"  {insight.description}")
    return Panel("\n".join(lines), title="Key Insights", box=ROUNDED, border_style="magenta")


def overview_table(summary: OverviewSummary) -> Table:
    """Table of the all-habits overview."""
    table = Table(
        title=f"[bold]{summary.title}[/bold]",
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Details")

    table.add_row(
        "Habit Consistency Score",
        _styled(str(summary.consistency_score), get_score_style(summary.consistency_score)),
        "Strong habit patterns detected" if summary.consistency_score > 75
        else "Developing habit patterns detected",
    )
    table.add_row(
        "Current Momentum",
        _momentum_cell(summary.weekly_momentum),
        "Change from previous week",
    )
    table.add_row(
        "Habit Diversity",
        _styled(f"{summary.diversity.score:.0f}", get_score_style(summary.diversity.score, (40, 70))),
        f"{summary.diversity.categories} life areas. {summary.diversity.recommendation}",
    )
    table.add_row(
        "Stability",
        _styled(f"{summary.stability}%", get_score_style(summary.stability)),
        "How consistent your completion rate is day-to-day",
    )
    table.add_row(
        "Habit Synergy",
        f"{summary.synergy.score:.1f}%",
        f"{summary.synergy.complementary_habits} complementary habit pairs identified",
    )
    risk_style = RISK_STYLES[summary.burnout_risk.level]
    table.add_row(
        "Burnout Risk",
        _styled(summary.burnout_risk.level.value, risk_style),
        summary.burnout_risk.recommendation,
    )
    return table


def habit_summary_table(summary: HabitSummary) -> Table:
    """Table of a single habit's analytics."""
    table = Table(
        title=f"[bold]{summary.title}[/bold]",
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Details")

    streaks = summary.streaks
    table.add_row(
        "Current Streak",
        f"{streaks.current_streak} days",
        f"Best streak: {streaks.best_streak} days. {streaks.streak_quality}",
    )

    if summary.performance is not None:
        perf = summary.performance
        table.add_row(
            "Performance",
            _styled(f"{perf.average:.1f} {perf.unit}".strip(), "green" if perf.goal_met else "yellow"),
            perf.details,
        )
    else:
        table.add_row("Current Momentum", _momentum_cell(summary.weekly_momentum), "Change from previous week")

    for key, rate in summary.completion_rates.items():
        table.add_row(
            f"Completion Rate ({key})",
            _styled(f"{rate.rate:.1f}%", get_score_style(rate.rate, (50, 70))),
            f"{rate.label}: {rate.completions}/{rate.days} days",
        )

    table.add_row(
        "Stability",
        _styled(f"{summary.stability}%", get_score_style(summary.stability)),
        "How consistently you complete this habit in a week",
    )
    table.add_row(
        "Best Day",
        summary.time_pattern.optimal_day,
        f"{summary.time_pattern.day_success_rate}% success rate on this day",
    )
    table.add_row(
        "Recovery Rate",
        f"{summary.recovery_rate:.0f}%",
        "How quickly you restart after missing a day",
    )
    return table


def correlation_table(results: List[CorrelationResult]) -> Table:
    """Table of correlations, strongest first."""
    table = Table(title="[bold]Habit Correlations[/bold]", box=SIMPLE, header_style="bold cyan")
    table.add_column("Habit", style="cyan")
    table.add_column("Correlation", justify="right")
    table.add_column("Both done", justify="right")
    table.add_column("Conflicts", justify="right")
    table.add_column("Proximity", justify="right")

    for result in results:
        proximity = "N/A" if result.time_proximity is None else f"{result.time_proximity:.1f}d"
        table.add_row(
            f"{result.emoji} {result.habit_name}".strip(),
            _styled(f"{result.correlation_score:.1f}%", get_score_style(result.correlation_score, (50, 65))),
            f"{result.success_rate:.1f}%",
            f"{result.conflict_rate:.1f}%",
            proximity,
        )
    return table


def group_stats_table(title: str, stats: GroupStats, member_count: int) -> Table:
    """Table of a group's headline statistics."""
    table = Table(title=f"[bold]{title}[/bold]", box=ROUNDED, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="bold")
    table.add_row("30-Day Completion Rate", _styled(f"{stats.completion_rate}%", get_score_style(stats.completion_rate)))
    table.add_row("Current Streak", f"{stats.current_streak} days")
    table.add_row("Total Completions", str(stats.total_completions))
    table.add_row("Active Members", f"{stats.active_members}/{member_count}")
    return table


def leaderboard_table(standings: Sequence[MemberStanding]) -> Table:
    """Table of member standings, best completion rate first."""
    table = Table(title="[bold]Leaderboard[/bold]", box=ROUNDED, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Member", style="cyan")
    table.add_column("30-Day Rate", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Last Active", style="dim")

    for rank, standing in enumerate(standings, 1):
        table.add_row(
            str(rank),
            standing.name,
            _styled(f"{standing.completion_rate}%", get_score_style(standing.completion_rate)),
            f"{standing.streak} days",
            str(standing.total_completions),
            standing.last_active.isoformat() if standing.last_active else "Never",
        )
    return table


def achievements_table(achievements: Sequence[Achievement]) -> Table:
    """Table of achievements with their progress."""
    table = Table(title="[bold]Achievements[/bold]", box=SIMPLE, header_style="bold cyan")
    table.add_column("Achievement")
    table.add_column("Progress", justify="right")
    table.add_column("Status")

    for achievement in achievements:
        status = _styled("Unlocked", "green") if achievement.unlocked else _styled("Locked", "dim")
        table.add_row(
            f"{achievement.icon} {achievement.title}",
            f"{achievement.progress}/{achievement.target}",
            status,
        )
    return table


def group_chart_table(charts: Sequence[GroupChart]) -> Table:
    """Latest point of each group trend chart."""
    table = Table(title="[bold]Trends[/bold]", box=SIMPLE, header_style="bold cyan")
    table.add_column("Habit", style="cyan")
    table.add_column("Window")
    table.add_column("Group Avg", justify="right")
    table.add_column("Y Max", justify="right", style="dim")

    for chart in charts:
        if chart.dates:
            window = f"{chart.dates[0].isoformat()} .. {chart.dates[-1].isoformat()}"
        else:
            window = "-"
        latest = f"{chart.group_average[-1]:.1f}" if chart.group_average else "-"
        table.add_row(chart.habit_name, window, latest, f"{chart.y_max:g}")
    return table


def render_overview(summary: OverviewSummary, out: Optional[Console] = None) -> None:
    """Print an overview with its insights."""
    out = out or console
    out.print(overview_table(summary))
    panel = _insights_panel(summary.insights)
    if panel is not None:
        out.print(panel)


def render_habit_summary(summary: HabitSummary, out: Optional[Console] = None) -> None:
    """Print a habit summary, its correlations and insights."""
    out = out or console
    out.print(habit_summary_table(summary))
    if summary.correlations:
        out.print(correlation_table(summary.correlations))
    panel = _insights_panel(summary.insights)
    if panel is not None:
        out.print(panel)
    out.print(f"\n[dim italic]{summary.streaks.recommendation}[/dim italic]")


def render_group_summary(summary: GroupSummary, out: Optional[Console] = None) -> None:
    """Print a group's statistics, leaderboard, achievements and trends."""
    out = out or console
    out.print(group_stats_table(summary.title, summary.stats, len(summary.leaderboard)))
    if summary.leaderboard:
        out.print(leaderboard_table(summary.leaderboard))
    out.print(achievements_table(summary.achievements))
    if summary.charts:
        out.print(group_chart_table(summary.charts))
