"""Command-line interface for habit analytics."""

import argparse
import hashlib
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from .config import AnalyticsConfig, load_config
from .formatter import render_group_summary, render_habit_summary, render_overview
from .insight_cache import InsightCache, latest_analytics
from .logging_config import setup_logging
from .models import ServerAnalytics
from .store import HabitDataError, JsonHabitStore, load_server_analytics_file
from .summary import build_group_summary, build_habit_summary, build_overview

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "local"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``habit-analytics`` command."""
    parser = argparse.ArgumentParser(
        prog="habit-analytics",
        description="Analyze habit completion history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s habits.json                          # Overview of all habits
  %(prog)s habits.json --habit h1               # Analytics for one habit
  %(prog)s habits.json --habit h1 --correlations
  %(prog)s habits.json --groups                 # Stats for every group
  %(prog)s habits.json --groups --narrow        # Shorter trend window
  %(prog)s habits.json --insights insights.json --json
        """
    )
    parser.add_argument(
        'data',
        type=Path,
        help='JSON file with "habits" and "groups"'
    )
    parser.add_argument(
        '--habit',
        type=str,
        help='Analyze a specific habit by ID'
    )
    parser.add_argument(
        '-u', '--user',
        type=str,
        help='Member ID used to read group habit completions'
    )
    parser.add_argument(
        '-d', '--date',
        type=date.fromisoformat,
        help='Reference date YYYY-MM-DD (defaults to today)'
    )
    parser.add_argument(
        '-c', '--correlations',
        action='store_true',
        help='Include correlations with the other habits (requires --habit)'
    )
    parser.add_argument(
        '-g', '--groups',
        action='store_true',
        help='Show statistics, leaderboard, achievements and trends for every group'
    )
    parser.add_argument(
        '--narrow',
        action='store_true',
        help='Use the narrow chart window for group trends'
    )
    parser.add_argument(
        '-i', '--insights',
        type=Path,
        help='Server analytics JSON file; cached per user for the configured TTL'
    )
    parser.add_argument(
        '-j', '--json',
        action='store_true',
        help='Output results as JSON'
    )
    parser.add_argument(
        '--env-file',
        type=Path,
        help='Load settings from this .env file'
    )
    return parser


def _insights_source(path: Path) -> str:
    """Path and content digest of an insights file, used to key the cache."""
    try:
        digest = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
    except OSError:
        digest = "missing"
    return f"{path.resolve()}#{digest}"


def _load_insights(
    path: Optional[Path],
    user_id: Optional[str],
    config: AnalyticsConfig
) -> Optional[ServerAnalytics]:
    if path is None:
        return None
    cache = InsightCache(config.cache_dir, ttl_seconds=config.cache_ttl_seconds)
    payload = cache.get_or_load(
        user_id or ANONYMOUS_USER,
        lambda: load_server_analytics_file(path),
        source=_insights_source(path),
    )
    return latest_analytics(payload)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.correlations and not args.habit:
        parser.error("--correlations requires --habit")

    try:
        config = load_config(args.env_file)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)
    today = args.date or date.today()
    logger.debug("Analyzing %s as of %s", args.data, today)

    try:
        store = JsonHabitStore(args.data)
        habits = store.combined_habits()
        analytics = _load_insights(args.insights, args.user, config)
    except HabitDataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.groups:
        summaries = [
            build_group_summary(group, today=today, config=config, narrow=args.narrow)
            for group in store.list_groups()
        ]
        if args.json:
            payload = {summary.group_id: summary.to_dict() for summary in summaries}
            print(json.dumps(payload, indent=2))
        else:
            for summary in summaries:
                render_group_summary(summary)
        return 0

    if args.habit:
        habit = store.get_habit(args.habit)
        if habit is None:
            print(f"Error: habit {args.habit!r} not found", file=sys.stderr)
            return 1
        summary = build_habit_summary(
            habit,
            today=today,
            user_id=args.user,
            analytics=analytics,
            config=config,
            habits=habits if args.correlations else None,
        )
        if args.json:
            print(json.dumps(summary.to_dict(), indent=2))
        else:
            render_habit_summary(summary)
        return 0

    overview = build_overview(habits, today=today, user_id=args.user, analytics=analytics, config=config)
    if args.json:
        print(json.dumps(overview.to_dict(), indent=2))
    else:
        render_overview(overview)
    return 0


if __name__ == "__main__":
    sys.exit(main())
