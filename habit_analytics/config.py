"""
Configuration for habit analytics.

Values come from ``HABIT_ANALYTICS_*`` environment variables, optionally
loaded from a ``.env`` file:

- HABIT_ANALYTICS_LOOKBACK_DAYS        days of history for overview scores (90)
- HABIT_ANALYTICS_CORRELATION_MONTHS   correlation look-back in months (3)
- HABIT_ANALYTICS_SYNERGY_THRESHOLD    complementary pair threshold (0.7)
- HABIT_ANALYTICS_CHART_DAYS           chart window on wide screens (30)
- HABIT_ANALYTICS_CHART_DAYS_NARROW    chart window on narrow screens (14)
- HABIT_ANALYTICS_CACHE_DIR            insight cache directory
- HABIT_ANALYTICS_CACHE_TTL            insight cache lifetime in seconds (3600)
- HABIT_ANALYTICS_LOG_LEVEL            logging level (INFO)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

ENV_PREFIX = "HABIT_ANALYTICS_"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "habit_analytics" / "insights"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AnalyticsConfig:
    """Tunable settings shared by the summary pipeline, cache and CLI."""
    lookback_days: int = 90
    correlation_months: int = 3
    synergy_threshold: float = 0.7
    chart_days: int = 30
    chart_days_narrow: int = 14
    cache_dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)
    cache_ttl_seconds: int = 3600
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate ranges."""
        if self.lookback_days < 14:
            raise ValueError("Lookback must cover at least 14 days")
        if self.correlation_months < 1:
            raise ValueError("Correlation look-back must be at least one month")
        if not 0.0 <= self.synergy_threshold <= 1.0:
            raise ValueError("Synergy threshold must be between 0 and 1")
        if self.chart_days < 1 or self.chart_days_narrow < 1:
            raise ValueError("Chart windows must span at least one day")
        if self.cache_ttl_seconds < 0:
            raise ValueError("Cache TTL must not be negative")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        self.cache_dir = Path(self.cache_dir).expanduser()

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from None


def _env_float(name: str, default: float) -> float:
    value = _env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from None


def load_config(env_path: Optional[Union[str, Path]] = None) -> AnalyticsConfig:
    """
    Build an AnalyticsConfig from the environment.

    Args:
        env_path: Optional ``.env`` file to load first. Variables already set
            in the environment take precedence over the file.

    Returns:
        Validated AnalyticsConfig

    Raises:
        ValueError: If a variable cannot be parsed or is out of range
    """
    if env_path is not None:
        load_dotenv(env_path)
    else:
        load_dotenv()

    defaults = AnalyticsConfig()
    return AnalyticsConfig(
        lookback_days=_env_int("LOOKBACK_DAYS", defaults.lookback_days),
        correlation_months=_env_int("CORRELATION_MONTHS", defaults.correlation_months),
        synergy_threshold=_env_float("SYNERGY_THRESHOLD", defaults.synergy_threshold),
        chart_days=_env_int("CHART_DAYS", defaults.chart_days),
        chart_days_narrow=_env_int("CHART_DAYS_NARROW", defaults.chart_days_narrow),
        cache_dir=Path(_env("CACHE_DIR") or defaults.cache_dir),
        cache_ttl_seconds=_env_int("CACHE_TTL", defaults.cache_ttl_seconds),
        log_level=_env("LOG_LEVEL") or defaults.log_level,
    )
