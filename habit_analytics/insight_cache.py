"""
Insight cache for server-generated analytics.

Server analytics are expensive to regenerate, so the raw payload is kept on
disk per user for a fixed lifetime (one hour by default). The engine treats
the payload as opaque apart from picking the latest batch and sorting its
insights by score.
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .models import KeyInsight, ServerAnalytics, server_analytics_from_dict

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
ALL_HABITS = "all"


class InsightCache:
    """Cache server analytics payloads per user with a TTL."""

    def __init__(self, cache_dir: Union[str, Path], ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.ttl_seconds = ttl_seconds

    def _cache_file(self, user_id: str) -> Path:
        """Cache file for a user; ids are hashed to keep filenames safe."""
        key = hashlib.sha256(user_id.encode()).hexdigest()[:16]
        return self.cache_dir / f"{key}.json"

    def _is_fresh(self, cached_time: datetime) -> bool:
        return datetime.now() - cached_time < timedelta(seconds=self.ttl_seconds)

    def get(self, user_id: str, source: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Return the cached payload, or None when missing, expired or corrupt.

        When ``source`` is given, an entry stored for a different source is
        also a miss.
        """
        cache_file = self._cache_file(user_id)
        if not cache_file.exists():
            return None

        try:
            cached = json.loads(cache_file.read_text(encoding="utf-8"))
            cached_time = datetime.fromisoformat(cached["timestamp"])
            payload = cached["payload"]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("Discarding corrupt insight cache entry %s", cache_file)
            cache_file.unlink(missing_ok=True)
            return None

        if not self._is_fresh(cached_time):
            logger.debug("Insight cache entry for %s expired", user_id)
            cache_file.unlink(missing_ok=True)
            return None

        if source is not None and cached.get("source") != source:
            logger.debug("Insight cache entry for %s came from another source", user_id)
            return None

        return payload

    def set(self, user_id: str, payload: Dict[str, Any], source: Optional[str] = None) -> None:
        """Store a payload for a user, replacing any previous entry."""
        cache_file = self._cache_file(user_id)
        cache_file.write_text(json.dumps({
            "timestamp": datetime.now().isoformat(),
            "user_id": user_id,
            "source": source,
            "payload": payload,
        }), encoding="utf-8")

    def get_or_load(
        self,
        user_id: str,
        loader: Callable[[], Optional[Dict[str, Any]]],
        source: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Return the cached payload, calling ``loader`` on a miss.

        A payload returned by the loader is cached; None is not.

        Args:
            user_id: Owner of the analytics
            loader: Fetches a fresh payload from the server
            source: Identifies where the payload comes from; a cached entry
                from another source is reloaded

        Returns:
            Cached or freshly loaded payload, or None
        """
        payload = self.get(user_id, source)
        if payload is not None:
            return payload

        payload = loader()
        if payload is not None:
            self.set(user_id, payload, source)
        return payload

    def invalidate(self, user_id: str) -> None:
        """Drop the cached payload for a user (sign-out, account switch)."""
        self._cache_file(user_id).unlink(missing_ok=True)

    def clear_expired(self) -> int:
        """Remove expired and corrupt entries; returns how many were removed."""
        removed = 0
        for cache_file in self.cache_dir.glob("*.json"):
            try:
                cached = json.loads(cache_file.read_text(encoding="utf-8"))
                expired = not self._is_fresh(datetime.fromisoformat(cached["timestamp"]))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                expired = True  # corrupt
            if expired:
                cache_file.unlink(missing_ok=True)
                removed += 1
        return removed


def latest_analytics(payload: Optional[Dict[str, Any]]) -> Optional[ServerAnalytics]:
    """
    Most recent analytics batch in a server payload.

    Accepts ``{"analytics": [batch, ...]}`` (latest last) or a single batch.
    """
    if not payload:
        return None
    batches = payload.get("analytics")
    if isinstance(batches, list):
        if not batches:
            return None
        return server_analytics_from_dict(batches[-1])
    return server_analytics_from_dict(payload)


def key_insights_for(
    analytics: Optional[ServerAnalytics],
    habit_name: str = ALL_HABITS
) -> List[KeyInsight]:
    """Insights for one habit name, or the overall ones for "all", best score first."""
    if analytics is None:
        return []
    if habit_name == ALL_HABITS:
        insights = analytics.key_insights
    else:
        insights = analytics.habit_key_insights.get(habit_name, [])
    return sorted(insights, key=lambda insight: insight.score, reverse=True)
