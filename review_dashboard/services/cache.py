"""
Aggregates Cache - Review Dashboard
review_dashboard/services/cache.py

Score-set aggregates cached in Redis. Entries are keyed by score-set name
and carry the upload timestamp they were computed from, so an entry left
over from an earlier upload is never served.

get_cache() returns None while Redis is unreachable; callers then
recompute on every request.
"""
import logging
from datetime import datetime
from typing import Optional

import redis

from review_dashboard.config import settings
from review_dashboard.models.scoring import AggregatedDataResponse
from review_dashboard.services.redis_cache import RedisCache

logger = logging.getLogger(__name__)

AGGREGATES_NAMESPACE = "aggregates"

# Singleton instance
_cache: Optional[RedisCache] = None


def aggregates_key(score_set_name: str) -> str:
    return f"{AGGREGATES_NAMESPACE}:{score_set_name}"


class AggregatesCache:
    """Load, store and invalidate one score set's aggregates."""

    def __init__(self, cache: RedisCache, ttl: Optional[int] = None):
        self.cache = cache
        self.ttl = settings.CACHE_TTL_AGGREGATES if ttl is None else ttl

    def load(
        self, score_set_name: str, uploaded_at: Optional[datetime]
    ) -> Optional[AggregatedDataResponse]:
        """Cached aggregates of the given upload, or None."""
        key = aggregates_key(score_set_name)
        cached = self.cache.get(key, AggregatedDataResponse)
        if cached is None:
            return None
        if cached.uploaded_at != uploaded_at:
            logger.debug(f"Ignoring {key} computed from an earlier upload")
            return None
        logger.debug(f"Cache hit for {key}")
        return cached

    def store(self, response: AggregatedDataResponse) -> None:
        self.cache.set(aggregates_key(response.score_set_name), response, self.ttl)

    def invalidate(self, score_set_name: str) -> None:
        self.cache.delete(aggregates_key(score_set_name))


def get_cache() -> Optional[RedisCache]:
    """Shared RedisCache, or None when Redis does not answer a ping."""
    global _cache
    if _cache is None:
        try:
            _cache = RedisCache()
            _cache.client.ping()
        except (redis.RedisError, ConnectionError):
            logger.debug(f"Redis unavailable at {settings.REDIS_URL}; aggregates are not cached")
            _cache = None
    return _cache


def reset_cache() -> None:
    """Drop the shared instance so the next get_cache() reconnects."""
    global _cache
    _cache = None
