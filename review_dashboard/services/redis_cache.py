import logging
import redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel, ValidationError
from review_dashboard.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

KEY_PREFIX = "review-dashboard:"


class RedisCache:
    """Pydantic-model cache. Redis failures degrade to cache misses."""

    def __init__(self, url: Optional[str] = None, prefix: str = KEY_PREFIX):
        self.prefix = prefix
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        try:
            data = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if not data:
            return None
        try:
            return model.model_validate_json(data)
        except ValidationError:
            # Stale shape from an older release
            logger.info(f"Discarding unreadable cache entry {key}")
            self.delete(key)
            return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Cache Pydantic model with TTL."""
        try:
            self.client.setex(self._key(key), ttl_seconds, value.model_dump_json())
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def delete(self, key: str) -> None:
        """Invalidate single cache entry."""
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")

    def delete_pattern(self, pattern: str) -> None:
        """Invalidate all keys matching pattern."""
        try:
            for key in self.client.scan_iter(match=self._key(pattern)):
                self.client.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Cache pattern delete failed for {pattern}: {e}")
