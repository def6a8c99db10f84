# ecogest/core/cache.py
"""Redis caching implementation."""
import json
import logging
from typing import Any, Optional, Union
from datetime import timedelta
import redis.asyncio as redis
from redis.exceptions import RedisError

from .config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    def __init__(self, url: str = None, enabled: bool = True):
        self.url = url
        self.enabled = enabled
        self.redis: Optional[redis.Redis] = None

    @staticmethod
    def make_key(*parts: Any) -> str:
        return ":".join(str(part) for part in parts)

    async def initialize(self):
        """Initialize Redis connection."""
        if self.enabled and not self.redis:
            self.redis = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True
            )

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self.enabled:
            return None
        await self.initialize()

        try:
            value = await self.redis.get(key)
            if value:
                return json.loads(value)
        except (RedisError, ValueError) as e:
            logger.warning(f"Cache get failed for {key}: {e}")
        return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[Union[int, timedelta]] = 300
    ) -> bool:
        """Set value in cache."""
        if not self.enabled:
            return False
        await self.initialize()

        try:
            serialized = json.dumps(value, default=str)
            if ttl:
                if isinstance(ttl, timedelta):
                    ttl = int(ttl.total_seconds())
                return bool(await self.redis.setex(key, ttl, serialized))
            return bool(await self.redis.set(key, serialized))
        except (RedisError, TypeError) as e:
            logger.warning(f"Cache set failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if not self.enabled:
            return False
        await self.initialize()

        try:
            return bool(await self.redis.delete(key))
        except RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching pattern."""
        if not self.enabled:
            return 0
        await self.initialize()

        deleted = 0
        try:
            async for key in self.redis.scan_iter(match=pattern):
                deleted += await self.redis.delete(key)
        except RedisError as e:
            logger.warning(f"Cache pattern delete failed for {pattern}: {e}")
        return deleted


# Global cache instance
cache_manager = CacheManager(settings.redis_url, enabled=settings.cache_enabled)
