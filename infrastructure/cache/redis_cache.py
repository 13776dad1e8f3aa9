import json
import logging
from datetime import timedelta
from typing import Any

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError

logger = logging.getLogger(__name__)


class RedisCacheService:
    """Shared cache backed by Redis. Values are stored as JSON with SETEX.

    Redis being unreachable is never fatal: reads degrade to a miss and
    writes are dropped, both with a warning.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @staticmethod
    def _decode(data: str | bytes) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError) as e:
            raise CacheError(f'Invalid json data in cache: {e}') from e

    async def get(self, key: str) -> tuple[Any, bool]:
        try:
            data = await self.redis.get(key)
            if data is None:
                return None, False
            return self._decode(data), True
        except (RedisError, CacheError) as e:
            logger.warning(f'Cache read failed for {key}, treating as miss: {e}')
            return None, False

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        try:
            await self.redis.setex(key, ttl, json.dumps(value))
        except RedisError as e:
            logger.warning(f'Cache write failed for {key}: {e}')

    async def close(self) -> None:
        await self.redis.aclose()
