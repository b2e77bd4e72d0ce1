import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from portfolio_relay.core.exceptions import StoreError
from portfolio_relay.services.cache.base import CacheStore

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """Cache store backed by Redis string keys with EX expiry."""

    def __init__(self, client: Redis, key_prefix: str = ""):
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(self._key(key))
        except RedisError as exc:
            logger.error("Redis GET %s failed: %s", key, exc)
            raise StoreError(f"Cache read failed for {key}: {exc}") from exc
        # decode_responses may be off on an injected client
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.client.set(self._key(key), value, ex=ttl_seconds)
        except RedisError as exc:
            logger.error("Redis SET %s failed: %s", key, exc)
            raise StoreError(f"Cache write failed for {key}: {exc}") from exc
