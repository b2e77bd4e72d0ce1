from typing import Dict, Optional, Type

from redis.asyncio import Redis

from portfolio_relay.core.redis import get_async_redis
from portfolio_relay.services.cache.base import CacheStore
from portfolio_relay.services.cache.memory_store import InMemoryCacheStore
from portfolio_relay.services.cache.redis_store import RedisCacheStore

STORES: Dict[str, Type[CacheStore]] = {
    "redis": RedisCacheStore,
    "memory": InMemoryCacheStore,
}

# The memory backend must outlive a single request.
_memory_store: Optional[InMemoryCacheStore] = None


def get_cache_store(name: str = "redis", redis_client: Optional[Redis] = None) -> CacheStore:
    """
    Factory to get the configured cache store.

    The memory backend is one store per process. The API and the Celery
    worker do not see each other's writes, so use it only when the API
    runs as a single process (local development, tests). Deployments with
    a worker or several API processes need redis.
    """
    global _memory_store
    if name not in STORES:
        raise ValueError(f"Unknown cache backend: {name}")
    if name == "memory":
        if _memory_store is None:
            _memory_store = InMemoryCacheStore()
        return _memory_store
    return RedisCacheStore(redis_client or get_async_redis())


__all__ = ["CacheStore", "InMemoryCacheStore", "RedisCacheStore", "get_cache_store"]
