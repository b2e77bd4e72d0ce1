"""
Redis connection management.

Provides the async Redis client backing the portfolio cache.
"""

from typing import Optional
from redis.asyncio import Redis as AsyncRedis
from portfolio_relay.core.config import settings

# Async Redis client (for the API process)
async_redis_client: Optional[AsyncRedis] = None


def create_async_redis(url: Optional[str] = None) -> AsyncRedis:
    """Build a new async Redis client from settings."""
    return AsyncRedis.from_url(
        url or settings.REDIS_URL,
        decode_responses=True,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
    )


def get_async_redis() -> AsyncRedis:
    """Get the shared async Redis client."""
    global async_redis_client
    if async_redis_client is None:
        async_redis_client = create_async_redis()
    return async_redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global async_redis_client

    if async_redis_client is not None:
        await async_redis_client.aclose()
        async_redis_client = None
