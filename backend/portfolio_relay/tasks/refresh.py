"""
Scheduled cache refresh.

Runs on the beat schedule regardless of read traffic. A failed run is logged
and reported in the task result; the cache keeps serving the last good
snapshot until the next run or a read-triggered refresh replaces it.
"""
import asyncio
import logging

from portfolio_relay.core.config import settings
from portfolio_relay.core.redis import create_async_redis
from portfolio_relay.scheduler.celery_app import app
from portfolio_relay.services.cache import get_cache_store
from portfolio_relay.services.refresh_engine import RefreshEngine
from portfolio_relay.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


async def _refresh_cache_async() -> dict:
    """Async implementation of the scheduled refresh."""
    # Each asyncio.run gets its own loop, so the client cannot be shared.
    redis = create_async_redis() if settings.CACHE_BACKEND == "redis" else None
    try:
        store = get_cache_store(settings.CACHE_BACKEND, redis_client=redis)
        engine = RefreshEngine(store=store, upstream=UpstreamClient())
        bundle = await engine.refresh()
    finally:
        if redis is not None:
            await redis.aclose()

    return {
        "status": "ok",
        "positions": len(bundle.positions),
        "history_points": len(bundle.history),
    }


@app.task(name="portfolio_relay.tasks.refresh.refresh_portfolio_cache")
def refresh_portfolio_cache() -> dict:
    """Refresh the portfolio cache from upstream; never raises."""
    logger.info("Scheduled task: refreshing portfolio snapshot")
    try:
        result = asyncio.run(_refresh_cache_async())
    except Exception as exc:
        logger.error("Scheduled task error: %s", exc, exc_info=True)
        return {"status": "failed", "error": str(exc), "error_type": type(exc).__name__}

    logger.info("Scheduled task: refresh complete %s", result)
    return result
