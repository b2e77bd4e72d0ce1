"""
Read-through access to the cached portfolio.

Each read checks the store first; a miss (cold start or TTL expiry) runs a
refresh inline and then serves what the refresh wrote.
"""
import json
import logging
from typing import Any, Optional, Tuple

from portfolio_relay.core.exceptions import ResourceUnavailableError
from portfolio_relay.core.metrics import metrics
from portfolio_relay.schemas.portfolio import CATEGORIES, PortfolioBundle, validate_bundle
from portfolio_relay.services.cache.base import CacheStore
from portfolio_relay.services.refresh_engine import (
    FULL_DATA_KEY,
    LAST_UPDATED_KEY,
    RefreshEngine,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    """Serve portfolio resources from the cache, refreshing on a miss."""

    def __init__(self, store: CacheStore, engine: RefreshEngine):
        self.store = store
        self.engine = engine

    async def _read_through(self, key: str) -> str:
        cached = await self.store.get(key)
        if cached is not None:
            metrics.cache_hit(key)
            logger.debug("Cache hit for %s", key)
            return cached

        metrics.cache_miss(key)
        logger.info("Cache miss for %s, refreshing", key)
        await self.engine.refresh()

        cached = await self.store.get(key)
        if cached is None:
            raise ResourceUnavailableError(key)
        return cached

    async def get_resource(self, category: str) -> Any:
        """
        Get one category (account, history, positions, activities).

        Returns:
            The decoded JSON value stored under the category key
        """
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        return json.loads(await self._read_through(category))

    async def get_full_bundle(self) -> Tuple[PortfolioBundle, Optional[str]]:
        """
        Get the whole document plus the time of the last refresh.

        last_updated can be None when it expired separately from full_data.
        """
        payload = await self._read_through(FULL_DATA_KEY)
        last_updated = await self.store.get(LAST_UPDATED_KEY)
        return validate_bundle(json.loads(payload)), last_updated

    async def force_refresh(self) -> PortfolioBundle:
        """Refresh regardless of what is cached."""
        logger.info("Forced refresh requested")
        return await self.engine.refresh()
