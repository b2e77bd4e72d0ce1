"""
Refresh engine for the portfolio cache.

Pulls the upstream snapshot, validates it and writes the derived keys:

    full_data      whole validated document
    account        \\
    history         |  one key per category
    positions       |
    activities     /
    last_updated   ISO timestamp of the last refresh that wrote full_data

The store has no multi-key transactions. Two refreshes racing with different
snapshots can leave full_data briefly out of step with a category key; the
next refresh repairs it.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Literal, Optional

from portfolio_relay.core.config import settings
from portfolio_relay.core.metrics import metrics
from portfolio_relay.schemas.portfolio import (
    CATEGORIES,
    PortfolioBundle,
    serialize,
    validate_bundle,
)
from portfolio_relay.services.cache.base import CacheStore
from portfolio_relay.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

FULL_DATA_KEY = "full_data"
LAST_UPDATED_KEY = "last_updated"

WriteStrategy = Literal["diff", "overwrite"]


def utc_timestamp(now: datetime) -> str:
    """Millisecond ISO-8601 in UTC with a Z suffix."""
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshEngine:
    """Fetch, validate and selectively store the upstream snapshot."""

    def __init__(
        self,
        store: CacheStore,
        upstream: UpstreamClient,
        ttl_seconds: Optional[int] = None,
        strategy: Optional[WriteStrategy] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.upstream = upstream
        self.ttl_seconds = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.strategy = strategy or settings.CACHE_WRITE_STRATEGY
        if self.strategy not in ("diff", "overwrite"):
            raise ValueError(f"Unknown write strategy: {self.strategy}")
        self.clock = clock

    async def refresh(self) -> PortfolioBundle:
        """
        Refresh the cache from upstream.

        Nothing is written unless the whole document validates; on a fetch or
        validation error the previous cache contents stay in place. A store
        error mid-write can leave some keys updated and others not.

        Returns:
            The validated bundle
        """
        try:
            raw = await self.upstream.fetch_document()
            bundle = validate_bundle(raw)
        except Exception as exc:
            metrics.refresh_failed(exc)
            logger.error("Refresh aborted: %s", exc)
            raise

        document = bundle.model_dump(mode="json")
        payload = serialize(document)

        try:
            if self.strategy == "diff":
                written = await self._write_changed(document, payload)
            else:
                written = await self._write_all(document, payload)
        except Exception as exc:
            metrics.refresh_failed(exc)
            logger.error("Refresh failed while writing the cache: %s", exc)
            raise

        if written:
            metrics.refresh_completed(written, self.strategy)
            logger.info("Refresh wrote %s", ", ".join(written))
        else:
            metrics.refresh_unchanged()
            logger.info("Upstream unchanged, skipped cache writes")
        return bundle

    async def _write_changed(self, document: dict, payload: str) -> List[str]:
        if await self.store.get(FULL_DATA_KEY) == payload:
            return await self._restore_lapsed(document)

        written: List[str] = []
        for category in CATEGORIES:
            value = serialize(document[category])
            if await self.store.get(category) != value:
                await self.store.put(category, value, self.ttl_seconds)
                written.append(category)

        await self._write_document(payload)
        written.extend([FULL_DATA_KEY, LAST_UPDATED_KEY])
        return written

    async def _restore_lapsed(self, document: dict) -> List[str]:
        # Unchanged categories keep older expiries than full_data, so they can
        # lapse while full_data is still live.
        restored: List[str] = []
        for category in CATEGORIES:
            if await self.store.get(category) is None:
                await self.store.put(category, serialize(document[category]), self.ttl_seconds)
                restored.append(category)
        return restored

    async def _write_all(self, document: dict, payload: str) -> List[str]:
        for category in CATEGORIES:
            await self.store.put(category, serialize(document[category]), self.ttl_seconds)
        await self._write_document(payload)
        return [*CATEGORIES, FULL_DATA_KEY, LAST_UPDATED_KEY]

    async def _write_document(self, payload: str) -> None:
        await self.store.put(FULL_DATA_KEY, payload, self.ttl_seconds)
        await self.store.put(LAST_UPDATED_KEY, utc_timestamp(self.clock()), self.ttl_seconds)
