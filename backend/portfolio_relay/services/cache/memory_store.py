import time
from typing import Callable, Dict, Optional, Tuple

from portfolio_relay.services.cache.base import CacheStore


class InMemoryCacheStore(CacheStore):
    """
    Process-local cache store.

    Entries live in this process only; a Celery worker refreshing its own
    instance never populates the one the API reads from.

    Expiry is evaluated lazily on read against an injectable monotonic clock,
    so tests can advance time without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def expires_at(self, key: str) -> Optional[float]:
        """Expiry timestamp of a key, expired or not."""
        entry = self._entries.get(key)
        return entry[1] if entry else None

    def __len__(self) -> int:
        return len(self._entries)
