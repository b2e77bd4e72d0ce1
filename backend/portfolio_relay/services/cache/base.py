from abc import ABC, abstractmethod
from typing import Optional


class CacheStore(ABC):
    """Key-value store with per-key expiration."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent or expired."""
        raise NotImplementedError

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds."""
        raise NotImplementedError
