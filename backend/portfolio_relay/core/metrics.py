"""
Metrics emission for cache observability.

Provides structured metrics for:
- Refresh outcomes (completed, unchanged, failed)
- Read path cache hits and misses

Metrics are emitted to:
1. Python logging (immediate visibility)
2. In-memory buffer (API aggregation)
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


@dataclass
class MetricEvent:
    """Structured metric event."""
    timestamp: datetime
    category: str          # "refresh", "cache"
    event_type: str        # "completed", "miss", etc.
    value: float
    key: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class MetricsEmitter:
    """Emit structured metrics to the log and an in-memory buffer."""

    CATEGORY_REFRESH = "refresh"
    CATEGORY_CACHE = "cache"

    def __init__(self, buffer_size: int = 1000):
        self.buffer_size = buffer_size
        self._buffer: List[MetricEvent] = []

    def emit(
        self,
        category: str,
        event_type: str,
        value: float,
        key: str = None,
        metadata: dict = None
    ) -> MetricEvent:
        """
        Emit a metric event.

        Args:
            category: Event category (refresh, cache)
            event_type: Specific event type within category
            value: Numeric value (1.0 for a single occurrence, counts otherwise)
            key: Optional cache key the event concerns
            metadata: Additional context as key-value pairs

        Returns:
            The emitted MetricEvent
        """
        event = MetricEvent(
            timestamp=datetime.now(timezone.utc),
            category=category,
            event_type=event_type,
            value=value,
            key=key,
            metadata=metadata or {}
        )

        meta_str = f" {metadata}" if metadata else ""
        logger.debug(
            f"METRIC [{category}/{event_type}] "
            f"key={key} value={value}{meta_str}"
        )

        self._buffer.append(event)
        if len(self._buffer) > self.buffer_size:
            self._buffer = self._buffer[-self.buffer_size:]

        return event

    # Refresh metrics
    def refresh_completed(self, written_keys: List[str], strategy: str) -> MetricEvent:
        """Record a refresh that wrote to the store."""
        return self.emit(
            self.CATEGORY_REFRESH, "completed", len(written_keys),
            metadata={"written": written_keys, "strategy": strategy}
        )

    def refresh_unchanged(self) -> MetricEvent:
        """Record a refresh skipped because upstream was unchanged."""
        return self.emit(self.CATEGORY_REFRESH, "unchanged", 1.0)

    def refresh_failed(self, error: Exception) -> MetricEvent:
        """Record a failed refresh."""
        return self.emit(
            self.CATEGORY_REFRESH, "failed", 1.0,
            metadata={"error_type": type(error).__name__}
        )

    # Cache metrics
    def cache_hit(self, key: str) -> MetricEvent:
        return self.emit(self.CATEGORY_CACHE, "hit", 1.0, key=key)

    def cache_miss(self, key: str) -> MetricEvent:
        return self.emit(self.CATEGORY_CACHE, "miss", 1.0, key=key)

    def get_summary(self, hours: int = 24) -> dict:
        """
        Get aggregated summary of recent metrics.

        Args:
            hours: How many hours of data to include

        Returns:
            Dictionary with aggregated metrics
        """
        cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)
        recent = [e for e in self._buffer if e.timestamp >= cutoff]

        by_event: Dict[str, int] = {}
        for event in recent:
            name = f"{event.category}/{event.event_type}"
            by_event[name] = by_event.get(name, 0) + 1

        hits = by_event.get("cache/hit", 0)
        lookups = hits + by_event.get("cache/miss", 0)

        return {
            "period_hours": hours,
            "total_events": len(recent),
            "by_event": by_event,
            "refreshes_completed": by_event.get("refresh/completed", 0),
            "refreshes_unchanged": by_event.get("refresh/unchanged", 0),
            "refreshes_failed": by_event.get("refresh/failed", 0),
            "cache_hit_rate": hits / lookups if lookups > 0 else None,
        }

    def clear_buffer(self) -> int:
        """Clear buffer and return count of cleared events."""
        count = len(self._buffer)
        self._buffer = []
        return count


# Global singleton instance
metrics = MetricsEmitter()
