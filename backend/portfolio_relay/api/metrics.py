"""
Metrics API endpoint for the cache dashboard.
"""
from typing import Optional
from fastapi import APIRouter, Query
from pydantic import BaseModel

from portfolio_relay.core.metrics import metrics

router = APIRouter()


class MetricsSummary(BaseModel):
    """Summary of cache metrics over a time period."""
    period_hours: int
    total_events: int
    by_event: dict
    refreshes_completed: int
    refreshes_unchanged: int
    refreshes_failed: int
    cache_hit_rate: Optional[float]


@router.get("/summary", response_model=MetricsSummary)
async def get_metrics_summary(
    hours: int = Query(default=24, ge=1, le=168, description="Hours of history to include")
) -> MetricsSummary:
    """Counts of refresh outcomes and cache lookups."""
    summary = metrics.get_summary(hours=hours)
    return MetricsSummary(**summary)
