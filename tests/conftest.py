"""
Pytest configuration and fixtures for the portfolio cache tests.

This module provides:
- A valid upstream snapshot and a mutable upstream stub (httpx.MockTransport)
- An in-memory store with a controllable clock and a write log
- Engine, service and API client fixtures wired to the fakes
"""

import copy
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from portfolio_relay.api.deps import get_portfolio_service
from portfolio_relay.api.main import app
from portfolio_relay.core.exceptions import StoreError
from portfolio_relay.core.metrics import metrics
from portfolio_relay.services.cache import InMemoryCacheStore
from portfolio_relay.services.portfolio_service import PortfolioService
from portfolio_relay.services.refresh_engine import RefreshEngine
from portfolio_relay.services.upstream import UpstreamClient

UPSTREAM_URL = "https://data.example.test/portfolio.json"
TTL_SECONDS = 60


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================


SCENARIO_DOCUMENT = {
    "account": {
        "cash": "100.00",
        "equity": "500.00",
        "portfolioValue": "600.00",
        "originalInvestment": 500,
    },
    "history": [
        {"timestamp": 1700000000, "equity": 500, "change": 0, "changePercent": 0},
    ],
    "positions": [],
    "activities": {},
}


FULL_DOCUMENT = {
    "account": {
        "cash": "2500.50",
        "equity": "10250.75",
        "portfolioValue": "12751.25",
        "originalInvestment": 10000,
    },
    "history": [
        {"timestamp": 1700000000, "equity": 10000, "change": 0, "changePercent": 0},
        {"timestamp": 1700086400, "equity": 10120.5, "change": 120.5, "changePercent": 1.205},
        {"timestamp": 1700172800, "equity": 10250.75, "change": 130.25, "changePercent": 1.287},
    ],
    "positions": [
        {
            "symbol": "AAPL",
            "qty": "10",
            "marketValue": "1855.00",
            "costBasis": "1800.00",
            "currentPrice": "185.50",
            "lastdayPrice": "184.25",
            "changeToday": "0.0068",
        },
    ],
    "activities": {
        "2023-11-16": [
            {
                "activity_type": "FILL",
                "transaction_time": "2023-11-16T14:30:00Z",
                "type": "fill",
                "price": "180.00",
                "qty": "10",
                "side": "buy",
                "symbol": "AAPL",
                "leaves_qty": "0",
                "cum_qty": "10",
                "order_status": "filled",
            },
        ],
    },
}


@pytest.fixture
def document() -> dict:
    """A fresh copy of the full sample snapshot."""
    return copy.deepcopy(FULL_DOCUMENT)


# =============================================================================
# CLOCKS
# =============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


FIXED_NOW = datetime(2024, 6, 15, 14, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# STORE FAKES
# =============================================================================


class RecordingStore(InMemoryCacheStore):
    """In-memory store that logs every put."""

    def __init__(self, clock):
        super().__init__(clock=clock)
        self.writes: List[str] = []
        self.ttls: List[int] = []

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self.writes.append(key)
        self.ttls.append(ttl_seconds)
        await super().put(key, value, ttl_seconds)


class DroppingStore(RecordingStore):
    """Store whose writes silently never land."""

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self.writes.append(key)


class UnreachableStore(RecordingStore):
    """Store whose backend refuses every command."""

    async def get(self, key: str) -> Optional[str]:
        raise StoreError(f"Cache read failed for {key}: connection refused")

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        raise StoreError(f"Cache write failed for {key}: connection refused")


@pytest.fixture
def store(clock) -> RecordingStore:
    return RecordingStore(clock)


# =============================================================================
# UPSTREAM STUB
# =============================================================================


class UpstreamStub:
    """
    Programmable upstream file host.

    Serves `document` as JSON unless `body`, `status_code` or `error`
    say otherwise.
    """

    def __init__(self, document: Any):
        self.document = document
        self.status_code = 200
        self.body: Optional[str] = None
        self.error: Optional[Exception] = None
        self.calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.document)

    def client(self) -> UpstreamClient:
        return UpstreamClient(
            url=UPSTREAM_URL,
            timeout_sec=1.0,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def upstream(document) -> UpstreamStub:
    return UpstreamStub(document)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_metrics():
    """Metrics are a process-wide singleton."""
    metrics.clear_buffer()
    yield
    metrics.clear_buffer()


@pytest.fixture
def engine(store, upstream) -> RefreshEngine:
    return RefreshEngine(
        store=store,
        upstream=upstream.client(),
        ttl_seconds=TTL_SECONDS,
        strategy="diff",
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def portfolio_service(store, engine) -> PortfolioService:
    return PortfolioService(store=store, engine=engine)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(portfolio_service) -> TestClient:
    """FastAPI test client with the service wired to the fakes."""
    app.dependency_overrides[get_portfolio_service] = lambda: portfolio_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
