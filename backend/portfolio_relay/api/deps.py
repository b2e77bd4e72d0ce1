"""FastAPI dependencies for the portfolio routes."""

from portfolio_relay.core.config import settings
from portfolio_relay.services.cache import get_cache_store
from portfolio_relay.services.portfolio_service import PortfolioService
from portfolio_relay.services.refresh_engine import RefreshEngine
from portfolio_relay.services.upstream import UpstreamClient


def build_portfolio_service() -> PortfolioService:
    """Wire store, upstream client and engine from settings."""
    store = get_cache_store(settings.CACHE_BACKEND)
    engine = RefreshEngine(store=store, upstream=UpstreamClient())
    return PortfolioService(store=store, engine=engine)


def get_portfolio_service() -> PortfolioService:
    return build_portfolio_service()
