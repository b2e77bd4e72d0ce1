"""
FastAPI application entry point.

Serves the cached portfolio snapshot to the dashboard.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from portfolio_relay.core.config import settings
from portfolio_relay.core.logging import setup_logging
from portfolio_relay.core.redis import close_redis

# Setup logging
setup_logging()

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Read-through cache for the published portfolio snapshot",
    debug=settings.DEBUG,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
async def shutdown() -> None:
    """Run on application shutdown."""
    await close_redis()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache_backend": settings.CACHE_BACKEND,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


from portfolio_relay.api.portfolio import router as portfolio_router
from portfolio_relay.api.metrics import router as metrics_router

app.include_router(portfolio_router, prefix="/api", tags=["portfolio"])
app.include_router(metrics_router, prefix="/api/metrics", tags=["metrics"])
