"""
Portfolio API Router.

Every route answers with a {success, ...} envelope. Core failures become
{success: false, error} with status 500 so the dashboard can keep showing
what it already has.
"""
import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio_relay.api.deps import get_portfolio_service
from portfolio_relay.core.config import settings
from portfolio_relay.core.exceptions import PortfolioRelayError
from portfolio_relay.services.display import apply_equity_offset
from portfolio_relay.services.portfolio_service import PortfolioService

router = APIRouter()
logger = logging.getLogger(__name__)


def _cacheable(body: dict) -> JSONResponse:
    return JSONResponse(
        content=body,
        headers={"Cache-Control": f"public, max-age={settings.CLIENT_CACHE_MAX_AGE}"},
    )


def _error(path: str, exc: PortfolioRelayError) -> JSONResponse:
    logger.error("Error in %s: %s", path, exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message},
        headers={"Cache-Control": "no-store"},
    )


def _display_account(account: Any) -> Any:
    if isinstance(account, dict):
        return apply_equity_offset(account, settings.DISPLAY_EQUITY_OFFSET)
    return account


# ---------- Endpoints ----------

@router.get("/portfolio")
async def get_portfolio(service: PortfolioService = Depends(get_portfolio_service)):
    """Full snapshot plus the time of the last refresh."""
    try:
        bundle, last_updated = await service.get_full_bundle()
    except PortfolioRelayError as exc:
        return _error("/api/portfolio", exc)

    data = bundle.model_dump(mode="json")
    data["account"] = _display_account(data["account"])
    return _cacheable({"success": True, "data": data, "lastUpdated": last_updated})


async def _category_response(
    service: PortfolioService, category: str, transform: Optional[Callable[[Any], Any]] = None
) -> JSONResponse:
    try:
        data = await service.get_resource(category)
    except PortfolioRelayError as exc:
        return _error(f"/api/{category}", exc)

    if transform is not None:
        data = transform(data)
    return _cacheable({"success": True, "data": data})


@router.get("/account")
async def get_account(service: PortfolioService = Depends(get_portfolio_service)):
    return await _category_response(service, "account", _display_account)


@router.get("/history")
async def get_history(service: PortfolioService = Depends(get_portfolio_service)):
    return await _category_response(service, "history")


@router.get("/positions")
async def get_positions(service: PortfolioService = Depends(get_portfolio_service)):
    return await _category_response(service, "positions")


@router.get("/activities")
async def get_activities(service: PortfolioService = Depends(get_portfolio_service)):
    return await _category_response(service, "activities")


@router.post("/refresh")
async def refresh(service: PortfolioService = Depends(get_portfolio_service)):
    """Bypass the cache and pull upstream now."""
    try:
        bundle = await service.force_refresh()
    except PortfolioRelayError as exc:
        return _error("/api/refresh", exc)

    return JSONResponse(
        content={
            "success": True,
            "message": "Data refreshed successfully",
            "data": bundle.model_dump(mode="json"),
        },
        headers={"Cache-Control": "no-store"},
    )
