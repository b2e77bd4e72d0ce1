"""
Portfolio document schema.

Strict pydantic models for the upstream snapshot and its four categories.
Decimal amounts travel as strings so no float rounding happens between the
upstream file and the dashboard.
"""
import json
import math
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, PlainValidator
from pydantic import ValidationError as PydanticValidationError

from portfolio_relay.core.exceptions import ValidationError

CATEGORIES = ("account", "history", "positions", "activities")


def _json_number(value: Any) -> Union[int, float]:
    # bool is an int subclass but never a JSON number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Input should be a finite number")
    return value


Number = Annotated[Union[int, float], PlainValidator(_json_number)]


class _Strict(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class Account(_Strict):
    cash: str
    equity: str
    portfolioValue: str
    originalInvestment: Number


class HistoryEntry(_Strict):
    timestamp: Number
    equity: Number
    change: Number
    changePercent: Number


class Position(_Strict):
    symbol: str
    qty: str
    marketValue: str
    costBasis: str
    currentPrice: str
    lastdayPrice: str
    changeToday: str


class Activity(_Strict):
    activity_type: str
    transaction_time: str
    type: str
    price: str
    qty: str
    side: str
    symbol: str
    leaves_qty: str
    cum_qty: str
    order_status: str


class PortfolioBundle(_Strict):
    account: Account
    history: list[HistoryEntry]
    positions: list[Position]
    activities: dict[str, list[Activity]]


def _format_issue(error: dict) -> str:
    path = ".".join(str(part) for part in error["loc"]) or "<root>"
    return f"{path}: {error['msg']}"


def validate_bundle(raw: Any) -> PortfolioBundle:
    """
    Validate a decoded JSON value as a portfolio snapshot.

    Raises:
        ValidationError: listing every schema violation found
    """
    try:
        return PortfolioBundle.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError([_format_issue(e) for e in exc.errors()]) from exc


def serialize(value: Any) -> str:
    """
    Canonical JSON text for cache storage and change detection.

    Accepts a model or a plain JSON-compatible value.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
