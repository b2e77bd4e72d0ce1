"""
Presentation adjustments applied after the read path.

Nothing here touches the cache; transforms operate on copies of values
about to be returned to the dashboard.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

OFFSET_FIELDS = ("equity", "portfolioValue")


def apply_equity_offset(account: Dict[str, Any], offset: Decimal) -> Dict[str, Any]:
    """
    Subtract a fixed offset from equity and portfolioValue.

    Values stay decimal strings; the result keeps at least the input's
    number of decimal places. Fields that are not decimal strings are left
    as they are.
    """
    if not offset:
        return account

    adjusted = dict(account)
    for name in OFFSET_FIELDS:
        raw = adjusted.get(name)
        if not isinstance(raw, str):
            continue
        try:
            adjusted[name] = format(Decimal(raw) - offset, "f")
        except InvalidOperation:
            continue
    return adjusted
