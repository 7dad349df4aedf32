# procure_pricing/core/money.py
"""
Decimal helpers shared by the pricing engine.

Every numeric input coming from a form or an API payload goes through
``to_decimal``: missing, blank or non-numeric values become zero, the same
way the portal's pricing screens treat half-typed input.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


def to_decimal(val: Any) -> Decimal:
    """Safely convert a value to Decimal (anything unusable -> 0)."""
    if val is None or val == "":
        return ZERO
    if isinstance(val, bool):
        return Decimal(int(val))
    try:
        result = val if isinstance(val, Decimal) else Decimal(str(val).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round2(val: Decimal) -> Decimal:
    """Round half-up to 2 decimal places.

    Non-finite values, and values too large to carry two decimals at the
    current precision, pass through unrounded.
    """
    if not val.is_finite():
        return val
    try:
        return val.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return val
