"""Monetary coercion and display helpers.

Pure Python, Decimal arithmetic. Loose snapshot values (strings, floats,
None, garbage) are coerced with a single rule: anything that is not a
finite number becomes zero.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_amount(value: Any) -> Decimal:
    """Coerce a loose value to Decimal; missing, invalid or non-finite → 0."""
    if value is None or isinstance(value, bool) or value == "":
        return ZERO
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return ZERO
    if not d.is_finite():
        return ZERO
    return d


def to_optional_amount(value: Any) -> Decimal | None:
    """Like `to_amount`, but None when the value is absent or not a finite number."""
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return d if d.is_finite() else None


def non_negative(value: Decimal) -> Decimal:
    """Clamp to ≥ 0."""
    return value if value > ZERO else ZERO


def to_cents(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | int | float | None) -> str:
    """Format with grouping and exactly two fraction digits: 1080000 -> "1,080,000.00"."""
    d = to_amount(value)
    return f"{to_cents(d):,.2f}"
