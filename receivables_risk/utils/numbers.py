"""Numeric coercion and rounding helpers"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal

# Enough digits to quantize any finite float without InvalidOperation
_WIDE_CONTEXT = Context(prec=400)


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (Python's round() is banker's rounding)"""
    return math.floor(value + 0.5)


def format_half_up(value: float, places: int = 1) -> str:
    """
    Fixed-point text with exact ties rounded away from zero ("2.25" -> "2.3").

    Format specs like `:.1f` round ties to even, which renders 2.25 as "2.2".
    """
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT))


def safe_float(text: str | None, default: float = 0.0) -> float:
    """Parse a float, mapping empty, malformed, NaN and infinite input to default"""
    if text is None:
        return default
    try:
        value = float(text.strip())
    except (ValueError, AttributeError):
        return default
    return value if math.isfinite(value) else default


def safe_int(text: str | None, default: int = 0) -> int:
    """Parse an integer count; decimal text is truncated ("2.7" -> 2)"""
    value = safe_float(text, float(default))
    return int(value)
