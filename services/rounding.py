"""Rounding rule shared by recipe scaling and nutrition totals.

Values are rounded half-up on their shortest decimal representation, so
`2.0005` becomes `2.001` rather than whatever the binary float happens to
be closest to. Repeated runs over the same input give the same digits.
"""

from decimal import Decimal, ROUND_HALF_UP

from core.config import SCALE_DECIMAL_PLACES

# Beyond this magnitude a float carries no fractional digits worth keeping.
_MAX_QUANTIZABLE = 1e15


def round_half_up(value: float, places: int = SCALE_DECIMAL_PLACES) -> float:
    """Round `value` to `places` decimals, ties away from zero."""
    if abs(value) >= _MAX_QUANTIZABLE:
        return float(value)
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up_int(value: float) -> int:
    """Round `value` to the nearest integer, ties away from zero."""
    return int(Decimal(repr(float(value))).quantize(Decimal(1), rounding=ROUND_HALF_UP))
