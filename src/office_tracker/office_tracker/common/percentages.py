from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0):
    """Round like a browser's ``Math.round`` (halves away from zero for positives).

    Returns an ``int`` when ``digits`` is 0.
    """

    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def percentage(part: float, whole: float) -> int:
    """``round(part / whole * 100)``; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0
    return round_half_up(part * 100 / whole)


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))
