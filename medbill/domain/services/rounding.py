# medbill/domain/services/rounding.py
"""
Rounding primitives shared by every billing calculation.

All monetary values are floats at two-decimal resolution.  Standard
rounding nudges the value by machine epsilon before scaling so that
figures such as 1.005, stored as 1.00499999..., still round half-up to
1.01.  Ties round toward +infinity, matching how invoice figures have
always been rounded at the counter.
"""

from __future__ import annotations

import math
import sys
from enum import Enum

EPSILON = sys.float_info.epsilon


class RoundingMethod(str, Enum):
    ROUND = "round"
    CEIL = "ceil"
    FLOOR = "floor"
    NEAREST_05 = "nearest05"
    NEAREST_50 = "nearest50"
    NEAREST_1 = "nearest1"


_INCREMENTS = {
    RoundingMethod.NEAREST_05: 0.05,
    RoundingMethod.NEAREST_50: 0.50,
    RoundingMethod.NEAREST_1: 1,
}


def _half_up(value: float) -> float:
    return math.floor(value + 0.5)


def round_value(value: float, decimals: int = 2) -> float:
    """Round half-up to ``decimals`` places after an epsilon nudge."""
    factor = 10 ** decimals
    return _half_up((value + EPSILON) * factor) / factor


def round_up(value: float, decimals: int = 2) -> float:
    factor = 10 ** decimals
    # drop float noise first so 1.1 * 100 does not ceil to 111
    return math.ceil(round(value * factor, 9)) / factor


def round_down(value: float, decimals: int = 2) -> float:
    factor = 10 ** decimals
    return math.floor(round(value * factor, 9)) / factor


def _increment_decimals(increment: float) -> int:
    text = repr(float(increment))
    if "e" in text or "E" in text:
        return 10
    return max(2, len(text.split(".")[1].rstrip("0")))


def round_to_nearest(value: float, increment: float = 1) -> float:
    """Round to the nearest multiple of ``increment`` (0.05, 0.5, 1, ...)."""
    if increment <= 0:
        return round_value(value)
    steps = _half_up(value / increment)
    # 3 * 0.05 is 0.15000000000000002 in binary; trim back to the increment's resolution
    return round_value(steps * increment, _increment_decimals(increment))


def apply_policy(value: float, method: RoundingMethod | str = RoundingMethod.ROUND) -> float:
    """Round ``value`` with one of the supported methods.

    Unknown method names fall back to standard two-decimal rounding.
    """
    try:
        method = RoundingMethod(method)
    except ValueError:
        method = RoundingMethod.ROUND

    if method == RoundingMethod.CEIL:
        return round_up(value)
    if method == RoundingMethod.FLOOR:
        return round_down(value)
    if method in _INCREMENTS:
        return round_to_nearest(value, _INCREMENTS[method])
    return round_value(value)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)
