"""
Static lookup tables used by the calculator.

Price offsets are signed fractions of the current price: negative for
long entries (buy below the market) and positive for short entries
(sell above it).  Margin splits are indexed best price first.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from .models import Direction, LimitStyle

LIMIT_OFFSETS: Mapping[Tuple[Direction, LimitStyle], Tuple[float, ...]] = MappingProxyType({
    (Direction.LONG, LimitStyle.AGGRESSIVE): (-0.002, -0.004, -0.006),
    (Direction.LONG, LimitStyle.EQUAL): (-0.005, -0.010, -0.015),
    (Direction.LONG, LimitStyle.MODERATE): (-0.010, -0.020, -0.030),
    (Direction.SHORT, LimitStyle.AGGRESSIVE): (0.002, 0.004, 0.006),
    (Direction.SHORT, LimitStyle.EQUAL): (0.01, 0.02, 0.04),
    (Direction.SHORT, LimitStyle.MODERATE): (0.02, 0.04, 0.06),
})

# Front-loaded styles put more margin on the best price, back-loaded
# styles on the worst (easiest to fill) one.
MARGIN_SPLITS: Mapping[Tuple[LimitStyle, int], Tuple[float, ...]] = MappingProxyType({
    (LimitStyle.AGGRESSIVE, 2): (0.7, 0.3),
    (LimitStyle.AGGRESSIVE, 3): (0.6, 0.3, 0.1),
    (LimitStyle.MODERATE, 2): (0.4, 0.6),
    (LimitStyle.MODERATE, 3): (0.3, 0.3, 0.4),
})

# Fraction of the position closed at each take-profit level.
TP_SPLITS: Tuple[float, float, float] = (0.40, 0.35, 0.25)


def margin_splits(style: LimitStyle, num_limits: int) -> Tuple[float, ...]:
    """Return the margin fraction for each limit, best price first."""
    if num_limits <= 1:
        return (1.0,)
    if style is LimitStyle.EQUAL:
        return tuple(1.0 / num_limits for _ in range(num_limits))
    return MARGIN_SPLITS[(style, num_limits)]
