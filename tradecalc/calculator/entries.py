"""
Limit entry construction.

Spreads the margin over up to three resting limit orders around the
current price and derives the averaged fill price of the position.
"""

from __future__ import annotations

from typing import List, Tuple

from .models import Direction, LimitEntry, LimitStyle
from .tables import LIMIT_OFFSETS, margin_splits


def ordered_offsets(direction: Direction, style: LimitStyle, num_limits: int) -> List[float]:
    """Return the first `num_limits` offsets, best price first.

    The best price is the lowest one for a long (buy cheaper) and the
    highest one for a short (sell dearer).
    """
    offsets = list(LIMIT_OFFSETS[(direction, style)][:num_limits])
    offsets.sort(reverse=direction is Direction.SHORT)
    return offsets


def build_limits(
    direction: Direction,
    current_price: float,
    num_limits: int,
    style: LimitStyle,
    margin: float,
) -> Tuple[Tuple[LimitEntry, ...], float]:
    """Build the limit orders and the weighted-average entry price.

    Parameters
    ----------
    direction : Direction
        Trade side.
    current_price : float
        Reference market price.
    num_limits : int
        Number of limits, ``0`` for a single entry at `current_price`.
    style : LimitStyle
        Selects both the offset table and the margin distribution.
    margin : float
        Total margin to spread over the limits.

    Returns
    -------
    limits : tuple of LimitEntry
        Orders sorted best price first.
    entry_price : float
        Average fill price weighted by each order's margin split.
    """
    if num_limits == 0:
        return (LimitEntry(price=current_price, margin=margin, split=1.0),), current_price

    splits = margin_splits(style, num_limits)
    offsets = ordered_offsets(direction, style, num_limits)

    limits = tuple(
        LimitEntry(price=current_price * (1 + offset), margin=margin * split, split=split)
        for offset, split in zip(offsets, splits)
    )
    weighted = sum(limit.price * limit.split for limit in limits)
    entry_price = weighted / sum(splits)
    return limits, entry_price
