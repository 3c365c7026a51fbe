"""Take-profit levels."""

from __future__ import annotations

from typing import Sequence, Tuple

from .models import Direction, TakeProfit
from .tables import TP_SPLITS


def compute_takes(
    direction: Direction,
    entry_price: float,
    position: float,
    stop_usd: float,
    tp_percents: Sequence[float],
) -> Tuple[TakeProfit, ...]:
    """Build one take-profit per entry of `tp_percents`, levels numbered from 1.

    Each level closes a fixed share of the position (`TP_SPLITS`).  The
    risk/reward ratio is the level's profit over the stop loss in USD, or
    zero when there is no risk to compare against.
    """
    takes = []
    for i, tp in enumerate(tp_percents):
        usd = position * tp * TP_SPLITS[i]
        if direction is Direction.LONG:
            price = entry_price * (1 + tp)
        else:
            price = entry_price * (1 - tp)
        takes.append(TakeProfit(
            level=i + 1,
            price=price,
            move_pct=tp * 100,
            usd=usd,
            risk_reward=usd / stop_usd if stop_usd > 0 else 0.0,
        ))
    return tuple(takes)
