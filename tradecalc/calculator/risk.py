"""
Stop-loss, liquidation and safety-margin metrics.

Liquidation uses a simplified linear model, ``entry * (1 -/+ 1/leverage)``,
which ignores funding, fees and maintenance margin.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .models import Direction

if TYPE_CHECKING:
    from .models import TradeResult

SAFETY_DANGER_PCT = 2.0
SAFETY_CAUTION_PCT = 5.0


class SafetyLevel(str, Enum):
    DANGER = "danger"
    CAUTION = "caution"
    SAFE = "safe"


@dataclass(frozen=True)
class RiskMetrics:
    stop_price: float
    stop_usd: float
    liquidation_price: float
    liquidation_distance_pct: float
    safety_margin_pct: float


def stop_price(direction: Direction, entry_price: float, stop_risk: float) -> float:
    if direction is Direction.LONG:
        return entry_price * (1 - stop_risk)
    return entry_price * (1 + stop_risk)


def liquidation_price(direction: Direction, entry_price: float, leverage: float) -> float:
    if direction is Direction.LONG:
        return entry_price * (1 - 1 / leverage)
    return entry_price * (1 + 1 / leverage)


def compute_risk_metrics(
    direction: Direction,
    entry_price: float,
    position: float,
    leverage: float,
    stop_risk: float,
) -> RiskMetrics:
    """Compute stop, liquidation and the buffer between them.

    The safety margin is the distance from the stop to liquidation as a
    percentage of the entry price.  It is positive while the stop would
    trigger before liquidation.
    """
    stop = stop_price(direction, entry_price, stop_risk)
    liquidation = liquidation_price(direction, entry_price, leverage)

    if direction is Direction.LONG:
        distance = (entry_price - liquidation) / entry_price * 100
        safety = (stop - liquidation) / entry_price * 100
    else:
        distance = (liquidation - entry_price) / entry_price * 100
        safety = (liquidation - stop) / entry_price * 100

    return RiskMetrics(
        stop_price=stop,
        stop_usd=position * stop_risk,
        liquidation_price=liquidation,
        liquidation_distance_pct=abs(distance),
        safety_margin_pct=safety,
    )


def classify_safety_margin(safety_margin_pct: float) -> SafetyLevel:
    """Map a safety margin percentage to a warning level."""
    if safety_margin_pct < SAFETY_DANGER_PCT:
        return SafetyLevel.DANGER
    if safety_margin_pct < SAFETY_CAUTION_PCT:
        return SafetyLevel.CAUTION
    return SafetyLevel.SAFE


def safety_level(result: "TradeResult") -> SafetyLevel:
    """Classify a formatted result using only its `safety_margin_pct` string."""
    return classify_safety_margin(float(result.safety_margin_pct))
