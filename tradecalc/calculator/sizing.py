"""
Position sizing.

Turns the deposit and the selected sizing method into the margin (USD
collateral) committed to the trade.  Each method also produces a short
label and a parameter summary that are shown next to the plan.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .models import (
    FixedFractionalSizing,
    KellySizing,
    RiskParitySizing,
    TradeParameters,
    VolatilitySizing,
)


logger = logging.getLogger(__name__)

KELLY_DAMPING = 0.5
KELLY_CAP = 0.25
VOLATILITY_MIN_MARGIN_PCT = 0.01


@dataclass(frozen=True)
class SizingOutcome:
    """Margin chosen by a sizing method plus its display label and note."""
    margin: float
    method_name: str
    note: str


def kelly_fraction(win_rate: float, avg_win_loss_ratio: float) -> float:
    """Full Kelly fraction ``(b*p - q) / b``.  May be negative."""
    p = win_rate
    q = 1.0 - p
    b = avg_win_loss_ratio
    return (b * p - q) / b


def _plain_number(value: float) -> str:
    """Shortest round-trip text of a number, without a trailing `.0`."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _fixed(params: TradeParameters) -> SizingOutcome:
    return SizingOutcome(
        margin=params.deposit * params.deposit_risk,
        method_name="Fixed Risk",
        note=f"{params.deposit_risk * 100:.1f}% of deposit",
    )


def compute_margin(params: TradeParameters) -> SizingOutcome:
    """Compute the trade margin for the sizing method in `params.sizing`.

    Parameters
    ----------
    params : TradeParameters
        Validated calculator input.

    Returns
    -------
    SizingOutcome
        The margin in USD and a human-readable description of how it was
        obtained.  A negative Kelly edge yields a zero margin rather than
        an error.
    """
    sizing = params.sizing
    deposit = params.deposit

    if isinstance(sizing, KellySizing):
        raw = kelly_fraction(sizing.win_rate, sizing.avg_win_loss_ratio)
        safe = max(0.0, min(raw * KELLY_DAMPING, KELLY_CAP))
        if raw < 0:
            logger.debug("Kelly fraction %.4f is negative, sizing clamped to zero", raw)
        outcome = SizingOutcome(
            margin=deposit * safe,
            method_name="Kelly Criterion (Half-Kelly)",
            note=f"Win Rate: {sizing.win_rate * 100:.1f}%, Win/Loss: {sizing.avg_win_loss_ratio:.2f}x",
        )
    elif isinstance(sizing, FixedFractionalSizing):
        outcome = SizingOutcome(
            margin=deposit * sizing.fixed_fraction,
            method_name="Fixed Fractional",
            note=f"{sizing.fixed_fraction * 100:.1f}% of account per trade",
        )
    elif isinstance(sizing, VolatilitySizing) and sizing.atr_value > 0:
        # Higher volatility relative to price shrinks the position
        volatility_factor = sizing.atr_value * sizing.atr_multiplier
        base_risk = deposit * params.deposit_risk
        adjusted = base_risk / (1 + volatility_factor / params.current_price)
        outcome = SizingOutcome(
            margin=max(adjusted, deposit * VOLATILITY_MIN_MARGIN_PCT),
            method_name="Volatility-Based (ATR)",
            note=f"ATR: {sizing.atr_value:.6f}, Multiplier: {_plain_number(sizing.atr_multiplier)}x",
        )
    elif isinstance(sizing, RiskParitySizing):
        outcome = SizingOutcome(
            margin=deposit * sizing.target_risk_pct,
            method_name="Risk Parity",
            note=f"{sizing.target_risk_pct * 100:.1f}% risk per trade",
        )
    else:
        if isinstance(sizing, VolatilitySizing):
            logger.debug("ATR is not positive, volatility sizing falls back to fixed risk")
        outcome = _fixed(params)

    logger.debug("Sizing method %s -> margin %.2f (%s)", outcome.method_name, outcome.margin, outcome.note)
    return outcome
