"""
Fixed-decimal rendering of trade plans.

Consumers compare the formatted strings directly (for example the
safety margin thresholds), so the number of digits is part of the
output contract: prices use 6 fractional digits, USD amounts,
percentages and risk/reward ratios use 2.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import List

from ..calculator.models import FormattedLimit, FormattedTake, TradePlan, TradeResult
from ..calculator.risk import classify_safety_margin

_PRICE_QUANTUM = Decimal("0.000001")
_USD_QUANTUM = Decimal("0.01")


def _fixed(value: float, quantum: Decimal) -> str:
    """Round the exact binary value half away from zero, like JS `toFixed`."""
    if value == 0:
        value = 0.0  # no "-0.00"
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def fmt_price(value: float) -> str:
    return _fixed(value, _PRICE_QUANTUM)


def fmt_usd(value: float) -> str:
    return _fixed(value, _USD_QUANTUM)


fmt_pct = fmt_usd


def format_plan(plan: TradePlan) -> TradeResult:
    """Render a numeric `TradePlan` into a `TradeResult` of strings."""
    return TradeResult(
        margin=fmt_usd(plan.margin),
        position=fmt_usd(plan.position),
        entry_price=fmt_price(plan.entry_price),
        stop_price=fmt_price(plan.stop_price),
        stop_usd=fmt_usd(plan.stop_usd),
        liquidation_price=fmt_price(plan.liquidation_price),
        liquidation_distance_pct=fmt_pct(plan.liquidation_distance_pct),
        safety_margin_pct=fmt_pct(plan.safety_margin_pct),
        limits=tuple(
            FormattedLimit(price=fmt_price(limit.price), margin=fmt_usd(limit.margin))
            for limit in plan.limits
        ),
        takes=tuple(
            FormattedTake(
                level=take.level,
                price=fmt_price(take.price),
                move_pct=fmt_pct(take.move_pct),
                usd=fmt_usd(take.usd),
                risk_reward=fmt_usd(take.risk_reward),
            )
            for take in plan.takes
        ),
        position_sizing_method=plan.sizing_method,
        position_sizing_note=plan.sizing_note,
    )


def render_text(result: TradeResult) -> str:
    """Plain-text summary of a formatted result, one field per line."""
    level = classify_safety_margin(float(result.safety_margin_pct))
    lines: List[str] = [
        f"Sizing:            {result.position_sizing_method} ({result.position_sizing_note})",
        f"Margin:            {result.margin} USD",
        f"Position:          {result.position} USD",
        f"Entry price:       {result.entry_price}",
        f"Stop price:        {result.stop_price}",
        f"Stop loss:         {result.stop_usd} USD",
        f"Liquidation price: {result.liquidation_price}",
        f"Liquidation dist.: {result.liquidation_distance_pct}%",
        f"Safety margin:     {result.safety_margin_pct}% [{level.value}]",
        "",
        "Limits:",
    ]
    for i, limit in enumerate(result.limits, start=1):
        lines.append(f"  #{i}  price {limit.price}  margin {limit.margin} USD")
    lines.append("")
    lines.append("Take profits:")
    for take in result.takes:
        lines.append(
            f"  TP{take.level}  price {take.price}  move {take.move_pct}%  "
            f"profit {take.usd} USD  R/R {take.risk_reward}"
        )
    return "\n".join(lines)
