"""
Trade plan calculator.

This module exposes the single calculation entry point.  Given a
validated `TradeParameters` it performs, in order: position sizing,
limit construction with the weighted entry price, stop-loss,
liquidation and safety metrics, and the take-profit levels.

The calculation is a pure function of its input.  It keeps no state
and may be called concurrently from any number of threads.
"""

from __future__ import annotations

from typing import Any, Mapping
import logging

from ..reporting.formatting import format_plan
from .entries import build_limits
from .errors import ValidationError
from .models import TradeParameters, TradePlan, TradeResult, sizing_from_options
from .risk import SafetyLevel, classify_safety_margin, compute_risk_metrics
from .sizing import compute_margin
from .takes import compute_takes


logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("deposit", "direction", "current_price", "leverage")
_PARAMETER_KEYS = ("num_limits", "limit_style", "deposit_risk", "stop_risk", "tp_percents")
_SIZING_KEYS = ("win_rate", "avg_win_loss_ratio", "fixed_fraction", "atr_value", "atr_multiplier", "target_risk_pct")


def calculate_plan(params: TradeParameters) -> TradePlan:
    """Compute the full-precision trade plan for `params`."""
    sizing = compute_margin(params)
    margin = sizing.margin
    position = margin * params.leverage

    limits, entry_price = build_limits(
        params.direction,
        params.current_price,
        params.num_limits,
        params.limit_style,
        margin,
    )
    risk = compute_risk_metrics(
        params.direction,
        entry_price,
        position,
        params.leverage,
        params.stop_risk,
    )
    takes = compute_takes(
        params.direction,
        entry_price,
        position,
        risk.stop_usd,
        params.tp_percents,
    )

    logger.debug(
        "%s plan: margin=%.2f position=%.2f entry=%.6f stop=%.6f liq=%.6f",
        params.direction.value,
        margin,
        position,
        entry_price,
        risk.stop_price,
        risk.liquidation_price,
    )
    if classify_safety_margin(risk.safety_margin_pct) is SafetyLevel.DANGER:
        logger.warning(
            "Safety margin %.2f%% between stop and liquidation is dangerously thin",
            risk.safety_margin_pct,
        )

    return TradePlan(
        direction=params.direction,
        margin=margin,
        position=position,
        entry_price=entry_price,
        stop_price=risk.stop_price,
        stop_usd=risk.stop_usd,
        liquidation_price=risk.liquidation_price,
        liquidation_distance_pct=risk.liquidation_distance_pct,
        safety_margin_pct=risk.safety_margin_pct,
        limits=limits,
        takes=takes,
        sizing_method=sizing.method_name,
        sizing_note=sizing.note,
    )


def calculate_trade(params: TradeParameters) -> TradeResult:
    """Compute the trade plan and return it as fixed-decimal strings."""
    return format_plan(calculate_plan(params))


def parameters_from_mapping(values: Mapping[str, Any]) -> TradeParameters:
    """Build `TradeParameters` from the flat keyword shape used by forms.

    Recognised keys are the `TradeParameters` fields plus
    ``position_sizing`` and the per-method sizing options.  Missing
    optional keys (or `None` values) take their defaults; unknown keys
    are rejected.
    """
    known = set(_REQUIRED_KEYS) | set(_PARAMETER_KEYS) | set(_SIZING_KEYS) | {"position_sizing"}
    for key in values:
        if key not in known:
            raise ValidationError(key, "unknown parameter")
    for key in _REQUIRED_KEYS:
        if values.get(key) is None:
            raise ValidationError(key, "is required")

    kwargs = {key: values[key] for key in _REQUIRED_KEYS}
    kwargs.update({key: values[key] for key in _PARAMETER_KEYS if values.get(key) is not None})
    kwargs["sizing"] = sizing_from_options(
        values.get("position_sizing"),
        **{key: values.get(key) for key in _SIZING_KEYS},
    )
    return TradeParameters(**kwargs)


def calculate_trade_from_mapping(values: Mapping[str, Any]) -> TradeResult:
    return calculate_trade(parameters_from_mapping(values))
