"""
Trade plan input and output models.

These dataclasses represent the values passed into and returned from
the calculator.  All of them are frozen: a plan is computed once per
call and never mutated afterwards.  Input validation happens in
`__post_init__` so an invalid `TradeParameters` can never be built.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union
import math

from .errors import ConfigurationError, ValidationError

MAX_LIMITS = 3


class Direction(str, Enum):
    """Trade side."""
    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: Union[str, "Direction"]) -> "Direction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError("direction", f"unknown direction {value!r}, expected 'long' or 'short'") from None


class LimitStyle(str, Enum):
    """How limit prices are spread and how margin is distributed over them."""
    AGGRESSIVE = "aggressive"  # front-loaded: most margin at the best price
    EQUAL = "equal"
    MODERATE = "moderate"  # back-loaded: most margin at the easiest fill

    @classmethod
    def parse(cls, value: Union[str, "LimitStyle"]) -> "LimitStyle":
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = _LIMIT_STYLE_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                "limit_style",
                f"unknown limit style {value!r}, expected one of "
                "aggressive/increasing, equal, moderate/decreasing",
            ) from None


_LIMIT_STYLE_ALIASES = {
    "increasing": "aggressive",
    "decreasing": "moderate",
}


class SizingMethod(str, Enum):
    FIXED = "fixed"
    KELLY = "kelly"
    FIXED_FRACTIONAL = "fixed_fractional"
    VOLATILITY = "volatility"
    RISK_PARITY = "risk_parity"

    @classmethod
    def parse(cls, value: Union[str, "SizingMethod"]) -> "SizingMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError("position_sizing", f"unknown sizing method {value!r}, expected one of {choices}") from None


def _number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(name, f"expected a number, got {value!r}")
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(name, f"must be finite, got {value!r}")
    return number


def _positive(name: str, value: Any) -> float:
    number = _number(name, value)
    if number <= 0:
        raise ValidationError(name, f"must be positive, got {value!r}")
    return number


def _fraction(name: str, value: Any, allow_zero: bool = True) -> float:
    number = _number(name, value)
    low_ok = number >= 0 if allow_zero else number > 0
    if not low_ok or number > 1:
        interval = "[0, 1]" if allow_zero else "(0, 1]"
        raise ValidationError(name, f"must be in {interval}, got {value!r}")
    return number


# --- Position sizing variants ---------------------------------------------

@dataclass(frozen=True)
class FixedSizing:
    """Margin is `deposit * deposit_risk`."""
    method: ClassVar[SizingMethod] = SizingMethod.FIXED


@dataclass(frozen=True)
class KellySizing:
    """Half-Kelly sizing from a historical win rate and payoff ratio."""
    win_rate: float = 0.5
    avg_win_loss_ratio: float = 2.0
    method: ClassVar[SizingMethod] = SizingMethod.KELLY

    def __post_init__(self) -> None:
        object.__setattr__(self, "win_rate", _fraction("win_rate", self.win_rate))
        object.__setattr__(self, "avg_win_loss_ratio", _positive("avg_win_loss_ratio", self.avg_win_loss_ratio))


@dataclass(frozen=True)
class FixedFractionalSizing:
    fixed_fraction: float = 0.02
    method: ClassVar[SizingMethod] = SizingMethod.FIXED_FRACTIONAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "fixed_fraction", _fraction("fixed_fraction", self.fixed_fraction))


@dataclass(frozen=True)
class VolatilitySizing:
    """ATR-damped fixed risk.  A zero ATR falls back to fixed sizing."""
    atr_value: float = 0.0
    atr_multiplier: float = 2.0
    method: ClassVar[SizingMethod] = SizingMethod.VOLATILITY

    def __post_init__(self) -> None:
        atr_value = _number("atr_value", self.atr_value)
        if atr_value < 0:
            raise ValidationError("atr_value", f"must not be negative, got {self.atr_value!r}")
        object.__setattr__(self, "atr_value", atr_value)
        object.__setattr__(self, "atr_multiplier", _positive("atr_multiplier", self.atr_multiplier))


@dataclass(frozen=True)
class RiskParitySizing:
    target_risk_pct: float = 0.02
    method: ClassVar[SizingMethod] = SizingMethod.RISK_PARITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_risk_pct", _fraction("target_risk_pct", self.target_risk_pct))


SizingConfig = Union[FixedSizing, KellySizing, FixedFractionalSizing, VolatilitySizing, RiskParitySizing]

_SIZING_CLASSES = {
    SizingMethod.FIXED: FixedSizing,
    SizingMethod.KELLY: KellySizing,
    SizingMethod.FIXED_FRACTIONAL: FixedFractionalSizing,
    SizingMethod.VOLATILITY: VolatilitySizing,
    SizingMethod.RISK_PARITY: RiskParitySizing,
}

_SIZING_OPTIONS = {
    SizingMethod.FIXED: (),
    SizingMethod.KELLY: ("win_rate", "avg_win_loss_ratio"),
    SizingMethod.FIXED_FRACTIONAL: ("fixed_fraction",),
    SizingMethod.VOLATILITY: ("atr_value", "atr_multiplier"),
    SizingMethod.RISK_PARITY: ("target_risk_pct",),
}


def sizing_from_options(method: Union[str, SizingMethod, None] = None, **options: Any) -> SizingConfig:
    """Build a sizing variant from a flat method name and keyword options.

    Options that do not belong to the selected method are ignored, and
    `None` values fall back to the variant's defaults.  This is the shape
    configuration files and the CLI provide.
    """
    selected = SizingMethod.FIXED if method is None else SizingMethod.parse(method)
    kwargs = {
        name: options[name]
        for name in _SIZING_OPTIONS[selected]
        if options.get(name) is not None
    }
    return _SIZING_CLASSES[selected](**kwargs)


# --- Calculator input --------------------------------------------------------

@dataclass(frozen=True)
class TradeParameters:
    """Everything the calculator needs to build one trade plan."""
    deposit: float
    direction: Direction
    current_price: float
    leverage: float
    num_limits: int = 2
    limit_style: LimitStyle = LimitStyle.AGGRESSIVE
    deposit_risk: float = 0.143
    stop_risk: float = 0.05
    tp_percents: Tuple[float, float, float] = (0.04, 0.09, 0.16)
    sizing: SizingConfig = field(default_factory=FixedSizing)

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "deposit", _positive("deposit", self.deposit))
        set_(self, "direction", Direction.parse(self.direction))
        set_(self, "current_price", _positive("current_price", self.current_price))
        set_(self, "leverage", _positive("leverage", self.leverage))

        if isinstance(self.num_limits, bool) or not isinstance(self.num_limits, int):
            raise ValidationError("num_limits", f"expected an integer, got {self.num_limits!r}")
        if not 0 <= self.num_limits <= MAX_LIMITS:
            raise ValidationError("num_limits", f"must be between 0 and {MAX_LIMITS}, got {self.num_limits}")

        set_(self, "limit_style", LimitStyle.parse(self.limit_style))
        set_(self, "deposit_risk", _fraction("deposit_risk", self.deposit_risk, allow_zero=False))
        set_(self, "stop_risk", _fraction("stop_risk", self.stop_risk))

        if isinstance(self.tp_percents, (str, bytes)):
            raise ValidationError("tp_percents", f"expected a sequence of 3 numbers, got {self.tp_percents!r}")
        try:
            tps = tuple(self.tp_percents)
        except TypeError:
            raise ValidationError("tp_percents", f"expected a sequence of 3 numbers, got {self.tp_percents!r}") from None
        if len(tps) != 3:
            raise ValidationError("tp_percents", f"expected exactly 3 take-profit percentages, got {len(tps)}")
        set_(self, "tp_percents", tuple(_fraction("tp_percents", tp) for tp in tps))

        if not isinstance(self.sizing, tuple(_SIZING_CLASSES.values())):
            raise ConfigurationError("position_sizing", f"unsupported sizing configuration {self.sizing!r}")


# --- Numeric calculator output ---------------------------------------------

@dataclass(frozen=True)
class LimitEntry:
    """One resting limit order of the plan."""
    price: float
    margin: float
    split: float


@dataclass(frozen=True)
class TakeProfit:
    level: int
    price: float
    move_pct: float
    usd: float
    risk_reward: float


@dataclass(frozen=True)
class TradePlan:
    """Full-precision result of a calculation."""
    direction: Direction
    margin: float
    position: float
    entry_price: float
    stop_price: float
    stop_usd: float
    liquidation_price: float
    liquidation_distance_pct: float
    safety_margin_pct: float
    limits: Tuple[LimitEntry, ...]
    takes: Tuple[TakeProfit, ...]
    sizing_method: str
    sizing_note: str


# --- Formatted output --------------------------------------------------------

@dataclass(frozen=True)
class FormattedLimit:
    price: str
    margin: str


@dataclass(frozen=True)
class FormattedTake:
    level: int
    price: str
    move_pct: str
    usd: str
    risk_reward: str


@dataclass(frozen=True)
class TradeResult:
    """A `TradePlan` rendered as fixed-decimal strings.

    Prices carry 6 fractional digits; USD amounts, percentages and
    risk/reward ratios carry 2.
    """
    margin: str
    position: str
    entry_price: str
    stop_price: str
    stop_usd: str
    liquidation_price: str
    liquidation_distance_pct: str
    safety_margin_pct: str
    limits: Tuple[FormattedLimit, ...]
    takes: Tuple[FormattedTake, ...]
    position_sizing_method: str = ""
    position_sizing_note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["limits"] = [dict(limit) for limit in data["limits"]]
        data["takes"] = [dict(take) for take in data["takes"]]
        return data
