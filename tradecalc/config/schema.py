"""
Configuration schema and loader.

This module defines dataclasses that mirror the expected structure of
the optional YAML configuration file (`config.yaml`).  The file only
supplies defaults for the calculator: deposit, direction, price and
leverage always come from the command line.  A helper function
`load_config()` reads a YAML file from disk and returns an instance of
`Config` populated with reasonable defaults for any missing fields.

When extending the configuration, add new fields to the appropriate
dataclass and update `load_config()` accordingly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any
import yaml

from ..calculator.errors import ValidationError


@dataclass
class CalculatorConfig:
    """Defaults for the trade plan calculation.

    Attributes
    ----------
    num_limits : int
        Number of staggered limit entries (0 to 3).  ``0`` means a single
        market entry at the current price.
    limit_style : str
        ``aggressive``, ``equal`` or ``moderate`` (``increasing`` and
        ``decreasing`` are accepted as aliases).
    deposit_risk : float or None
        Fraction of the deposit committed as margin by the fixed sizing
        method.  ``None`` means ``1 / leverage``.
    stop_risk : float
        Adverse move, as a fraction of the entry price, that defines the
        stop-loss.
    tp_percents : List[float]
        Exactly three favourable moves defining the take-profit levels.
    """

    num_limits: int = 2
    limit_style: str = "aggressive"
    deposit_risk: Optional[float] = None
    stop_risk: float = 0.05
    tp_percents: List[float] = field(default_factory=lambda: [0.04, 0.09, 0.16])


@dataclass
class SizingSection:
    """Position sizing method and its parameters.

    Only the parameters belonging to `method` are used; the others are
    ignored.
    """

    method: str = "fixed"
    win_rate: float = 0.5
    avg_win_loss_ratio: float = 2.0
    fixed_fraction: float = 0.02
    atr_value: float = 0.0
    atr_multiplier: float = 2.0
    target_risk_pct: float = 0.02


@dataclass
class ReportConfig:
    """Where plan reports are written."""

    out_dir: str = "results"


@dataclass
class Config:
    """Root configuration for the trade planner."""

    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    sizing: SizingSection = field(default_factory=SizingSection)
    report: ReportConfig = field(default_factory=ReportConfig)


def _merge_dict(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries.

    The values in `override` take precedence over those in `defaults`.
    This helper is used when loading YAML into nested dataclasses.
    """
    result: Dict[str, Any] = defaults.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def _section(merged: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = merged[name]
    if not isinstance(section, dict):
        raise ValidationError(name, f"config section must be a mapping, got {section!r}")
    return section


def _lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def load_config(path: Optional[str] = None) -> Config:
    """Load a configuration file from the given YAML path.

    Parameters
    ----------
    path : str, optional
        Path to the YAML file.  When `None`, the built-in defaults are
        returned without touching the filesystem.

    Returns
    -------
    Config
        A populated configuration object.  Missing fields are filled with
        the defaults defined in the dataclasses.  Field values are not
        converted here; they are validated when the trade parameters are
        built.

    Raises
    ------
    ValidationError
        If the file or one of its sections is not a mapping.
    """
    raw: Dict[str, Any] = {}
    if path is not None:
        with Path(path).open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ValidationError("config", f"{path} must contain a mapping at the top level")

    defaults: Dict[str, Any] = {
        'calculator': {
            'num_limits': 2,
            'limit_style': "aggressive",
            'deposit_risk': None,
            'stop_risk': 0.05,
            'tp_percents': [0.04, 0.09, 0.16],
        },
        'sizing': {
            'method': "fixed",
            'win_rate': 0.5,
            'avg_win_loss_ratio': 2.0,
            'fixed_fraction': 0.02,
            'atr_value': 0.0,
            'atr_multiplier': 2.0,
            'target_risk_pct': 0.02,
        },
        'report': {
            'out_dir': "results",
        },
    }

    merged = _merge_dict(defaults, raw)

    # Values are kept as written; TradeParameters and the sizing
    # variants reject anything outside their domain.
    calc = _section(merged, 'calculator')
    calculator_cfg = CalculatorConfig(
        num_limits=calc['num_limits'],
        limit_style=_lower(calc['limit_style']),
        deposit_risk=calc.get('deposit_risk'),
        stop_risk=calc['stop_risk'],
        tp_percents=calc['tp_percents'],
    )
    sizing = _section(merged, 'sizing')
    sizing_cfg = SizingSection(
        method=_lower(sizing['method']),
        win_rate=sizing['win_rate'],
        avg_win_loss_ratio=sizing['avg_win_loss_ratio'],
        fixed_fraction=sizing['fixed_fraction'],
        atr_value=sizing['atr_value'],
        atr_multiplier=sizing['atr_multiplier'],
        target_risk_pct=sizing['target_risk_pct'],
    )
    report = _section(merged, 'report')
    report_cfg = ReportConfig(out_dir=str(report['out_dir']))

    return Config(calculator=calculator_cfg, sizing=sizing_cfg, report=report_cfg)
