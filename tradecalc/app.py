"""
Application entry point.

This module defines a simple command-line interface for computing a
leveraged trade plan.  Defaults come from an optional YAML
configuration file; command-line flags override them.  The plan is
printed as text or JSON and can also be written to a report directory.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

import yaml

from .calculator.engine import calculate_plan
from .calculator.errors import ValidationError
from .calculator.models import LimitStyle, SizingMethod, TradeParameters, sizing_from_options
from .config.schema import Config, load_config
from .reporting.formatting import format_plan, render_text
from .reporting.report import generate_plan_report

DEFAULT_CONFIG_PATH = 'config.yaml'

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Leveraged trade planner")
    parser.add_argument('deposit', type=float, help="Account deposit in USD")
    parser.add_argument('direction', help="Trade side: long or short")
    parser.add_argument('price', type=float, help="Current market price")
    parser.add_argument('leverage', type=float, help="Leverage multiplier")
    parser.add_argument('--limits', type=int, choices=[0, 1, 2, 3], help="Number of limit entries")
    parser.add_argument(
        '--style',
        choices=[s.value for s in LimitStyle] + ['increasing', 'decreasing'],
        help="Limit style",
    )
    parser.add_argument('--deposit-risk', type=float, help="Fraction of deposit used as margin (default 1/leverage)")
    parser.add_argument('--stop-risk', type=float, help="Stop distance as a fraction of entry")
    parser.add_argument('--tp', type=float, nargs=3, metavar='PCT', help="Three take-profit fractions")
    parser.add_argument('--sizing', choices=[m.value for m in SizingMethod], help="Position sizing method")
    parser.add_argument('--win-rate', type=float, help="Kelly: win probability (0-1)")
    parser.add_argument('--win-loss', type=float, help="Kelly: average win / average loss")
    parser.add_argument('--fixed-fraction', type=float, help="Fixed fractional: share of account")
    parser.add_argument('--atr', type=float, help="Volatility: ATR value")
    parser.add_argument('--atr-mult', type=float, help="Volatility: ATR multiplier")
    parser.add_argument('--target-risk', type=float, help="Risk parity: target risk share")
    parser.add_argument('--config', help=f"Path to configuration YAML file (default {DEFAULT_CONFIG_PATH} if present)")
    parser.add_argument('--json', action='store_true', help="Print the result as JSON")
    parser.add_argument('--report', action='store_true', help="Write CSV/JSON/PNG report files")
    parser.add_argument('--out-dir', help="Report directory (overrides config)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    return parser


def _pick(cli_value, config_value):
    return config_value if cli_value is None else cli_value


def build_parameters(args: argparse.Namespace, config: Config) -> TradeParameters:
    """Merge command-line arguments over configuration defaults."""
    calc = config.calculator
    deposit_risk = _pick(args.deposit_risk, calc.deposit_risk)
    if deposit_risk is None and args.leverage > 0:
        deposit_risk = min(1.0, 1.0 / args.leverage)

    sizing_cfg = config.sizing
    sizing = sizing_from_options(
        _pick(args.sizing, sizing_cfg.method),
        win_rate=_pick(args.win_rate, sizing_cfg.win_rate),
        avg_win_loss_ratio=_pick(args.win_loss, sizing_cfg.avg_win_loss_ratio),
        fixed_fraction=_pick(args.fixed_fraction, sizing_cfg.fixed_fraction),
        atr_value=_pick(args.atr, sizing_cfg.atr_value),
        atr_multiplier=_pick(args.atr_mult, sizing_cfg.atr_multiplier),
        target_risk_pct=_pick(args.target_risk, sizing_cfg.target_risk_pct),
    )

    kwargs = dict(
        deposit=args.deposit,
        direction=args.direction,
        current_price=args.price,
        leverage=args.leverage,
        num_limits=_pick(args.limits, calc.num_limits),
        limit_style=_pick(args.style, calc.limit_style),
        stop_risk=_pick(args.stop_risk, calc.stop_risk),
        tp_percents=_pick(args.tp, calc.tp_percents),
        sizing=sizing,
    )
    if deposit_risk is not None:
        kwargs['deposit_risk'] = deposit_risk
    return TradeParameters(**kwargs)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments, compute the plan and print it."""
    args = _build_parser().parse_args(argv)

    _setup_logging(args.verbose)

    config_path = args.config
    if config_path is None and os.path.exists(DEFAULT_CONFIG_PATH):
        config_path = DEFAULT_CONFIG_PATH
    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Cannot read configuration %s: %s", config_path, exc)
        return 2
    except ValidationError as exc:
        logger.error("Invalid configuration %s: %s", config_path, exc)
        return 2
    if config_path:
        logger.debug("Loaded configuration from %s", config_path)

    try:
        params = build_parameters(args, config)
        plan = calculate_plan(params)
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    result = format_plan(plan)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(render_text(result))

    if args.report:
        out_dir = args.out_dir or config.report.out_dir
        generate_plan_report(plan, out_dir=out_dir)
        logger.info("Report written to the '%s' directory.", out_dir)
    return 0


if __name__ == '__main__':
    sys.exit(main())
