import os
import sys
import tempfile

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tradecalc.calculator.errors import ValidationError
from tradecalc.calculator.models import TradeParameters, sizing_from_options
from tradecalc.config.schema import Config, load_config

import unittest


class TestLoadConfig(unittest.TestCase):
    def test_defaults_without_file(self) -> None:
        cfg = load_config(None)
        self.assertEqual(cfg, Config())
        self.assertEqual(cfg.calculator.tp_percents, [0.04, 0.09, 0.16])
        self.assertIsNone(cfg.calculator.deposit_risk)
        self.assertEqual(cfg.sizing.method, "fixed")

    def test_partial_file_is_merged_with_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(
                    "calculator:\n"
                    "  limit_style: Equal\n"
                    "  deposit_risk: 0.2\n"
                    "  tp_percents: [0.07, 0.15, 0.25]\n"
                    "sizing:\n"
                    "  method: kelly\n"
                    "  win_rate: 0.6\n"
                )
            cfg = load_config(path)
        self.assertEqual(cfg.calculator.limit_style, "equal")
        self.assertEqual(cfg.calculator.num_limits, 2)
        self.assertAlmostEqual(cfg.calculator.deposit_risk, 0.2)
        self.assertEqual(cfg.calculator.tp_percents, [0.07, 0.15, 0.25])
        self.assertEqual(cfg.sizing.method, "kelly")
        self.assertAlmostEqual(cfg.sizing.win_rate, 0.6)
        self.assertAlmostEqual(cfg.sizing.avg_win_loss_ratio, 2.0)
        self.assertEqual(cfg.report.out_dir, "results")

    def test_empty_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "empty.yaml")
            open(path, "w", encoding="utf-8").close()
            self.assertEqual(load_config(path), Config())

    def _load(self, text: str) -> Config:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(text)
            return load_config(path)

    def _parameters(self, cfg: Config) -> TradeParameters:
        calc = cfg.calculator
        return TradeParameters(
            deposit=1000.0, direction="long", current_price=100.0, leverage=10.0,
            num_limits=calc.num_limits, limit_style=calc.limit_style,
            stop_risk=calc.stop_risk, tp_percents=calc.tp_percents,
        )

    def test_fractional_limit_count_is_not_truncated(self) -> None:
        cfg = self._load("calculator:\n  num_limits: 2.9\n")
        self.assertEqual(cfg.calculator.num_limits, 2.9)
        with self.assertRaises(ValidationError) as ctx:
            self._parameters(cfg)
        self.assertEqual(ctx.exception.field, "num_limits")

    def test_non_numeric_values_are_rejected_on_use(self) -> None:
        cfg = self._load("calculator:\n  stop_risk: abc\nsizing:\n  method: kelly\n  win_rate: high\n")
        with self.assertRaises(ValidationError) as ctx:
            self._parameters(cfg)
        self.assertEqual(ctx.exception.field, "stop_risk")
        with self.assertRaises(ValidationError) as ctx:
            sizing_from_options(cfg.sizing.method, win_rate=cfg.sizing.win_rate)
        self.assertEqual(ctx.exception.field, "win_rate")

    def test_sections_must_be_mappings(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self._load("calculator: 5\n")
        self.assertEqual(ctx.exception.field, "calculator")
        with self.assertRaises(ValidationError):
            self._load("- just\n- a list\n")

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")


if __name__ == '__main__':
    unittest.main()
