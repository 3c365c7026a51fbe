import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tradecalc.calculator.engine import parameters_from_mapping
from tradecalc.calculator.errors import ConfigurationError, ValidationError
from tradecalc.calculator.models import (
    Direction,
    FixedSizing,
    KellySizing,
    LimitStyle,
    TradeParameters,
    VolatilitySizing,
    sizing_from_options,
)

import unittest


BASE = dict(deposit=1000.0, direction="long", current_price=100.0, leverage=10.0)


class TestParameterValidation(unittest.TestCase):
    def _build(self, **overrides) -> TradeParameters:
        values = dict(BASE)
        values.update(overrides)
        return TradeParameters(**values)

    def _assert_rejected(self, field: str, **overrides) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self._build(**overrides)
        self.assertEqual(ctx.exception.field, field)

    def test_defaults_and_normalisation(self) -> None:
        params = self._build(direction=" Long ", limit_style="DECREASING", tp_percents=[0.07, 0.15, 0.25])
        self.assertIs(params.direction, Direction.LONG)
        self.assertIs(params.limit_style, LimitStyle.MODERATE)
        self.assertEqual(params.tp_percents, (0.07, 0.15, 0.25))
        self.assertEqual(params.num_limits, 2)
        self.assertAlmostEqual(params.deposit_risk, 0.143)
        self.assertAlmostEqual(params.stop_risk, 0.05)
        self.assertIsInstance(params.sizing, FixedSizing)

    def test_unknown_enums_are_configuration_errors(self) -> None:
        with self.assertRaises(ConfigurationError):
            self._build(direction="sideways")
        with self.assertRaises(ConfigurationError):
            self._build(limit_style="random")
        with self.assertRaises(ConfigurationError):
            sizing_from_options("martingale")

    def test_numeric_domains(self) -> None:
        self._assert_rejected("deposit", deposit=-5.0)
        self._assert_rejected("deposit", deposit=0)
        self._assert_rejected("leverage", leverage=0.0)
        self._assert_rejected("current_price", current_price=-1.0)
        self._assert_rejected("num_limits", num_limits=4)
        self._assert_rejected("num_limits", num_limits=-1)
        self._assert_rejected("num_limits", num_limits=2.0)
        self._assert_rejected("deposit_risk", deposit_risk=0.0)
        self._assert_rejected("deposit_risk", deposit_risk=1.5)
        self._assert_rejected("stop_risk", stop_risk=-0.01)
        self._assert_rejected("tp_percents", tp_percents=(0.1, 0.2))
        self._assert_rejected("tp_percents", tp_percents=(0.1, 0.2, 1.2))
        self._assert_rejected("deposit", deposit="1000")

    def test_take_profits_must_be_a_sequence(self) -> None:
        self._assert_rejected("tp_percents", tp_percents=None)
        self._assert_rejected("tp_percents", tp_percents=0.1)
        self._assert_rejected("tp_percents", tp_percents="0.1")

    def test_sizing_variant_domains(self) -> None:
        with self.assertRaises(ValidationError):
            KellySizing(win_rate=1.2)
        with self.assertRaises(ValidationError):
            KellySizing(avg_win_loss_ratio=0.0)
        with self.assertRaises(ValidationError):
            VolatilitySizing(atr_value=-1.0)

    def test_parameters_are_frozen(self) -> None:
        params = self._build()
        with self.assertRaises(AttributeError):
            params.deposit = 1.0


class TestMappingValidation(unittest.TestCase):
    def test_missing_required_field(self) -> None:
        values = dict(BASE)
        del values["leverage"]
        with self.assertRaises(ValidationError) as ctx:
            parameters_from_mapping(values)
        self.assertEqual(ctx.exception.field, "leverage")

    def test_unknown_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            parameters_from_mapping(dict(BASE, leverge=5))
        self.assertEqual(ctx.exception.field, "leverge")

    def test_none_values_take_defaults(self) -> None:
        params = parameters_from_mapping(dict(BASE, num_limits=None, position_sizing=None))
        self.assertEqual(params.num_limits, 2)
        self.assertIsInstance(params.sizing, FixedSizing)

    def test_sizing_options_for_other_methods_are_ignored(self) -> None:
        sizing = sizing_from_options("volatility", atr_value=1.5, win_rate=7.0)
        self.assertEqual(sizing, VolatilitySizing(atr_value=1.5, atr_multiplier=2.0))


if __name__ == '__main__':
    unittest.main()
