import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tradecalc.calculator.models import (
    FixedFractionalSizing,
    KellySizing,
    RiskParitySizing,
    TradeParameters,
    VolatilitySizing,
)
from tradecalc.calculator.sizing import compute_margin, kelly_fraction

import unittest


def _params(**overrides) -> TradeParameters:
    values = dict(deposit=1000.0, direction="long", current_price=100.0, leverage=10.0, deposit_risk=0.1)
    values.update(overrides)
    return TradeParameters(**values)


class TestPositionSizing(unittest.TestCase):
    def test_fixed_uses_deposit_risk(self) -> None:
        outcome = compute_margin(_params())
        self.assertAlmostEqual(outcome.margin, 100.0)
        self.assertEqual(outcome.method_name, "Fixed Risk")
        self.assertEqual(outcome.note, "10.0% of deposit")

    def test_half_kelly_below_cap(self) -> None:
        """Win rate 55 % with a 2:1 payoff gives f=0.325, half of it is 0.1625."""
        self.assertAlmostEqual(kelly_fraction(0.55, 2.0), 0.325)
        outcome = compute_margin(_params(sizing=KellySizing(win_rate=0.55, avg_win_loss_ratio=2.0)))
        self.assertAlmostEqual(outcome.margin, 162.5)
        self.assertEqual(outcome.method_name, "Kelly Criterion (Half-Kelly)")
        self.assertEqual(outcome.note, "Win Rate: 55.0%, Win/Loss: 2.00x")

    def test_kelly_is_capped(self) -> None:
        outcome = compute_margin(_params(sizing=KellySizing(win_rate=0.9, avg_win_loss_ratio=5.0)))
        self.assertAlmostEqual(outcome.margin, 250.0)

    def test_negative_kelly_clamps_to_zero(self) -> None:
        self.assertLess(kelly_fraction(0.2, 1.0), 0)
        outcome = compute_margin(_params(sizing=KellySizing(win_rate=0.2, avg_win_loss_ratio=1.0)))
        self.assertEqual(outcome.margin, 0.0)

    def test_fixed_fractional(self) -> None:
        outcome = compute_margin(_params(sizing=FixedFractionalSizing(fixed_fraction=0.03)))
        self.assertAlmostEqual(outcome.margin, 30.0)
        self.assertEqual(outcome.note, "3.0% of account per trade")

    def test_volatility_shrinks_margin(self) -> None:
        # factor = 5 * 2 = 10 -> base 100 / (1 + 10/100)
        outcome = compute_margin(_params(sizing=VolatilitySizing(atr_value=5.0, atr_multiplier=2.0)))
        self.assertAlmostEqual(outcome.margin, 100.0 / 1.1)
        self.assertEqual(outcome.method_name, "Volatility-Based (ATR)")
        self.assertEqual(outcome.note, "ATR: 5.000000, Multiplier: 2x")

    def test_volatility_note_keeps_full_multiplier(self) -> None:
        outcome = compute_margin(_params(sizing=VolatilitySizing(atr_value=0.5, atr_multiplier=2.1234567)))
        self.assertEqual(outcome.note, "ATR: 0.500000, Multiplier: 2.1234567x")

    def test_volatility_has_one_percent_floor(self) -> None:
        outcome = compute_margin(_params(sizing=VolatilitySizing(atr_value=1000.0, atr_multiplier=3.0)))
        self.assertAlmostEqual(outcome.margin, 10.0)

    def test_volatility_without_atr_falls_back_to_fixed(self) -> None:
        outcome = compute_margin(_params(sizing=VolatilitySizing(atr_value=0.0, atr_multiplier=2.0)))
        self.assertAlmostEqual(outcome.margin, 100.0)
        self.assertEqual(outcome.method_name, "Fixed Risk")

    def test_risk_parity(self) -> None:
        outcome = compute_margin(_params(sizing=RiskParitySizing(target_risk_pct=0.05)))
        self.assertAlmostEqual(outcome.margin, 50.0)
        self.assertEqual(outcome.note, "5.0% risk per trade")


if __name__ == '__main__':
    unittest.main()
