"""
Report generation utilities.

This module turns a trade plan into files that can be kept next to a
trading journal: CSV tables of the limit orders and take-profit levels,
a JSON summary of the formatted result and a PNG chart of the price
ladder (limits, entry, stop, liquidation and take-profits).
"""

from __future__ import annotations

import os
import json
from typing import Dict
import pandas as pd
import matplotlib

# Use non-interactive backend for environments without display
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..calculator.models import TradePlan
from .formatting import format_plan


def generate_plan_report(plan: TradePlan, out_dir: str = "results") -> Dict[str, str]:
    """Write report files for a trade plan.

    Creates the output directory if it does not exist and writes the
    following files:

    - `limits.csv` – limit orders, best price first
    - `takes.csv` – take-profit levels
    - `summary.json` – the formatted result
    - `plan.png` – horizontal price ladder of the plan

    Returns
    -------
    dict
        Mapping of report name to the path written.
    """
    os.makedirs(out_dir, exist_ok=True)
    result = format_plan(plan)
    paths: Dict[str, str] = {}

    # Limits CSV
    df_limits = pd.DataFrame(
        [
            {
                'order': i,
                'price': limit.price,
                'margin': limit.margin,
                'split': limit.split,
            }
            for i, limit in enumerate(plan.limits, start=1)
        ]
    )
    paths['limits'] = os.path.join(out_dir, 'limits.csv')
    df_limits.to_csv(paths['limits'], index=False)

    # Take-profits CSV
    df_takes = pd.DataFrame(
        [
            {
                'level': take.level,
                'price': take.price,
                'move_pct': take.move_pct,
                'usd': take.usd,
                'risk_reward': take.risk_reward,
            }
            for take in plan.takes
        ]
    )
    paths['takes'] = os.path.join(out_dir, 'takes.csv')
    df_takes.to_csv(paths['takes'], index=False)

    # Summary JSON
    paths['summary'] = os.path.join(out_dir, 'summary.json')
    with open(paths['summary'], 'w', encoding='utf-8') as fh:
        json.dump(result.to_dict(), fh, indent=2, ensure_ascii=False)

    # Price ladder plot
    levels = [('Entry', plan.entry_price, 'black', '-'),
              ('Stop', plan.stop_price, 'red', '--'),
              ('Liquidation', plan.liquidation_price, 'darkred', ':')]
    levels += [(f'Limit {i}', limit.price, 'tab:blue', '-.')
               for i, limit in enumerate(plan.limits, start=1)]
    levels += [(f'TP{take.level}', take.price, 'green', '--') for take in plan.takes]

    fig, ax = plt.subplots(figsize=(8, 5))
    for label, price, color, style in levels:
        ax.axhline(price, color=color, linestyle=style, linewidth=1.2)
        ax.annotate(f'{label} {price:.6f}', xy=(0.01, price), xycoords=('axes fraction', 'data'),
                    fontsize=8, color=color, va='bottom')
    ax.set_xticks([])
    ax.set_ylabel('Price')
    ax.set_title(f'{plan.direction.value.capitalize()} trade plan')
    fig.tight_layout()
    paths['chart'] = os.path.join(out_dir, 'plan.png')
    fig.savefig(paths['chart'])
    plt.close(fig)

    return paths
