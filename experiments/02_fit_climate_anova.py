#!/usr/bin/env python3
"""
Experiment 02: R0 by Climate Class (one-way ANOVA)

Relates the department R0 estimates from Experiment 01 to the climate
classification of each department:
  - results/R0.csv             (from 01_fit_regression.py --write-csv)
  - data/raw/dept_climate.csv  (department, climate)
"""
import sys
import argparse
from pathlib import Path

import pandas as pd

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from zika_r0.config import load_config, get_data_path
from zika_r0.data.loader import load_climate_classes
from zika_r0.models.bayesian.anova import OneWayAnova
from zika_r0.models.bayesian.sampler import select_monitor


def _r0_path(results_dir: Path) -> Path:
    path = results_dir / 'R0.csv'
    if not path.exists():
        raise FileNotFoundError(
            f'Missing {path}. Run experiments/01_fit_regression.py --write-csv first.'
        )
    return path


def main():
    parser = argparse.ArgumentParser(description="One-way ANOVA of R0 on climate class")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: config/config_default.yaml)"
    )
    parser.add_argument("--r0", type=str, default=None, help="R0 CSV (default: <results_dir>/R0.csv)")
    parser.add_argument("--climate", type=str, default=None, help="Climate table (overrides config)")
    parser.add_argument("--n-samples", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    cfg = load_config(args.config)
    output_cfg = cfg.get('output', {})
    sampler_cfg = dict(cfg.get('sampler', {}))
    for key in ('n_samples', 'seed'):
        if getattr(args, key) is not None:
            sampler_cfg[key] = getattr(args, key)
    monitor = select_monitor(sampler_cfg.pop('monitor', None), 'anova')
    if sampler_cfg.get('output_dir'):
        sampler_cfg['output_dir'] = str(get_data_path(sampler_cfg['output_dir']) / 'anova')

    print("=" * 60)
    print("ZIKA R0 - CLIMATE ANOVA")
    print("=" * 60)

    results_dir = get_data_path(output_cfg.get('results_dir', 'results'))
    r0_path = Path(args.r0) if args.r0 else _r0_path(results_dir)
    r0 = pd.read_csv(r0_path)
    print(f"  → {len(r0)} departments from {r0_path}")

    climate_path = get_data_path(args.climate or cfg['data']['raw']['climate'])
    climate = load_climate_classes(climate_path, delimiter=cfg['data'].get('delimiter', ','))
    print(f"  → {climate['climate'].nunique()} climate classes from {climate_path}")

    model = OneWayAnova(config={
        **sampler_cfg,
        'monitor': monitor,
        'ci': cfg.get('model', {}).get('ci', 0.95),
    })
    model.fit(r0, climate_df=climate, value_col='r0_mean')
    model.print_diagnostics()

    print("\nClass means of R0:")
    print(model.effects().round(3).to_string(index=False))

    residual = model.constraint_residual()
    print(f"\nMax |sum of effects| over draws: {abs(residual).max():.2e}")

    f = model.f_test()
    print(f"Classical F-test: F={f['f_statistic']:.3f}, p={f['p_value']:.4f}")


if __name__ == "__main__":
    main()
