#!/usr/bin/env python3
"""
Experiment 00: Simulate Outbreak Data

Writes synthetic inputs in the raw file layout so the pipeline can be run
end-to-end without surveillance data:
  - data/raw/dept_totals.csv   (department, week, cases)
  - data/raw/dept_climate.csv  (department, climate)

Parameters come from the `simulation` section of the config.
"""
import sys
import argparse
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from zika_r0.config import load_config, get_data_path
from zika_r0.data.simulate import (
    simulate_observations,
    simulate_climate_classes,
    write_observations,
)


def main():
    parser = argparse.ArgumentParser(description="Simulate outbreak input files")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: config/config_default.yaml)"
    )
    parser.add_argument("--n-departments", type=int, default=None)
    parser.add_argument("--n-weeks", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    cfg = load_config(args.config)
    sim = dict(cfg.get('simulation', {}))
    for key in ('n_departments', 'n_weeks', 'seed'):
        if getattr(args, key) is not None:
            sim[key] = getattr(args, key)

    print("=" * 60)
    print("ZIKA R0 - SIMULATE INPUT DATA")
    print("=" * 60)

    df = simulate_observations(
        n_departments=sim.get('n_departments', 3),
        n_weeks=sim.get('n_weeks', 10),
        beta_mu=sim.get('beta_mu', 0.3),
        beta_sigma=sim.get('beta_sigma', 0.05),
        sigma=sim.get('sigma', 0.1),
        intercept_low=sim.get('intercept_low', 1.0),
        intercept_high=sim.get('intercept_high', 4.0),
        seed=sim.get('seed', 42),
    )
    truth = df.attrs['truth']
    print(f"  → {len(df)} rows, {df['department'].nunique()} departments")
    print(f"  → true beta_mu={truth['beta_mu']}, sigma={truth['sigma']}")
    for j, b in enumerate(truth['beta'], start=1):
        print(f"     dept {j}: beta={b:.3f}")

    climate = simulate_climate_classes(
        df['department'].nunique(),
        classes=sim.get('climate_classes', ['A', 'B', 'C']),
        seed=sim.get('seed', 42),
    )

    obs_path = get_data_path(cfg['data']['raw']['observations'])
    climate_path = get_data_path(cfg['data']['raw']['climate'])
    obs_path.parent.mkdir(parents=True, exist_ok=True)

    write_observations(df, obs_path)
    climate.to_csv(climate_path, index=False)
    print(f"\nSaved {obs_path}")
    print(f"Saved {climate_path}")


if __name__ == "__main__":
    main()
