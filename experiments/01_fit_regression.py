#!/usr/bin/env python3
"""
Experiment 01: Fit Hierarchical Regression and Estimate R0

This script:
1. Loads cumulative case counts per department and week
2. Checks every department has a week-0 observation
3. Fits the hierarchical regression via MCMC
4. Reports MCMC diagnostics and the posterior predictive check
5. Converts slopes to R0 per department
6. Optionally saves R0.csv / predicted.csv and figures

Outputs (when enabled):
  - results/R0.csv
  - results/predicted.csv
  - results/plots/r0_intervals.png, results/plots/growth_fits.png
"""
import sys
import argparse
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from zika_r0.config import load_config, get_data_path
from zika_r0.data.loader import load_observations, check_week_zero
from zika_r0.models.bayesian.hierarchical_regression import HierarchicalRegression
from zika_r0.models.bayesian.sampler import select_monitor
from zika_r0.postprocess.r0 import write_outputs


def main():
    parser = argparse.ArgumentParser(description="Fit hierarchical regression and estimate R0")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: config/config_default.yaml)"
    )
    parser.add_argument("--data", type=str, default=None, help="Observations file (overrides config)")
    parser.add_argument("--n-warmup", type=int, default=None, help="MCMC burn-in iterations")
    parser.add_argument("--n-samples", type=int, default=None, help="MCMC sampling iterations per chain")
    parser.add_argument("--n-chains", type=int, default=None, help="Number of MCMC chains")
    parser.add_argument("--thin", type=int, default=None, help="Thinning interval")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--write-csv", action="store_true", help="Save R0.csv and predicted.csv")
    parser.add_argument("--plots", action="store_true", help="Save figures")
    args = parser.parse_args()

    cfg = load_config(args.config)
    data_cfg = cfg.get('data', {})
    model_cfg = cfg.get('model', {})
    output_cfg = cfg.get('output', {})

    sampler_cfg = dict(cfg.get('sampler', {}))
    for key in ('n_warmup', 'n_samples', 'n_chains', 'thin', 'seed'):
        if getattr(args, key) is not None:
            sampler_cfg[key] = getattr(args, key)
    monitor = select_monitor(sampler_cfg.pop('monitor', None), 'regression')
    if sampler_cfg.get('output_dir'):
        sampler_cfg['output_dir'] = str(get_data_path(sampler_cfg['output_dir']) / 'regression')

    si = model_cfg.get('serial_interval', {})
    model_config = {
        **sampler_cfg,
        'monitor': monitor,
        'si_lower': si.get('lower', 10.0),
        'si_upper': si.get('upper', 23.0),
        'ci': model_cfg.get('ci', 0.95),
    }

    print("=" * 60)
    print("ZIKA R0 - HIERARCHICAL REGRESSION")
    print("=" * 60)

    data_path = get_data_path(args.data or data_cfg['raw']['observations'])
    print(f"\nLoading observations from {data_path}...")
    df = load_observations(data_path, delimiter=data_cfg.get('delimiter', ','))
    print(f"  → {len(df)} rows, {df['department'].nunique()} departments, "
          f"weeks {df['week'].min()}-{df['week'].max()}")

    missing = check_week_zero(df)
    if missing:
        raise ValueError(f"No week-0 observation for departments: {missing}")

    print("\n" + "=" * 60)
    print("FITTING MODEL")
    print("=" * 60)
    model = HierarchicalRegression(config=model_config)
    model.fit(df)
    model.print_diagnostics()

    print("\n" + "=" * 60)
    print("POSTERIOR PREDICTIVE CHECK")
    print("=" * 60)
    check = model.check_fit(ci=0.9)
    print(f"Bayesian p-value: {check['pvalue']:.3f} (recomputed: {check['pvalue_replicates']:.3f})")
    print(f"90% predictive interval coverage of ln(cases): {check['coverage']:.1%}")

    summary = model.summary()
    print("\nPosterior summary:")
    print(summary[['mean', 'sd', 'ci_low', 'ci_high', 'r_hat']].round(3).to_string())

    print("\n" + "=" * 60)
    print("R0 BY DEPARTMENT")
    print("=" * 60)
    r0 = model.r0_summary()
    print("Serial interval ~ U({}, {}) days:".format(model_config['si_lower'], model_config['si_upper']))
    print(r0.round(3).to_string(index=False))

    fixed_si = model_cfg.get('postprocess_serial_interval')
    if fixed_si is not None:
        r0_fixed = model.r0_fixed_interval(fixed_si)
        print(f"\nFixed serial interval {fixed_si} days:")
        print(r0_fixed.round(3).to_string(index=False))

    results_dir = get_data_path(output_cfg.get('results_dir', 'results'))
    predicted = model.predicted()

    if args.write_csv or output_cfg.get('write_csv', False):
        print("\nSaving outputs...")
        write_outputs(results_dir, r0_df=r0, predicted_df=predicted)

    if args.plots or output_cfg.get('write_plots', False):
        from zika_r0.visualization.plots import plot_r0_intervals, plot_growth_fits

        dpi = output_cfg.get('dpi', 150)
        plot_r0_intervals(r0, results_dir / 'plots' / 'r0_intervals.png', dpi=dpi)
        plot_growth_fits(predicted, results_dir / 'plots' / 'growth_fits.png', dpi=dpi)
        print(f"  → Saved figures to {results_dir / 'plots'}")


if __name__ == "__main__":
    main()
