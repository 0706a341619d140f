"""
R0 from exponential growth rates.

With a weekly growth rate r (slope of log cumulative cases on week) and a
serial interval Tc in days, the linear approximation

    R0 = 1 + r * Tc / 7

gives the basic reproduction number.

Heffernan, J. M., Smith, R. J., & Wahl, L. M. (2005). "Perspectives on the
basic reproductive ratio." Journal of the Royal Society Interface, 2(4),
281-293. http://doi.org/10.1098/rsif.2005.0042
"""
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, Optional, Union

DAYS_PER_WEEK = 7.0

ArrayLike = Union[float, np.ndarray]


def r0_from_slope(beta: ArrayLike, serial_interval_days: ArrayLike) -> ArrayLike:
    """
    Convert weekly growth rate(s) to R0.

    Args:
        beta: Weekly growth rate(s)
        serial_interval_days: Serial interval(s) in days, broadcast against beta

    Returns:
        1 + beta * serial_interval_days / 7
    """
    si = np.asarray(serial_interval_days, dtype=float)
    if np.any(si <= 0):
        raise ValueError("Serial interval must be positive")
    return 1.0 + np.asarray(beta, dtype=float) * si / DAYS_PER_WEEK


def r0_from_draws(beta_draws: np.ndarray, si_draws: np.ndarray) -> np.ndarray:
    """
    Per-draw R0 from posterior slope and serial interval draws.

    Args:
        beta_draws: Array (n_draws, J)
        si_draws: Array (n_draws, J), days

    Returns:
        Array (n_draws, J)
    """
    beta_draws = np.asarray(beta_draws, dtype=float)
    si_draws = np.asarray(si_draws, dtype=float)
    if beta_draws.shape != si_draws.shape:
        raise ValueError(
            f"Shape mismatch: beta {beta_draws.shape} vs serial interval {si_draws.shape}"
        )
    return r0_from_slope(beta_draws, si_draws)


def summarize_draws(draws: np.ndarray, ci: float = 0.95) -> pd.DataFrame:
    """
    Mean and central interval per column of a draws matrix.

    Args:
        draws: Array (n_draws,) or (n_draws, J)
        ci: Central interval mass

    Returns:
        DataFrame with columns: department (1..J), low, mean, high
    """
    if not 0 < ci < 1:
        raise ValueError(f"ci must be in (0, 1), got {ci}")
    draws = np.asarray(draws, dtype=float)
    if draws.ndim == 1:
        draws = draws[:, None]
    lo, hi = np.quantile(draws, [(1 - ci) / 2, 1 - (1 - ci) / 2], axis=0)
    return pd.DataFrame({
        'department': np.arange(1, draws.shape[1] + 1),
        'low': lo,
        'mean': draws.mean(axis=0),
        'high': hi,
    })


def r0_table(slopes: pd.DataFrame, serial_interval_days: float) -> pd.DataFrame:
    """
    R0 point estimate and interval per department from slope summaries.

    R0 is increasing in beta for a positive serial interval, so interval
    bounds on beta map to interval bounds on R0.

    Args:
        slopes: DataFrame with columns department, beta_low, beta_mean, beta_high
        serial_interval_days: Fixed serial interval, days

    Returns:
        DataFrame with columns: department, r0_low, r0_mean, r0_high
    """
    return pd.DataFrame({
        'department': slopes['department'].values,
        'r0_low': r0_from_slope(slopes['beta_low'].values, serial_interval_days),
        'r0_mean': r0_from_slope(slopes['beta_mean'].values, serial_interval_days),
        'r0_high': r0_from_slope(slopes['beta_high'].values, serial_interval_days),
    })


def predicted_values(
    df: pd.DataFrame,
    alpha: np.ndarray,
    beta: np.ndarray
) -> pd.DataFrame:
    """
    Fitted case counts from estimated intercepts and slopes.

    Args:
        df: Observations (department, week, cases)
        alpha: Intercept per department (index j-1)
        beta: Slope per department (index j-1)

    Returns:
        DataFrame with columns: department, week, observed_cases, predicted_cases
    """
    alpha = np.asarray(alpha, dtype=float)
    beta = np.asarray(beta, dtype=float)
    idx = df['department'].values.astype(int) - 1
    if idx.max() >= len(alpha) or idx.max() >= len(beta):
        raise ValueError("Department ids exceed the number of estimated parameters")

    predicted_ln = alpha[idx] + beta[idx] * df['week'].values
    return pd.DataFrame({
        'department': df['department'].values,
        'week': df['week'].values,
        'observed_cases': df['cases'].values,
        'predicted_cases': np.exp(predicted_ln),
    })


def write_outputs(
    results_dir: str,
    r0_df: Optional[pd.DataFrame] = None,
    predicted_df: Optional[pd.DataFrame] = None
) -> Dict[str, Path]:
    """
    Save R0 intervals and predicted values as CSV.

    Returns:
        Mapping of output name to written path
    """
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    if r0_df is not None:
        written['r0'] = results_dir / 'R0.csv'
        r0_df.to_csv(written['r0'], index=False)
    if predicted_df is not None:
        written['predicted'] = results_dir / 'predicted.csv'
        predicted_df.to_csv(written['predicted'], index=False)

    for path in written.values():
        print(f"  → Saved {path}")
    return written
