"""
Synthetic outbreak data with known parameters.

Used to check that the hierarchical regression recovers the generating
growth rates, and to produce demo inputs when real surveillance data is
not at hand.
"""
import numpy as np
import pandas as pd
from typing import Dict, Optional, Sequence


def simulate_observations(
    n_departments: int = 3,
    n_weeks: int = 10,
    beta_mu: float = 0.3,
    beta_sigma: float = 0.05,
    sigma: float = 0.1,
    intercept_low: float = 1.0,
    intercept_high: float = 4.0,
    seed: Optional[int] = 42
) -> pd.DataFrame:
    """
    Simulate log-linear outbreak growth per department.

    ln_y = alpha[j] + beta[j] * week + Normal(0, sigma), with
    beta[j] ~ Normal(beta_mu, beta_sigma) and alpha[j] ~ Uniform(low, high).

    Args:
        n_departments: Number of departments (ids 1..n)
        n_weeks: Weeks per department (indices 0..n_weeks-1)
        beta_mu: Mean weekly growth rate
        beta_sigma: Between-department sd of growth rates
        sigma: Residual sd on the log scale
        intercept_low, intercept_high: Range of true log intercepts
        seed: Random seed

    Returns:
        DataFrame with columns: department, week, cases, ln_y.
        The true parameters are stored in df.attrs['truth'].
    """
    if n_departments < 1 or n_weeks < 2:
        raise ValueError("Need at least one department and two weeks")
    if sigma <= 0 or beta_sigma < 0:
        raise ValueError("sigma must be positive and beta_sigma non-negative")

    rng = np.random.default_rng(seed)
    alpha = rng.uniform(intercept_low, intercept_high, size=n_departments)
    beta = rng.normal(beta_mu, beta_sigma, size=n_departments)

    dept = np.repeat(np.arange(1, n_departments + 1), n_weeks)
    week = np.tile(np.arange(n_weeks), n_departments)
    mu = alpha[dept - 1] + beta[dept - 1] * week
    ln_y = mu + rng.normal(0.0, sigma, size=len(mu))

    df = pd.DataFrame({
        'department': dept,
        'week': week,
        'cases': np.exp(ln_y),
        'ln_y': ln_y,
    })
    df.attrs['truth'] = {
        'alpha': alpha,
        'beta': beta,
        'beta_mu': beta_mu,
        'beta_sigma': beta_sigma,
        'sigma': sigma,
    }
    return df


def simulate_climate_classes(
    n_departments: int,
    classes: Sequence[str] = ('A', 'B', 'C'),
    seed: Optional[int] = 42
) -> pd.DataFrame:
    """
    Assign climate classes to departments, every class used at least once
    when there are enough departments.

    Returns:
        DataFrame with columns: department, climate
    """
    if not classes:
        raise ValueError("At least one climate class required")
    rng = np.random.default_rng(seed)
    labels = np.resize(np.asarray(classes, dtype=object), n_departments)
    rng.shuffle(labels)
    return pd.DataFrame({
        'department': np.arange(1, n_departments + 1),
        'climate': labels,
    })


def simulate_grouped_values(
    group_means: Dict[str, float],
    n_per_group: int = 10,
    sigma: float = 0.2,
    seed: Optional[int] = 42
) -> pd.DataFrame:
    """
    Simulate one value per department from class-specific means.

    Returns:
        DataFrame with columns: department, climate, value
    """
    rng = np.random.default_rng(seed)
    rows = []
    department = 1
    for climate, mean in group_means.items():
        for value in rng.normal(mean, sigma, size=n_per_group):
            rows.append({'department': department, 'climate': climate, 'value': value})
            department += 1
    return pd.DataFrame(rows)


def write_observations(df: pd.DataFrame, path) -> None:
    """Write observations in the raw input layout (department, week, cases)."""
    df[['department', 'week', 'cases']].to_csv(path, index=False)
