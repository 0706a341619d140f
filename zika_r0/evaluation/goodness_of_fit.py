"""
Posterior predictive goodness of fit.

The discrepancy is the sum of squared residuals around the fitted mean.
For each draw, a replicate data set is compared with the observed data;
the Bayesian p-value is the share of draws where the replicate is more
discrepant. Values near 0.5 indicate the model reproduces the spread of
the data; values near 0 or 1 indicate misfit.
"""
import numpy as np


def sum_of_squares(y: np.ndarray, mu: np.ndarray) -> np.ndarray:
    """
    Sum of squared residuals along the last axis.

    Args:
        y: Observations, shape (N,) or (n_draws, N)
        mu: Fitted means, broadcastable against y

    Returns:
        Scalar or array (n_draws,)
    """
    resid = np.asarray(y, dtype=float) - np.asarray(mu, dtype=float)
    return np.sum(resid ** 2, axis=-1)


def bayesian_pvalue(indicator_draws: np.ndarray) -> float:
    """
    Posterior mean of the per-draw indicator 1{fit_new > fit}.

    Args:
        indicator_draws: 0/1 draws

    Returns:
        Bayesian p-value in [0, 1]
    """
    draws = np.asarray(indicator_draws, dtype=float).ravel()
    if draws.size == 0:
        raise ValueError("No draws supplied")
    if np.any((draws != 0) & (draws != 1)):
        raise ValueError("Indicator draws must be 0 or 1")
    return float(draws.mean())


def bayesian_pvalue_from_replicates(
    y: np.ndarray,
    y_rep: np.ndarray,
    mu: np.ndarray
) -> float:
    """
    Bayesian p-value recomputed from replicate draws.

    Args:
        y: Observed data (N,)
        y_rep: Replicates (n_draws, N)
        mu: Fitted means per draw (n_draws, N)

    Returns:
        Share of draws where SS(y_rep - mu) > SS(y - mu)
    """
    y_rep = np.asarray(y_rep, dtype=float)
    mu = np.asarray(mu, dtype=float)
    if y_rep.shape != mu.shape:
        raise ValueError(f"Shape mismatch: y_rep {y_rep.shape} vs mu {mu.shape}")
    fit = sum_of_squares(y, mu)
    fit_new = sum_of_squares(y_rep, mu)
    return bayesian_pvalue((fit_new > fit).astype(int))


def interval_coverage(y: np.ndarray, y_rep: np.ndarray, ci: float = 0.9) -> float:
    """
    Fraction of observations inside the central posterior predictive interval.
    """
    lower = np.percentile(y_rep, 100 * (1 - ci) / 2, axis=0)
    upper = np.percentile(y_rep, 100 * (1 - (1 - ci) / 2), axis=0)
    y = np.asarray(y, dtype=float)
    return float(np.mean((y >= lower) & (y <= upper)))
