"""Tests for posterior predictive goodness-of-fit statistics."""

import numpy as np
import pytest

from zika_r0.evaluation.goodness_of_fit import (
    sum_of_squares,
    bayesian_pvalue,
    bayesian_pvalue_from_replicates,
    interval_coverage,
)


def test_sum_of_squares_vector():
    assert sum_of_squares([1.0, 2.0, 3.0], [1.0, 1.0, 1.0]) == pytest.approx(5.0)


def test_sum_of_squares_per_draw():
    y_rep = np.array([[1.0, 1.0], [2.0, 0.0]])
    mu = np.zeros((2, 2))
    np.testing.assert_allclose(sum_of_squares(y_rep, mu), [2.0, 4.0])


def test_bayesian_pvalue_mean_of_indicator():
    assert bayesian_pvalue([0, 1, 1, 0]) == 0.5
    assert bayesian_pvalue(np.ones(10)) == 1.0
    assert bayesian_pvalue(np.zeros(10)) == 0.0


def test_bayesian_pvalue_rejects_non_indicator():
    with pytest.raises(ValueError):
        bayesian_pvalue([0, 0.5, 1])


def test_bayesian_pvalue_rejects_empty():
    with pytest.raises(ValueError):
        bayesian_pvalue([])


def test_pvalue_near_half_for_correct_model():
    # Under the true model the p-value is uniform, so its average over
    # repeated data sets sits at 0.5
    rng = np.random.default_rng(1)
    n_sets, n_draws, n_obs, sigma = 200, 500, 30, 0.1
    mu = np.tile(np.linspace(1, 4, n_obs), (n_draws, 1))

    pvalues = []
    for _ in range(n_sets):
        y = mu[0] + rng.normal(0, sigma, size=n_obs)
        y_rep = mu + rng.normal(0, sigma, size=(n_draws, n_obs))
        pvalues.append(bayesian_pvalue_from_replicates(y, y_rep, mu))

    pvalues = np.array(pvalues)
    assert ((pvalues >= 0) & (pvalues <= 1)).all()
    assert pvalues.mean() == pytest.approx(0.5, abs=0.08)


def test_pvalue_extreme_for_misfit():
    rng = np.random.default_rng(2)
    n_draws, n_obs = 2000, 30
    mu = np.zeros((n_draws, n_obs))
    # Observed data far more dispersed than the model allows
    y = rng.normal(0, 5.0, size=n_obs)
    y_rep = rng.normal(0, 0.1, size=(n_draws, n_obs))
    assert bayesian_pvalue_from_replicates(y, y_rep, mu) == 0.0


def test_pvalue_from_replicates_shape_mismatch():
    with pytest.raises(ValueError, match="Shape mismatch"):
        bayesian_pvalue_from_replicates(np.zeros(3), np.zeros((5, 3)), np.zeros((4, 3)))


def test_interval_coverage():
    y_rep = np.tile(np.arange(101, dtype=float)[:, None], (1, 3))
    y = np.array([50.0, 2.0, 200.0])
    assert interval_coverage(y, y_rep, ci=0.9) == pytest.approx(1 / 3)
