"""Evaluation module - posterior predictive goodness of fit."""

from zika_r0.evaluation.goodness_of_fit import (
    sum_of_squares,
    bayesian_pvalue,
    bayesian_pvalue_from_replicates,
    interval_coverage,
)

__all__ = [
    'sum_of_squares',
    'bayesian_pvalue',
    'bayesian_pvalue_from_replicates',
    'interval_coverage',
]
