"""Bayesian models fitted with CmdStanPy."""

from zika_r0.models.bayesian.sampler import SamplerConfig, check_cmdstan
from zika_r0.models.bayesian.hierarchical_regression import HierarchicalRegression
from zika_r0.models.bayesian.anova import OneWayAnova

__all__ = [
    'SamplerConfig',
    'check_cmdstan',
    'HierarchicalRegression',
    'OneWayAnova',
]
