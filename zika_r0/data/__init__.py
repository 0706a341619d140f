"""Data module - loading, validation and synthetic outbreak data."""

from zika_r0.data.loader import (
    load_observations,
    check_week_zero,
    derive_intercepts,
    build_regression_data,
    load_climate_classes,
    build_anova_data,
    load_regression_inputs,
)

from zika_r0.data.simulate import (
    simulate_observations,
    simulate_climate_classes,
    simulate_grouped_values,
)

__all__ = [
    'load_observations',
    'check_week_zero',
    'derive_intercepts',
    'build_regression_data',
    'load_climate_classes',
    'build_anova_data',
    'load_regression_inputs',
    'simulate_observations',
    'simulate_climate_classes',
    'simulate_grouped_values',
]
