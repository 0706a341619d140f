"""Post-processing - R0 estimates and predicted values."""

from zika_r0.postprocess.r0 import (
    DAYS_PER_WEEK,
    r0_from_slope,
    r0_from_draws,
    r0_table,
    summarize_draws,
    predicted_values,
    write_outputs,
)

__all__ = [
    'DAYS_PER_WEEK',
    'r0_from_slope',
    'r0_from_draws',
    'r0_table',
    'summarize_draws',
    'predicted_values',
    'write_outputs',
]
