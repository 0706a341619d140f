"""Smoke tests for figures."""

import numpy as np
import pandas as pd

from zika_r0.postprocess.r0 import predicted_values
from zika_r0.visualization.plots import plot_r0_intervals, plot_growth_fits


def test_plot_r0_intervals(tmp_path):
    r0 = pd.DataFrame({
        'department': [2, 1, 3],
        'r0_low': [1.2, 1.1, 0.9],
        'r0_mean': [1.6, 1.4, 1.3],
        'r0_high': [2.1, 1.9, 1.8],
    })
    out = plot_r0_intervals(r0, tmp_path / 'plots' / 'r0.png', dpi=50)
    assert out.exists()
    assert out.stat().st_size > 0


def test_plot_growth_fits(tmp_path, sim_df):
    truth = sim_df.attrs['truth']
    pred = predicted_values(sim_df, truth['alpha'], truth['beta'])
    out = plot_growth_fits(pred, tmp_path / 'growth.png', dpi=50)
    assert out.exists()
    assert np.all(pred['predicted_cases'] > 0)
