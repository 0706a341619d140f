"""Shared fixtures for the zika_r0 tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from zika_r0.data.simulate import simulate_observations, write_observations


@pytest.fixture
def sim_df():
    return simulate_observations(n_departments=3, n_weeks=10, seed=7)


@pytest.fixture
def obs_csv(tmp_path, sim_df):
    path = tmp_path / "dept_totals.csv"
    write_observations(sim_df, path)
    return path


@pytest.fixture
def write_csv(tmp_path):
    """Write raw text to a CSV file in tmp_path and return its path."""
    def _write(text, name="input.csv"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write
