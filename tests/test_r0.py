"""Tests for R0 post-processing."""

import numpy as np
import pandas as pd
import pytest

from zika_r0.postprocess.r0 import (
    r0_from_slope,
    r0_from_draws,
    r0_table,
    summarize_draws,
    predicted_values,
    write_outputs,
)


def test_r0_formula_exact():
    assert r0_from_slope(0.3, 14.0) == pytest.approx(1 + 0.3 * 14.0 / 7)
    assert r0_from_slope(0.0, 10.0) == 1.0


def test_r0_zero_growth_is_one():
    np.testing.assert_array_equal(r0_from_slope(np.zeros(4), 16.5), np.ones(4))


def test_r0_broadcast():
    beta = np.array([0.1, 0.2, 0.5])
    si = np.array([10.0, 16.5, 23.0])
    np.testing.assert_allclose(r0_from_slope(beta, si), 1 + beta * si / 7)
    np.testing.assert_allclose(r0_from_slope(beta, 7.0), 1 + beta)


def test_r0_rejects_non_positive_serial_interval():
    with pytest.raises(ValueError):
        r0_from_slope(0.3, 0.0)


def test_r0_from_draws():
    rng = np.random.default_rng(0)
    beta = rng.normal(0.3, 0.05, size=(200, 3))
    si = rng.uniform(10, 23, size=(200, 3))
    np.testing.assert_allclose(r0_from_draws(beta, si), 1 + beta * si / 7)


def test_r0_from_draws_shape_mismatch():
    with pytest.raises(ValueError, match="Shape mismatch"):
        r0_from_draws(np.zeros((10, 3)), np.ones((10, 2)))


def test_summarize_draws():
    draws = np.column_stack([np.arange(101, dtype=float), np.full(101, 2.0)])
    s = summarize_draws(draws, ci=0.9)
    assert s["department"].tolist() == [1, 2]
    assert s.loc[0, "mean"] == pytest.approx(50.0)
    assert s.loc[0, "low"] == pytest.approx(5.0)
    assert s.loc[0, "high"] == pytest.approx(95.0)
    assert s.loc[1, "low"] == s.loc[1, "high"] == 2.0


def test_summarize_draws_bad_ci():
    with pytest.raises(ValueError):
        summarize_draws(np.zeros(10), ci=1.0)


def test_r0_table_maps_bounds():
    slopes = pd.DataFrame({
        "department": [1, 2],
        "beta_low": [0.1, 0.2],
        "beta_mean": [0.2, 0.3],
        "beta_high": [0.3, 0.4],
    })
    table = r0_table(slopes, serial_interval_days=14.0)
    assert list(table.columns) == ["department", "r0_low", "r0_mean", "r0_high"]
    np.testing.assert_allclose(table["r0_low"], [1.2, 1.4])
    np.testing.assert_allclose(table["r0_mean"], [1.4, 1.6])
    np.testing.assert_allclose(table["r0_high"], [1.6, 1.8])
    assert (table["r0_low"] <= table["r0_mean"]).all()
    assert (table["r0_mean"] <= table["r0_high"]).all()


def test_predicted_values():
    df = pd.DataFrame({
        "department": [1, 1, 2],
        "week": [0, 2, 1],
        "cases": [3.0, 8.0, 5.0],
    })
    pred = predicted_values(df, alpha=np.array([1.0, 2.0]), beta=np.array([0.5, 0.1]))
    assert list(pred.columns) == ["department", "week", "observed_cases", "predicted_cases"]
    np.testing.assert_allclose(pred["predicted_cases"], np.exp([1.0, 2.0, 2.1]))
    np.testing.assert_allclose(pred["observed_cases"], df["cases"])


def test_predicted_values_too_few_parameters():
    df = pd.DataFrame({"department": [1, 3], "week": [0, 0], "cases": [1.0, 1.0]})
    with pytest.raises(ValueError):
        predicted_values(df, alpha=np.zeros(2), beta=np.zeros(2))


def test_write_outputs(tmp_path):
    r0 = pd.DataFrame({"department": [1], "r0_low": [1.1], "r0_mean": [1.5], "r0_high": [2.0]})
    pred = pd.DataFrame({"department": [1], "week": [0], "observed_cases": [3.0], "predicted_cases": [2.9]})
    written = write_outputs(tmp_path / "results", r0_df=r0, predicted_df=pred)
    assert written["r0"].name == "R0.csv"
    assert written["predicted"].name == "predicted.csv"
    pd.testing.assert_frame_equal(pd.read_csv(written["r0"]), r0)


def test_write_outputs_skips_missing_tables(tmp_path):
    written = write_outputs(tmp_path, r0_df=None, predicted_df=None)
    assert written == {}


def test_r0_table_reproduces_constant_multiplier():
    # A 9.9 multiplier on weekly slopes corresponds to a 69.3-day interval
    slopes = pd.DataFrame({
        "department": [1, 2],
        "beta_low": [0.10, 0.25],
        "beta_mean": [0.20, 0.30],
        "beta_high": [0.30, 0.35],
    })
    table = r0_table(slopes, serial_interval_days=9.9 * 7)
    np.testing.assert_allclose(table["r0_mean"], 1 + 9.9 * slopes["beta_mean"])
    np.testing.assert_allclose(table["r0_low"], 1 + 9.9 * slopes["beta_low"])
