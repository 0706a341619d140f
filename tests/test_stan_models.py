"""End-to-end fits with CmdStan.

Skipped when CmdStan is not installed (python -m cmdstanpy.install_cmdstan).
"""

import numpy as np
import pytest

import cmdstanpy
from zika_r0.data.simulate import simulate_observations, simulate_grouped_values
from zika_r0.models.bayesian.hierarchical_regression import HierarchicalRegression
from zika_r0.models.bayesian.anova import OneWayAnova


def _has_cmdstan():
    try:
        cmdstanpy.cmdstan_path()
    except ValueError:
        return False
    return True


pytestmark = [
    pytest.mark.slow,
    pytest.mark.skipif(not _has_cmdstan(), reason="CmdStan not installed"),
]

SAMPLER = {
    'n_chains': 4,
    'n_warmup': 1000,
    'n_samples': 1000,
    'seed': 20160101,
    'adapt_delta': 0.99,
    'show_progress': False,
}


@pytest.fixture(scope="module")
def regression():
    df = simulate_observations(
        n_departments=3,
        n_weeks=10,
        beta_mu=0.3,
        beta_sigma=0.02,
        sigma=0.1,
        seed=2016,
    )
    return HierarchicalRegression(config=SAMPLER).fit(df)


@pytest.fixture(scope="module")
def anova():
    values = simulate_grouped_values({'A': 1.5, 'B': 2.0, 'C': 2.5}, n_per_group=8, sigma=0.2, seed=3)
    climate = values[['department', 'climate']]
    r0 = values.rename(columns={'value': 'r0_mean'})[['department', 'r0_mean']]
    return OneWayAnova(config={**SAMPLER, 'n_chains': 2}).fit(r0, climate_df=climate)


def test_beta_mu_recovered(regression):
    s = regression.summary()
    assert s.loc['beta_mu', 'mean'] == pytest.approx(0.3, abs=0.1)
    assert s.loc['beta_mu', 'ci_low'] < 0.3 < s.loc['beta_mu', 'ci_high']


def test_department_slopes_recovered(regression):
    truth = regression.observations_.attrs['truth']
    slopes = regression.slope_summary()
    np.testing.assert_allclose(slopes['beta_mean'], truth['beta'], atol=0.05)


def test_pvalue_in_unit_interval(regression):
    assert 0.0 <= regression.bayesian_pvalue() <= 1.0


def test_pvalue_near_half_across_datasets():
    # A single data set gives one noisy p-value; average over several
    config = {**SAMPLER, 'n_chains': 2, 'n_warmup': 500}
    pvalues = []
    for seed in range(6):
        df = simulate_observations(
            n_departments=3,
            n_weeks=10,
            beta_mu=0.3,
            beta_sigma=0.02,
            sigma=0.1,
            seed=100 + seed,
        )
        model = HierarchicalRegression(config=config).fit(df)
        pvalues.append(model.bayesian_pvalue())

    pvalues = np.array(pvalues)
    assert ((pvalues >= 0) & (pvalues <= 1)).all()
    assert pvalues.mean() == pytest.approx(0.5, abs=0.2)


def test_pvalue_matches_replicates(regression):
    check = regression.check_fit(ci=0.9)
    # Replicates are written with limited precision, so allow a little slack
    assert check['pvalue_replicates'] == pytest.approx(check['pvalue'], abs=0.02)
    assert 0.5 < check['coverage'] <= 1.0


def test_r0_draws_follow_formula(regression):
    beta = regression.stan_variable('beta')
    si = regression.stan_variable('serial_interval')
    r0 = regression.stan_variable('R0')
    np.testing.assert_allclose(r0, 1 + beta * si / 7, rtol=1e-4)
    assert si.min() >= 10 and si.max() <= 23


def test_r0_mean_uses_beta_mu(regression):
    beta_mu = regression.stan_variable('beta_mu')
    si_mean = regression.stan_variable('si_mean')
    np.testing.assert_allclose(regression.stan_variable('R0_mean'), 1 + beta_mu * si_mean / 7, rtol=1e-4)


def test_r0_summary_and_predicted(regression):
    r0 = regression.r0_summary()
    assert list(r0.columns) == ['department', 'r0_low', 'r0_mean', 'r0_high']
    assert (r0['r0_low'] < r0['r0_mean']).all() and (r0['r0_mean'] < r0['r0_high']).all()

    fixed = regression.r0_fixed_interval(16.5)
    slopes = regression.slope_summary()
    np.testing.assert_allclose(fixed['r0_mean'], 1 + slopes['beta_mean'] * 16.5 / 7)

    pred = regression.predicted()
    assert len(pred) == len(regression.observations_)
    ratio = pred['predicted_cases'] / pred['observed_cases']
    assert ratio.between(0.5, 2.0).all()


def test_regression_diagnostics(regression):
    diag = regression.get_diagnostics()
    assert diag['max_rhat'] < 1.1
    assert 'beta_mu' in diag['parameter_summary']


def test_anova_sum_to_zero(anova):
    residual = anova.constraint_residual()
    assert residual.shape == (anova.sampler_config.n_draws,)
    np.testing.assert_allclose(residual, 0.0, atol=1e-4)


def test_anova_class_means(anova):
    effects = anova.effects()
    assert effects['climate'].tolist() == ['A', 'B', 'C']
    np.testing.assert_allclose(effects['mean'], [1.5, 2.0, 2.5], atol=0.3)
    assert effects['effect_mean'].sum() == pytest.approx(0.0, abs=1e-4)


def test_anova_f_test(anova):
    result = anova.f_test()
    assert result['p_value'] < 0.01
