"""
One-way ANOVA relating department R0 estimates to climate class.

Group effects are constrained to sum to zero, so a0 is the grand mean and
a[k] the deviation of class k from it. A classical F-test of the same
grouping is reported alongside the posterior.
"""
import numpy as np
import pandas as pd
from scipy import stats
from typing import Any, Dict, Optional

from zika_r0.data.loader import build_anova_data, stan_data_only
from .stan_model import StanModel


class OneWayAnova(StanModel):
    """Bayesian one-way ANOVA with sum-to-zero effects."""

    stan_name = 'one_way_anova'
    default_monitor = ['a0', 'a', 'sigma']
    key_params = ['a0', 'a', 'sigma']

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(name="one_way_anova", config=config)
        self.classes_ = None

    def fit(
        self,
        df: pd.DataFrame,
        climate_df: Optional[pd.DataFrame] = None,
        value_col: str = 'r0_mean',
        inits: Optional[Any] = None
    ) -> 'OneWayAnova':
        """
        Fit via MCMC.

        Args:
            df: Per-department values with 'department' and value_col; if
                climate_df is None it must already carry a 'climate' column
            climate_df: Output of load_climate_classes()
            value_col: Response column
            inits: Initial values passed to CmdStan

        Returns:
            self
        """
        if climate_df is None:
            if 'climate' not in df.columns:
                raise ValueError("Need a climate table or a 'climate' column")
            climate_df = df[['department', 'climate']]

        data = build_anova_data(df, climate_df, value_col=value_col)
        self.classes_ = data['classes']
        print(f"Data summary: N={data['N']}, K={data['K']} classes {self.classes_}")

        self._sample(stan_data_only(data), inits=inits)
        return self

    def effects(self, ci: Optional[float] = None) -> pd.DataFrame:
        """
        Posterior class means (a0 + a[k]) and effects a[k].

        Returns:
            DataFrame with columns: climate, effect_mean, mean, low, high
        """
        ci = ci or self.ci
        a0 = self.stan_variable('a0')
        a = self.stan_variable('a')
        class_means = a0[:, None] + a
        lo, hi = np.quantile(class_means, [(1 - ci) / 2, 1 - (1 - ci) / 2], axis=0)
        return pd.DataFrame({
            'climate': self.classes_,
            'effect_mean': a.mean(axis=0),
            'mean': class_means.mean(axis=0),
            'low': lo,
            'high': hi,
        })

    def constraint_residual(self) -> np.ndarray:
        """a[1] + sum(a[2..K]) per draw; zero up to output precision."""
        return self.stan_variable('a').sum(axis=1)

    def f_test(self) -> Dict[str, float]:
        """Classical one-way ANOVA F-test of the fitted data."""
        self._check_fitted()
        x = np.asarray(self.data_['x'])
        y = np.asarray(self.data_['y'])
        groups = [y[x == k] for k in range(1, int(self.data_['K']) + 1)]
        result = stats.f_oneway(*groups)
        return {'f_statistic': float(result.statistic), 'p_value': float(result.pvalue)}
