"""
Shared machinery for models whose inference runs in Stan.

Subclasses name their Stan program, the parameters monitored by default,
and the parameters checked for convergence; data preparation and
interpretation of the posterior live in the subclass.
"""
import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional

from ..base import BaseModel
from .sampler import (
    SamplerConfig,
    get_stan_file,
    compile_model,
    run_sampler,
    summarize,
    flatten_draws,
    get_diagnostics,
    print_diagnostics,
)


class StanModel(BaseModel):
    """Base class for CmdStanPy-backed models."""

    stan_name: str = ''
    default_monitor: List[str] = []
    key_params: List[str] = []

    def __init__(self, name: str, config: Optional[Dict] = None):
        super().__init__(name=name, config=config)

        monitor = self.config.get('monitor') or self.default_monitor
        self.sampler_config = SamplerConfig.from_dict(self.config, monitor=monitor)
        self.ci = self.config.get('ci', 0.95)
        self.stan_file = self.config.get('stan_file', None)

        # Fitted objects
        self.model_ = None
        self.fit_ = None
        self.data_ = None

    def _sample(self, stan_data: Dict[str, Any], inits: Optional[Any] = None) -> None:
        stan_file = get_stan_file(self.stan_name, self.stan_file)
        self.model_ = compile_model(stan_file)
        self.data_ = stan_data
        self.fit_ = run_sampler(self.model_, stan_data, self.sampler_config, inits=inits)
        self.is_fitted = True

    def summary(self, ci: Optional[float] = None) -> pd.DataFrame:
        self._check_fitted()
        return summarize(self.fit_, self.sampler_config.monitor, ci=ci or self.ci)

    def stan_variable(self, name: str) -> np.ndarray:
        """Posterior draws of one variable, shape (n_draws, ...)."""
        self._check_fitted()
        return np.asarray(self.fit_.stan_variable(name))

    def draws(self, name: str) -> pd.DataFrame:
        """Posterior draws of one variable, one column per element."""
        self._check_fitted()
        return flatten_draws(self.fit_, name)

    def get_diagnostics(self) -> Dict[str, Any]:
        self._check_fitted()
        return get_diagnostics(self.fit_, self.key_params)

    def print_diagnostics(self) -> None:
        print_diagnostics(self.get_diagnostics())
