"""
Sampler driver: runs CmdStan through CmdStanPy and collects results.

Sampling configuration mirrors the classic MCMC run settings (chains,
burn-in, post-burn-in samples, thinning, seed, monitored parameters).
Whatever CmdStan reports (compilation errors, failed chains, numerical
problems) is propagated to the caller; nothing is retried here.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
import cmdstanpy
from cmdstanpy import CmdStanModel


STAN_DIR = Path(__file__).resolve().parent.parent.parent / "stan_models"


@dataclass
class SamplerConfig:
    """MCMC run settings."""
    n_chains: int = 1
    n_warmup: int = 1000
    n_samples: int = 10000
    thin: int = 1
    seed: Optional[int] = 0
    monitor: List[str] = field(default_factory=list)
    adapt_delta: Optional[float] = None
    sig_figs: Optional[int] = None
    show_progress: bool = True
    output_dir: Optional[str] = None

    def __post_init__(self):
        for name in ('n_chains', 'n_samples', 'thin'):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if int(self.n_warmup) < 0:
            raise ValueError(f"n_warmup must be >= 0, got {self.n_warmup}")
        if self.adapt_delta is not None and not 0 < self.adapt_delta < 1:
            raise ValueError(f"adapt_delta must be in (0, 1), got {self.adapt_delta}")
        self.monitor = list(self.monitor or [])

    @classmethod
    def from_dict(cls, cfg: Optional[Dict[str, Any]], monitor: Optional[Sequence[str]] = None) -> 'SamplerConfig':
        """
        Build from a config dict (e.g. the `sampler` section of the YAML).

        Unknown keys are ignored. A `monitor` argument overrides the dict.
        """
        cfg = dict(cfg or {})
        known = set(cls.__dataclass_fields__)
        kwargs = {k: v for k, v in cfg.items() if k in known}
        if monitor is not None:
            kwargs['monitor'] = list(monitor)
        elif isinstance(kwargs.get('monitor'), dict):
            # Per-model monitor lists must be selected by the caller
            kwargs.pop('monitor')
        return cls(**kwargs)

    @property
    def n_draws(self) -> int:
        """Total retained draws across chains."""
        return self.n_chains * ((self.n_samples + self.thin - 1) // self.thin)


def select_monitor(monitor: Any, model_key: str) -> Optional[List[str]]:
    """
    Monitored parameters for one model from the `sampler.monitor` config.

    The config may hold per-model lists keyed by model name, or one list
    shared by every model. Returns None when nothing is configured, so the
    model's own default applies.
    """
    if isinstance(monitor, dict):
        monitor = monitor.get(model_key)
    if monitor is None:
        return None
    if isinstance(monitor, str):
        return [monitor]
    return list(monitor)


def check_cmdstan() -> str:
    """
    Return the CmdStan installation path.

    Raises:
        RuntimeError: if CmdStan has not been installed
    """
    try:
        return cmdstanpy.cmdstan_path()
    except ValueError as e:
        raise RuntimeError(
            "CmdStan installation not found. Install with: "
            "python -m cmdstanpy.install_cmdstan"
        ) from e


def get_stan_file(name: str, stan_file: Optional[str] = None) -> Path:
    """
    Resolve a Stan program.

    Args:
        name: Model file stem inside zika_r0/stan_models (e.g. "one_way_anova")
        stan_file: Explicit path that overrides the packaged model

    Returns:
        Path to an existing .stan file
    """
    path = Path(stan_file) if stan_file else STAN_DIR / f"{name}.stan"
    if not path.exists():
        raise FileNotFoundError(f"Stan model not found: {path}")
    return path


def compile_model(stan_file: Path) -> CmdStanModel:
    check_cmdstan()
    print(f"Compiling Stan model from {stan_file}...")
    return CmdStanModel(stan_file=str(stan_file))


def run_sampler(
    model: Union[CmdStanModel, str, Path],
    data: Dict[str, Any],
    config: SamplerConfig,
    inits: Optional[Any] = None
) -> 'cmdstanpy.CmdStanMCMC':
    """
    Run NUTS sampling.

    Args:
        model: Compiled model, or path to a .stan file to compile first
        data: Stan data dictionary
        config: Sampler settings
        inits: Initial values; None lets CmdStan pick random inits

    Returns:
        CmdStanMCMC fit object
    """
    if not isinstance(model, CmdStanModel):
        model = compile_model(Path(model))

    print(f"Running MCMC: {config.n_chains} chains, {config.n_warmup} warmup, "
          f"{config.n_samples} samples, thin={config.thin}...")

    kwargs = {
        'data': data,
        'chains': config.n_chains,
        'iter_warmup': config.n_warmup,
        'iter_sampling': config.n_samples,
        'thin': config.thin,
        'seed': config.seed,
        'inits': inits,
        'show_progress': config.show_progress,
    }
    if config.adapt_delta is not None:
        kwargs['adapt_delta'] = config.adapt_delta
    if config.sig_figs is not None:
        kwargs['sig_figs'] = config.sig_figs
    if config.output_dir is not None:
        Path(config.output_dir).mkdir(parents=True, exist_ok=True)
        kwargs['output_dir'] = config.output_dir

    return model.sample(**kwargs)


def flatten_draws(fit, name: str) -> pd.DataFrame:
    """
    Draws of one (scalar or vector) variable as a DataFrame.

    Columns are named `name` for scalars and `name[k]` (1-based) otherwise.
    """
    arr = np.asarray(fit.stan_variable(name), dtype=float)
    if arr.ndim == 1:
        return pd.DataFrame({name: arr})
    arr = arr.reshape(arr.shape[0], -1)
    cols = [f"{name}[{k + 1}]" for k in range(arr.shape[1])]
    return pd.DataFrame(arr, columns=cols)


def _pick(summary: pd.DataFrame, candidates: Sequence[str]) -> Optional[str]:
    for col in candidates:
        if col in summary.columns:
            return col
    return None


def summarize(fit, monitor: Sequence[str], ci: float = 0.95) -> pd.DataFrame:
    """
    Summary statistics for monitored parameters.

    Args:
        fit: CmdStanMCMC fit
        monitor: Variable names to include
        ci: Central credible interval mass

    Returns:
        DataFrame indexed by parameter (e.g. 'beta[2]') with columns
        mean, sd, ci_low, median, ci_high, r_hat, ess_bulk, ess_tail
    """
    if not 0 < ci < 1:
        raise ValueError(f"ci must be in (0, 1), got {ci}")
    lo_q, hi_q = (1 - ci) / 2, 1 - (1 - ci) / 2

    frames = [flatten_draws(fit, name) for name in monitor]
    if not frames:
        raise ValueError("No parameters to summarize")
    draws = pd.concat(frames, axis=1)

    out = pd.DataFrame({
        'mean': draws.mean(),
        'sd': draws.std(ddof=1),
        'ci_low': draws.quantile(lo_q),
        'median': draws.median(),
        'ci_high': draws.quantile(hi_q),
    })

    # Convergence columns from CmdStan's own summary
    stan_summary = fit.summary()
    rhat_col = _pick(stan_summary, ['R_hat'])
    bulk_col = _pick(stan_summary, ['ESS_bulk', 'N_Eff'])
    tail_col = _pick(stan_summary, ['ESS_tail', 'N_Eff'])
    for col, src in (('r_hat', rhat_col), ('ess_bulk', bulk_col), ('ess_tail', tail_col)):
        if src is None:
            out[col] = np.nan
        else:
            out[col] = stan_summary[src].reindex(out.index).astype(float)

    return out


def get_diagnostics(fit, key_params: Sequence[str]) -> Dict[str, Any]:
    """
    Get MCMC diagnostics.

    Returns:
        Dictionary with divergences, worst R-hat / ESS and a per-parameter table
    """
    summary = fit.summary()
    rhat_col = _pick(summary, ['R_hat'])
    bulk_col = _pick(summary, ['ESS_bulk', 'N_Eff'])
    tail_col = _pick(summary, ['ESS_tail', 'N_Eff'])

    # lp__ and generated quantities (e.g. the 0/1 p-value indicator) are not
    # meaningful for convergence checks
    params = [p for p in summary.index if p.split('[')[0] in set(key_params)]
    sub = summary.loc[params] if params else summary

    diagnostics = {
        'n_divergences': int(np.sum(fit.divergences)),
        'max_rhat': float(sub[rhat_col].max()) if rhat_col else np.nan,
        'min_ess_bulk': float(sub[bulk_col].min()) if bulk_col else np.nan,
        'min_ess_tail': float(sub[tail_col].min()) if tail_col else np.nan,
        'parameter_summary': {}
    }

    for param in key_params:
        if param in summary.index:
            row = summary.loc[param]
            diagnostics['parameter_summary'][param] = {
                'mean': row['Mean'],
                'std': row['StdDev'],
                'rhat': row[rhat_col] if rhat_col else np.nan,
                'ess_bulk': row[bulk_col] if bulk_col else np.nan,
            }

    return diagnostics


def print_diagnostics(diag: Dict[str, Any]) -> None:
    """Print formatted diagnostics summary."""
    print("\n" + "=" * 50)
    print("MCMC DIAGNOSTICS")
    print("=" * 50)

    print(f"\nDivergences: {diag['n_divergences']}")
    print(f"Max R-hat: {diag['max_rhat']:.4f}")
    print(f"Min ESS (bulk): {diag['min_ess_bulk']:.0f}")
    print(f"Min ESS (tail): {diag['min_ess_tail']:.0f}")

    print("\nParameter Estimates:")
    print("-" * 50)
    print(f"{'Parameter':<15} {'Mean':>10} {'Std':>10} {'R-hat':>8} {'ESS':>8}")
    print("-" * 50)

    for param, vals in diag['parameter_summary'].items():
        print(f"{param:<15} {vals['mean']:>10.3f} {vals['std']:>10.3f} "
              f"{vals['rhat']:>8.3f} {vals['ess_bulk']:>8.0f}")

    print("\n" + "-" * 50)
    for warning in diagnostic_warnings(diag):
        print(f"WARNING: {warning}")
    if not diagnostic_warnings(diag):
        print("✓ All diagnostics passed")


def diagnostic_warnings(diag: Dict[str, Any]) -> List[str]:
    """Human-readable convergence warnings (empty when all checks pass)."""
    warnings = []
    if diag['n_divergences'] > 0:
        warnings.append(f"{diag['n_divergences']} divergent transitions")
    if diag['max_rhat'] > 1.05:
        warnings.append("R-hat > 1.05 (chains may not have converged)")
    if diag['min_ess_bulk'] < 100:
        warnings.append("Low ESS (< 100)")
    return warnings
