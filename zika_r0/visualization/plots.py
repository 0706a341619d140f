"""
Figures for R0 estimates and growth-curve fits.

Figures are written to disk and closed; nothing is shown interactively.
"""
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


FIGSIZE = (10, 6)
DPI = 150


def plot_r0_intervals(r0_df: pd.DataFrame, out_path: Path, dpi: int = DPI) -> Path:
    """
    Forest plot of R0 per department.

    Args:
        r0_df: DataFrame with columns department, r0_low, r0_mean, r0_high
        out_path: PNG destination

    Returns:
        out_path
    """
    r0_df = r0_df.sort_values('department')
    y = np.arange(len(r0_df))
    err = np.vstack([
        r0_df['r0_mean'] - r0_df['r0_low'],
        r0_df['r0_high'] - r0_df['r0_mean'],
    ])

    fig, ax = plt.subplots(figsize=(8, max(3, 0.35 * len(r0_df) + 1)), dpi=dpi)
    ax.errorbar(
        r0_df['r0_mean'], y,
        xerr=err,
        fmt='o',
        color='#1f77b4',
        ecolor='#1f77b4',
        capsize=3,
        label='R0 (mean and interval)',
    )
    ax.axvline(1.0, color='red', linestyle='--', linewidth=1.5, label='R0 = 1')

    ax.set_yticks(y)
    ax.set_yticklabels([str(d) for d in r0_df['department']])
    ax.set_xlabel('R0', fontsize=12, fontweight='bold')
    ax.set_ylabel('Department', fontsize=12, fontweight='bold')
    ax.set_title('Basic reproduction number by department', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3, linestyle='--')
    ax.legend(loc='lower right', framealpha=0.95, fontsize=10)
    plt.tight_layout()

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return out_path


def plot_growth_fits(predicted_df: pd.DataFrame, out_path: Path, dpi: int = DPI) -> Path:
    """
    Observed and fitted cumulative cases (log scale) per department.

    Args:
        predicted_df: Output of predicted_values()
        out_path: PNG destination

    Returns:
        out_path
    """
    fig, ax = plt.subplots(figsize=FIGSIZE, dpi=dpi)
    colors = plt.cm.tab10.colors

    for i, (dept, g) in enumerate(predicted_df.groupby('department')):
        g = g.sort_values('week')
        color = colors[i % len(colors)]
        ax.plot(g['week'], g['observed_cases'], 'o', color=color, markersize=4, alpha=0.7)
        ax.plot(g['week'], g['predicted_cases'], '-', color=color, linewidth=2, label=f'Dept {dept}')

    ax.set_yscale('log')
    ax.set_xlabel('Week', fontsize=12, fontweight='bold')
    ax.set_ylabel('Cumulative cases', fontsize=12, fontweight='bold')
    ax.set_title('Observed (points) and fitted (lines) growth', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3, linestyle='--')
    if predicted_df['department'].nunique() <= 12:
        ax.legend(loc='upper left', framealpha=0.95, fontsize=9)
    plt.tight_layout()

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return out_path
