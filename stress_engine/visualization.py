"""
Visualization Module
====================
Static charts for stress run reporting.

Generated Figures:
    1. Distribution of per-path worst drawdowns
    2. Mark-to-market position breakdown
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.ticker as mtick
import seaborn as sns
from pathlib import Path

from stress_engine.statistics import path_loss_percentages


# ─────────────────────────────────────────────────────────────
# Style Configuration
# ─────────────────────────────────────────────────────────────
plt.rcParams.update({
    "figure.figsize": (12, 7),
    "figure.dpi": 150,
    "font.size": 11,
    "font.family": "serif",
    "axes.grid": True,
    "grid.alpha": 0.3,
    "axes.spines.top": False,
    "axes.spines.right": False,
})

COLORS = {
    "primary": "#1f77b4",
    "worst": "#d62728",
    "mean": "#ff7f0e",
}


def save_figure(fig: plt.Figure, name: str, output_dir: str = "results/figures") -> str:
    """Save figure to disk and return the path."""
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    filepath = path / f"{name}.png"
    fig.savefig(filepath, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    return str(filepath)


def plot_drawdown_distribution(
    path_drawdowns: np.ndarray,
    initial_value: float,
    risk_pct: float,
    title: str = "Monte Carlo Worst Drawdown per Stress Path",
    output_dir: str = "results/figures",
) -> str:
    """
    Histogram of per-path worst drawdowns with the headline risk line.

    Parameters
    ----------
    path_drawdowns : np.ndarray
        Per-path worst drawdowns (price units).
    initial_value : float
        Baseline portfolio value.
    risk_pct : float
        Headline stress risk (%).
    title : str
        Plot title.
    output_dir : str
        Output directory for figure.

    Returns
    -------
    str
        Path to saved figure.
    """
    losses = path_loss_percentages(path_drawdowns, initial_value)

    fig, ax = plt.subplots(figsize=(14, 7))

    sns.histplot(
        losses, bins=min(50, max(10, losses.size // 4)), stat="density",
        color=COLORS["primary"], alpha=0.7, edgecolor="none", ax=ax,
        label="Path worst drawdown",
    )

    ax.axvline(losses.mean(), color=COLORS["mean"], linewidth=2,
               linestyle=":", label=f"Mean = {losses.mean():.2f}%")
    ax.axvline(risk_pct, color=COLORS["worst"], linewidth=2,
               linestyle="--", label=f"Stress risk = {risk_pct:.2f}%")

    ax.set_xlabel("Worst Drawdown (% of baseline)", fontsize=12)
    ax.set_ylabel("Density", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=11, loc="upper right")
    ax.xaxis.set_major_formatter(mtick.PercentFormatter(100.0))

    return save_figure(fig, "stress_drawdown_distribution", output_dir)


def plot_position_values(
    values: pd.Series,
    output_dir: str = "results/figures",
) -> str:
    """Bar chart of mark-to-market value per holding."""
    fig, ax = plt.subplots(figsize=(10, 6))

    sns.barplot(x=values.index, y=values.values, color=COLORS["primary"], ax=ax)

    total = values.sum()
    for i, v in enumerate(values.values):
        share = v / total * 100 if total > 0 else 0.0
        ax.text(i, v, f"{share:.1f}%", ha="center", va="bottom", fontsize=10)

    ax.set_xlabel("Symbol", fontsize=12)
    ax.set_ylabel("Position Value", fontsize=12)
    ax.set_title("Baseline Position Values", fontsize=14, fontweight="bold")

    return save_figure(fig, "position_values", output_dir)
