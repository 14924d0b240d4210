"""
Path Statistics Module
======================
Descriptive diagnostics of the per-path worst-drawdown sample and the
headline risk classification.

Mathematical Definitions:
    Path loss (%):   L_k = W_k / V_0 · 100
    Loss share:      #{k : W_k > 0} / N
"""

from typing import Dict

import numpy as np
import pandas as pd
from scipy import stats as scipy_stats


# ─────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────
HIGH_RISK_THRESHOLD: float = 15.0


def path_loss_percentages(
    path_drawdowns: np.ndarray, initial_value: float
) -> np.ndarray:
    """Per-path worst drawdown expressed as a percentage of the baseline."""
    return np.asarray(path_drawdowns, dtype=float) / initial_value * 100


def summarize_drawdowns(
    path_drawdowns: np.ndarray, initial_value: float
) -> Dict[str, float]:
    """
    Summary statistics of the worst-drawdown distribution.

    Skewness and excess kurtosis describe how concentrated the bad
    paths are; both are reported as 0 for a degenerate (constant)
    sample.

    Parameters
    ----------
    path_drawdowns : np.ndarray
        Per-path worst drawdowns (price units).
    initial_value : float
        Baseline portfolio value.

    Returns
    -------
    dict
        mean, median, std and max loss (%), share of paths with a
        loss, skewness, excess kurtosis and number of paths.
    """
    losses = path_loss_percentages(path_drawdowns, initial_value)
    if losses.size == 0:
        raise ValueError("path_drawdowns is empty")

    std = float(losses.std(ddof=1)) if losses.size > 1 else 0.0

    # scipy returns nan for a constant sample
    if losses.size > 2 and np.ptp(losses) > 0:
        skewness = float(scipy_stats.skew(losses))
        excess_kurtosis = float(scipy_stats.kurtosis(losses))
    else:
        skewness = 0.0
        excess_kurtosis = 0.0

    return {
        "mean_loss_pct": float(losses.mean()),
        "median_loss_pct": float(np.median(losses)),
        "std_loss_pct": std,
        "max_loss_pct": float(losses.max()),
        "loss_path_share": float(np.mean(losses > 0)),
        "skewness": skewness,
        "excess_kurtosis": excess_kurtosis,
        "num_paths": int(losses.size),
    }


def classify_risk(risk_pct: float, threshold: float = HIGH_RISK_THRESHOLD) -> str:
    return "High Risk!" if risk_pct > threshold else "Risk Acceptable"


def drawdown_table(results: Dict[str, object]) -> pd.DataFrame:
    """
    Per-path table built from :func:`run_risk_engine` results.

    Columns: path, worst_drawdown, loss_pct.
    """
    drawdowns = np.asarray(results["path_drawdowns"], dtype=float)
    return pd.DataFrame({
        "path": np.arange(drawdowns.size),
        "worst_drawdown": drawdowns,
        "loss_pct": path_loss_percentages(drawdowns, results["initial_value"]),
    })
