"""
Monte Carlo Stress Engine (Flagship Module)
===========================================
Runs independent stress paths over isolated market clones and reduces
them to a single worst-case loss percentage.

Mathematical Foundation:
    Baseline:       V_0 = Σ P_i · q_i              (computed once)
    Drawdown:       D_t = V_0 − V_t
    Path worst:     W_k = max(0, max_t D_t)
    Risk:           R   = max_k W_k / V_0 · 100

Design note:
    Each path owns its own market clone and its own random generator,
    spawned from a single SeedSequence.  A fixed seed therefore gives the
    same answer whether the paths run inline or across a worker pool.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from stress_engine.audit import AuditSink, NullAuditSink
from stress_engine.errors import DegenerateBaselineError, InvalidParameterError
from stress_engine.market import Market
from stress_engine.portfolio import Portfolio
from stress_engine.valuation import portfolio_value


# ─────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────
DEFAULT_NUM_SIMULATIONS: int = 200
DEFAULT_VOLATILITY: float = 0.05
DEFAULT_STEPS_PER_PATH: int = 10


def validate_parameters(
    num_simulations: int,
    volatility: float,
    steps_per_path: int = DEFAULT_STEPS_PER_PATH,
) -> None:
    """
    Reject invalid simulation parameters before any work is done.

    Raises
    ------
    InvalidParameterError
        If ``num_simulations`` or ``steps_per_path`` is not a positive
        integer, or ``volatility <= 0``.
    """
    for name, count in (
        ("num_simulations", num_simulations),
        ("steps_per_path", steps_per_path),
    ):
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
            raise InvalidParameterError(
                f"{name} must be an integer, got {count!r}"
            )
    if num_simulations <= 0 or not volatility > 0:
        raise InvalidParameterError(
            "Invalid simulation parameters: "
            f"num_simulations={num_simulations}, volatility={volatility}"
        )
    if steps_per_path <= 0:
        raise InvalidParameterError(
            f"steps_per_path must be positive, got {steps_per_path}"
        )


def compute_baseline(portfolio: Portfolio, market: Market) -> float:
    """
    Value the portfolio on the unstressed market.

    Raises
    ------
    UndefinedInstrumentError
        If a held symbol is missing from the market.
    DegenerateBaselineError
        If the baseline is zero or negative (loss ratio undefined).
    """
    initial_value = portfolio_value(portfolio, market)
    if not initial_value > 0:
        raise DegenerateBaselineError(
            f"Initial portfolio value must be positive, got {initial_value}"
        )
    return initial_value


def spawn_generators(
    num_simulations: int, seed: Optional[int] = None
) -> List[np.random.Generator]:
    """One statistically independent generator per path."""
    children = np.random.SeedSequence(seed).spawn(num_simulations)
    return [np.random.default_rng(child) for child in children]


def simulate_path(
    portfolio: Portfolio,
    market: Market,
    initial_value: float,
    volatility: float,
    steps_per_path: int,
    rng: np.random.Generator,
) -> float:
    """
    Run one stress path on a private clone of ``market``.

    Algorithm:
        1. Clone the market (the source is never touched)
        2. Repeat ``steps_per_path`` times: stress, revalue, track
           D_t = V_0 − V_t
        3. Return the worst drawdown, floored at zero

    Returns
    -------
    float
        Worst drawdown observed on the path (price units, ≥ 0).
    """
    path_market = market.copy()
    worst = 0.0

    for _ in range(steps_per_path):
        path_market.apply_stress(volatility, rng)
        drawdown = initial_value - portfolio_value(portfolio, path_market)
        worst = max(worst, drawdown)

    return worst


def simulate_path_drawdowns(
    portfolio: Portfolio,
    market: Market,
    initial_value: float,
    num_simulations: int,
    volatility: float,
    steps_per_path: int = DEFAULT_STEPS_PER_PATH,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    """
    Worst drawdown of every simulated path.

    Parameters
    ----------
    portfolio : Portfolio
        Holdings (read only).
    market : Market
        Unstressed market each path clones from (read only).
    initial_value : float
        Baseline value V_0.
    num_simulations : int
        Number of independent paths.
    volatility : float
        Stress scale σ.
    steps_per_path : int
        Stress steps per path (default: 10).
    seed : int, optional
        Root seed; ``None`` draws fresh OS entropy.
    max_workers : int, optional
        If greater than 1, paths are distributed over a thread pool.

    Returns
    -------
    np.ndarray
        Per-path worst drawdowns (num_simulations,).
    """
    generators = spawn_generators(num_simulations, seed)

    def run(rng: np.random.Generator) -> float:
        return simulate_path(
            portfolio, market, initial_value, volatility, steps_per_path, rng
        )

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            worst = list(pool.map(run, generators))
    else:
        worst = [run(rng) for rng in generators]

    return np.asarray(worst, dtype=float)


def run_risk_engine(
    portfolio: Portfolio,
    market: Market,
    num_simulations: int = DEFAULT_NUM_SIMULATIONS,
    volatility: float = DEFAULT_VOLATILITY,
    steps_per_path: int = DEFAULT_STEPS_PER_PATH,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    audit: Optional[AuditSink] = None,
) -> Dict[str, object]:
    """
    Full Monte Carlo stress engine execution.

    Parameters
    ----------
    portfolio : Portfolio
        Holdings to stress.
    market : Market
        Unstressed market; left unchanged on return.
    num_simulations : int
        Number of independent paths (> 0).
    volatility : float
        Stress scale σ (> 0).
    steps_per_path : int
        Stress steps per path (> 0).
    seed : int, optional
        Root seed for reproducible runs.
    max_workers : int, optional
        Thread pool size for path execution.
    audit : AuditSink, optional
        Receives lifecycle events; defaults to a no-op sink.

    Returns
    -------
    dict
        Contains: risk_pct, max_loss, initial_value, path_drawdowns,
        num_simulations, volatility, steps_per_path, seed.
    """
    validate_parameters(num_simulations, volatility, steps_per_path)
    initial_value = compute_baseline(portfolio, market)

    if audit is None:
        audit = NullAuditSink()
    audit.record("Risk simulation started")
    logger.debug(
        "Stress run: {} paths x {} steps, volatility={}, baseline={:.2f}",
        num_simulations, steps_per_path, volatility, initial_value,
    )

    path_drawdowns = simulate_path_drawdowns(
        portfolio, market, initial_value, num_simulations, volatility,
        steps_per_path=steps_per_path, seed=seed, max_workers=max_workers,
    )

    max_loss = float(path_drawdowns.max())
    risk_pct = (max_loss / initial_value) * 100

    logger.info("Stress risk {:.4f}% over {} paths", risk_pct, num_simulations)
    audit.record("Simulation completed")

    results = {
        "risk_pct": risk_pct,
        "max_loss": max_loss,
        "initial_value": initial_value,
        "path_drawdowns": path_drawdowns,
        "num_simulations": num_simulations,
        "volatility": volatility,
        "steps_per_path": steps_per_path,
        "seed": seed,
    }

    return results


def estimate_risk(
    portfolio: Portfolio,
    market: Market,
    num_simulations: int,
    volatility: float,
    steps_per_path: int = DEFAULT_STEPS_PER_PATH,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    audit: Optional[AuditSink] = None,
) -> float:
    """
    Estimated maximum percentage loss across all stress paths.

    Returns
    -------
    float
        (max path drawdown / baseline) · 100, always ≥ 0.
    """
    results = run_risk_engine(
        portfolio, market, num_simulations, volatility,
        steps_per_path=steps_per_path, seed=seed,
        max_workers=max_workers, audit=audit,
    )
    return results["risk_pct"]
