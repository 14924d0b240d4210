"""
Monte Carlo Portfolio Stress Engine — Main Orchestrator
=======================================================
Entry point for a complete stress run.

Execution Flow:
    1. Open the audit sink
    2. Build market and portfolio
    3. Baseline valuation
    4. Monte Carlo stress run (dispatched to a background worker)
    5. Risk classification and path diagnostics
    6. Visualization
    7. Results export
"""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from stress_engine.audit import LoguruAuditSink
from stress_engine.logging_config import setup_logging
from stress_engine.market import default_market
from stress_engine.monte_carlo import run_risk_engine
from stress_engine.portfolio import default_portfolio
from stress_engine.statistics import (
    HIGH_RISK_THRESHOLD,
    classify_risk,
    drawdown_table,
    summarize_drawdowns,
)
from stress_engine.valuation import portfolio_value, position_values
from stress_engine.visualization import (
    plot_drawdown_distribution,
    plot_position_values,
)

# ─────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent
RESULTS_DIR = PROJECT_ROOT / "results"
FIGURES_DIR = RESULTS_DIR / "figures"
TABLES_DIR = RESULTS_DIR / "tables"

NUM_SIMULATIONS = 200
VOLATILITY = 0.05
STEPS_PER_PATH = 10
RANDOM_SEED = 42
LOG_LEVEL = "INFO"


def print_header(text: str) -> None:
    """Print formatted section header."""
    width = 60
    print("\n" + "=" * width)
    print(f"  {text}")
    print("=" * width)


def print_metrics(metrics: dict, indent: int = 4) -> None:
    """Print dictionary of metrics with formatting."""
    prefix = " " * indent
    for key, val in metrics.items():
        if isinstance(val, float):
            print(f"{prefix}{key:.<35} {val:>12.6f}")
        else:
            print(f"{prefix}{key:.<35} {str(val):>12}")


def main() -> None:
    """Execute a complete stress run."""
    setup_logging(LOG_LEVEL)

    audit = LoguruAuditSink()
    executor = ThreadPoolExecutor(max_workers=1)

    try:
        audit.connect()

        # ── PHASE 1: Market & Portfolio ───────────────────────
        print_header("PHASE 1 — MARKET & PORTFOLIO")

        market = default_market()
        portfolio = default_portfolio()

        print(f"  Market:        {market}")
        print(f"  Holdings:      {dict(portfolio.holdings)}")
        print(f"  Capital:       {portfolio.capital:,.2f}")
        print(f"  Baseline:      {portfolio_value(portfolio, market):,.2f}")

        # ── PHASE 2: Monte Carlo Stress ───────────────────────
        print_header("PHASE 2 — MONTE CARLO STRESS")

        future = executor.submit(
            run_risk_engine,
            portfolio,
            market,
            NUM_SIMULATIONS,
            VOLATILITY,
            steps_per_path=STEPS_PER_PATH,
            seed=RANDOM_SEED,
            audit=audit,
        )
        print("  Simulation running asynchronously...")

        results = future.result()
        stress_risk = results["risk_pct"]

        print(f"\n  Stress Risk: {stress_risk:.4f}%")
        print(f"  {classify_risk(stress_risk, HIGH_RISK_THRESHOLD)}")

        summary = summarize_drawdowns(
            results["path_drawdowns"], results["initial_value"]
        )
        print("\n  Path Summary:")
        print_metrics(summary)

        # ── PHASE 3: Visualization ────────────────────────────
        print_header("PHASE 3 — GENERATING VISUALIZATIONS")

        fig_dir = str(FIGURES_DIR)
        p1 = plot_drawdown_distribution(
            results["path_drawdowns"], results["initial_value"], stress_risk,
            output_dir=fig_dir,
        )
        print(f"  ✓ {p1}")

        p2 = plot_position_values(
            position_values(portfolio, market), output_dir=fig_dir
        )
        print(f"  ✓ {p2}")

        # ── Results export ────────────────────────────────────
        TABLES_DIR.mkdir(parents=True, exist_ok=True)
        drawdown_table(results).to_csv(
            TABLES_DIR / "path_drawdowns.csv", index=False
        )

        all_results = {
            "parameters": {
                "num_simulations": NUM_SIMULATIONS,
                "volatility": VOLATILITY,
                "steps_per_path": STEPS_PER_PATH,
                "seed": RANDOM_SEED,
            },
            "initial_value": results["initial_value"],
            "stress_risk_pct": stress_risk,
            "classification": classify_risk(stress_risk, HIGH_RISK_THRESHOLD),
            "path_summary": summary,
        }

        results_path = TABLES_DIR / "stress_results.json"
        with open(results_path, "w") as f:
            json.dump(all_results, f, indent=2, default=str)

        print(f"\n  Results saved to: {results_path}")

    except Exception as e:
        print(f"Handled Error: {e}")
    finally:
        executor.shutdown()
        audit.disconnect()


if __name__ == "__main__":
    main()
