"""
Monte Carlo Portfolio Stress Engine
===================================
Short-horizon stress model for a book of priced instruments:
- Stochastic multiplicative price stress (independent Gaussian shocks)
- Isolated market clones per simulation path
- Worst-case drawdown aggregation across paths
- Path-level drawdown diagnostics and reporting
"""

from stress_engine.errors import (
    DegenerateBaselineError,
    InvalidParameterError,
    StressEngineError,
    UndefinedInstrumentError,
)
from stress_engine.market import Instrument, Market, default_market
from stress_engine.monte_carlo import estimate_risk, run_risk_engine
from stress_engine.portfolio import Portfolio
from stress_engine.valuation import portfolio_value

__version__ = "1.0.0"

__all__ = [
    "DegenerateBaselineError",
    "Instrument",
    "InvalidParameterError",
    "Market",
    "Portfolio",
    "StressEngineError",
    "UndefinedInstrumentError",
    "default_market",
    "estimate_risk",
    "portfolio_value",
    "run_risk_engine",
]
