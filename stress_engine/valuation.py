"""
Valuation Module
================
Mark-to-market of a portfolio against a market snapshot.

Mathematical Definition:
    V = Σ_i  P_i · q_i   over every (symbol i, quantity q_i) held
"""

import numpy as np
import pandas as pd

from stress_engine.market import Market
from stress_engine.portfolio import Portfolio


def portfolio_value(portfolio: Portfolio, market: Market) -> float:
    """
    Total mark-to-market value of ``portfolio`` under ``market``.

    Pure function: depends only on the current market prices.

    Parameters
    ----------
    portfolio : Portfolio
        Holdings to value.
    market : Market
        Price source.

    Returns
    -------
    float
        Portfolio value in price units.

    Raises
    ------
    UndefinedInstrumentError
        If any held symbol is absent from the market.  No default price
        is ever substituted.
    """
    prices = market.price_vector(portfolio.symbols)
    return float(np.dot(prices, portfolio.quantities))


def position_values(portfolio: Portfolio, market: Market) -> pd.Series:
    """Per-symbol mark-to-market breakdown, indexed by symbol."""
    prices = market.price_vector(portfolio.symbols)
    return pd.Series(
        prices * portfolio.quantities,
        index=portfolio.symbols,
        name="position_value",
    )
