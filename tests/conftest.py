"""Shared fixtures for the stress engine test suite."""

import matplotlib

matplotlib.use("Agg")

import pytest

from stress_engine.market import Market, default_market
from stress_engine.portfolio import Portfolio


@pytest.fixture
def market() -> Market:
    """AAPL 185.00, GOOG 135.00, TSLA 240.00"""
    return default_market()


@pytest.fixture
def portfolio() -> Portfolio:
    """AAPL 50, GOOG 10, TSLA 20 → baseline 15 400"""
    return Portfolio({"AAPL": 50, "GOOG": 10, "TSLA": 20})
