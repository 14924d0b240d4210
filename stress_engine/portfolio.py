"""
Portfolio Construction Module
=============================
Defines the static book of holdings and handles market data ingestion.

Data sources:
    - Cached CSV of closing prices (date index, one column per symbol)
    - Yahoo Finance download of adjusted closes

Design note:
    A Portfolio is built once and never mutated.  Holdings are stored
    behind a read-only mapping so that concurrent simulation paths can
    share the same instance safely.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

import numpy as np
import pandas as pd
import yfinance as yf

from stress_engine.market import DEFAULT_CATEGORY, Market


# ─────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────
DEFAULT_CAPITAL: float = 100_000.0

DEFAULT_HOLDINGS: Dict[str, int] = {
    "AAPL": 50,
    "GOOG": 10,
    "TSLA": 20,
}


@dataclass(frozen=True)
class Portfolio:
    """
    Immutable mapping of symbol → held quantity plus reference capital.

    Parameters
    ----------
    holdings : mapping
        Symbol → non-negative integer quantity.
    capital : float
        Reference capital figure (informational; not used as the loss
        baseline).

    Raises
    ------
    ValueError
        If a quantity is negative or not an integer.
    """

    holdings: Mapping[str, int]
    capital: float = DEFAULT_CAPITAL
    _symbols: List[str] = field(init=False, repr=False, compare=False)
    _quantities: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        clean: Dict[str, int] = {}
        for sym, qty in dict(self.holdings).items():
            if isinstance(qty, bool) or not isinstance(qty, (int, np.integer)):
                raise ValueError(
                    f"Quantity for {sym!r} must be an integer, got {qty!r}"
                )
            if qty < 0:
                raise ValueError(
                    f"Quantity for {sym!r} must be non-negative, got {qty}"
                )
            clean[sym] = int(qty)

        object.__setattr__(self, "holdings", MappingProxyType(clean))
        object.__setattr__(self, "_symbols", list(clean))
        quantities = np.asarray(list(clean.values()), dtype=float)
        quantities.setflags(write=False)
        object.__setattr__(self, "_quantities", quantities)

    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    @property
    def quantities(self) -> np.ndarray:
        """Read-only quantity vector aligned with :attr:`symbols`."""
        return self._quantities

    def __len__(self) -> int:
        return len(self._symbols)

    def __hash__(self) -> int:
        return hash((tuple(sorted(self.holdings.items())), self.capital))


def default_portfolio() -> Portfolio:
    return Portfolio(DEFAULT_HOLDINGS)


# ─────────────────────────────────────────────────────────────
# Market data ingestion
# ─────────────────────────────────────────────────────────────
def _market_from_frame(
    prices: pd.DataFrame,
    categories: Optional[Mapping[str, str]],
) -> Market:
    prices = prices.dropna()
    if prices.empty:
        raise ValueError("No complete price rows available to build a market")

    latest = prices.iloc[-1]
    return Market.from_prices(
        {str(sym): float(px) for sym, px in latest.items()},
        categories=categories,
        category=DEFAULT_CATEGORY,
    )


def load_market(
    path: str,
    categories: Optional[Mapping[str, str]] = None,
) -> Market:
    """
    Build a market from the last complete row of a price CSV.

    Parameters
    ----------
    path : str
        Path to the CSV file with Date index and symbol columns.
    categories : mapping, optional
        Symbol → category label.

    Returns
    -------
    Market
        Market priced at the most recent close.
    """
    df = pd.read_csv(path, index_col=0, parse_dates=True)
    return _market_from_frame(df, categories)


def fetch_market(
    symbols: List[str],
    start: str = "2025-01-01",
    end: Optional[str] = None,
    categories: Optional[Mapping[str, str]] = None,
    save_path: Optional[str] = None,
) -> Market:
    """
    Download adjusted closes from Yahoo Finance and price a market at
    the latest close.

    Parameters
    ----------
    symbols : list of str
        Ticker symbols to download.
    start : str
        Start date in YYYY-MM-DD format.
    end : str, optional
        End date in YYYY-MM-DD format (defaults to today).
    categories : mapping, optional
        Symbol → category label.
    save_path : str, optional
        If provided, saves the downloaded closes as CSV.

    Returns
    -------
    Market
        Market priced at the most recent close.
    """
    raw = yf.download(symbols, start=start, end=end, auto_adjust=True)

    # Handle multi-level columns from yfinance
    if isinstance(raw.columns, pd.MultiIndex):
        prices = raw["Close"].copy()
    else:
        prices = raw[["Close"]].copy()
        prices.columns = symbols

    if save_path:
        prices.to_csv(save_path)

    return _market_from_frame(prices, categories)
