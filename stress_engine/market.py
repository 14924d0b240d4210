"""
Market & Price Stress Module
============================
Holds the instrument universe and applies stochastic price stress.

Mathematical Foundation:
    Stress step:  P' = max(floor, round(P · (1 + Z · σ), 2)),  Z ~ N(0, 1)

Design note:
    Prices live in a single contiguous NumPy vector so that a market
    clone is one array copy.  Every simulation path owns its clone,
    which makes concurrent paths safe without any locking.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

import numpy as np
import pandas as pd

from stress_engine.errors import InvalidParameterError, UndefinedInstrumentError


# ─────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────
MIN_PRICE: float = 0.01
PRICE_DECIMALS: int = 2
DEFAULT_CATEGORY: str = "equity"

DEFAULT_PRICES: Dict[str, float] = {
    "AAPL": 185.00,
    "GOOG": 135.00,
    "TSLA": 240.00,
}

DEFAULT_CATEGORIES: Dict[str, str] = {
    "AAPL": "tech-equity",
    "GOOG": "tech-equity",
    "TSLA": "equity",
}


@dataclass(frozen=True)
class Instrument:
    """
    Point-in-time view of a single priced instrument.

    ``category`` is a descriptive label; the stress model treats every
    category identically.
    """

    symbol: str
    price: float
    category: str = DEFAULT_CATEGORY


class Market:
    """
    Named collection of instruments with mutable prices.

    Parameters
    ----------
    instruments : iterable of Instrument
        Instrument universe. Symbols must be unique and prices strictly
        positive.

    Raises
    ------
    ValueError
        On duplicate symbols or non-positive prices.
    """

    def __init__(self, instruments: Iterable[Instrument] = ()):
        symbols: List[str] = []
        prices: List[float] = []
        categories: Dict[str, str] = {}

        for inst in instruments:
            if inst.symbol in categories:
                raise ValueError(f"Duplicate instrument symbol: {inst.symbol!r}")
            if not np.isfinite(inst.price) or inst.price <= 0:
                raise ValueError(
                    f"Price for {inst.symbol!r} must be positive, got {inst.price}"
                )
            symbols.append(inst.symbol)
            prices.append(float(inst.price))
            categories[inst.symbol] = inst.category

        self._symbols = symbols
        self._index = {s: i for i, s in enumerate(symbols)}
        self._categories = categories
        self._prices = np.asarray(prices, dtype=float)

    @classmethod
    def from_prices(
        cls,
        prices: Mapping[str, float],
        categories: Optional[Mapping[str, str]] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> "Market":
        """Build a market from a symbol → price mapping."""
        categories = categories or {}
        return cls(
            Instrument(sym, float(px), categories.get(sym, category))
            for sym, px in prices.items()
        )

    # ── Lookup ────────────────────────────────────────────────
    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._symbols))

    def __getitem__(self, symbol: str) -> Instrument:
        return Instrument(symbol, self.price(symbol), self._categories[symbol])

    def __repr__(self) -> str:
        body = ", ".join(
            f"{s}={p:.2f}" for s, p in zip(self._symbols, self._prices)
        )
        return f"Market({body})"

    def price(self, symbol: str) -> float:
        """
        Current price of ``symbol``.

        Raises
        ------
        UndefinedInstrumentError
            If the symbol is not part of this market.
        """
        try:
            idx = self._index[symbol]
        except KeyError:
            raise UndefinedInstrumentError(symbol) from None
        return float(self._prices[idx])

    def price_vector(self, symbols: List[str]) -> np.ndarray:
        """Prices for ``symbols`` in the given order."""
        try:
            idx = [self._index[s] for s in symbols]
        except KeyError as exc:
            raise UndefinedInstrumentError(exc.args[0]) from None
        return self._prices[idx]

    def prices(self) -> pd.Series:
        """Snapshot of all prices as a Series indexed by symbol."""
        return pd.Series(self._prices.copy(), index=self._symbols, name="price")

    # ── Path isolation ────────────────────────────────────────
    def copy(self) -> "Market":
        """
        Independent clone of this market.

        The clone shares no mutable state with the source: stressing it
        never alters the original or any sibling clone.
        """
        clone = Market.__new__(Market)
        clone._symbols = list(self._symbols)
        clone._index = dict(self._index)
        clone._categories = dict(self._categories)
        clone._prices = self._prices.copy()
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo) -> "Market":
        return self.copy()

    # ── Stress ────────────────────────────────────────────────
    def apply_stress(
        self,
        volatility: float,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Apply one stochastic stress step to every instrument in place.

        Algorithm:
            1. Draw Z ~ N(0, 1), one independent draw per instrument
            2. Shock:  P' = P · (1 + Z · σ)
            3. Round to cent precision and floor at MIN_PRICE

        Parameters
        ----------
        volatility : float
            Shock scale σ. Must be strictly positive.
        rng : np.random.Generator, optional
            Random source. A fresh unseeded generator is used if omitted.

        Raises
        ------
        InvalidParameterError
            If ``volatility <= 0``.
        """
        if not volatility > 0:
            raise InvalidParameterError(
                f"Volatility must be positive, got {volatility}"
            )
        if rng is None:
            rng = np.random.default_rng()

        z = rng.standard_normal(self._prices.shape[0])
        shocked = self._prices * (1.0 + z * volatility)
        self._prices = np.maximum(np.round(shocked, PRICE_DECIMALS), MIN_PRICE)


def default_market() -> Market:
    """Reference universe: AAPL, GOOG (tech-equity) and TSLA (equity)."""
    return Market.from_prices(DEFAULT_PRICES, categories=DEFAULT_CATEGORIES)
