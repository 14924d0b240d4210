"""
Tests for portfolio construction and market data ingestion
"""

import pandas as pd
import pytest

from stress_engine import portfolio as portfolio_module
from stress_engine.market import Market
from stress_engine.portfolio import (
    DEFAULT_CAPITAL,
    Portfolio,
    default_portfolio,
    fetch_market,
    load_market,
)


class TestPortfolio:
    """Immutable holdings"""

    def test_default_portfolio(self) -> None:
        p = default_portfolio()
        assert dict(p.holdings) == {"AAPL": 50, "GOOG": 10, "TSLA": 20}
        assert p.capital == DEFAULT_CAPITAL == 100_000.0

    def test_holdings_are_read_only(self, portfolio: Portfolio) -> None:
        with pytest.raises(TypeError):
            portfolio.holdings["AAPL"] = 1

    def test_attributes_are_frozen(self, portfolio: Portfolio) -> None:
        with pytest.raises(AttributeError):
            portfolio.capital = 1.0

    def test_source_mapping_is_copied(self) -> None:
        source = {"AAPL": 5}
        p = Portfolio(source)
        source["AAPL"] = 500
        assert p.holdings["AAPL"] == 5

    def test_quantities_aligned_with_symbols(self, portfolio: Portfolio) -> None:
        assert portfolio.symbols == ["AAPL", "GOOG", "TSLA"]
        assert portfolio.quantities.tolist() == [50.0, 10.0, 20.0]
        assert not portfolio.quantities.flags.writeable

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            Portfolio({"AAPL": -1})

    @pytest.mark.parametrize("qty", [1.5, "10", True])
    def test_non_integer_quantity_rejected(self, qty) -> None:
        with pytest.raises(ValueError, match="integer"):
            Portfolio({"AAPL": qty})

    def test_hashable_and_consistent_with_equality(self) -> None:
        a = Portfolio({"AAPL": 1, "GOOG": 2})
        b = Portfolio({"GOOG": 2, "AAPL": 1})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, Portfolio({"AAPL": 1})}) == 2

    def test_zero_quantity_allowed(self) -> None:
        assert Portfolio({"AAPL": 0}).holdings["AAPL"] == 0


class TestLoadMarket:
    """CSV ingestion"""

    def test_uses_last_complete_row(self, tmp_path) -> None:
        path = tmp_path / "prices.csv"
        pd.DataFrame(
            {"AAPL": [180.0, 185.0, 190.0], "GOOG": [130.0, 135.0, None]},
            index=pd.to_datetime(["2025-01-02", "2025-01-03", "2025-01-06"]),
        ).to_csv(path)

        m = load_market(str(path), categories={"AAPL": "tech-equity"})

        assert m.price("AAPL") == 185.0
        assert m.price("GOOG") == 135.0
        assert m["AAPL"].category == "tech-equity"
        assert m["GOOG"].category == "equity"

    def test_empty_file_rejected(self, tmp_path) -> None:
        path = tmp_path / "prices.csv"
        pd.DataFrame({"AAPL": [None]}, index=pd.to_datetime(["2025-01-02"])).to_csv(path)
        with pytest.raises(ValueError, match="No complete price rows"):
            load_market(str(path))


class TestFetchMarket:
    """Yahoo Finance ingestion (network stubbed)"""

    def test_multiindex_download(self, monkeypatch, tmp_path) -> None:
        idx = pd.to_datetime(["2025-01-02", "2025-01-03"])
        columns = pd.MultiIndex.from_product([["Close", "Open"], ["AAPL", "TSLA"]])
        raw = pd.DataFrame(
            [[184.0, 239.0, 1.0, 1.0], [185.0, 240.0, 1.0, 1.0]],
            index=idx, columns=columns,
        )
        calls = {}

        def fake_download(tickers, **kwargs):
            calls["tickers"] = tickers
            calls.update(kwargs)
            return raw

        monkeypatch.setattr(portfolio_module.yf, "download", fake_download)
        save_path = tmp_path / "closes.csv"

        m = fetch_market(["AAPL", "TSLA"], save_path=str(save_path))

        assert isinstance(m, Market)
        assert m.price("AAPL") == 185.0
        assert m.price("TSLA") == 240.0
        assert calls["tickers"] == ["AAPL", "TSLA"]
        assert calls["auto_adjust"] is True
        assert save_path.exists()

    def test_single_ticker_download(self, monkeypatch) -> None:
        raw = pd.DataFrame(
            {"Close": [101.0, 102.5], "Open": [100.0, 101.0]},
            index=pd.to_datetime(["2025-01-02", "2025-01-03"]),
        )
        monkeypatch.setattr(portfolio_module.yf, "download", lambda *a, **k: raw)

        m = fetch_market(["SPY"])

        assert m.symbols == ["SPY"]
        assert m.price("SPY") == 102.5
