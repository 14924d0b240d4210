"""
Tests for path statistics and risk classification
"""

import numpy as np
import pytest

from stress_engine.statistics import (
    HIGH_RISK_THRESHOLD,
    classify_risk,
    drawdown_table,
    path_loss_percentages,
    summarize_drawdowns,
)


class TestSummarizeDrawdowns:

    def test_basic_summary(self) -> None:
        dd = np.array([0.0, 100.0, 200.0, 400.0])
        s = summarize_drawdowns(dd, initial_value=1000.0)

        assert s["mean_loss_pct"] == pytest.approx(17.5)
        assert s["median_loss_pct"] == pytest.approx(15.0)
        assert s["max_loss_pct"] == pytest.approx(40.0)
        assert s["loss_path_share"] == pytest.approx(0.75)
        assert s["num_paths"] == 4
        assert s["skewness"] > 0

    def test_constant_sample(self) -> None:
        s = summarize_drawdowns(np.zeros(10), initial_value=500.0)
        assert s["std_loss_pct"] == 0.0
        assert s["skewness"] == 0.0
        assert s["excess_kurtosis"] == 0.0
        assert s["loss_path_share"] == 0.0

    def test_single_path(self) -> None:
        s = summarize_drawdowns(np.array([50.0]), initial_value=100.0)
        assert s["std_loss_pct"] == 0.0
        assert s["max_loss_pct"] == pytest.approx(50.0)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            summarize_drawdowns(np.array([]), initial_value=100.0)


class TestClassifyRisk:

    @pytest.mark.parametrize(
        "risk, label",
        [(0.0, "Risk Acceptable"), (15.0, "Risk Acceptable"), (15.01, "High Risk!")],
    )
    def test_default_threshold(self, risk: float, label: str) -> None:
        assert HIGH_RISK_THRESHOLD == 15.0
        assert classify_risk(risk) == label

    def test_custom_threshold(self) -> None:
        assert classify_risk(6.0, threshold=5.0) == "High Risk!"


class TestDrawdownTable:

    def test_columns(self) -> None:
        results = {"path_drawdowns": np.array([10.0, 0.0]), "initial_value": 200.0}
        table = drawdown_table(results)
        assert list(table.columns) == ["path", "worst_drawdown", "loss_pct"]
        assert table["loss_pct"].tolist() == [5.0, 0.0]
        assert table["path"].tolist() == [0, 1]

    def test_percentages(self) -> None:
        np.testing.assert_allclose(
            path_loss_percentages([1.0, 2.0], 4.0), [25.0, 50.0]
        )
