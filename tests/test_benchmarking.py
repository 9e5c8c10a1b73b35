"""
Unit tests for peer benchmarking metrics
"""

import pytest

from benchmarking.competitive import (
    COMPETITIVE_INDEX_WEIGHTS,
    calculate_competitive_index,
    competitive_index_report,
)
from benchmarking.market import calculate_market_share


class TestCompetitiveIndex:

    def test_weights_sum_to_one(self):
        assert sum(COMPETITIVE_INDEX_WEIGHTS.values()) == pytest.approx(1.0)

    def test_weighted_sum(self):
        # 15 + 12.5 + 12.5 + 10
        assert calculate_competitive_index(50, 50, 50, 50) == 50

    def test_clamped_to_100(self):
        # 30 + 25 + 25 + 30 = 110
        assert calculate_competitive_index(100, 100, 100, 150) == 100

    def test_zeros(self):
        assert calculate_competitive_index(0, 0, 0, 0) == 0

    def test_negative_sum_clamped_to_zero(self):
        assert calculate_competitive_index(-100, 0, 0, 0) == 0

    def test_half_rounds_up(self):
        # 0.25 * 10 = 2.5
        assert calculate_competitive_index(0, 10, 0, 0) == 3

    def test_non_finite_inputs_count_as_zero(self):
        assert calculate_competitive_index(float("nan"), None, "n/a", 50) == 10

    def test_always_int_in_range(self):
        for args in [(12.3, 45.6, 78.9, 101.1), (99, 1, 50, 149), (1e9, 0, 0, 0)]:
            score = calculate_competitive_index(*args)
            assert isinstance(score, int)
            assert 0 <= score <= 100

    def test_report_shape(self):
        report = competitive_index_report(40, 60, 55, 120)
        assert report.score == calculate_competitive_index(40, 60, 55, 120)
        d = report.to_dict()
        assert d["competitiveIndexScore"] == report.score
        assert d["breakdown"] == {
            "marketShare": 40.0,
            "npsScore": 60.0,
            "winLossRatio": 55.0,
            "competitorBenchmark": 120.0,
        }


class TestMarketShare:

    def test_percentage(self):
        assert calculate_market_share(250, 1000) == 25.0

    def test_rounded_to_two_places(self):
        assert calculate_market_share(1, 3) == 33.33

    def test_invalid_market(self):
        assert calculate_market_share(100, 0) == 0.0
        assert calculate_market_share(100, -5) == 0.0
        assert calculate_market_share(None, 1000) == 0.0
        assert calculate_market_share(100, "") == 0.0

    def test_numeric_strings(self):
        assert calculate_market_share("500", "2,000") == 25.0
