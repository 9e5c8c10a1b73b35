"""
Unit tests for the cashflow builder
"""

import math

import numpy as np
import pytest

from core.config import EngineConfig
from core.schema import Projection
from engine.cashflow import build_cashflows, free_cash_flow_proxy


class TestFreeCashFlowProxy:
    """Net income first, then EBITDA * 0.7, then zero."""

    def test_positive_net_income_wins(self):
        value, source = free_cash_flow_proxy(Projection(net_income=100, ebitda=500))
        assert value == 100
        assert source == "net_income"

    def test_non_positive_net_income_falls_back_to_ebitda(self):
        value, source = free_cash_flow_proxy(Projection(net_income=-5, ebitda=100))
        assert value == pytest.approx(70.0)
        assert source == "ebitda"

    def test_negative_ebitda_is_still_used(self):
        value, source = free_cash_flow_proxy(Projection(ebitda=-100))
        assert value == pytest.approx(-70.0)
        assert source == "ebitda"

    def test_nothing_usable(self):
        assert free_cash_flow_proxy(Projection()) == (0.0, "none")

    def test_non_finite_figures_are_ignored(self):
        value, source = free_cash_flow_proxy(
            Projection(net_income=float("nan"), ebitda=float("inf"))
        )
        assert (value, source) == (0.0, "none")

    def test_custom_ratio(self):
        value, _ = free_cash_flow_proxy(Projection(ebitda=100), ebitda_to_fcf=0.5)
        assert value == pytest.approx(50.0)


class TestBuildCashflows:
    """Series construction over the explicit horizon."""

    def test_length_is_years_plus_one(self, baseline_projection):
        for years in (1, 3, 5, 10):
            assert len(build_cashflows(baseline_projection, years)) == years + 1

    def test_first_year_applies_capex_and_nwc_drag(self, baseline_projection):
        flows = build_cashflows(baseline_projection, 5)
        # 100 - 3% capex - 1% working capital
        assert flows[1] == pytest.approx(96.0)

    def test_initial_investment_is_year_zero(self):
        outlay = build_cashflows(Projection(net_income=100, initial_investment=-150), 5)
        proceeds = build_cashflows(Projection(net_income=100, initial_investment=250), 5)
        assert outlay[0] == -150
        assert proceeds[0] == 250

    def test_missing_initial_investment_is_zero(self):
        assert build_cashflows(Projection(net_income=100), 3)[0] == 0.0

    def test_growth_compounds_from_year_two(self):
        flows = build_cashflows(Projection(net_income=100, growth_rate=0.10), 4)
        assert flows[2] == pytest.approx(110.0 * 0.96)
        assert flows[3] == pytest.approx(121.0 * 0.96)

    def test_terminal_value_folded_into_last_year(self, baseline_projection):
        flows = build_cashflows(baseline_projection, 5)
        f5 = 100.0 * 1.03 ** 4
        expected = f5 * 0.96 + f5 * 1.03 * 8.0
        assert flows[-1] == pytest.approx(expected)

    def test_terminal_growth_is_capped(self):
        fast = Projection(net_income=100, growth_rate=0.10, terminal_multiple=8.0)
        flows = build_cashflows(fast, 2)
        f2 = 110.0
        assert flows[-1] == pytest.approx(f2 * 0.96 + f2 * 1.03 * 8.0)

    def test_negative_cash_flow_drag_still_costs(self):
        flows = build_cashflows(Projection(ebitda=-100, terminal_multiple=0), 1)
        # -70 minus 4% of |-70|
        assert flows[1] == pytest.approx(-72.8)

    def test_zero_years_single_element(self):
        flows = build_cashflows(Projection(net_income=100, initial_investment=-50), 0)
        assert len(flows) == 1
        assert flows[0] == pytest.approx(-50 + 100 * 1.03 * 8.0)

    def test_negative_years_clamped_to_zero(self, baseline_projection):
        assert len(build_cashflows(baseline_projection, -3)) == 1

    def test_degenerate_projection_is_flat_zero(self):
        flows = build_cashflows(Projection(initial_investment=-20), 5)
        np.testing.assert_allclose(flows, [-20, 0, 0, 0, 0, 0])

    def test_non_finite_assumptions_use_defaults(self, baseline_projection):
        messy = Projection(
            net_income=100,
            initial_investment=float("nan"),
            growth_rate=float("inf"),
            terminal_multiple=None,
        )
        np.testing.assert_allclose(
            build_cashflows(messy, 5), build_cashflows(baseline_projection, 5)
        )

    def test_drag_overrides(self, baseline_projection):
        flows = build_cashflows(baseline_projection, 2, capex_pct=0.0, nwc_pct=0.0)
        assert flows[1] == pytest.approx(100.0)

    def test_config_defaults(self, baseline_projection):
        config = EngineConfig(capex_pct=0.05, nwc_pct=0.05, default_terminal_multiple=0.0)
        flows = build_cashflows(baseline_projection, 1, config=config)
        assert flows[1] == pytest.approx(90.0)

    def test_all_values_finite(self):
        flows = build_cashflows(Projection(ebitda=1e6, growth_rate=0.5, terminal_multiple=20), 15)
        assert all(math.isfinite(v) for v in flows)
