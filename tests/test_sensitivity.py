"""
Unit tests for sweep resolution and the sensitivity grid
"""

import logging

import pytest

from core.config import EngineConfig
from core.errors import GridTooLargeError, NoProjectionDataError
from core.schema import Projection, ROIProjectionSet
from engine.roi import compare_scenarios
from sensitivity.grid import run_sensitivity_analysis
from sensitivity.sweeps import SWEEP_DIMENSIONS, SweepSpec


class TestSweepSpec:

    def test_from_payload_aliases_and_scalars(self):
        spec = SweepSpec.from_payload({
            "discountRates": [0.08, "0.1"],
            "growth_rate": 0.05,
            "terminalMultiples": (6, 8),
            "somethingElse": [1, 2, 3],
        })
        assert spec.discount_rates == (0.08, "0.1")
        assert spec.growth_rates == (0.05,)
        assert spec.terminal_multiples == (6, 8)
        assert spec.capex_pcts == ()

    def test_from_payload_ragged_and_string_values(self, projection_set):
        spec = SweepSpec.from_payload({"discountRates": [0.1, [0.2]], "growthRate": "0.04"})
        assert spec.discount_rates == (0.1, [0.2])
        assert spec.growth_rates == ("0.04",)
        resolved = spec.resolve(projection_set)
        assert resolved.discount_rate == (0.1, 0.10)
        assert resolved.growth_rate == (0.04,)

    def test_from_payload_none(self):
        assert SweepSpec.from_payload(None) == SweepSpec()

    def test_empty_lists_resolve_to_defaults(self, projection_set):
        resolved = SweepSpec().resolve(projection_set)
        assert resolved.discount_rate == (0.10,)
        assert resolved.growth_rate == (0.06,)
        assert resolved.terminal_multiple == (8.5,)
        assert resolved.capex_pct == (0.03,)
        assert resolved.nwc_pct == (0.01,)
        assert resolved.n_cells == 1

    def test_non_finite_entries_replaced_by_default(self, projection_set):
        spec = SweepSpec(discount_rates=(0.08, float("nan"), "abc"))
        resolved = spec.resolve(projection_set)
        assert resolved.discount_rate == (0.08, 0.10, 0.10)

    def test_shape_and_points_order(self, projection_set):
        spec = SweepSpec(discount_rates=(0.08, 0.12), growth_rates=(0.01, 0.02, 0.03))
        resolved = spec.resolve(projection_set)
        assert resolved.shape == (2, 3, 1, 1, 1)
        points = list(resolved.points())
        assert [(p.discount_rate, p.growth_rate) for p in points] == [
            (0.08, 0.01), (0.08, 0.02), (0.08, 0.03),
            (0.12, 0.01), (0.12, 0.02), (0.12, 0.03),
        ]

    def test_summary_table(self, projection_set):
        summary = SweepSpec(terminal_multiples=(6, 10)).resolve(projection_set).summary()
        assert list(summary["Dimension"]) == list(SWEEP_DIMENSIONS)
        row = summary.set_index("Dimension").loc["terminal_multiple"]
        assert (row["Values"], row["Min"], row["Max"]) == (2, 6, 10)


class TestRunSensitivityAnalysis:

    def test_single_point_matches_comparison(self, projection_set):
        grid = run_sensitivity_analysis(projection_set, 5)
        result = compare_scenarios(projection_set, 5)
        assert len(grid) == 1
        row = grid[0]
        assert row.baseline_npv == pytest.approx(result.baseline.npv)
        assert row.scenario_npv == pytest.approx(result.scenario.npv)
        assert row.delta_npv == pytest.approx(result.delta_npv)
        assert row.scenario_irr == pytest.approx(result.scenario.irr)

    def test_row_count_and_order(self, projection_set):
        grid = run_sensitivity_analysis(
            projection_set, 5, SweepSpec(discount_rates=(0.08, 0.12))
        )
        assert len(grid) == 2
        assert [r.discount_rate for r in grid] == [0.08, 0.12]
        assert grid[0].scenario_npv > grid[1].scenario_npv

    def test_full_product_nesting(self, projection_set):
        spec = SweepSpec(
            discount_rates=(0.08, 0.10),
            growth_rates=(0.01, 0.02, 0.03),
            terminal_multiples=(6.0, 8.0),
        )
        grid = run_sensitivity_analysis(projection_set, 5, spec)
        assert len(grid) == 12
        assert grid[1].terminal_multiple == 8.0
        assert grid[2].growth_rate == 0.02
        assert grid[6].discount_rate == 0.10
        assert (grid[11].discount_rate, grid[11].growth_rate, grid[11].terminal_multiple) == (
            0.10, 0.03, 8.0
        )

    def test_growth_and_multiple_only_move_the_scenario(self, projection_set):
        spec = SweepSpec(growth_rates=(0.0, 0.05), terminal_multiples=(5.0, 10.0))
        grid = run_sensitivity_analysis(projection_set, 5, spec)
        baseline_npvs = {round(r.baseline_npv, 9) for r in grid}
        assert len(baseline_npvs) == 1
        assert len({round(r.scenario_npv, 9) for r in grid}) == 4

    def test_capex_moves_both_legs(self, projection_set):
        grid = run_sensitivity_analysis(projection_set, 5, SweepSpec(capex_pcts=(0.0, 0.10)))
        assert grid[0].baseline_npv > grid[1].baseline_npv
        assert grid[0].scenario_npv > grid[1].scenario_npv

    def test_payload_mapping_accepted(self, projection_set):
        grid = run_sensitivity_analysis(
            projection_set, 5, {"discountRate": [0.09, 0.11], "nwcPct": 0.02}
        )
        assert len(grid) == 2
        assert all(r.nwc_pct == 0.02 for r in grid)

    def test_grid_too_large(self, projection_set):
        config = EngineConfig(max_grid_cells=4)
        spec = SweepSpec(discount_rates=(0.05, 0.06, 0.07, 0.08, 0.09))
        with pytest.raises(GridTooLargeError) as exc:
            run_sensitivity_analysis(projection_set, 5, spec, config=config)
        assert exc.value.n_cells == 5

    def test_missing_projection(self):
        with pytest.raises(NoProjectionDataError):
            run_sensitivity_analysis(ROIProjectionSet(baseline=Projection(net_income=1)))

    def test_logs_grid_size(self, projection_set, caplog):
        with caplog.at_level(logging.INFO, logger="sensitivity.grid"):
            run_sensitivity_analysis(projection_set, 5, SweepSpec(growth_rates=(0.01, 0.02)))
        assert "2 points" in caplog.text

    @pytest.mark.parametrize("executor", ["thread", "process"])
    def test_parallel_matches_serial(self, projection_set, executor):
        spec = SweepSpec(
            discount_rates=(0.08, 0.10, 0.12),
            growth_rates=(0.0, 0.03, 0.06),
            terminal_multiples=(6.0, 8.0),
            capex_pcts=(0.02, 0.04),
        )
        serial = run_sensitivity_analysis(projection_set, 5, spec)
        parallel = run_sensitivity_analysis(
            projection_set, 5, spec,
            config=EngineConfig(parallel_threshold=2, max_workers=3, executor=executor),
        )
        assert len(parallel) == 36
        assert parallel.to_records() == serial.to_records()


class TestSensitivityResult:

    @pytest.fixture
    def grid(self, projection_set):
        spec = SweepSpec(
            discount_rates=(0.08, 0.10, 0.12),
            growth_rates=(0.02, 0.04),
            terminal_multiples=(6.0, 10.0),
        )
        return run_sensitivity_analysis(projection_set, 5, spec)

    def test_dataframe_columns(self, grid):
        df = grid.to_dataframe()
        assert len(df) == 12
        assert list(df.columns[:5]) == list(SWEEP_DIMENSIONS)
        assert "delta_npv" in df.columns

    def test_records_are_camel_case(self, grid):
        rec = grid.to_records()[0]
        assert {"discountRate", "growthRate", "deltaNPV", "scenarioIRR"} <= set(rec)

    def test_pivot_averages_other_dimensions(self, grid):
        table = grid.pivot(index="discount_rate", columns="growth_rate")
        assert table.shape == (3, 2)
        df = grid.to_dataframe()
        cell = df[(df.discount_rate == 0.08) & (df.growth_rate == 0.02)]["delta_npv"].mean()
        assert table.loc[0.08, 0.02] == pytest.approx(cell)

    def test_pivot_rejects_output_columns(self, grid):
        with pytest.raises(ValueError):
            grid.pivot(index="delta_npv", columns="growth_rate")

    def test_metadata(self, grid):
        assert grid.scenario_name == "realistic"
        assert grid.horizon_years == 5
        assert grid.sweeps.shape == (3, 2, 2, 1, 1)
