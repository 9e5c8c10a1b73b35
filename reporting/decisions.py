"""
ROI decision support — headline figures plus flags a board deck should call out.

Translates a scenario comparison (and optionally its sensitivity grid) into
answers the reader can act on:
  Q1: "Does the scenario beat the baseline?"      -> delta NPV, ROI %
  Q2: "Does it clear the hurdle rate?"            -> IRR vs discount rate
  Q3: "Can we trust the IRR?"                     -> solver convergence
  Q4: "How fragile is the conclusion?"            -> delta NPV sign across the grid
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd

from core.utils import is_near_zero
from engine.roi import ScenarioROIResult
from sensitivity.grid import SensitivityResult


@dataclass
class ROIDecisionReport:
    """Structured decision output for one scenario comparison."""
    company_name: str
    scenario_name: str
    discount_rate: float
    horizon_years: int

    baseline_npv: float
    scenario_npv: float
    delta_npv: float
    scenario_roi_percent: float
    scenario_irr: float
    irr_converged: bool

    # Grid statistics (None when no grid was supplied)
    grid_points: Optional[int] = None
    share_positive_delta: Optional[float] = None
    worst_delta_npv: Optional[float] = None
    best_delta_npv: Optional[float] = None

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a display-friendly table."""
        rows = [
            {"Metric": "Company", "Value": self.company_name, "Unit": ""},
            {"Metric": "Scenario", "Value": self.scenario_name, "Unit": ""},
            {"Metric": "Discount Rate", "Value": f"{self.discount_rate:.2%}", "Unit": ""},
            {"Metric": "Horizon", "Value": f"{self.horizon_years}", "Unit": "years"},
            {"Metric": "Baseline NPV", "Value": f"{self.baseline_npv:,.2f}", "Unit": ""},
            {"Metric": "Scenario NPV", "Value": f"{self.scenario_npv:,.2f}", "Unit": ""},
            {"Metric": "Delta NPV", "Value": f"{self.delta_npv:,.2f}", "Unit": ""},
            {"Metric": "Scenario ROI", "Value": f"{self.scenario_roi_percent:.2f}", "Unit": "%"},
            {
                "Metric": "Scenario IRR",
                "Value": f"{self.scenario_irr:.2%}" + ("" if self.irr_converged else " (estimate)"),
                "Unit": "",
            },
        ]
        if self.grid_points is not None:
            rows.extend([
                {"Metric": "Grid Points", "Value": f"{self.grid_points:,}", "Unit": ""},
                {"Metric": "P(Delta NPV > 0)", "Value": f"{self.share_positive_delta:.1%}", "Unit": ""},
                {"Metric": "Worst Delta NPV", "Value": f"{self.worst_delta_npv:,.2f}", "Unit": ""},
                {"Metric": "Best Delta NPV", "Value": f"{self.best_delta_npv:,.2f}", "Unit": ""},
            ])
        if self.flags:
            rows.append({"Metric": "FLAGS", "Value": " | ".join(self.flags), "Unit": ""})
        return pd.DataFrame(rows)


def generate_roi_report(
    result: ScenarioROIResult,
    *,
    grid: Optional[SensitivityResult] = None,
    company_name: str = "Unknown Company",
) -> ROIDecisionReport:
    """
    Build a decision report from a comparison and, optionally, its sensitivity grid.

    Parameters
    ----------
    result : ScenarioROIResult
        Output of engine.roi.compare_scenarios().
    grid : SensitivityResult, optional
        Output of sensitivity.grid.run_sensitivity_analysis() for the same set.
    company_name : str
        Identifier for the report header.
    """
    flags = []
    if result.delta_npv < 0:
        flags.append("VALUE_DESTRUCTIVE: scenario NPV is below baseline")
    if not result.scenario.irr_converged:
        flags.append("IRR_ESTIMATE: solver did not converge; IRR is best-effort")
    elif result.scenario.irr < result.discount_rate:
        flags.append("BELOW_HURDLE: scenario IRR is below the discount rate")
    if is_near_zero(result.baseline.npv):
        flags.append("ZERO_BASELINE: baseline NPV is ~0; ROI % is a placeholder")

    grid_points = share_positive = worst = best = None
    if grid is not None and len(grid) > 0:
        deltas = np.array([r.delta_npv for r in grid.rows], dtype=float)
        grid_points = len(deltas)
        share_positive = float(np.mean(deltas > 0))
        worst = float(np.min(deltas))
        best = float(np.max(deltas))
        if worst < 0 < best:
            flags.append(
                f"SIGN_FLIP: delta NPV is negative in {1 - share_positive:.0%} of sensitivity cases"
            )
        n_unconverged = sum(1 for r in grid.rows if not r.irr_converged)
        if n_unconverged:
            flags.append(f"GRID_IRR_ESTIMATES: {n_unconverged} grid points have best-effort IRR")

    return ROIDecisionReport(
        company_name=company_name,
        scenario_name=result.scenario_name,
        discount_rate=result.discount_rate,
        horizon_years=result.horizon_years,
        baseline_npv=result.baseline.npv,
        scenario_npv=result.scenario.npv,
        delta_npv=result.delta_npv,
        scenario_roi_percent=result.scenario_roi_percent,
        scenario_irr=result.scenario.irr,
        irr_converged=bool(result.scenario.irr_converged),
        grid_points=grid_points,
        share_positive_delta=share_positive,
        worst_delta_npv=worst,
        best_delta_npv=best,
        flags=flags,
    )
