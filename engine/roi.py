"""
Scenario ROI comparison — baseline vs. one scenario projection.

Flow:
  1. Pick the scenario: realistic, else optimistic, else pessimistic
  2. Build both cashflow series over the same horizon
  3. NPV for both at the set's discount rate, IRR for the scenario
  4. delta NPV and ROI % relative to |baseline NPV|

Numeric degeneracy never raises. The only failure is a set with no
baseline or no scenario projection: that is "could not compute", which the
caller must be able to tell apart from "computed a zero ROI".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from core.config import DEFAULT_CONFIG, EngineConfig
from core.errors import NoProjectionDataError
from core.schema import BASELINE, Projection, ROIProjectionSet
from core.utils import finite_or, is_near_zero, round_half_away, to_float

from .cashflow import build_cashflows
from .discounting import npv, solve_irr

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegResult:
    """Cashflows and valuation for one side of the comparison."""
    cashflows: Tuple[float, ...]
    npv: float
    irr: Optional[float] = None
    irr_converged: Optional[bool] = None
    irr_iterations: Optional[int] = None

    def to_dict(self) -> Dict:
        out = {"cashflows": list(self.cashflows), "npv": self.npv}
        if self.irr is not None:
            out["irr"] = self.irr
        return out


@dataclass(frozen=True)
class ScenarioROIResult:
    discount_rate: float
    horizon_years: int
    scenario_name: str
    baseline: LegResult
    scenario: LegResult
    delta_npv: float
    scenario_roi_percent: float

    def to_dict(self) -> Dict:
        return {
            "discountRate": self.discount_rate,
            "horizonYears": self.horizon_years,
            "scenarioName": self.scenario_name,
            "baseline": self.baseline.to_dict(),
            "scenario": self.scenario.to_dict(),
            "deltaNPV": self.delta_npv,
            "scenarioRoiPercent": self.scenario_roi_percent,
        }

    def summary(self) -> Dict:
        """Flattened shape handed to reporting consumers."""
        return {
            "scenarioRoiPercent": self.scenario_roi_percent,
            "discountRate": self.discount_rate,
            "horizonYears": self.horizon_years,
            "baselineNPV": self.baseline.npv,
            "scenarioNPV": self.scenario.npv,
            "scenarioIRR": self.scenario.irr,
        }


def scenario_roi_percent(baseline_npv: float, scenario_npv: float) -> float:
    """
    100 * (scenario - baseline) / |baseline|, rounded to 2 dp.
    With a zero baseline NPV: 100 if the scenario is worth anything, else 0.
    """
    if is_near_zero(baseline_npv):
        return 100.0 if scenario_npv != 0 else 0.0
    return round_half_away(100.0 * (scenario_npv - baseline_npv) / abs(baseline_npv), 2)


def resolve_discount_rate(rate, config: EngineConfig = DEFAULT_CONFIG) -> float:
    value = to_float(rate)
    if value is None:
        logger.warning(
            "Discount rate %r is not a finite number; using %.2f",
            rate, config.default_discount_rate,
        )
        return config.default_discount_rate
    return value


def require_projections(projection_set: ROIProjectionSet) -> tuple:
    """Return (baseline, scenario_name, scenario) or raise NoProjectionDataError."""
    missing: List[str] = []
    baseline = projection_set.baseline
    if baseline is None:
        missing.append(BASELINE)
    resolved = projection_set.resolve_scenario()
    if resolved is None:
        missing.append("scenario (realistic/optimistic/pessimistic)")
    if missing:
        raise NoProjectionDataError(missing)
    name, scenario = resolved
    return baseline, name, scenario


def evaluate_pair(
    baseline: Projection,
    scenario: Projection,
    *,
    discount_rate: float,
    horizon_years: int,
    capex_pct: Optional[float] = None,
    nwc_pct: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
):
    """Build, discount and solve one baseline/scenario pair. Returns (baseline_leg, scenario_leg)."""
    base_cf = build_cashflows(
        baseline, horizon_years, capex_pct=capex_pct, nwc_pct=nwc_pct, config=config
    )
    scen_cf = build_cashflows(
        scenario, horizon_years, capex_pct=capex_pct, nwc_pct=nwc_pct, config=config
    )
    irr_result = solve_irr(
        scen_cf,
        config.irr_guess,
        tolerance=config.irr_tolerance,
        max_iterations=config.irr_max_iterations,
        rate_floor=config.irr_rate_floor,
    )
    baseline_leg = LegResult(cashflows=tuple(base_cf.tolist()), npv=npv(discount_rate, base_cf))
    scenario_leg = LegResult(
        cashflows=tuple(scen_cf.tolist()),
        npv=npv(discount_rate, scen_cf),
        irr=irr_result.rate,
        irr_converged=irr_result.converged,
        irr_iterations=irr_result.iterations,
    )
    return baseline_leg, scenario_leg


def compare_scenarios(
    projection_set: ROIProjectionSet,
    horizon_years: int = DEFAULT_CONFIG.horizon_years,
    *,
    capex_pct: Optional[float] = None,
    nwc_pct: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ScenarioROIResult:
    """
    Compare the preferred scenario projection against the baseline.

    Parameters
    ----------
    projection_set : ROIProjectionSet
        Needs a baseline and at least one of realistic/optimistic/pessimistic.
    horizon_years : int
        Explicit forecast horizon shared by both legs.
    capex_pct, nwc_pct : float, optional
        Drag overrides; default to config values.

    Raises
    ------
    NoProjectionDataError
        Baseline or scenario projection is missing.
    """
    baseline, name, scenario = require_projections(projection_set)
    rate = resolve_discount_rate(projection_set.discount_rate, config)
    years = max(int(finite_or(horizon_years, config.horizon_years)), 0)

    baseline_leg, scenario_leg = evaluate_pair(
        baseline,
        scenario,
        discount_rate=rate,
        horizon_years=years,
        capex_pct=capex_pct,
        nwc_pct=nwc_pct,
        config=config,
    )
    delta = scenario_leg.npv - baseline_leg.npv

    return ScenarioROIResult(
        discount_rate=rate,
        horizon_years=years,
        scenario_name=name,
        baseline=baseline_leg,
        scenario=scenario_leg,
        delta_npv=delta,
        scenario_roi_percent=scenario_roi_percent(baseline_leg.npv, scenario_leg.npv),
    )
