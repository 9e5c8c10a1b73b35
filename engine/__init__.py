"""
ROI engine — yearly cashflow construction, discounting (NPV / IRR), and the
baseline-vs-scenario comparison.
"""

from .cashflow import build_cashflows, free_cash_flow_proxy
from .discounting import IRRResult, irr, npv, solve_irr
from .roi import LegResult, ScenarioROIResult, compare_scenarios, scenario_roi_percent

__all__ = [
    "build_cashflows",
    "free_cash_flow_proxy",
    "IRRResult",
    "irr",
    "npv",
    "solve_irr",
    "LegResult",
    "ScenarioROIResult",
    "compare_scenarios",
    "scenario_roi_percent",
]
