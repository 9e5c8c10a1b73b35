"""
ROI & sensitivity tables for the reporting layer.

Everything here is presentation: the engine's result objects go in,
pandas DataFrames (and optionally an Excel workbook) come out.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

from engine.roi import ScenarioROIResult
from sensitivity.grid import SensitivityResult

_SENSITIVITY_LABELS: Dict[str, str] = {
    "discount_rate": "Discount Rate",
    "growth_rate": "Growth Rate",
    "terminal_multiple": "Terminal Multiple",
    "capex_pct": "Capex %",
    "nwc_pct": "NWC %",
    "baseline_npv": "Baseline NPV",
    "scenario_npv": "Scenario NPV",
    "delta_npv": "Delta NPV",
    "scenario_irr": "Scenario IRR",
    "irr_converged": "IRR Converged",
}


def roi_summary_table(result: ScenarioROIResult) -> pd.DataFrame:
    """One row per headline figure of a scenario comparison."""
    rows = [
        {"Metric": "Scenario", "Value": result.scenario_name, "Unit": ""},
        {"Metric": "Discount Rate", "Value": result.discount_rate, "Unit": "fraction"},
        {"Metric": "Horizon", "Value": result.horizon_years, "Unit": "years"},
        {"Metric": "Baseline NPV", "Value": result.baseline.npv, "Unit": "currency"},
        {"Metric": "Scenario NPV", "Value": result.scenario.npv, "Unit": "currency"},
        {"Metric": "Delta NPV", "Value": result.delta_npv, "Unit": "currency"},
        {"Metric": "Scenario ROI", "Value": result.scenario_roi_percent, "Unit": "%"},
        {"Metric": "Scenario IRR", "Value": result.scenario.irr, "Unit": "fraction"},
        {"Metric": "IRR Converged", "Value": result.scenario.irr_converged, "Unit": ""},
    ]
    return pd.DataFrame(rows)


def cashflow_table(result: ScenarioROIResult) -> pd.DataFrame:
    """
    Year-by-year cashflows for both legs with discount factors and present values.
    Year 0 is the initial investment; the last year includes the terminal value.
    """
    base = np.asarray(result.baseline.cashflows, dtype=float)
    scen = np.asarray(result.scenario.cashflows, dtype=float)
    years = np.arange(len(base))
    factor = 1.0 / np.power(1.0 + result.discount_rate, years)
    return pd.DataFrame({
        "year": years,
        "baseline_cashflow": base,
        "scenario_cashflow": scen,
        "delta_cashflow": scen - base,
        "discount_factor": factor,
        "baseline_pv": base * factor,
        "scenario_pv": scen * factor,
    })


def sensitivity_table(grid: SensitivityResult, *, labels: bool = True) -> pd.DataFrame:
    """Grid rows in canonical order; human-readable headers when labels=True."""
    df = grid.to_dataframe()
    return df.rename(columns=_SENSITIVITY_LABELS) if labels else df


def sensitivity_pivot(
    grid: SensitivityResult,
    *,
    index: str = "discount_rate",
    columns: str = "growth_rate",
    values: str = "delta_npv",
) -> pd.DataFrame:
    """Two-way table (e.g. delta NPV by discount rate x growth) for heat maps."""
    return grid.pivot(index=index, columns=columns, values=values)


def sensitivity_summary(
    grid: SensitivityResult,
    *,
    percentiles: Tuple[float, ...] = (0.05, 0.25, 0.50, 0.75, 0.95),
) -> pd.DataFrame:
    """
    Distribution of each output across the grid.

    One row per metric (baseline NPV, scenario NPV, delta NPV, scenario IRR)
    with mean / std / min / percentiles / max.
    """
    df = grid.to_dataframe()
    metrics = {
        "Baseline NPV": "baseline_npv",
        "Scenario NPV": "scenario_npv",
        "Delta NPV": "delta_npv",
        "Scenario IRR": "scenario_irr",
    }
    rows = []
    for label, col in metrics.items():
        values = df[col].dropna().to_numpy(dtype=float)
        if len(values) == 0:
            continue
        row = {
            "Metric": label,
            "Mean": float(np.mean(values)),
            "Std Dev": float(np.std(values)),
            "Min": float(np.min(values)),
        }
        for p in percentiles:
            row[f"P{int(round(p * 100)):02d}"] = float(np.percentile(values, p * 100))
        row["Max"] = float(np.max(values))
        rows.append(row)
    return pd.DataFrame(rows)


def export_tables_to_excel(
    target: Union[str, Path, IO[bytes]],
    *,
    result: Optional[ScenarioROIResult] = None,
    grid: Optional[SensitivityResult] = None,
) -> None:
    """
    Write the "ROI & Sensitivity Analysis Tables" workbook.

    Sheets (only those with data): ROI Summary, Cashflows, Sensitivity,
    Sensitivity Summary.
    """
    if result is None and grid is None:
        raise ValueError("Nothing to export: pass a comparison result and/or a sensitivity grid.")

    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        if result is not None:
            roi_summary_table(result).to_excel(writer, sheet_name="ROI Summary", index=False)
            cashflow_table(result).to_excel(writer, sheet_name="Cashflows", index=False)
        if grid is not None:
            sensitivity_table(grid).to_excel(writer, sheet_name="Sensitivity", index=False)
            sensitivity_summary(grid).to_excel(writer, sheet_name="Sensitivity Summary", index=False)
