"""
StrategicSim ROI — Scenario ROI & Sensitivity Dashboard
=======================================================

Three sections:
  1. Projections:   Enter baseline + scenario assumptions (or load a JSON/CSV)
  2. Comparison:    NPV / IRR / ROI % of the scenario vs. the baseline
  3. Sensitivity:   Sweep discount rate, growth, multiple, capex, NWC

Run: streamlit run app/streamlit_app.py   (or the `strategicsim-roi` command)
"""

from __future__ import annotations

import io
import logging
import sys
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import DEFAULT_CONFIG
from core.errors import ROIEngineError
from core.schema import SCENARIO_PREFERENCE, Projection, ROIProjectionSet

from data_prep.loader import load_projection_set_csv, load_projection_set_json
from data_prep.validators import validate_projection_set

from engine.roi import compare_scenarios
from sensitivity.grid import run_sensitivity_analysis
from sensitivity.sweeps import SWEEP_DIMENSIONS, SweepSpec

from reporting.decisions import generate_roi_report
from reporting.tables import (
    cashflow_table,
    export_tables_to_excel,
    sensitivity_pivot,
    sensitivity_summary,
    sensitivity_table,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Input presets
# ---------------------------------------------------------------------------
PROJECTION_PRESETS: Dict[str, Dict[str, Dict[str, float]]] = {
    "Expansion": {
        "baseline": {"net_income": 100.0, "initial_investment": 0.0,
                     "growth_rate": 0.03, "terminal_multiple": 8.0},
        "realistic": {"net_income": 120.0, "initial_investment": -150.0,
                      "growth_rate": 0.06, "terminal_multiple": 8.5},
    },
    "Divestiture": {
        "baseline": {"net_income": 100.0, "initial_investment": 0.0,
                     "growth_rate": 0.03, "terminal_multiple": 8.0},
        "realistic": {"net_income": 80.0, "initial_investment": 250.0,
                      "growth_rate": 0.04, "terminal_multiple": 8.0},
    },
    "Turnaround": {
        "baseline": {"ebitda": 60.0, "net_income": -10.0, "initial_investment": 0.0,
                     "growth_rate": 0.0, "terminal_multiple": 6.0},
        "realistic": {"ebitda": 90.0, "net_income": 20.0, "initial_investment": -200.0,
                      "growth_rate": 0.08, "terminal_multiple": 7.0},
    },
}

# Default sweep ranges offered in the sensitivity section
SWEEP_PRESETS: Dict[str, List[float]] = {
    "discount_rate": [0.08, 0.10, 0.12],
    "growth_rate": [0.01, 0.03, 0.05],
    "terminal_multiple": [6.0, 8.0, 10.0],
    "capex_pct": [0.03],
    "nwc_pct": [0.01],
}

SWEEP_LABELS: Dict[str, str] = {
    "discount_rate": "Discount rate",
    "growth_rate": "Growth rate",
    "terminal_multiple": "Terminal multiple",
    "capex_pct": "Capex %",
    "nwc_pct": "NWC %",
}


# ---------------------------------------------------------------------------
# Formatting / chart helpers
# ---------------------------------------------------------------------------
def _fmt_money(val):
    return f"{val:,.2f}"


def _fmt_pct(val):
    return f"{val:.2%}"


def _parse_list(text: str) -> List[float]:
    """Comma-separated numbers; blanks and garbage are dropped."""
    out = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            out.append(float(part))
        except ValueError:
            st.warning(f"Ignoring non-numeric sweep value '{part}'")
    return out


def _plot_cashflows(cf: pd.DataFrame, *, height=320):
    fig = go.Figure()
    fig.add_bar(x=cf["year"], y=cf["baseline_cashflow"], name="Baseline")
    fig.add_bar(x=cf["year"], y=cf["scenario_cashflow"], name="Scenario")
    fig.add_scatter(x=cf["year"], y=cf["delta_cashflow"], name="Delta", mode="lines+markers")
    fig.update_layout(
        title="Yearly Cashflows (terminal value in final year)",
        barmode="group", height=height,
        xaxis_title="Year", yaxis_title="Cashflow",
    )
    st.plotly_chart(fig, use_container_width=True)


def _plot_heatmap(pivot: pd.DataFrame, *, x_label, y_label, height=380):
    if pivot.empty:
        st.info("No data to plot.")
        return
    fig = go.Figure(data=go.Heatmap(
        z=pivot.to_numpy(),
        x=[str(c) for c in pivot.columns],
        y=[str(i) for i in pivot.index],
        colorscale="RdYlGn",
        zmid=0.0,
        colorbar=dict(title="Δ NPV"),
    ))
    fig.update_layout(
        title=f"Delta NPV by {y_label} × {x_label}",
        xaxis_title=x_label, yaxis_title=y_label, height=height,
    )
    st.plotly_chart(fig, use_container_width=True)


def _plot_delta_histogram(values: np.ndarray, *, bins=30, height=300):
    if len(values) == 0:
        st.info("No data.")
        return
    fig = go.Figure(data=go.Histogram(x=values, nbinsx=bins, opacity=0.8))
    fig.update_layout(title="Delta NPV Across Grid", xaxis_title="Delta NPV",
                      yaxis_title="Grid points", height=height)
    st.plotly_chart(fig, use_container_width=True)


def _projection_inputs(label: str, defaults: Dict[str, float], key: str) -> Projection:
    """Sidebar-free input block for one projection."""
    st.markdown(f"**{label}**")
    c1, c2, c3, c4, c5 = st.columns(5)
    ebitda = c1.number_input("EBITDA", value=float(defaults.get("ebitda", 0.0)), key=f"{key}_ebitda")
    net_income = c2.number_input("Net income", value=float(defaults.get("net_income", 0.0)),
                                 key=f"{key}_ni")
    investment = c3.number_input("Initial investment", value=float(defaults.get("initial_investment", 0.0)),
                                 key=f"{key}_inv", help="Negative = outlay, positive = proceeds")
    growth = c4.number_input("Growth rate", value=float(defaults.get("growth_rate", 0.03)),
                             step=0.01, format="%.3f", key=f"{key}_g")
    multiple = c5.number_input("Terminal multiple", value=float(defaults.get("terminal_multiple", 8.0)),
                               step=0.5, key=f"{key}_m")
    return Projection(
        ebitda=ebitda if ebitda != 0 else None,
        net_income=net_income if net_income != 0 else None,
        initial_investment=investment,
        growth_rate=growth,
        terminal_multiple=multiple,
    )


def _grid_key(projection_set: ROIProjectionSet, horizon: int, spec: SweepSpec) -> str:
    """Session-state key for a sensitivity grid; changes whenever any input does."""
    return f"grid_{hash((projection_set, int(horizon), spec)):x}"


def _load_uploaded(upload) -> ROIProjectionSet:
    suffix = Path(upload.name).suffix.lower()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / f"projections{suffix}"
        path.write_bytes(upload.getvalue())
        if suffix == ".csv":
            return load_projection_set_csv(path)
        return load_projection_set_json(path)


# ═══════════════════════════════════════════════════════════════════════════
# PAGE
# ═══════════════════════════════════════════════════════════════════════════
def render() -> None:
    logging.basicConfig(level=logging.INFO)

    st.set_page_config(page_title="StrategicSim ROI", layout="wide")
    st.title("StrategicSim ROI")
    st.caption("Scenario ROI Engine: NPV / IRR vs. baseline, with sensitivity sweeps")

    # --- SIDEBAR: engine settings ---
    with st.sidebar:
        st.header("Settings")
        discount_rate = st.number_input("Discount rate", value=DEFAULT_CONFIG.default_discount_rate,
                                        step=0.005, format="%.3f")
        horizon = st.slider("Horizon (years)", min_value=1, max_value=15,
                            value=DEFAULT_CONFIG.horizon_years)
        preset_name = st.selectbox("Preset", options=list(PROJECTION_PRESETS), index=0)
        upload = st.file_uploader("…or load projections (JSON / CSV)", type=["json", "csv"])

    # --- 1. Projections ---
    st.subheader("Projections")
    if upload is not None:
        try:
            projection_set = _load_uploaded(upload)
        except (OSError, ValueError) as e:
            st.error(f"Could not read {upload.name}: {e}")
            st.stop()
        if projection_set.discount_rate is None:
            projection_set = projection_set.with_projections(discount_rate=discount_rate)
        st.json({k: asdict(v) for k, v in projection_set.projections().items()})
    else:
        preset = PROJECTION_PRESETS[preset_name]
        baseline = _projection_inputs("Baseline", preset["baseline"], "base")
        scenario_kind = st.radio("Scenario kind", options=list(SCENARIO_PREFERENCE), horizontal=True)
        scenario = _projection_inputs(f"Scenario ({scenario_kind})", preset["realistic"], "scen")
        projection_set = ROIProjectionSet(
            baseline=baseline, discount_rate=discount_rate, **{scenario_kind: scenario}
        )

    vr = validate_projection_set(projection_set)
    if not vr.is_valid:
        st.error("Projection validation failed:\n" + vr.summary())
        st.stop()
    if vr.warnings:
        with st.expander(f"{len(vr.warnings)} data warnings", expanded=False):
            st.text(vr.summary())

    # --- 2. Comparison ---
    st.divider()
    st.subheader("Scenario vs. Baseline")
    try:
        result = compare_scenarios(projection_set, horizon)
    except ROIEngineError as e:
        st.error(str(e))
        st.stop()

    k1, k2, k3, k4, k5 = st.columns(5)
    k1.metric("Scenario ROI", f"{result.scenario_roi_percent:.2f}%")
    k2.metric("Delta NPV", _fmt_money(result.delta_npv))
    k3.metric("Baseline NPV", _fmt_money(result.baseline.npv))
    k4.metric("Scenario NPV", _fmt_money(result.scenario.npv))
    k5.metric("Scenario IRR", _fmt_pct(result.scenario.irr)
              + ("" if result.scenario.irr_converged else " *"))
    if not result.scenario.irr_converged:
        st.caption("* IRR solver did not converge; value is a best-effort estimate.")

    cf = cashflow_table(result)
    _plot_cashflows(cf)
    with st.expander("Cashflow table", expanded=False):
        st.dataframe(cf, use_container_width=True, hide_index=True)

    # --- 3. Sensitivity ---
    st.divider()
    st.subheader("Sensitivity Analysis")
    cols = st.columns(len(SWEEP_DIMENSIONS))
    raw_sweeps = {}
    for col, dim in zip(cols, SWEEP_DIMENSIONS):
        text = col.text_input(SWEEP_LABELS[dim], value=", ".join(str(v) for v in SWEEP_PRESETS[dim]))
        raw_sweeps[dim] = _parse_list(text)
    spec = SweepSpec(
        discount_rates=tuple(raw_sweeps["discount_rate"]),
        growth_rates=tuple(raw_sweeps["growth_rate"]),
        terminal_multiples=tuple(raw_sweeps["terminal_multiple"]),
        capex_pcts=tuple(raw_sweeps["capex_pct"]),
        nwc_pcts=tuple(raw_sweeps["nwc_pct"]),
    )

    # a grid is only shown for the exact inputs it was computed from
    grid_key = _grid_key(projection_set, horizon, spec)
    for stale in [k for k in st.session_state if str(k).startswith("grid_") and k != grid_key]:
        del st.session_state[stale]
    if st.button("Run sensitivity sweep", type="primary"):
        try:
            with st.spinner("Evaluating grid..."):
                st.session_state[grid_key] = run_sensitivity_analysis(projection_set, horizon, spec)
        except ROIEngineError as e:
            st.error(str(e))
            st.stop()
    grid = st.session_state.get(grid_key)

    if grid is not None:
        report = generate_roi_report(result, grid=grid)
        for flag in report.flags:
            st.warning(flag)

        left, right = st.columns(2)
        with left:
            x_dim = st.selectbox("Heat map columns", SWEEP_DIMENSIONS, index=1)
        with right:
            y_dim = st.selectbox("Heat map rows", SWEEP_DIMENSIONS, index=0)
        if x_dim != y_dim:
            _plot_heatmap(sensitivity_pivot(grid, index=y_dim, columns=x_dim),
                          x_label=SWEEP_LABELS[x_dim], y_label=SWEEP_LABELS[y_dim])

        _plot_delta_histogram(grid.to_dataframe()["delta_npv"].to_numpy())

        st.markdown("**Grid Summary**")
        st.dataframe(sensitivity_summary(grid).round(4), use_container_width=True, hide_index=True)
        st.markdown("**Decision Report**")
        st.dataframe(report.to_dataframe(), use_container_width=True, hide_index=True)
        with st.expander(f"All {len(grid):,} grid rows", expanded=False):
            st.dataframe(sensitivity_table(grid), use_container_width=True, hide_index=True)

    # --- Download ---
    buffer = io.BytesIO()
    export_tables_to_excel(buffer, result=result, grid=grid)
    st.download_button(
        "Download ROI & Sensitivity tables (.xlsx)",
        data=buffer.getvalue(),
        file_name="roi_sensitivity_tables.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def main() -> None:
    """Console entry point: launch this file under `streamlit run`."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).resolve())]
    sys.exit(stcli.main())


if __name__ == "__main__":
    render()
