"""
Load ROI projection sets from the shapes callers hand us:
  - a camelCase mapping (request body / stored "roiProjections")
  - simulation results that carry "roiProjections"
  - a JSON file holding either of the above
  - a CSV with one row per scenario
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pandas as pd

from core.schema import SCENARIO_KEYS, ROIProjectionSet
from core.utils import to_float

from .payloads import ProjectionSetPayload

_CSV_COLUMN_ALIASES: Dict[str, str] = {
    "Scenario": "scenario",
    "EBITDA": "ebitda",
    "Ebitda": "ebitda",
    "Net Income": "netIncome",
    "net_income": "netIncome",
    "NetIncome": "netIncome",
    "Initial Investment": "initialInvestment",
    "initial_investment": "initialInvestment",
    "Growth Rate": "growthRate",
    "growth_rate": "growthRate",
    "Terminal Multiple": "terminalMultiple",
    "terminal_multiple": "terminalMultiple",
    "Discount Rate": "discountRate",
    "discount_rate": "discountRate",
}


def projection_set_from_mapping(data: Optional[Mapping[str, Any]]) -> ROIProjectionSet:
    """Parse a {baseline, optimistic, realistic, pessimistic, discountRate} mapping."""
    return ProjectionSetPayload.model_validate(dict(data or {})).to_projection_set()


def projection_set_from_simulation(simulation: Optional[Mapping[str, Any]]) -> ROIProjectionSet:
    """
    Pull the projection set out of a completed simulation.

    Accepts either the simulation document ({"results": {"roiProjections": ...}})
    or its results object ({"roiProjections": ...}). Missing keys give an empty set.
    """
    sim = simulation or {}
    results = sim.get("results", sim)
    if not isinstance(results, Mapping):
        results = {}
    rp = results.get("roiProjections") or {}
    if not isinstance(rp, Mapping):
        rp = {}
    return projection_set_from_mapping(rp)


def load_projection_set_json(path: Union[str, Path]) -> ROIProjectionSet:
    """Load a JSON file holding a projection set or a simulation document."""
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}.")
    if "roiProjections" in data or "results" in data:
        return projection_set_from_simulation(data)
    return projection_set_from_mapping(data)


def load_projection_set_csv(
    path: Union[str, Path],
    *,
    discount_rate: Optional[float] = None,
) -> ROIProjectionSet:
    """
    Load a CSV with one row per scenario.

    Required column: scenario (baseline / optimistic / realistic / pessimistic).
    Optional columns: ebitda, netIncome, initialInvestment, growthRate,
    terminalMultiple, discountRate. An explicit discount_rate argument wins
    over the column; otherwise the first finite value in the column is used.
    """
    df = pd.read_csv(path)
    df = df.rename(columns={c: _CSV_COLUMN_ALIASES.get(c, c) for c in df.columns})
    if "scenario" not in df.columns:
        raise ValueError(f"{path}: missing required column 'scenario'.")

    df["scenario"] = df["scenario"].astype(str).str.strip().str.lower()
    unknown = sorted(set(df["scenario"]) - set(SCENARIO_KEYS))
    if unknown:
        raise ValueError(f"{path}: unknown scenario names {unknown}; expected {SCENARIO_KEYS}.")

    payload: Dict[str, Any] = {}
    for _, row in df.drop_duplicates("scenario", keep="first").iterrows():
        fields = row.drop(labels=["scenario"]).to_dict()
        fields.pop("discountRate", None)
        payload[row["scenario"]] = {k: (None if pd.isna(v) else v) for k, v in fields.items()}

    if discount_rate is None and "discountRate" in df.columns:
        finite = [to_float(v) for v in df["discountRate"] if to_float(v) is not None]
        discount_rate = finite[0] if finite else None
    payload["discountRate"] = discount_rate

    return projection_set_from_mapping(payload)
