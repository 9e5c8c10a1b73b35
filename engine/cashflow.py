"""
Deterministic yearly cashflow construction for one Projection.

Key design principles:
  1. Index 0 is the initial investment (signed: outlay < 0, proceeds > 0)
  2. Free-cash-flow proxy: net income if positive, else EBITDA * 0.7, else 0
  3. Years 2..N compound the proxy by the growth rate
  4. Capex and working-capital drag are always a cost: |f_t| * pct
  5. Terminal value = f_N * (1 + min(g, 3%)) * multiple, folded into year N
  6. Missing or non-finite inputs degrade to defaults, never raise
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from core.config import DEFAULT_CONFIG, EngineConfig
from core.schema import Projection
from core.utils import finite_or, to_float


def free_cash_flow_proxy(
    projection: Projection,
    *,
    ebitda_to_fcf: float = DEFAULT_CONFIG.ebitda_to_fcf,
) -> Tuple[float, str]:
    """
    Resolve the free-cash-flow proxy through the priority chain.

    Returns
    -------
    (value, source) where source is "net_income", "ebitda" or "none".
    """
    net_income = to_float(projection.net_income)
    if net_income is not None and net_income > 0:
        return net_income, "net_income"

    ebitda = to_float(projection.ebitda)
    if ebitda is not None:
        return ebitda * ebitda_to_fcf, "ebitda"

    return 0.0, "none"


def build_cashflows(
    projection: Projection,
    years: int = DEFAULT_CONFIG.horizon_years,
    *,
    capex_pct: Optional[float] = None,
    nwc_pct: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """
    Build the (years + 1) cashflow series for a projection.

    Parameters
    ----------
    projection : Projection
        Scenario assumptions; empty fields fall back to config defaults.
    years : int
        Explicit forecast horizon. 0 yields a single element holding the
        initial investment plus the terminal value of the unscaled proxy.
    capex_pct, nwc_pct : float, optional
        Drag as fractions of |free cash flow|; default to config values.

    Returns
    -------
    np.ndarray of float, length years + 1.
    """
    n_years = int(finite_or(years, config.horizon_years))
    n_years = max(n_years, 0)

    capex = finite_or(capex_pct, config.capex_pct)
    nwc = finite_or(nwc_pct, config.nwc_pct)
    growth = finite_or(projection.growth_rate, config.default_growth_rate)
    multiple = finite_or(projection.terminal_multiple, config.default_terminal_multiple)

    base, _ = free_cash_flow_proxy(projection, ebitda_to_fcf=config.ebitda_to_fcf)

    flows = [finite_or(projection.initial_investment, 0.0)]

    fcf = base
    for t in range(1, n_years + 1):
        if t > 1:
            fcf = fcf * (1.0 + growth)
        flows.append(fcf - abs(fcf) * capex - abs(fcf) * nwc)

    terminal_growth = min(growth, config.terminal_growth_cap)
    terminal = fcf * (1.0 + terminal_growth) * multiple
    flows[-1] += terminal

    return np.asarray(flows, dtype=float)
