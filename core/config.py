"""
Engine configuration.
Every numeric default used by the cashflow builder, the IRR solver and the
sensitivity grid lives here so callers can override them in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class EngineConfig:
    horizon_years: int = 5

    # capex / working-capital drag as fractions of yearly free cash flow
    capex_pct: float = 0.03
    nwc_pct: float = 0.01

    # projection defaults when the caller leaves a field empty
    default_discount_rate: float = 0.10
    default_growth_rate: float = 0.03
    default_terminal_multiple: float = 8.0

    # net income is preferred; EBITDA * ratio is the fallback FCF proxy
    ebitda_to_fcf: float = 0.7

    # perpetuity growth never exceeds this in the terminal value
    terminal_growth_cap: float = 0.03

    # IRR solver (damped Newton-Raphson)
    irr_guess: float = 0.10
    irr_tolerance: float = 1e-7
    irr_max_iterations: int = 100
    irr_rate_floor: float = -0.99

    # sensitivity grid
    max_grid_cells: int = 10_000
    parallel_threshold: int = 512
    max_workers: Optional[int] = None  # None -> os.cpu_count()
    executor: Literal["process", "thread"] = "process"


DEFAULT_CONFIG = EngineConfig()
