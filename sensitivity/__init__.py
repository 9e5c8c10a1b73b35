"""
Sensitivity package — sweep specification and the grid runner.

  1. sweeps.py — which values to try for each of the five assumptions
  2. grid.py   — run the scenario comparison for every combination
"""

from .sweeps import SWEEP_DIMENSIONS, GridPoint, ResolvedSweeps, SweepSpec
from .grid import SensitivityResult, SensitivityRow, run_sensitivity_analysis

__all__ = [
    "SWEEP_DIMENSIONS",
    "GridPoint",
    "ResolvedSweeps",
    "SweepSpec",
    "SensitivityResult",
    "SensitivityRow",
    "run_sensitivity_analysis",
]
