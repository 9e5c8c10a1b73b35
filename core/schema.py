"""
Input data model for the ROI engine.

A Projection is a handful of financial assumptions for one scenario; an
ROIProjectionSet bundles the four named scenarios with the discount rate.
Fields are explicit optionals: "not supplied" stays None here and the
substitution policy (defaults, EBITDA fallback) is applied by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .utils import to_float

BASELINE = "baseline"

# Preference order when more than one non-baseline scenario is present.
SCENARIO_PREFERENCE: Tuple[str, ...] = ("realistic", "optimistic", "pessimistic")

SCENARIO_KEYS: Tuple[str, ...] = (BASELINE, "optimistic", "realistic", "pessimistic")


@dataclass(frozen=True)
class Projection:
    ebitda: Optional[float] = None
    net_income: Optional[float] = None
    initial_investment: Optional[float] = None  # <0 outlay, >0 divestiture proceeds
    growth_rate: Optional[float] = None
    terminal_multiple: Optional[float] = None

    def with_assumptions(
        self,
        *,
        growth_rate: Optional[float] = None,
        terminal_multiple: Optional[float] = None,
    ) -> "Projection":
        """Copy with growth / terminal multiple substituted (None keeps the current value)."""
        changes = {}
        if growth_rate is not None:
            changes["growth_rate"] = growth_rate
        if terminal_multiple is not None:
            changes["terminal_multiple"] = terminal_multiple
        return replace(self, **changes) if changes else self

    @property
    def is_degenerate(self) -> bool:
        """True when neither EBITDA nor net income is a positive finite number."""
        figures = [to_float(self.ebitda), to_float(self.net_income)]
        return all(f is None or f <= 0 for f in figures)


@dataclass(frozen=True)
class ROIProjectionSet:
    baseline: Optional[Projection] = None
    optimistic: Optional[Projection] = None
    realistic: Optional[Projection] = None
    pessimistic: Optional[Projection] = None
    discount_rate: Optional[float] = 0.10

    def get(self, name: str) -> Optional[Projection]:
        if name not in SCENARIO_KEYS:
            raise KeyError(f"Unknown scenario '{name}'. Expected one of {SCENARIO_KEYS}.")
        return getattr(self, name)

    def resolve_scenario(self) -> Optional[Tuple[str, Projection]]:
        """First present of realistic -> optimistic -> pessimistic, as (name, projection)."""
        for name in SCENARIO_PREFERENCE:
            proj = getattr(self, name)
            if proj is not None:
                return name, proj
        return None

    def projections(self) -> Dict[str, Projection]:
        """Present projections keyed by scenario name."""
        return {k: getattr(self, k) for k in SCENARIO_KEYS if getattr(self, k) is not None}

    def with_projections(self, **projections: Optional[Projection]) -> "ROIProjectionSet":
        return replace(self, **projections)
