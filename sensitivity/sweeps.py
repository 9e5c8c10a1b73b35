"""
Sweep specification for the sensitivity grid.

Five swept assumptions, in nesting order (outer -> inner):
  discount rate, growth rate, terminal multiple, capex %, working-capital %

Any list left empty resolves to a single value taken from the projection set
(discount rate, scenario growth and multiple) or from the engine config
(capex, nwc). Grid size is the product of the list lengths.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass, field
from math import prod
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import pandas as pd

from core.config import DEFAULT_CONFIG, EngineConfig
from core.schema import ROIProjectionSet
from core.utils import finite_or, to_float

# Nesting order of the Cartesian product; also the column order of the rows.
SWEEP_DIMENSIONS: Tuple[str, ...] = (
    "discount_rate",
    "growth_rate",
    "terminal_multiple",
    "capex_pct",
    "nwc_pct",
)

# Accepted payload keys -> dimension
_PAYLOAD_ALIASES: Dict[str, str] = {
    "discountRate": "discount_rate",
    "discountRates": "discount_rate",
    "discount_rate": "discount_rate",
    "discount_rates": "discount_rate",
    "growthRate": "growth_rate",
    "growthRates": "growth_rate",
    "growth_rate": "growth_rate",
    "growth_rates": "growth_rate",
    "terminalMultiple": "terminal_multiple",
    "terminalMultiples": "terminal_multiple",
    "terminal_multiple": "terminal_multiple",
    "terminal_multiples": "terminal_multiple",
    "capexPct": "capex_pct",
    "capexPcts": "capex_pct",
    "capex_pct": "capex_pct",
    "capex_pcts": "capex_pct",
    "nwcPct": "nwc_pct",
    "nwcPcts": "nwc_pct",
    "nwc_pct": "nwc_pct",
    "nwc_pcts": "nwc_pct",
}


@dataclass(frozen=True)
class GridPoint:
    """One combination of swept assumptions."""
    discount_rate: float
    growth_rate: float
    terminal_multiple: float
    capex_pct: float
    nwc_pct: float


@dataclass(frozen=True)
class SweepSpec:
    """
    Caller-supplied sweep lists. Empty tuples mean "use the single default".

    Can be built directly or from a request payload via from_payload().
    """
    discount_rates: Tuple[float, ...] = ()
    growth_rates: Tuple[float, ...] = ()
    terminal_multiples: Tuple[float, ...] = ()
    capex_pcts: Tuple[float, ...] = ()
    nwc_pcts: Tuple[float, ...] = ()

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "SweepSpec":
        """
        Build from a loosely-typed mapping such as a request body's "sweeps".

        Keys may be camelCase or snake_case, singular or plural. A scalar is
        treated as a one-element list; unknown keys are ignored.
        """
        lists: Dict[str, Tuple] = {d: () for d in SWEEP_DIMENSIONS}
        for key, raw in (payload or {}).items():
            dim = _PAYLOAD_ALIASES.get(key)
            if dim is None or raw is None:
                continue
            if (
                isinstance(raw, (str, bytes))
                or not isinstance(raw, Iterable)
                or getattr(raw, "ndim", None) == 0
            ):
                raw = [raw]
            lists[dim] = tuple(raw)
        return cls(
            discount_rates=lists["discount_rate"],
            growth_rates=lists["growth_rate"],
            terminal_multiples=lists["terminal_multiple"],
            capex_pcts=lists["capex_pct"],
            nwc_pcts=lists["nwc_pct"],
        )

    def resolve(
        self,
        projection_set: ROIProjectionSet,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> "ResolvedSweeps":
        """Fill empty lists with defaults and replace non-finite entries by them."""
        resolved = projection_set.resolve_scenario()
        scenario = resolved[1] if resolved is not None else None

        defaults = {
            "discount_rate": finite_or(projection_set.discount_rate, config.default_discount_rate),
            "growth_rate": finite_or(
                scenario.growth_rate if scenario else None, config.default_growth_rate
            ),
            "terminal_multiple": finite_or(
                scenario.terminal_multiple if scenario else None,
                config.default_terminal_multiple,
            ),
            "capex_pct": config.capex_pct,
            "nwc_pct": config.nwc_pct,
        }
        supplied = {
            "discount_rate": self.discount_rates,
            "growth_rate": self.growth_rates,
            "terminal_multiple": self.terminal_multiples,
            "capex_pct": self.capex_pcts,
            "nwc_pct": self.nwc_pcts,
        }

        values = {}
        for dim in SWEEP_DIMENSIONS:
            default = defaults[dim]
            raw = supplied[dim]
            if not raw:
                values[dim] = (default,)
            else:
                values[dim] = tuple(
                    default if to_float(v) is None else to_float(v) for v in raw
                )
        return ResolvedSweeps(**values)


@dataclass(frozen=True)
class ResolvedSweeps:
    """Concrete, non-empty value lists for every swept dimension."""
    discount_rate: Tuple[float, ...] = field(default_factory=tuple)
    growth_rate: Tuple[float, ...] = field(default_factory=tuple)
    terminal_multiple: Tuple[float, ...] = field(default_factory=tuple)
    capex_pct: Tuple[float, ...] = field(default_factory=tuple)
    nwc_pct: Tuple[float, ...] = field(default_factory=tuple)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(len(getattr(self, d)) for d in SWEEP_DIMENSIONS)

    @property
    def n_cells(self) -> int:
        return prod(self.shape)

    def points(self) -> Iterator[GridPoint]:
        """Cartesian product in canonical nesting order."""
        lists = [getattr(self, d) for d in SWEEP_DIMENSIONS]
        for combo in itertools.product(*lists):
            yield GridPoint(*combo)

    def summary(self) -> pd.DataFrame:
        """One row per swept dimension: how many values and their range."""
        rows = []
        for dim in SWEEP_DIMENSIONS:
            vals = getattr(self, dim)
            rows.append({
                "Dimension": dim,
                "Values": len(vals),
                "Min": min(vals),
                "Max": max(vals),
            })
        return pd.DataFrame(rows)
