"""
Sensitivity grid — the scenario comparison run over every sweep combination.

Input:  ROIProjectionSet + SweepSpec (five value lists)
Output: one SensitivityRow per combination, in canonical nesting order

Per grid point:
  - scenario projection gets the point's growth rate and terminal multiple
  - baseline keeps its own growth / multiple
  - both legs use the point's capex % and nwc %
  - baseline NPV, scenario NPV, delta and scenario IRR are recorded

Grid points are independent. Large grids are fanned out to a worker pool;
every task carries its grid index and the rows are sorted back afterwards,
so positional correspondence with the input lists always holds.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from core.config import DEFAULT_CONFIG, EngineConfig
from core.errors import GridTooLargeError
from core.schema import Projection, ROIProjectionSet
from core.utils import finite_or
from engine.roi import evaluate_pair, require_projections

from .sweeps import SWEEP_DIMENSIONS, GridPoint, ResolvedSweeps, SweepSpec

logger = logging.getLogger(__name__)

_CAMEL_KEYS: Dict[str, str] = {
    "discount_rate": "discountRate",
    "growth_rate": "growthRate",
    "terminal_multiple": "terminalMultiple",
    "capex_pct": "capexPct",
    "nwc_pct": "nwcPct",
    "baseline_npv": "baselineNPV",
    "scenario_npv": "scenarioNPV",
    "delta_npv": "deltaNPV",
    "scenario_irr": "scenarioIRR",
    "irr_converged": "irrConverged",
}


@dataclass(frozen=True)
class SensitivityRow:
    """Result for one grid point."""
    discount_rate: float
    growth_rate: float
    terminal_multiple: float
    capex_pct: float
    nwc_pct: float
    baseline_npv: float
    scenario_npv: float
    delta_npv: float
    scenario_irr: float
    irr_converged: bool

    def to_dict(self) -> Dict[str, Any]:
        return {_CAMEL_KEYS[k]: v for k, v in asdict(self).items()}


@dataclass
class SensitivityResult:
    """
    Ordered grid output.

    rows[i] corresponds to the i-th combination of the Cartesian product
    (outer -> inner: discount rate, growth, multiple, capex, nwc).
    """
    rows: List[SensitivityRow]
    sweeps: ResolvedSweeps
    horizon_years: int
    scenario_name: str

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[SensitivityRow]:
        return iter(self.rows)

    def __getitem__(self, idx: int) -> SensitivityRow:
        return self.rows[idx]

    def to_records(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        cols = list(SensitivityRow.__dataclass_fields__)
        return pd.DataFrame([asdict(r) for r in self.rows], columns=cols)

    def pivot(
        self,
        index: str = "discount_rate",
        columns: str = "growth_rate",
        values: str = "delta_npv",
    ) -> pd.DataFrame:
        """
        Two-way table of one output over two swept dimensions.
        Remaining dimensions are averaged when they have more than one value.
        """
        for dim in (index, columns):
            if dim not in SWEEP_DIMENSIONS:
                raise ValueError(f"'{dim}' is not a swept dimension: {SWEEP_DIMENSIONS}")
        df = self.to_dataframe()
        return df.pivot_table(index=index, columns=columns, values=values, aggfunc="mean")


def _evaluate_point(
    baseline: Projection,
    scenario: Projection,
    point: GridPoint,
    horizon_years: int,
    config: EngineConfig,
) -> SensitivityRow:
    swept = scenario.with_assumptions(
        growth_rate=point.growth_rate,
        terminal_multiple=point.terminal_multiple,
    )
    base_leg, scen_leg = evaluate_pair(
        baseline,
        swept,
        discount_rate=point.discount_rate,
        horizon_years=horizon_years,
        capex_pct=point.capex_pct,
        nwc_pct=point.nwc_pct,
        config=config,
    )
    return SensitivityRow(
        discount_rate=point.discount_rate,
        growth_rate=point.growth_rate,
        terminal_multiple=point.terminal_multiple,
        capex_pct=point.capex_pct,
        nwc_pct=point.nwc_pct,
        baseline_npv=base_leg.npv,
        scenario_npv=scen_leg.npv,
        delta_npv=scen_leg.npv - base_leg.npv,
        scenario_irr=scen_leg.irr,
        irr_converged=bool(scen_leg.irr_converged),
    )


def _evaluate_chunk(
    baseline: Projection,
    scenario: Projection,
    chunk: Sequence[Tuple[int, GridPoint]],
    horizon_years: int,
    config: EngineConfig,
) -> List[Tuple[int, SensitivityRow]]:
    """Worker entry point; module-level so it pickles for process pools."""
    return [
        (idx, _evaluate_point(baseline, scenario, point, horizon_years, config))
        for idx, point in chunk
    ]


def _resolve_workers(config: EngineConfig) -> int:
    if config.max_workers is not None:
        return max(int(config.max_workers), 1)
    return os.cpu_count() or 1


def _run_parallel(
    baseline: Projection,
    scenario: Projection,
    points: List[GridPoint],
    horizon_years: int,
    config: EngineConfig,
    n_workers: int,
) -> List[SensitivityRow]:
    indexed = list(enumerate(points))
    # a few chunks per worker keeps the pool busy without per-point pickling
    chunk_size = max(1, int(np.ceil(len(indexed) / (n_workers * 4))))
    chunks = [indexed[i:i + chunk_size] for i in range(0, len(indexed), chunk_size)]

    pool_cls = ProcessPoolExecutor if config.executor == "process" else ThreadPoolExecutor
    collected: List[Tuple[int, SensitivityRow]] = []
    with pool_cls(max_workers=n_workers) as pool:
        futures = [
            pool.submit(_evaluate_chunk, baseline, scenario, chunk, horizon_years, config)
            for chunk in chunks
        ]
        for fut in as_completed(futures):
            collected.extend(fut.result())

    collected.sort(key=lambda pair: pair[0])
    return [row for _, row in collected]


def run_sensitivity_analysis(
    base_projections: ROIProjectionSet,
    horizon_years: int = DEFAULT_CONFIG.horizon_years,
    sweeps: Union[SweepSpec, Mapping[str, Any], None] = None,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SensitivityResult:
    """
    Evaluate the scenario comparison over the full Cartesian product of sweeps.

    Parameters
    ----------
    base_projections : ROIProjectionSet
        Baseline plus at least one scenario projection.
    horizon_years : int
        Forecast horizon for every grid point.
    sweeps : SweepSpec or mapping, optional
        Value lists per dimension; a mapping is parsed with SweepSpec.from_payload.
    config : EngineConfig
        Defaults, grid ceiling and worker pool settings.

    Raises
    ------
    NoProjectionDataError
        Baseline or scenario projection missing.
    GridTooLargeError
        Product of list lengths exceeds config.max_grid_cells.
    """
    baseline, scenario_name, scenario = require_projections(base_projections)

    spec = sweeps if isinstance(sweeps, SweepSpec) else SweepSpec.from_payload(sweeps)
    resolved = spec.resolve(base_projections, config)

    n_cells = resolved.n_cells
    if n_cells > config.max_grid_cells:
        raise GridTooLargeError(n_cells, config.max_grid_cells)

    years = max(int(finite_or(horizon_years, config.horizon_years)), 0)
    points = list(resolved.points())
    n_workers = min(_resolve_workers(config), n_cells)

    logger.info(
        "Sensitivity grid: %d points %s, scenario=%s, horizon=%d, workers=%d",
        n_cells, resolved.shape, scenario_name, years, n_workers,
    )

    if n_cells >= config.parallel_threshold and n_workers > 1:
        logger.debug("Dispatching grid to %d %s workers", n_workers, config.executor)
        rows = _run_parallel(baseline, scenario, points, years, config, n_workers)
    else:
        logger.debug("Evaluating grid serially")
        rows = [_evaluate_point(baseline, scenario, p, years, config) for p in points]

    return SensitivityResult(
        rows=rows,
        sweeps=resolved,
        horizon_years=years,
        scenario_name=scenario_name,
    )
