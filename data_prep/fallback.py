"""
Estimation fallback — fill missing or degenerate projections before comparison.

The engine never calls out for data. A caller that holds an incomplete
projection set (nothing entered, nothing imported, or all financial figures
<= 0) can ask an EstimationService for replacements first. The service is an
external collaborator (e.g. a text-generation backend); only the interface
and a static implementation live here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from core.schema import SCENARIO_KEYS, Projection, ROIProjectionSet

logger = logging.getLogger(__name__)


class EstimationService:
    """Interface for producing projections the caller could not supply."""

    def estimate(
        self,
        missing: Sequence[str],
        current: ROIProjectionSet,
    ) -> Mapping[str, Projection]:
        """
        Return replacement projections keyed by scenario name.

        Only names listed in `missing` are used; anything else in the answer
        is ignored, and names left out stay as they were.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class StaticEstimationService(EstimationService):
    """Answers from a fixed mapping (stored company financials, test fixtures)."""

    projections: Dict[str, Projection] = field(default_factory=dict)

    def estimate(
        self,
        missing: Sequence[str],
        current: ROIProjectionSet,
    ) -> Mapping[str, Projection]:
        return {k: v for k, v in self.projections.items() if k in missing}


def projections_needing_estimation(projection_set: ROIProjectionSet) -> List[str]:
    """Scenario names whose projection is absent or degenerate, in SCENARIO_KEYS order."""
    out = []
    for name in SCENARIO_KEYS:
        proj = projection_set.get(name)
        if proj is None or proj.is_degenerate:
            out.append(name)
    return out


def resolve_projection_set(
    projection_set: ROIProjectionSet,
    estimator: Optional[EstimationService] = None,
) -> ROIProjectionSet:
    """
    Ask the estimator for every missing/degenerate projection and merge the answers.

    Without an estimator, or when nothing needs estimating, the set is
    returned unchanged. Errors raised by the estimator propagate.
    """
    if estimator is None:
        return projection_set

    missing = projections_needing_estimation(projection_set)
    if not missing:
        return projection_set

    answers = estimator.estimate(missing, projection_set) or {}
    updates: Dict[str, Projection] = {}
    for name in missing:
        proj = answers.get(name)
        if proj is None:
            continue
        logger.warning("Using estimated %s projection (original was missing or degenerate)", name)
        updates[name] = proj

    return projection_set.with_projections(**updates) if updates else projection_set
