"""
Data preparation — parsing projection payloads, validation, estimation fallback.
"""

from .payloads import ProjectionPayload, ProjectionSetPayload
from .loader import (
    load_projection_set_csv,
    load_projection_set_json,
    projection_set_from_mapping,
    projection_set_from_simulation,
)
from .validators import ValidationResult, validate_projection_set
from .fallback import (
    EstimationService,
    StaticEstimationService,
    projections_needing_estimation,
    resolve_projection_set,
)

__all__ = [
    "ProjectionPayload",
    "ProjectionSetPayload",
    "load_projection_set_csv",
    "load_projection_set_json",
    "projection_set_from_mapping",
    "projection_set_from_simulation",
    "ValidationResult",
    "validate_projection_set",
    "EstimationService",
    "StaticEstimationService",
    "projections_needing_estimation",
    "resolve_projection_set",
]
