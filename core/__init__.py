"""
Core package — data model, configuration, errors, and shared numeric helpers.
No business logic lives here.
"""

from .schema import (
    BASELINE,
    SCENARIO_KEYS,
    SCENARIO_PREFERENCE,
    Projection,
    ROIProjectionSet,
)
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import GridTooLargeError, NoProjectionDataError, ROIEngineError
from .utils import excel_round, finite_or, round_half_away, to_float

__all__ = [
    "BASELINE",
    "SCENARIO_KEYS",
    "SCENARIO_PREFERENCE",
    "Projection",
    "ROIProjectionSet",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "GridTooLargeError",
    "NoProjectionDataError",
    "ROIEngineError",
    "excel_round",
    "finite_or",
    "round_half_away",
    "to_float",
]
