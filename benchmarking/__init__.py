"""
Peer benchmarking metrics — market share and the weighted competitive index.
"""

from .competitive import (
    COMPETITIVE_INDEX_WEIGHTS,
    CompetitiveIndexInputs,
    CompetitiveIndexScore,
    calculate_competitive_index,
    competitive_index_report,
)
from .market import calculate_market_share

__all__ = [
    "COMPETITIVE_INDEX_WEIGHTS",
    "CompetitiveIndexInputs",
    "CompetitiveIndexScore",
    "calculate_competitive_index",
    "competitive_index_report",
    "calculate_market_share",
]
