"""Shared pytest fixtures: small projection sets with hand-checkable numbers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.schema import Projection, ROIProjectionSet


@pytest.fixture
def baseline_projection():
    """Status quo: 100 of net income, no investment, default growth / multiple."""
    return Projection(net_income=100.0, initial_investment=0.0)


@pytest.fixture
def expansion_projection():
    return Projection(
        net_income=120.0,
        initial_investment=-150.0,
        growth_rate=0.06,
        terminal_multiple=8.5,
    )


@pytest.fixture
def projection_set(baseline_projection, expansion_projection):
    """Baseline + realistic expansion at a 10% discount rate."""
    return ROIProjectionSet(
        baseline=baseline_projection,
        realistic=expansion_projection,
        discount_rate=0.10,
    )


@pytest.fixture
def divestiture_set(baseline_projection):
    """Selling a unit: less income going forward, proceeds up front."""
    return ROIProjectionSet(
        baseline=baseline_projection,
        pessimistic=Projection(net_income=80.0, initial_investment=250.0),
        discount_rate=0.10,
    )
