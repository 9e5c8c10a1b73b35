"""
Unit tests for dashboard helpers
"""

from app.streamlit_app import _grid_key
from core.schema import Projection
from sensitivity.sweeps import SweepSpec


class TestGridKey:
    """A cached sensitivity grid belongs to one set of inputs."""

    def test_same_inputs_same_key(self, projection_set):
        spec = SweepSpec(discount_rates=(0.08, 0.12))
        assert _grid_key(projection_set, 5, spec) == _grid_key(projection_set, 5, SweepSpec(
            discount_rates=(0.08, 0.12)
        ))

    def test_changed_projection_changes_key(self, projection_set):
        spec = SweepSpec(discount_rates=(0.08, 0.12))
        edited = projection_set.with_projections(realistic=Projection(net_income=90.0))
        assert _grid_key(projection_set, 5, spec) != _grid_key(edited, 5, spec)

    def test_changed_horizon_rate_or_sweeps_changes_key(self, projection_set):
        spec = SweepSpec(discount_rates=(0.08, 0.12))
        key = _grid_key(projection_set, 5, spec)
        assert key != _grid_key(projection_set, 7, spec)
        assert key != _grid_key(projection_set.with_projections(discount_rate=0.12), 5, spec)
        assert key != _grid_key(projection_set, 5, SweepSpec(discount_rates=(0.08,)))

    def test_key_is_namespaced(self, projection_set):
        assert _grid_key(projection_set, 5, SweepSpec()).startswith("grid_")
