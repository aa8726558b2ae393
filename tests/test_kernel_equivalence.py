"""
Tests for kernel equivalence: Taichi vs naive implementations.

The Taichi kernels must reproduce the pure-Python references exactly for
the integration field (integer arithmetic, same visit order) and within
float32 tolerance for the flow field.
"""

import numpy as np
import pytest

from flowfield.core.dtypes import COST_MAX


def build_pair(field_factory, rows, cols, costs, target, **kwargs):
    """Identical fields, one per kernel family."""
    fast = field_factory(rows, cols, integration="taichi", flow="taichi", **kwargs)
    slow = field_factory(rows, cols, integration="naive", flow="naive", **kwargs)
    for field in (fast, slow):
        field.load_costs(costs)
        field.set_cost(target, 0)
        field.set_target(target)
    return fast, slow


class TestIntegrationEquivalence:
    """Taichi wavefront matches the deque reference."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_random_terrain(self, field_factory, random_costs, seed):
        costs = random_costs(24, 18, wall_fraction=0.25, seed=seed)
        fast, slow = build_pair(field_factory, 24, 18, costs, target=200)

        r_fast = fast.recompute()
        r_slow = slow.recompute()

        np.testing.assert_array_equal(fast.integration_array(), slow.integration_array())
        assert r_fast == r_slow

    def test_high_costs_saturate_identically(self, field_factory, random_costs):
        costs = random_costs(20, 20, wall_fraction=0.1, max_cost=COST_MAX - 1, seed=7)
        fast, slow = build_pair(field_factory, 20, 20, costs, target=0)
        fast.recompute()
        slow.recompute()
        np.testing.assert_array_equal(fast.integration_array(), slow.integration_array())

    @pytest.mark.parametrize("cap", [1, 5, 50])
    def test_capped_passes(self, field_factory, random_costs, cap):
        costs = random_costs(12, 12, seed=4)
        fast, slow = build_pair(
            field_factory, 12, 12, costs, target=77, max_iterations=cap
        )
        r_fast = fast.recompute()
        r_slow = slow.recompute()

        np.testing.assert_array_equal(fast.integration_array(), slow.integration_array())
        assert r_fast.degraded == r_slow.degraded
        assert r_fast.iterations == r_slow.iterations


class TestFlowEquivalence:
    """Taichi synthesis matches the float64 reference."""

    @pytest.mark.parametrize("centered", [True, False])
    @pytest.mark.parametrize("cell_size", [1.0, 25.0])
    def test_random_terrain(self, field_factory, random_costs, centered, cell_size):
        costs = random_costs(16, 16, seed=9)
        fast, slow = build_pair(
            field_factory, 16, 16, costs, target=136,
            cell_size=cell_size, centered=centered,
        )
        fast.recompute()
        slow.recompute()

        np.testing.assert_allclose(fast.flow_array(), slow.flow_array(), atol=1e-5)

    def test_zero_vectors_agree(self, field_factory, random_costs):
        costs = random_costs(16, 16, wall_fraction=0.3, seed=2)
        fast, slow = build_pair(field_factory, 16, 16, costs, target=17)
        fast.recompute()
        slow.recompute()

        zero_fast = np.all(fast.flow_array() == 0.0, axis=1)
        zero_slow = np.all(slow.flow_array() == 0.0, axis=1)
        np.testing.assert_array_equal(zero_fast, zero_slow)
