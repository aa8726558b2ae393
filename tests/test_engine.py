"""Tests for the FlowField engine and the functional API."""

import logging

import numpy as np
import pytest

from flowfield import (
    COST_MAX,
    INTEGR_MAX,
    NO_TARGET,
    CellIndexError,
    EngineConfig,
    FlowField,
    create_grid,
    recompute,
    set_cost,
    set_target,
    world_to_index,
)
from flowfield.kernels import KernelRegistry, KernelVariant, NaiveWavefrontKernel


class TestCreateGrid:
    """Construction and initial state."""

    def test_initial_state(self):
        field = create_grid(4, 6, 10.0)
        assert field.rows == 4
        assert field.cols == 6
        assert field.cell_size == 10.0
        assert field.size == 24
        assert field.target == NO_TARGET
        assert not field.has_valid_target
        np.testing.assert_array_equal(field.cost_array(), np.zeros(24))
        np.testing.assert_array_equal(field.integration_array(), np.full(24, INTEGR_MAX))
        np.testing.assert_array_equal(field.flow_array(), np.zeros((24, 2)))

    @pytest.mark.parametrize(
        "rows,cols,cell_size", [(0, 4, 1.0), (4, -1, 1.0), (4, 4, 0.0)]
    )
    def test_invalid_dimensions(self, rows, cols, cell_size):
        with pytest.raises(ValueError):
            create_grid(rows, cols, cell_size)

    def test_from_config(self):
        config = EngineConfig().with_updates(grid={"rows": 5, "cols": 3, "cell_size": 2.0})
        field = FlowField.from_config(config)
        assert field.geometry.shape == (5, 3)
        assert field.cell_size == 2.0
        assert field.config is config

    @pytest.mark.parametrize(
        "rows,cols,cell_size", [(2.5, 3, 1.0), (3, 2.0, 1.0), (3, 3, float("nan"))]
    )
    def test_non_integer_dimensions_fail_before_allocation(self, rows, cols, cell_size):
        with pytest.raises(ValueError):
            create_grid(rows, cols, cell_size)
        # The Taichi field builder is still usable afterwards
        field = create_grid(1, 3, 1.0)
        field.set_target(0)
        assert field.recompute().reached == 3

    def test_dimensions_override_config_grid(self):
        config = EngineConfig().with_updates(
            grid={"rows": 9, "cols": 9, "cell_size": 4.0},
            integration={"variant": "naive"},
        )
        field = create_grid(2, 5, 1.5, config)
        assert field.config.grid.rows == field.rows == 2
        assert field.config.grid.cols == field.cols == 5
        assert field.config.grid.cell_size == field.cell_size == 1.5
        assert field.config.integration.variant == "naive"
        # Caller's config is not modified
        assert config.grid.rows == 9

    def test_default_config_matches_dimensions(self):
        field = create_grid(4, 7, 3.0)
        assert (field.config.rows, field.config.cols) == (4, 7)
        assert field.config.cell_size == 3.0

    def test_config_selects_kernels(self):
        config = EngineConfig().with_updates(integration={"variant": "naive"})
        field = create_grid(3, 3, 1.0, config)
        field.set_target(4)
        field.recompute()
        assert field.integration_at(0) == 2

    def test_custom_registry(self):
        registry = KernelRegistry()
        registry.register_integration(KernelVariant.TAICHI, NaiveWavefrontKernel)
        field = FlowField(create_grid(2, 2, 1.0).geometry, registry=registry)
        field.set_target(0)
        assert field.recompute().reached == 4

    def test_repr(self):
        assert "rows=2" in repr(create_grid(2, 3, 1.0))


class TestMutation:
    """Cost and target edits."""

    def test_set_cost(self):
        field = create_grid(3, 3, 1.0)
        field.set_cost(2, 7)
        assert field.cost_at(2) == 7
        assert field.cost_array()[2] == 7

    @pytest.mark.parametrize("index", [-1, 9, 100])
    def test_set_cost_out_of_range(self, index):
        field = create_grid(3, 3, 1.0)
        with pytest.raises(CellIndexError):
            field.set_cost(index, 1)

    @pytest.mark.parametrize(
        "value", [-1, COST_MAX + 1, 2.5, float("inf"), float("nan"), "3", True]
    )
    def test_set_cost_bad_value(self, value):
        field = create_grid(3, 3, 1.0)
        with pytest.raises(ValueError):
            field.set_cost(0, value)

    def test_set_cost_accepts_numpy_int(self):
        field = create_grid(3, 3, 1.0)
        field.set_cost(0, np.int64(COST_MAX))
        assert field.cost_at(0) == COST_MAX

    def test_load_costs_2d(self):
        field = create_grid(2, 3, 1.0)
        field.load_costs([[0, 1, 2], [3, 4, COST_MAX]])
        np.testing.assert_array_equal(field.cost_array(), [0, 1, 2, 3, 4, COST_MAX])
        # (row, col) layout matches the linear index
        assert field.cost_at(field.geometry.cell_to_index(1, 0)) == 3

    def test_load_costs_flat(self):
        field = create_grid(2, 2, 1.0)
        field.load_costs(np.array([1, 2, 3, 4], dtype=np.int64))
        np.testing.assert_array_equal(field.cost_array(), [1, 2, 3, 4])

    def test_load_costs_bad_shape(self):
        field = create_grid(2, 3, 1.0)
        with pytest.raises(ValueError, match="shape"):
            field.load_costs(np.zeros((3, 2)))

    def test_load_costs_bad_values(self):
        field = create_grid(2, 2, 1.0)
        with pytest.raises(ValueError):
            field.load_costs([0, 0, 0, COST_MAX + 1])

    @pytest.mark.parametrize(
        "costs",
        [[0.5, 1.7, 2.0, 0.0], [0.0, 0.0, np.inf, 0.0], [0.0, np.nan, 0.0, 0.0]],
    )
    def test_load_costs_rejects_fractional(self, costs):
        field = create_grid(2, 2, 1.0)
        field.load_costs([1, 1, 1, 1])
        with pytest.raises(ValueError, match="integers"):
            field.load_costs(np.array(costs))
        # Rejected input leaves the grid unchanged
        np.testing.assert_array_equal(field.cost_array(), [1, 1, 1, 1])

    def test_load_costs_whole_floats(self):
        field = create_grid(2, 2, 1.0)
        field.load_costs(np.array([0.0, 3.0, 7.0, float(COST_MAX)]))
        np.testing.assert_array_equal(field.cost_array(), [0, 3, 7, COST_MAX])

    def test_clear_costs(self):
        field = create_grid(2, 2, 1.0)
        field.load_costs([5, 6, 7, 8])
        field.clear_costs()
        np.testing.assert_array_equal(field.cost_array(), np.zeros(4))

    def test_set_target_none_clears(self):
        field = create_grid(3, 3, 1.0)
        field.set_target(4)
        field.set_target(None)
        assert field.target == NO_TARGET

    def test_set_target_out_of_range_is_stored(self):
        field = create_grid(3, 3, 1.0)
        field.set_target(42)
        assert field.target == 42
        assert not field.has_valid_target


class TestRecompute:
    """Full update behaviour."""

    def test_no_target_is_noop(self, caplog):
        field = create_grid(3, 3, 1.0)
        with caplog.at_level(logging.DEBUG, logger="flowfield.engine"):
            assert field.recompute() is None
        assert "no valid target" in caplog.text
        np.testing.assert_array_equal(field.integration_array(), np.full(9, INTEGR_MAX))

    def test_invalid_target_keeps_previous_fields(self, three_by_three):
        before_i = three_by_three.integration_array()
        before_f = three_by_three.flow_array()
        three_by_three.set_target(-5)
        assert three_by_three.recompute() is None
        np.testing.assert_array_equal(three_by_three.integration_array(), before_i)
        np.testing.assert_array_equal(three_by_three.flow_array(), before_f)

    def test_idempotent(self, field_factory, random_costs):
        field = field_factory(10, 14)
        field.load_costs(random_costs(10, 14, seed=8))
        field.set_cost(33, 0)
        field.set_target(33)
        field.recompute()
        integration = field.integration_array()
        flow = field.flow_array()

        field.recompute()
        np.testing.assert_array_equal(field.integration_array(), integration)
        np.testing.assert_array_equal(field.flow_array(), flow)

    def test_cost_edit_takes_effect(self, three_by_three):
        three_by_three.set_cost(1, COST_MAX)
        three_by_three.recompute()
        assert three_by_three.integration_at(1) == INTEGR_MAX
        assert three_by_three.flow_at(1) == (0.0, 0.0)

    def test_degraded_logs_warning(self, field_factory, caplog):
        field = field_factory(4, 4, max_iterations=2)
        field.set_target(0)
        with caplog.at_level(logging.WARNING, logger="flowfield.engine"):
            result = field.recompute()
        assert result.degraded
        assert "partial" in caplog.text
        assert field.last_result is result

    def test_compute_steps_separately(self, field_factory):
        field = field_factory(3, 3)
        field.set_target(4)
        field.compute_integration()
        assert field.integration_at(0) == 2
        # Flow not rebuilt yet
        assert field.flow_at(0) == (0.0, 0.0)
        field.compute_flow()
        assert field.flow_at(0) != (0.0, 0.0)


class TestAccessors:
    """Read-only queries."""

    @pytest.mark.parametrize("accessor", ["cost_at", "integration_at", "flow_at"])
    def test_out_of_range(self, three_by_three, accessor):
        with pytest.raises(CellIndexError):
            getattr(three_by_three, accessor)(9)

    def test_arrays_are_copies(self, three_by_three):
        integration = three_by_three.integration_array()
        integration[:] = 0
        assert three_by_three.integration_at(0) == 2

    def test_flow_at_matches_array(self, three_by_three):
        flow = three_by_three.flow_array()
        for i in range(9):
            assert three_by_three.flow_at(i) == pytest.approx(tuple(flow[i]))


class TestFunctionalApi:
    """Module-level wrappers."""

    def test_round_trip(self):
        field = create_grid(3, 3, 10.0)
        set_target(field, world_to_index(field, (15.0, 15.0)))
        assert field.target == 4
        set_cost(field, 0, COST_MAX)
        result = recompute(field)
        assert result.reached == 8
        assert field.integration_at(0) == INTEGR_MAX
