"""Pytest fixtures and test utilities for flowfield."""

import numpy as np
import pytest

from flowfield.config import init_taichi
from flowfield.core.geometry import GridGeometry
from flowfield.engine import FlowField
from flowfield.fields.grid import GridFields, create_grid_container
from flowfield.params.schema import EngineConfig


@pytest.fixture(scope="session", autouse=True)
def taichi_init():
    """Initialize Taichi once per test session with CPU backend."""
    init_taichi(backend="cpu", debug=True)
    yield


@pytest.fixture
def field_factory():
    """Factory for FlowFields of various sizes and kernel variants."""
    return make_field


def make_field(
    rows: int,
    cols: int,
    cell_size: float = 1.0,
    integration: str = "taichi",
    flow: str = "taichi",
    centered: bool = True,
    max_iterations: int | None = None,
) -> FlowField:
    """Create a FlowField with the given kernel variants."""
    config = EngineConfig().with_updates(
        grid={"rows": rows, "cols": cols, "cell_size": cell_size},
        integration={"variant": integration, "max_iterations": max_iterations},
        flow={"variant": flow, "centered": centered},
    )
    return FlowField.from_config(config)


@pytest.fixture
def grid_factory():
    """Factory for bare grid stores (no engine) with open terrain."""
    return make_grid


def make_grid(rows: int, cols: int, cell_size: float = 1.0) -> GridFields:
    """Allocate and reset a grid store."""
    grid = GridFields(create_grid_container(GridGeometry(rows, cols, cell_size)))
    grid.reset()
    return grid


@pytest.fixture
def random_costs():
    """Random cost grids with a given wall fraction."""
    return make_random_costs


def make_random_costs(
    rows: int, cols: int, wall_fraction: float = 0.2, max_cost: int = 5, seed: int = 0
) -> np.ndarray:
    """Cost array of shape (rows, cols): random terrain plus random walls."""
    rng = np.random.default_rng(seed)
    costs = rng.integers(0, max_cost + 1, size=(rows, cols)).astype(np.int32)
    costs[rng.random((rows, cols)) < wall_fraction] = 20
    return costs


@pytest.fixture
def three_by_three(field_factory):
    """3x3 open grid targeting the center cell, already recomputed."""
    field = field_factory(3, 3)
    field.set_target(4)
    field.recompute()
    return field
