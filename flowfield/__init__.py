"""
flowfield: Taichi-accelerated flow fields for crowd steering.

A single-target integration field over a uniform grid, reduced to one
direction vector per cell that any number of agents can follow.
"""

from flowfield.core.dtypes import COST_MAX, COST_MIN, INTEGR_MAX, INTEGR_MIN, NO_TARGET
from flowfield.core.geometry import CellIndexError, GridGeometry
from flowfield.engine import (
    FlowField,
    create_grid,
    recompute,
    set_cost,
    set_target,
    world_to_index,
)
from flowfield.kernels.protocol import IntegrationResult, KernelVariant
from flowfield.params.schema import EngineConfig, ValidationError
from flowfield.scheduler import RecomputeScheduler

__version__ = "0.1.0"

__all__ = [
    "COST_MIN",
    "COST_MAX",
    "INTEGR_MIN",
    "INTEGR_MAX",
    "NO_TARGET",
    "CellIndexError",
    "GridGeometry",
    "FlowField",
    "create_grid",
    "set_target",
    "set_cost",
    "recompute",
    "world_to_index",
    "IntegrationResult",
    "KernelVariant",
    "EngineConfig",
    "ValidationError",
    "RecomputeScheduler",
]
