"""Core infrastructure: types, sentinels, and geometry."""

from flowfield.core.dtypes import (
    COST_MAX,
    COST_MIN,
    DTYPE,
    INTEGR_MAX,
    INTEGR_MIN,
    ITYPE,
    NO_TARGET,
)
from flowfield.core.geometry import (
    NEIGHBOR_DI,
    NEIGHBOR_DJ,
    NEIGHBOR_OFFSETS,
    NEIGHBOR_STEP,
    NUM_NEIGHBORS,
    CellIndexError,
    GridGeometry,
    get_neighbor,
    in_bounds,
)

__all__ = [
    "DTYPE",
    "ITYPE",
    "COST_MIN",
    "COST_MAX",
    "INTEGR_MIN",
    "INTEGR_MAX",
    "NO_TARGET",
    "GridGeometry",
    "CellIndexError",
    "NEIGHBOR_OFFSETS",
    "NEIGHBOR_DI",
    "NEIGHBOR_DJ",
    "NEIGHBOR_STEP",
    "NUM_NEIGHBORS",
    "in_bounds",
    "get_neighbor",
]
