"""Grid geometry and neighbor indexing for the flow-field engine.

This module centralizes all spatial indexing logic:
- GridGeometry: Immutable dataclass holding grid dimensions and cell size
- Neighbor vectors: Moore (8-connectivity) offsets shared by every kernel
- Helper functions: Bounds checks and neighbor coordinates inside Taichi scope

Cells are addressed by a single linear index:
    index = row * cols + col
    row   = index // cols
    col   = index % cols

World coordinates follow the index convention: world x runs along rows and
world y along columns, each cell spanning ``cell_size`` world units.

8-Connectivity Layout (clockwise from East):
    Index:  5  6  7
            4  X  0
            3  2  1

    Direction 0: East  (+col)
    Direction 1: SE    (+row, +col)
    Direction 2: South (+row)
    Direction 3: SW    (+row, -col)
    Direction 4: West  (-col)
    Direction 5: NW    (-row, -col)
    Direction 6: North (-row)
    Direction 7: NE    (-row, +col)
"""

import math
import numbers
from dataclasses import dataclass

import taichi as ti

# Number of neighbors in 8-connectivity
NUM_NEIGHBORS: int = 8

# (row, col) offsets in direction order
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)

# Row offset: positive = South, negative = North
NEIGHBOR_DI = ti.Vector([di for di, _ in NEIGHBOR_OFFSETS])

# Column offset: positive = East, negative = West
NEIGHBOR_DJ = ti.Vector([dj for _, dj in NEIGHBOR_OFFSETS])

# Manhattan step to each neighbor: 1 for cardinal, 2 for diagonal
NEIGHBOR_STEP = ti.Vector([abs(di) + abs(dj) for di, dj in NEIGHBOR_OFFSETS])


class CellIndexError(IndexError):
    """A linear cell index lies outside ``[0, size)``."""


@dataclass(frozen=True)
class GridGeometry:
    """Immutable grid geometry specification.

    Attributes:
        rows: Number of rows (extent along world x)
        cols: Number of columns (extent along world y)
        cell_size: World units per cell edge

    Properties:
        size: Total number of cells (rows * cols)
        shape: (rows, cols), the 2D view of every per-cell field
        world_width: Extent along world x (rows * cell_size)
        world_height: Extent along world y (cols * cell_size)
    """

    rows: int
    cols: int
    cell_size: float = 1.0

    def __post_init__(self):
        """Validate grid dimensions.

        Runs before any field is allocated: Taichi rejects a non-integer
        shape only after part of the field tree has been built.
        """
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
            # Plain int for Taichi shapes (numpy integers included)
            object.__setattr__(self, name, int(value))
        cell_size = self.cell_size
        if isinstance(cell_size, bool) or not isinstance(cell_size, numbers.Real):
            raise ValueError(f"cell_size must be a number, got {cell_size!r}")
        if not (0 < cell_size < math.inf):
            raise ValueError(f"cell_size must be > 0 and finite, got {cell_size}")

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.rows * self.cols

    @property
    def shape(self) -> tuple[int, int]:
        """Grid shape as (rows, cols) tuple."""
        return (self.rows, self.cols)

    @property
    def world_width(self) -> float:
        """World extent along x."""
        return self.rows * self.cell_size

    @property
    def world_height(self) -> float:
        """World extent along y."""
        return self.cols * self.cell_size

    def contains(self, index: int) -> bool:
        """Check whether a linear index addresses a cell of this grid."""
        return 0 <= index < self.size

    def check_index(self, index: int) -> int:
        """Return ``index`` unchanged, or raise CellIndexError if out of range."""
        if not self.contains(index):
            raise CellIndexError(
                f"cell index {index} out of range [0, {self.size})"
            )
        return index

    def index_to_cell(self, index: int) -> tuple[int, int]:
        """Decompose a linear index into (row, col)."""
        return (index // self.cols, index % self.cols)

    def cell_to_index(self, row: int, col: int) -> int:
        """Combine (row, col) into a linear index."""
        return row * self.cols + col

    def neighbors(self, index: int) -> list[int]:
        """Enumerate the in-bounds Moore neighborhood of a cell.

        Cells on an edge or corner yield fewer than 8 entries; the cell
        itself is never included. Order follows NEIGHBOR_OFFSETS.

        Args:
            index: Linear cell index

        Returns:
            Linear indices of the neighboring cells
        """
        row, col = self.index_to_cell(index)
        result = []
        for di, dj in NEIGHBOR_OFFSETS:
            ni, nj = row + di, col + dj
            if 0 <= ni < self.rows and 0 <= nj < self.cols:
                result.append(ni * self.cols + nj)
        return result

    def distance(self, a: int, b: int) -> int:
        """Manhattan distance between two cells, in cells.

        Used as the local step cost of the wavefront: diagonal neighbors
        are charged 2, orthogonal neighbors 1.
        """
        row_a, col_a = self.index_to_cell(a)
        row_b, col_b = self.index_to_cell(b)
        return abs(row_b - row_a) + abs(col_b - col_a)

    def cell_center(self, index: int) -> tuple[float, float]:
        """World position (x, y) of a cell center."""
        row, col = self.index_to_cell(index)
        return ((row + 0.5) * self.cell_size, (col + 0.5) * self.cell_size)


# =============================================================================
# Taichi helper functions for use in kernels
# =============================================================================


@ti.func
def in_bounds(i: int, j: int, rows: int, cols: int) -> bool:
    """Check if cell (i, j) lies on the grid.

    Args:
        i: Row index
        j: Column index
        rows: Number of rows
        cols: Number of columns

    Returns:
        True if 0 <= i < rows and 0 <= j < cols
    """
    return 0 <= i < rows and 0 <= j < cols


@ti.func
def get_neighbor(i: int, j: int, k: int) -> ti.Vector:
    """Get neighbor coordinates in direction k.

    Args:
        i: Current row index
        j: Current column index
        k: Neighbor direction (0-7)

    Returns:
        Vector [ni, nj] of neighbor coordinates
    """
    return ti.Vector([i + NEIGHBOR_DI[k], j + NEIGHBOR_DJ[k]])
