"""World position <-> cell index conversion.

Both functions accept anything exposing ``cols`` and ``cell_size``
(GridGeometry, FlowField, GridParams).
"""

from collections.abc import Sequence


def world_to_index(grid, world_pos: Sequence[float]) -> int:
    """Map a world position to a linear cell index.

    Each component is divided by cell_size and truncated toward zero, then
    combined as ``cols * x + y``. No bounds checking: positions off the grid
    yield indices outside ``[0, size)``, which callers may pass to
    ``set_target`` to clear the target.

    Args:
        grid: Object with ``cols`` and ``cell_size``
        world_pos: (x, y) world position

    Returns:
        Linear cell index (possibly out of range)
    """
    x, y = world_pos
    return grid.cols * int(x / grid.cell_size) + int(y / grid.cell_size)


def index_to_world(grid, index: int) -> tuple[float, float]:
    """World position (x, y) of the center of a cell."""
    row, col = divmod(index, grid.cols)
    return ((row + 0.5) * grid.cell_size, (col + 0.5) * grid.cell_size)
