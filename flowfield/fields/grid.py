"""Flow-field grid specifications and factory.

The grid store owns four index-aligned fields:
- cost: Terrain traversal cost, COST_MAX marks a wall
- integration: Accumulated cost to the target, INTEGR_MAX marks unreached
- flow: Unit direction vector per cell (or the zero vector)
- worklist: Reusable FIFO buffer for one integration pass
"""

from typing import Any

from flowfield.core.dtypes import COST_MIN, DTYPE, INTEGR_MAX, ITYPE
from flowfield.core.geometry import GridGeometry
from flowfield.fields.base import FieldContainer, FieldRole, FieldSpec


def create_grid_specs(dtype: Any = DTYPE) -> list[FieldSpec]:
    """Create specifications for the flow-field grid store.

    Args:
        dtype: Floating-point type of the flow vectors

    Returns:
        List of FieldSpec for cost, integration, flow and worklist
    """
    return [
        FieldSpec(
            name="cost",
            dtype=ITYPE,
            role=FieldRole.INPUT,
            initial=COST_MIN,
            description="Traversal cost [0, COST_MAX], COST_MAX = wall",
        ),
        FieldSpec(
            name="integration",
            dtype=ITYPE,
            role=FieldRole.DERIVED,
            initial=INTEGR_MAX,
            description="Cost to target [0, INTEGR_MAX], INTEGR_MAX = unreached",
        ),
        FieldSpec(
            name="flow",
            dtype=dtype,
            role=FieldRole.DERIVED,
            extra_dims=(2,),
            description="Direction vector (x, y) in world axes, unit or zero",
        ),
        FieldSpec(
            name="worklist",
            dtype=ITYPE,
            role=FieldRole.SCRATCH,
            description="FIFO of linear cell indices for one integration pass",
        ),
    ]


class GridFields:
    """Convenience wrapper for accessing the grid store.

    Example:
        store = GridFields(create_grid_container(geometry))
        store.reset()
        cost_np = store.cost.to_numpy()
    """

    def __init__(self, container: FieldContainer):
        """Initialize with field container.

        Args:
            container: Allocated FieldContainer with grid fields
        """
        self._container = container

    @property
    def geometry(self) -> GridGeometry:
        """Get the grid geometry."""
        return self._container.geometry

    @property
    def container(self) -> FieldContainer:
        """Underlying field container."""
        return self._container

    @property
    def cost(self) -> Any:
        """Traversal cost field [size]."""
        return self._container["cost"]

    @property
    def integration(self) -> Any:
        """Integration field [size]."""
        return self._container["integration"]

    @property
    def flow(self) -> Any:
        """Flow vector field [size, 2]."""
        return self._container["flow"]

    @property
    def worklist(self) -> Any:
        """Worklist buffer [size]."""
        return self._container["worklist"]

    def reset(self) -> None:
        """Open terrain everywhere, nothing reached, no directions."""
        for name in self._container.field_names:
            self._container[name].fill(self._container.get_spec(name).initial)


def create_grid_container(geometry: GridGeometry) -> FieldContainer:
    """Create an allocated container with all grid fields.

    Args:
        geometry: Grid dimensions and cell size

    Returns:
        Allocated FieldContainer
    """
    container = FieldContainer(geometry)
    container.register_many(create_grid_specs())
    container.allocate()
    return container
