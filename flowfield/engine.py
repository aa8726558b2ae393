"""Flow-field engine: grid store plus the integration and synthesis passes.

A FlowField owns the cost, integration and flow fields of one grid and a
single target. External collaborators mutate costs and the target, call
``recompute`` at their own cadence, and read the fields back.

Example:
    field = create_grid(32, 32, 25.0)
    field.set_target(field.world_to_index((400.0, 400.0)))
    field.set_cost(17, COST_MAX)
    result = field.recompute()
    direction = field.flow_at(0)
"""

import logging
import math
import numbers
from collections.abc import Sequence

import numpy as np

from flowfield.core.dtypes import COST_MAX, COST_MIN, NO_TARGET
from flowfield.core.geometry import GridGeometry
from flowfield.fields.grid import GridFields, create_grid_container
from flowfield.kernels import KernelRegistry, get_registry
from flowfield.kernels.protocol import IntegrationResult
from flowfield.kernels.utils import fill_int_field
from flowfield.mapping import world_to_index as _world_to_index
from flowfield.params.schema import EngineConfig

logger = logging.getLogger(__name__)


class FlowField:
    """Single-target flow field over a uniform grid.

    Not thread-safe; callers serialize access.
    """

    def __init__(
        self,
        geometry: GridGeometry,
        config: EngineConfig | None = None,
        registry: KernelRegistry | None = None,
    ):
        self.geometry = geometry
        self.config = config or EngineConfig()
        self._fields = GridFields(create_grid_container(geometry))
        self._fields.reset()
        self._target = NO_TARGET

        registry = registry or get_registry()
        self._integration_kernel = registry.get_integration(
            self.config.integration.kernel_variant
        )
        self._synthesis_kernel = registry.get_synthesis(
            self.config.flow.kernel_variant
        )
        self.last_result: IntegrationResult | None = None

    @classmethod
    def from_config(
        cls, config: EngineConfig, registry: KernelRegistry | None = None
    ) -> "FlowField":
        """Build a field sized by ``config.grid``."""
        g = config.grid
        geometry = GridGeometry(rows=g.rows, cols=g.cols, cell_size=g.cell_size)
        return cls(geometry, config, registry)

    # Dimensions

    @property
    def rows(self) -> int:
        return self.geometry.rows

    @property
    def cols(self) -> int:
        return self.geometry.cols

    @property
    def cell_size(self) -> float:
        return self.geometry.cell_size

    @property
    def size(self) -> int:
        return self.geometry.size

    @property
    def fields(self) -> GridFields:
        """Underlying Taichi fields (for kernels and diagnostics)."""
        return self._fields

    # Inputs

    @property
    def target(self) -> int:
        """Linear target index, NO_TARGET when absent."""
        return self._target

    @property
    def has_valid_target(self) -> bool:
        return self.geometry.contains(self._target)

    def set_target(self, index: int | None) -> None:
        """Set the target cell. None clears it.

        Out-of-range indices are stored as given; recompute then does nothing.
        """
        self._target = NO_TARGET if index is None else int(index)

    def set_cost(self, index: int, value: int) -> None:
        """Set the traversal cost of one cell.

        Raises:
            CellIndexError: If index is outside [0, size)
            ValueError: If value is outside [COST_MIN, COST_MAX]
        """
        self.geometry.check_index(index)
        self._fields.cost[index] = _checked_cost(value)

    def load_costs(self, costs) -> None:
        """Replace the whole cost grid.

        Args:
            costs: Array of shape (rows, cols) or (size,)

        Raises:
            ValueError: On shape mismatch, fractional or out-of-range values
        """
        costs = np.asarray(costs)
        if costs.shape not in (self.geometry.shape, (self.size,)):
            raise ValueError(
                f"cost array shape {costs.shape} does not match grid "
                f"{self.geometry.shape}"
            )
        if costs.dtype.kind == "f":
            if not np.all(np.isfinite(costs)) or not np.all(costs == np.floor(costs)):
                raise ValueError("cost values must be integers")
        elif costs.dtype.kind not in "iu":
            raise ValueError(f"cost values must be integers, got dtype {costs.dtype}")
        if costs.size and (costs.min() < COST_MIN or costs.max() > COST_MAX):
            raise ValueError(f"cost values must lie in [{COST_MIN}, {COST_MAX}]")
        self._fields.cost.from_numpy(costs.reshape(-1).astype(np.int32))

    def clear_costs(self) -> None:
        """Reset every cell to open terrain."""
        fill_int_field(self._fields.cost, COST_MIN)

    # Passes

    def compute_integration(self) -> IntegrationResult | None:
        """Rebuild the integration field. No-op without a valid target."""
        if not self.has_valid_target:
            logger.debug("integration skipped: no valid target (%d)", self._target)
            return None

        result = self._integration_kernel.compute(
            self._fields, self._target, self.config.integration.max_iterations
        )
        if result.degraded:
            logger.warning(
                "integration stopped after %d iterations; field is partial",
                result.iterations,
            )
        self.last_result = result
        return result

    def compute_flow(self) -> None:
        """Rebuild the flow field from the current integration field."""
        self._synthesis_kernel.compute(self._fields, self.config.flow.centered)

    def recompute(self) -> IntegrationResult | None:
        """Full update: integration then flow.

        Returns None (and leaves every field untouched) without a valid target.
        """
        result = self.compute_integration()
        if result is None:
            return None
        self.compute_flow()
        return result

    # Queries

    def world_to_index(self, world_pos: Sequence[float]) -> int:
        """Map a world position to a linear index (unchecked)."""
        return _world_to_index(self.geometry, world_pos)

    def cost_at(self, index: int) -> int:
        self.geometry.check_index(index)
        return int(self._fields.cost[index])

    def integration_at(self, index: int) -> int:
        self.geometry.check_index(index)
        return int(self._fields.integration[index])

    def flow_at(self, index: int) -> tuple[float, float]:
        self.geometry.check_index(index)
        flow = self._fields.flow
        return (float(flow[index, 0]), float(flow[index, 1]))

    def cost_array(self) -> np.ndarray:
        """Copy of the cost grid, shape (size,)."""
        return self._fields.cost.to_numpy()

    def integration_array(self) -> np.ndarray:
        """Copy of the integration grid, shape (size,)."""
        return self._fields.integration.to_numpy()

    def flow_array(self) -> np.ndarray:
        """Copy of the flow grid, shape (size, 2)."""
        return self._fields.flow.to_numpy()

    def __repr__(self) -> str:
        return (
            f"FlowField(rows={self.rows}, cols={self.cols}, "
            f"cell_size={self.cell_size}, target={self._target})"
        )


def _checked_cost(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"cost must be an integer, got {value!r}")
    if not math.isfinite(value) or int(value) != value:
        raise ValueError(f"cost must be an integer, got {value!r}")
    value = int(value)
    if not COST_MIN <= value <= COST_MAX:
        raise ValueError(f"cost must lie in [{COST_MIN}, {COST_MAX}], got {value}")
    return value


# =============================================================================
# Functional API
# =============================================================================


def create_grid(
    rows: int,
    cols: int,
    cell_size: float,
    config: EngineConfig | None = None,
) -> FlowField:
    """Create a flow field with open terrain and no target.

    The explicit dimensions win over ``config.grid``; the stored config is
    updated to match, so ``field.config.grid`` always describes the field.

    Raises:
        ValueError: If rows or cols is not a positive integer, or cell_size
            is not a positive number
    """
    geometry = GridGeometry(rows, cols, cell_size)
    config = (config or EngineConfig()).with_updates(
        grid={
            "rows": geometry.rows,
            "cols": geometry.cols,
            "cell_size": geometry.cell_size,
        }
    )
    return FlowField(geometry, config)


def set_target(field: FlowField, index: int | None) -> None:
    field.set_target(index)


def set_cost(field: FlowField, index: int, value: int) -> None:
    field.set_cost(index, value)


def recompute(field: FlowField) -> IntegrationResult | None:
    return field.recompute()


def world_to_index(field: FlowField, world_pos: Sequence[float]) -> int:
    return field.world_to_index(world_pos)
