"""
Wavefront integration kernel.

Single-source FIFO worklist relaxation outward from the target. Each cell
enters the worklist at most once, the first time its value drops below
INTEGR_MAX; later improvements update the value in place without
re-queuing. The field is therefore an approximation of the minimal cost,
not a shortest-path guarantee (see kernels.priority for the exact variant).
"""

import logging

import taichi as ti

from flowfield.core.dtypes import COST_MAX, INTEGR_MAX, INTEGR_MIN
from flowfield.core.geometry import (
    NEIGHBOR_STEP,
    NUM_NEIGHBORS,
    get_neighbor,
    in_bounds,
)
from flowfield.kernels.protocol import IntegrationResult
from flowfield.kernels.utils import count_below

logger = logging.getLogger(__name__)


@ti.kernel
def propagate_wavefront(
    cost: ti.template(),
    integration: ti.template(),
    worklist: ti.template(),
    target: ti.i32,
    rows: ti.i32,
    cols: ti.i32,
    max_iterations: ti.i32,
) -> ti.i32:
    """
    Rebuild the integration field from the target cell.

    The worklist field is used as a FIFO ring: head is the next pop,
    tail the next push. Since each cell is pushed at most once, tail never
    exceeds the grid size.

    Returns the final tail, so pops = min(tail, max_iterations) and the
    pass was cut short iff tail > max_iterations.
    """
    for i in integration:
        integration[i] = INTEGR_MAX

    integration[target] = INTEGR_MIN
    worklist[0] = target
    head = 0
    tail = 1

    while head < tail and head < max_iterations:
        center = worklist[head]
        head += 1

        ci = center // cols
        cj = center % cols
        base = cost[center] + integration[center]

        for k in ti.static(range(NUM_NEIGHBORS)):
            nb = get_neighbor(ci, cj, k)
            ni = nb[0]
            nj = nb[1]

            if in_bounds(ni, nj, rows, cols):
                n = ni * cols + nj
                # Walls never enter the field
                if cost[n] != COST_MAX:
                    candidate = ti.min(NEIGHBOR_STEP[k] + cost[n] + base, INTEGR_MAX)
                    if candidate < integration[n]:
                        if integration[n] == INTEGR_MAX:
                            worklist[tail] = n
                            tail += 1
                        integration[n] = candidate

    return tail


class TaichiWavefrontKernel:
    """Taichi implementation of the integration pass.

    Implements the IntegrationKernel protocol using a serial worklist loop
    over a scratch field, so no per-node allocation happens per pass.
    """

    def compute(
        self, grid, target: int, max_iterations: int | None = None
    ) -> IntegrationResult:
        """Build the integration field for a valid target.

        Args:
            grid: GridFields (cost, integration, worklist)
            target: Linear index of the goal cell
            max_iterations: Worklist pop cap (None = grid size)

        Returns:
            IntegrationResult with pass statistics
        """
        geometry = grid.geometry
        cap = geometry.size if max_iterations is None else max_iterations

        tail = propagate_wavefront(
            grid.cost,
            grid.integration,
            grid.worklist,
            target,
            geometry.rows,
            geometry.cols,
            cap,
        )

        result = IntegrationResult(
            target=target,
            reached=int(count_below(grid.integration, INTEGR_MAX)),
            iterations=min(int(tail), cap),
            degraded=int(tail) > cap,
        )
        logger.debug("wavefront pass: %s", result)
        return result

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        return {"cost"}

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        return {"integration", "worklist"}
