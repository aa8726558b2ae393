"""
Flow vector synthesis kernel.

Each reached cell sums the offsets center(i) - center(n) to its reachable
neighbors, weighted by their integration values, and normalizes the sum.
Neighbors holding more remaining cost push harder, so the result points
away from expensive neighbors and toward cheap ones: an approximate
negative gradient of the integration field without an explicit gradient.

Weights are accumulated in whole cells, so a zero sum is detected exactly
and never normalized.
"""

import taichi as ti

from flowfield.core.dtypes import DTYPE, INTEGR_MAX
from flowfield.core.geometry import (
    NEIGHBOR_DI,
    NEIGHBOR_DJ,
    NUM_NEIGHBORS,
    get_neighbor,
    in_bounds,
)


@ti.kernel
def synthesize_flow(
    integration: ti.template(),
    flow: ti.template(),
    rows: ti.i32,
    cols: ti.i32,
    cell_size: DTYPE,
    centered: ti.i32,
):
    """
    Rebuild the flow field from the integration field.

    Unreached cells and cells whose weighted sum cancels get the zero
    vector. Neighbors at INTEGR_MAX (walls, unreachable) are skipped.
    In centered mode weights are integration[n] - integration[i].
    """
    for c in integration:
        value = integration[c]
        sx = 0
        sy = 0

        if value != INTEGR_MAX:
            ci = c // cols
            cj = c % cols
            base = 0
            if centered != 0:
                base = value

            for k in ti.static(range(NUM_NEIGHBORS)):
                nb = get_neighbor(ci, cj, k)
                ni = nb[0]
                nj = nb[1]

                if in_bounds(ni, nj, rows, cols):
                    weight = integration[ni * cols + nj]
                    if weight != INTEGR_MAX:
                        # center(c) - center(n) = -offset[k] in cells
                        sx -= NEIGHBOR_DI[k] * (weight - base)
                        sy -= NEIGHBOR_DJ[k] * (weight - base)

        fx = ti.cast(0.0, DTYPE)
        fy = ti.cast(0.0, DTYPE)
        if sx != 0 or sy != 0:
            # Offsets scale with cell_size, the direction does not
            wx = ti.cast(sx, DTYPE) * cell_size
            wy = ti.cast(sy, DTYPE) * cell_size
            length = ti.sqrt(wx * wx + wy * wy)
            fx = wx / length
            fy = wy / length

        flow[c, 0] = fx
        flow[c, 1] = fy


class TaichiSynthesisKernel:
    """Taichi implementation of flow synthesis.

    Implements the FlowSynthesisKernel protocol. Cells are independent,
    so the outer loop runs in parallel.
    """

    def compute(self, grid, centered: bool = True) -> None:
        """Rebuild every flow vector from the current integration field.

        Args:
            grid: GridFields (integration, flow)
            centered: Weight neighbors relative to the cell's own value
        """
        geometry = grid.geometry
        synthesize_flow(
            grid.integration,
            grid.flow,
            geometry.rows,
            geometry.cols,
            geometry.cell_size,
            int(centered),
        )

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        return {"integration"}

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        return {"flow"}
