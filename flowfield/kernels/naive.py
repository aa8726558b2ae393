"""
Naive (reference) kernel implementations.

These kernels prioritize correctness and readability over performance.
They run in plain Python over numpy copies of the fields and serve as the
baseline for equivalence testing of the Taichi kernels.
"""

from collections import deque
from math import sqrt

import numpy as np

from flowfield.core.dtypes import COST_MAX, INTEGR_MAX, INTEGR_MIN
from flowfield.kernels.protocol import IntegrationResult


def wavefront_integration(
    geometry, cost: np.ndarray, target: int, max_iterations: int | None = None
) -> tuple[np.ndarray, int, bool]:
    """
    FIFO worklist relaxation over a cost array.

    Returns (integration, pops, degraded).
    """
    cap = geometry.size if max_iterations is None else max_iterations
    integration = np.full(geometry.size, INTEGR_MAX, dtype=np.int32)
    integration[target] = INTEGR_MIN

    worklist = deque([target])
    pops = 0
    while worklist and pops < cap:
        center = worklist.popleft()
        pops += 1
        base = int(cost[center]) + int(integration[center])

        for n in geometry.neighbors(center):
            if cost[n] == COST_MAX:
                continue
            candidate = min(
                geometry.distance(n, center) + int(cost[n]) + base, INTEGR_MAX
            )
            if candidate < integration[n]:
                if integration[n] == INTEGR_MAX:
                    worklist.append(n)
                integration[n] = candidate

    return integration, pops, bool(worklist)


def synthesize_flow(
    geometry, integration: np.ndarray, centered: bool = True
) -> np.ndarray:
    """Direction vectors for every cell from an integration array."""
    flow = np.zeros((geometry.size, 2), dtype=np.float32)

    for i in range(geometry.size):
        value = int(integration[i])
        if value == INTEGR_MAX:
            continue

        base = value if centered else 0
        cx, cy = geometry.cell_center(i)
        sx = sy = 0.0
        for n in geometry.neighbors(i):
            weight = int(integration[n])
            if weight == INTEGR_MAX:
                continue
            nx, ny = geometry.cell_center(n)
            sx += (cx - nx) * (weight - base)
            sy += (cy - ny) * (weight - base)

        length = sqrt(sx * sx + sy * sy)
        if length > 0.0:
            flow[i] = (sx / length, sy / length)

    return flow


# Protocol-compliant wrappers


class NaiveWavefrontKernel:
    """Naive implementation of the integration pass.

    Implements the IntegrationKernel protocol with a deque worklist.
    Reference implementation for equivalence testing.
    """

    def compute(
        self, grid, target: int, max_iterations: int | None = None
    ) -> IntegrationResult:
        """Build the integration field for a valid target.

        Args:
            grid: GridFields (cost, integration)
            target: Linear index of the goal cell
            max_iterations: Worklist pop cap (None = grid size)

        Returns:
            IntegrationResult with pass statistics
        """
        integration, pops, degraded = wavefront_integration(
            grid.geometry, grid.cost.to_numpy(), target, max_iterations
        )
        grid.integration.from_numpy(integration)

        return IntegrationResult(
            target=target,
            reached=int(np.count_nonzero(integration < INTEGR_MAX)),
            iterations=pops,
            degraded=degraded,
        )

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        return {"cost"}

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        return {"integration"}


class NaiveSynthesisKernel:
    """Naive implementation of flow synthesis.

    Implements the FlowSynthesisKernel protocol in world coordinates with
    double-precision accumulation.
    """

    def compute(self, grid, centered: bool = True) -> None:
        """Rebuild every flow vector from the current integration field.

        Args:
            grid: GridFields (integration, flow)
            centered: Weight neighbors relative to the cell's own value
        """
        flow = synthesize_flow(grid.geometry, grid.integration.to_numpy(), centered)
        grid.flow.from_numpy(flow)

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        return {"integration"}

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        return {"flow"}
