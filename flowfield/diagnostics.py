"""Consistency checks and summary statistics for a computed flow field.

Checks raise AssertionError with a readable report, so they can be used
both in tests and as runtime sanity checks after a recompute.
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti

from flowfield.core.dtypes import COST_MAX, INTEGR_MAX


@dataclass
class FieldSummary:
    """Cell counts and extremes of one flow field."""

    size: int
    walls: int  # cost == COST_MAX
    reached: int  # integration < INTEGR_MAX
    unreachable: int  # open cells left at INTEGR_MAX
    max_integration: int  # largest reached value, -1 if nothing reached
    zero_flow: int  # cells whose flow is the zero vector
    memory_bytes: int  # allocated field storage

    @property
    def reached_fraction(self) -> float:
        return self.reached / self.size


@ti.kernel
def max_reached(integration: ti.template()) -> ti.i32:
    """Largest integration value below INTEGR_MAX, -1 if none."""
    result = -1
    for i in integration:
        if integration[i] < INTEGR_MAX:
            ti.atomic_max(result, integration[i])
    return result


def summarize(field) -> FieldSummary:
    """Collect counts from a FlowField."""
    cost = field.cost_array()
    integration = field.integration_array()
    flow = field.flow_array()

    walls = int(np.count_nonzero(cost == COST_MAX))
    reached = int(np.count_nonzero(integration < INTEGR_MAX))
    return FieldSummary(
        size=field.size,
        walls=walls,
        reached=reached,
        unreachable=field.size - walls - reached,
        max_integration=int(max_reached(field.fields.integration)),
        zero_flow=int(np.count_nonzero(np.all(flow == 0.0, axis=1))),
        memory_bytes=field.fields.container.memory_bytes,
    )


def check_flow_normalized(field, atol: float = 1e-5) -> None:
    """Every flow vector is either zero or unit length.

    Raises:
        AssertionError: If any vector is NaN or has another length
    """
    flow = field.flow_array()
    length = np.hypot(flow[:, 0], flow[:, 1])
    bad = ~(np.isclose(length, 0.0, atol=atol) | np.isclose(length, 1.0, atol=atol))
    bad |= np.isnan(length)

    if np.any(bad):
        cells = np.flatnonzero(bad)
        raise AssertionError(
            f"Flow vectors not normalized!\n"
            f"  Cells:   {cells[:10].tolist()} ({cells.size} total)\n"
            f"  Lengths: {length[cells[:10]].tolist()}"
        )


def check_walls_unreached(field) -> None:
    """Walls keep INTEGR_MAX and a zero flow vector.

    Raises:
        AssertionError: If any wall was reached or has a direction
    """
    walls = field.cost_array() == COST_MAX
    integration = field.integration_array()
    flow = field.flow_array()

    reached = walls & (integration != INTEGR_MAX)
    moving = walls & np.any(flow != 0.0, axis=1)
    if np.any(reached) or np.any(moving):
        raise AssertionError(
            f"Walls entered the field!\n"
            f"  Reached: {np.flatnonzero(reached)[:10].tolist()}\n"
            f"  Nonzero flow: {np.flatnonzero(moving)[:10].tolist()}"
        )


def check_relaxation_support(field) -> None:
    """Every reached cell other than the target has a supporting neighbor.

    A neighbor j supports cell i if ``integration[i] >= integration[j] +
    distance(i, j)``. Holds for every integration variant since costs are
    non-negative and values only decrease during a pass.

    Raises:
        AssertionError: If the target is not 0 or a cell lacks support
    """
    geometry = field.geometry
    integration = field.integration_array()
    target = field.target

    if geometry.contains(target) and integration[target] != 0:
        raise AssertionError(
            f"Target {target} has integration {integration[target]}, expected 0"
        )

    unsupported = []
    for i in np.flatnonzero(integration < INTEGR_MAX):
        i = int(i)
        if i == target:
            continue
        value = int(integration[i])
        if not any(
            integration[j] < INTEGR_MAX
            and value >= int(integration[j]) + geometry.distance(i, j)
            for j in geometry.neighbors(i)
        ):
            unsupported.append(i)

    if unsupported:
        raise AssertionError(
            f"Cells without a supporting neighbor: {unsupported[:10]} "
            f"({len(unsupported)} total)"
        )
