"""
Kernel protocol definitions for swappable implementations.

Protocols define the interface that the compiled, reference, and
priority-ordered kernels implement, enabling variant selection at runtime
without changing engine code.

Each kernel type has:
- compute() method: Run one full pass over the grid
- fields_read property: Fields read by this kernel (for dependency tracking)
- fields_written property: Fields written by this kernel

IntegrationResult captures pass statistics for logging and diagnostics.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable


class KernelVariant(Enum):
    """Available kernel implementation variants."""

    TAICHI = auto()  # Compiled Taichi kernels (default)
    NAIVE = auto()  # Pure-Python reference implementation
    PRIORITY = auto()  # Heap-ordered relaxation, minimal costs


@dataclass(frozen=True)
class IntegrationResult:
    """Results from one integration pass.

    Attributes:
        target: Linear index the pass propagated from
        reached: Number of cells with integration < INTEGR_MAX
        iterations: Number of worklist pops
        degraded: True if the iteration cap stopped the pass early
    """

    target: int
    reached: int
    iterations: int
    degraded: bool = False


@runtime_checkable
class IntegrationKernel(Protocol):
    """Protocol for integration field kernels.

    Resets the integration field, then relaxes outward from the target
    through passable neighbors.
    Candidate: distance(n, c) + cost[n] + cost[c] + integration[c]
    """

    def compute(
        self,
        grid: Any,  # GridFields
        target: int,
        max_iterations: int | None = None,
    ) -> IntegrationResult:
        """Build the integration field for a valid target.

        Args:
            grid: Grid store (cost, integration, worklist)
            target: Linear index of the goal cell, already validated
            max_iterations: Worklist pop cap (None = grid size)

        Returns:
            IntegrationResult with pass statistics
        """
        ...

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        ...

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        ...


@runtime_checkable
class FlowSynthesisKernel(Protocol):
    """Protocol for flow vector synthesis kernels.

    Reduces the integration field to one direction per cell by summing
    neighbor offsets weighted by their integration values.
    """

    def compute(self, grid: Any, centered: bool = True) -> None:
        """Rebuild every flow vector from the current integration field.

        Args:
            grid: Grid store (integration, flow)
            centered: Weight neighbors relative to the cell's own value
        """
        ...

    @property
    def fields_read(self) -> set[str]:
        """Fields read by this kernel."""
        ...

    @property
    def fields_written(self) -> set[str]:
        """Fields written by this kernel."""
        ...
