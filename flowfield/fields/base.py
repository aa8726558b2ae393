"""Base field container and specification classes.

This module provides the foundation for declarative field management:
- FieldSpec: Describes a field's name, dtype, per-cell shape, and role
- FieldRole: Enum categorizing field usage patterns
- FieldContainer: Manages field lifecycle and allocation

Every field is indexed by the linear cell index first, so a field of
extra_dims=(2,) over a 4x5 grid has shape (20, 2).

Usage:
    container = FieldContainer(geometry)
    container.register(FieldSpec("cost", ITYPE, FieldRole.INPUT))
    container.allocate()
    cost = container["cost"]
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import taichi as ti

from flowfield.core.geometry import GridGeometry


class FieldRole(Enum):
    """Categorizes field usage patterns for documentation and validation.

    INPUT: Authored from outside the engine (cost)
    DERIVED: Replaced wholesale on every recompute (integration, flow)
    SCRATCH: Temporary workspace reused across passes (worklist)
    """

    INPUT = auto()
    DERIVED = auto()
    SCRATCH = auto()


@dataclass(frozen=True)
class FieldSpec:
    """Immutable specification for a Taichi field.

    Attributes:
        name: Field identifier (snake_case)
        dtype: Taichi data type (ti.f32, ti.i32, etc.)
        role: Field usage category
        extra_dims: Additional dimensions beyond (size,), e.g. (2,) for flow
        initial: Value every element takes on reset
        description: Human-readable description with units
    """

    name: str
    dtype: Any  # Taichi dtype
    role: FieldRole
    extra_dims: tuple[int, ...] = ()
    initial: int | float = 0
    description: str = ""

    def __post_init__(self):
        """Validate field specification."""
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if not self.name.islower() or not self.name.replace("_", "").isalnum():
            raise ValueError(
                f"Field name must be snake_case, got: {self.name}"
            )
        if any(dim <= 0 for dim in self.extra_dims):
            raise ValueError(
                f"Field '{self.name}' has non-positive extra dims {self.extra_dims}"
            )

    def shape(self, geometry: GridGeometry) -> tuple[int, ...]:
        """Full field shape for a given grid."""
        return (geometry.size,) + self.extra_dims


class FieldContainer:
    """Manages Taichi field lifecycle with declarative specifications.

    A FieldContainer holds a collection of Taichi fields associated with
    a specific grid geometry. Fields are registered via FieldSpec, then
    allocated together.

    Example:
        container = FieldContainer(GridGeometry(32, 32, cell_size=25.0))
        container.register(FieldSpec("cost", ITYPE, FieldRole.INPUT))
        container.allocate()

        cost = container["cost"]
    """

    def __init__(self, geometry: GridGeometry):
        """Initialize container with grid geometry.

        Args:
            geometry: Grid dimensions and cell size
        """
        self._geometry = geometry
        self._specs: dict[str, FieldSpec] = {}
        self._fields: dict[str, Any] = {}
        self._allocated = False

    @property
    def geometry(self) -> GridGeometry:
        """Get the grid geometry."""
        return self._geometry

    @property
    def allocated(self) -> bool:
        """Check if fields have been allocated."""
        return self._allocated

    @property
    def field_names(self) -> list[str]:
        """Get list of registered field names."""
        return list(self._specs.keys())

    def register(self, spec: FieldSpec) -> None:
        """Register a field specification.

        Args:
            spec: Field specification to register

        Raises:
            ValueError: If name already registered
            RuntimeError: If fields already allocated
        """
        if self._allocated:
            raise RuntimeError("Cannot register fields after allocation")
        if spec.name in self._specs:
            raise ValueError(f"Field '{spec.name}' already registered")
        self._specs[spec.name] = spec

    def register_many(self, specs: list[FieldSpec]) -> None:
        """Register multiple field specifications."""
        for spec in specs:
            self.register(spec)

    def allocate(self) -> None:
        """Allocate all registered fields.

        Raises:
            RuntimeError: If already allocated or no fields registered
        """
        if self._allocated:
            raise RuntimeError("Fields already allocated")
        if not self._specs:
            raise RuntimeError("No fields registered")

        for name, spec in self._specs.items():
            self._fields[name] = ti.field(
                dtype=spec.dtype, shape=spec.shape(self._geometry)
            )

        self._allocated = True

    def get(self, name: str) -> Any:
        """Get a field by name.

        Raises:
            KeyError: If field not found
            RuntimeError: If fields not allocated
        """
        if not self._allocated:
            raise RuntimeError("Fields not yet allocated")
        if name not in self._fields:
            raise KeyError(f"Field '{name}' not found")
        return self._fields[name]

    def __getitem__(self, name: str) -> Any:
        """Get a field by name using bracket notation."""
        return self.get(name)

    def get_spec(self, name: str) -> FieldSpec:
        """Get the specification for a field."""
        if name not in self._specs:
            raise KeyError(f"Field '{name}' not registered")
        return self._specs[name]

    @property
    def memory_bytes(self) -> int:
        """Estimate total memory usage in bytes.

        Returns:
            Approximate memory usage for all allocated fields
        """
        if not self._allocated:
            return 0

        total = 0
        for spec in self._specs.values():
            n_elements = 1
            for dim in spec.shape(self._geometry):
                n_elements *= dim

            # Dtype size (approximate)
            dtype_size = 4  # Default to f32/i32
            if spec.dtype == ti.f64 or spec.dtype == ti.i64:
                dtype_size = 8
            elif spec.dtype == ti.i8 or spec.dtype == ti.u8:
                dtype_size = 1
            elif spec.dtype == ti.i16:
                dtype_size = 2

            total += n_elements * dtype_size

        return total

    @property
    def memory_mb(self) -> float:
        """Estimate total memory usage in megabytes."""
        return self.memory_bytes / (1024 * 1024)

    def __contains__(self, name: str) -> bool:
        """Check if a field is registered."""
        return name in self._specs

    def __len__(self) -> int:
        """Number of registered fields."""
        return len(self._specs)
