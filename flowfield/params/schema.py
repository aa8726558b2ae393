"""Parameter schema with validation. Units: cells, world units, seconds."""

import numbers
from dataclasses import asdict, dataclass, field
from typing import Any

from flowfield.kernels.protocol import KernelVariant


class ValidationError(ValueError):
    """Parameter validation failed."""
    pass


def _positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def _count(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    _positive(value, name)


def _non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


def _variant(value: str, name: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ValidationError(f"{name} must be one of {allowed}, got {value!r}")


@dataclass(frozen=True)
class GridParams:
    """Grid: rows, cols (cells), cell_size [world units]."""
    rows: int = 32
    cols: int = 32
    cell_size: float = 25.0

    def __post_init__(self) -> None:
        _count(self.rows, "rows")
        _count(self.cols, "cols")
        _positive(self.cell_size, "cell_size")

    @property
    def size(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class IntegrationParams:
    """Integration: variant (taichi|naive|priority), max_iterations (None = grid size)."""
    variant: str = "taichi"
    max_iterations: int | None = None

    def __post_init__(self) -> None:
        _variant(self.variant, "integration.variant", ("taichi", "naive", "priority"))
        if self.max_iterations is not None:
            _count(self.max_iterations, "max_iterations")

    @property
    def kernel_variant(self) -> KernelVariant:
        return KernelVariant[self.variant.upper()]


@dataclass(frozen=True)
class FlowParams:
    """Flow synthesis: variant (taichi|naive), centered weighting."""
    variant: str = "taichi"
    centered: bool = True

    def __post_init__(self) -> None:
        _variant(self.variant, "flow.variant", ("taichi", "naive"))

    @property
    def kernel_variant(self) -> KernelVariant:
        return KernelVariant[self.variant.upper()]


@dataclass(frozen=True)
class RecomputeParams:
    """Recompute cadence: min_interval [s] between full recomputes."""
    min_interval: float = 0.1

    def __post_init__(self) -> None:
        _non_negative(self.min_interval, "min_interval")


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""

    grid: GridParams = field(default_factory=GridParams)
    integration: IntegrationParams = field(default_factory=IntegrationParams)
    flow: FlowParams = field(default_factory=FlowParams)
    recompute: RecomputeParams = field(default_factory=RecomputeParams)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "grid": asdict(self.grid),
            "integration": asdict(self.integration),
            "flow": asdict(self.flow),
            "recompute": asdict(self.recompute),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Create from nested dictionary."""
        param_classes = {
            "grid": GridParams,
            "integration": IntegrationParams,
            "flow": FlowParams,
            "recompute": RecomputeParams,
        }
        unknown = set(data) - set(param_classes)
        if unknown:
            raise ValidationError(f"Unknown parameter groups: {sorted(unknown)}")
        try:
            kwargs = {k: param_classes[k](**(data[k] or {})) for k in data}
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return cls(**kwargs)

    def with_updates(self, **kwargs: Any) -> "EngineConfig":
        """Create new config with updates."""
        current = self.to_dict()
        for key, value in kwargs.items():
            if key not in current:
                raise ValidationError(f"Unknown parameter group: {key}")
            if isinstance(value, dict):
                current[key].update(value)
            else:
                current[key] = asdict(value)
        return self.from_dict(current)

    # Convenience accessors
    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def cell_size(self) -> float:
        return self.grid.cell_size
