"""
Kernels for the flow-field engine.

This module provides kernel implementations and a registry for selecting
between compiled, reference, and priority-ordered implementations.

Usage:
    from flowfield.kernels import KernelRegistry, KernelVariant

    registry = KernelRegistry()
    integration = registry.get_integration(KernelVariant.TAICHI)
    result = integration.compute(grid, target)

Submodules:
- integration: Taichi wavefront relaxation (default)
- synthesis: Taichi flow vector synthesis (default)
- naive: Pure-Python reference implementations
- priority: Heap-ordered exact integration
- protocol: Kernel interfaces and result types
"""

from typing import Type

from flowfield.kernels.integration import TaichiWavefrontKernel
from flowfield.kernels.naive import NaiveSynthesisKernel, NaiveWavefrontKernel
from flowfield.kernels.priority import PriorityIntegrationKernel
from flowfield.kernels.protocol import (
    FlowSynthesisKernel,
    IntegrationKernel,
    IntegrationResult,
    KernelVariant,
)
from flowfield.kernels.synthesis import TaichiSynthesisKernel


class KernelRegistry:
    """Registry for kernel implementations with variant selection.

    Allows runtime selection of kernel implementations without changing
    engine code. Useful for:
    - Trading exact costs (PRIORITY) against latency (TAICHI)
    - Equivalence testing against the NAIVE references

    Example:
        registry = KernelRegistry()

        # Get default (Taichi) implementations
        integration = registry.get_integration()
        synthesis = registry.get_synthesis()

        # Get specific variant
        exact = registry.get_integration(KernelVariant.PRIORITY)

        # Register custom implementation
        registry.register_integration(KernelVariant.TAICHI, MyKernel)
    """

    def __init__(self):
        """Initialize registry with the built-in implementations."""
        self._integration: dict[KernelVariant, Type[IntegrationKernel]] = {
            KernelVariant.TAICHI: TaichiWavefrontKernel,
            KernelVariant.NAIVE: NaiveWavefrontKernel,
            KernelVariant.PRIORITY: PriorityIntegrationKernel,
        }

        self._synthesis: dict[KernelVariant, Type[FlowSynthesisKernel]] = {
            KernelVariant.TAICHI: TaichiSynthesisKernel,
            KernelVariant.NAIVE: NaiveSynthesisKernel,
        }

    # Get methods (return instances)

    def get_integration(
        self, variant: KernelVariant = KernelVariant.TAICHI
    ) -> IntegrationKernel:
        """Get an integration kernel instance.

        Args:
            variant: Implementation variant (default: TAICHI)

        Returns:
            Kernel instance implementing IntegrationKernel protocol

        Raises:
            KeyError: If variant not registered
        """
        if variant not in self._integration:
            raise KeyError(
                f"No integration kernel registered for variant {variant}. "
                f"Available: {list(self._integration.keys())}"
            )
        return self._integration[variant]()

    def get_synthesis(
        self, variant: KernelVariant = KernelVariant.TAICHI
    ) -> FlowSynthesisKernel:
        """Get a flow synthesis kernel instance.

        Args:
            variant: Implementation variant (default: TAICHI)

        Returns:
            Kernel instance implementing FlowSynthesisKernel protocol

        Raises:
            KeyError: If variant not registered
        """
        if variant not in self._synthesis:
            raise KeyError(
                f"No synthesis kernel registered for variant {variant}. "
                f"Available: {list(self._synthesis.keys())}"
            )
        return self._synthesis[variant]()

    # Register methods (for adding implementations)

    def register_integration(
        self, variant: KernelVariant, kernel_cls: Type[IntegrationKernel]
    ) -> None:
        """Register an integration kernel implementation."""
        self._integration[variant] = kernel_cls

    def register_synthesis(
        self, variant: KernelVariant, kernel_cls: Type[FlowSynthesisKernel]
    ) -> None:
        """Register a flow synthesis kernel implementation."""
        self._synthesis[variant] = kernel_cls

    # Query methods

    def available_variants(self, kernel_type: str) -> list[KernelVariant]:
        """List available variants for a kernel type.

        Args:
            kernel_type: One of "integration", "synthesis"

        Returns:
            List of registered variants for that kernel type

        Raises:
            ValueError: If kernel_type is not recognized
        """
        registries = {
            "integration": self._integration,
            "synthesis": self._synthesis,
        }
        if kernel_type not in registries:
            raise ValueError(
                f"Unknown kernel type: {kernel_type}. "
                f"Available: {list(registries.keys())}"
            )
        return list(registries[kernel_type].keys())


# Default registry instance for convenience
_default_registry = KernelRegistry()


def get_registry() -> KernelRegistry:
    """Get the default kernel registry."""
    return _default_registry


__all__ = [
    # Registry
    "KernelRegistry",
    "get_registry",
    # Protocol types
    "KernelVariant",
    "IntegrationKernel",
    "FlowSynthesisKernel",
    # Result types
    "IntegrationResult",
    # Implementations (for direct use)
    "TaichiWavefrontKernel",
    "TaichiSynthesisKernel",
    "NaiveWavefrontKernel",
    "NaiveSynthesisKernel",
    "PriorityIntegrationKernel",
]
