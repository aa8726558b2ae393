"""Tests for the kernel registry and protocol system.

Tests cover:
- Registry instantiation and kernel retrieval
- Protocol compliance of wrapper classes
- Variant registration and selection
- Error handling for missing variants
"""

import pytest

from flowfield.kernels import (
    FlowSynthesisKernel,
    IntegrationKernel,
    IntegrationResult,
    KernelRegistry,
    KernelVariant,
    NaiveSynthesisKernel,
    NaiveWavefrontKernel,
    PriorityIntegrationKernel,
    TaichiSynthesisKernel,
    TaichiWavefrontKernel,
    get_registry,
)


class TestKernelVariant:
    def test_variants(self):
        assert {v.name for v in KernelVariant} == {"TAICHI", "NAIVE", "PRIORITY"}


class TestIntegrationResult:
    def test_defaults(self):
        result = IntegrationResult(target=3, reached=9, iterations=9)
        assert not result.degraded

    def test_frozen(self):
        result = IntegrationResult(target=3, reached=9, iterations=9)
        with pytest.raises(Exception):  # FrozenInstanceError
            result.reached = 1


class TestProtocolCompliance:
    """Every implementation satisfies its protocol."""

    @pytest.mark.parametrize(
        "cls", [TaichiWavefrontKernel, NaiveWavefrontKernel, PriorityIntegrationKernel]
    )
    def test_integration_kernels(self, cls):
        kernel = cls()
        assert isinstance(kernel, IntegrationKernel)
        assert kernel.fields_read == {"cost"}
        assert "integration" in kernel.fields_written

    @pytest.mark.parametrize("cls", [TaichiSynthesisKernel, NaiveSynthesisKernel])
    def test_synthesis_kernels(self, cls):
        kernel = cls()
        assert isinstance(kernel, FlowSynthesisKernel)
        assert kernel.fields_read == {"integration"}
        assert kernel.fields_written == {"flow"}


class TestKernelRegistry:
    """Registry lookup and registration."""

    def test_defaults_are_taichi(self):
        registry = KernelRegistry()
        assert isinstance(registry.get_integration(), TaichiWavefrontKernel)
        assert isinstance(registry.get_synthesis(), TaichiSynthesisKernel)

    def test_get_specific_variant(self):
        registry = KernelRegistry()
        assert isinstance(
            registry.get_integration(KernelVariant.PRIORITY), PriorityIntegrationKernel
        )
        assert isinstance(
            registry.get_synthesis(KernelVariant.NAIVE), NaiveSynthesisKernel
        )

    def test_returns_new_instances(self):
        registry = KernelRegistry()
        assert registry.get_integration() is not registry.get_integration()

    def test_missing_synthesis_variant(self):
        registry = KernelRegistry()
        with pytest.raises(KeyError, match="No synthesis kernel"):
            registry.get_synthesis(KernelVariant.PRIORITY)

    def test_available_variants(self):
        registry = KernelRegistry()
        assert set(registry.available_variants("integration")) == set(KernelVariant)
        assert set(registry.available_variants("synthesis")) == {
            KernelVariant.TAICHI,
            KernelVariant.NAIVE,
        }

    def test_unknown_kernel_type(self):
        with pytest.raises(ValueError, match="Unknown kernel type"):
            KernelRegistry().available_variants("routing")

    def test_register_custom(self):
        registry = KernelRegistry()
        registry.register_synthesis(KernelVariant.PRIORITY, NaiveSynthesisKernel)
        assert isinstance(
            registry.get_synthesis(KernelVariant.PRIORITY), NaiveSynthesisKernel
        )
        # Other registries are unaffected
        with pytest.raises(KeyError):
            KernelRegistry().get_synthesis(KernelVariant.PRIORITY)

    def test_register_integration_override(self):
        registry = KernelRegistry()
        registry.register_integration(KernelVariant.TAICHI, NaiveWavefrontKernel)
        assert isinstance(registry.get_integration(), NaiveWavefrontKernel)

    def test_default_registry(self):
        assert get_registry() is get_registry()
        assert isinstance(get_registry(), KernelRegistry)
