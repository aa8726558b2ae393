"""
Parameter management for the flow-field engine.

This module provides:
- Validated, immutable parameter containers (schema.py)
- YAML loading utilities (loader.py)
"""

from flowfield.params.loader import (
    load_config,
    load_config_with_overrides,
    merge_configs,
    parse_assignment,
    parse_config,
    save_config,
)
from flowfield.params.schema import (
    EngineConfig,
    FlowParams,
    GridParams,
    IntegrationParams,
    RecomputeParams,
    ValidationError,
)

__all__ = [
    # Schema classes
    "GridParams",
    "IntegrationParams",
    "FlowParams",
    "RecomputeParams",
    "EngineConfig",
    "ValidationError",
    # Loader functions
    "load_config",
    "save_config",
    "load_config_with_overrides",
    "merge_configs",
    "parse_config",
    "parse_assignment",
]
