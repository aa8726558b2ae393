"""Field management for the flow-field engine.

Main classes:
- FieldSpec: Declarative field specification
- FieldRole: Field categorization (INPUT, DERIVED, SCRATCH)
- FieldContainer: Manages Taichi field lifecycle

Convenience wrappers:
- GridFields: Access to cost, integration, flow and worklist

Factory functions:
- create_grid_container, create_grid_specs
"""

from flowfield.fields.base import FieldContainer, FieldRole, FieldSpec
from flowfield.fields.grid import (
    GridFields,
    create_grid_container,
    create_grid_specs,
)

__all__ = [
    "FieldContainer",
    "FieldRole",
    "FieldSpec",
    "GridFields",
    "create_grid_container",
    "create_grid_specs",
]
