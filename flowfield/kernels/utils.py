"""Utility kernels for the flow-field engine."""

import taichi as ti


@ti.kernel
def count_below(field: ti.template(), value: ti.i32) -> ti.i32:
    """Count cells of an integer field holding less than value."""
    total = 0
    for I in ti.grouped(field):
        if field[I] < value:
            total += 1
    return total


@ti.kernel
def fill_int_field(field: ti.template(), value: ti.i32):
    """Set all field values to an integer constant."""
    for I in ti.grouped(field):
        field[I] = value
