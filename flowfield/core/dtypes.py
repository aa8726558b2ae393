"""Type definitions and sentinel values for the flow-field engine.

Cost and integration values are stored as 32-bit integers, but the value
ranges stay those of the 8-bit reference behaviour so that the sentinel
contract ("== max means wall / unreached") is identical across backends.
"""

import taichi as ti

# Floating-point type for flow vectors
# ti.f32: Single precision - enough for unit direction vectors
DTYPE = ti.f32

# Integer type for cost, integration and worklist fields
ITYPE = ti.i32

# Cost grid range. COST_MAX marks an impassable wall.
COST_MIN: int = 0
COST_MAX: int = 20

# Integration grid range. INTEGR_MAX marks an unvisited or unreachable cell.
INTEGR_MIN: int = 0
INTEGR_MAX: int = 255

# Linear index used when no target is set
NO_TARGET: int = -1
