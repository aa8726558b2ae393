"""ASCII arena maps.

One line per grid row, one character per column:

    #  wall (COST_MAX)
    .  open terrain (COST_MIN)
    0-9  terrain cost
    T  target cell (open terrain)

Leading and trailing blank lines are ignored; every other line must have
the same width.
"""

from dataclasses import dataclass
from math import hypot
from pathlib import Path

import numpy as np

from flowfield.core.dtypes import COST_MAX, COST_MIN, INTEGR_MAX
from flowfield.core.geometry import NEIGHBOR_OFFSETS

WALL = "#"
OPEN = "."
TARGET = "T"

# Glyphs in NEIGHBOR_OFFSETS order (E, SE, S, SW, W, NW, N, NE)
ARROWS = (">", "\\", "v", "/", "<", "\\", "^", "/")


@dataclass
class AsciiMap:
    """Parsed map: costs of shape (rows, cols) and an optional target index."""

    costs: np.ndarray
    target: int | None = None

    @property
    def rows(self) -> int:
        return self.costs.shape[0]

    @property
    def cols(self) -> int:
        return self.costs.shape[1]


def parse_ascii_map(text: str) -> AsciiMap:
    """Parse map text.

    Raises:
        ValueError: On an empty map, ragged rows, unknown characters
            or more than one target
    """
    lines = [line.rstrip("\r") for line in text.strip("\n").split("\n")]
    if not lines or not lines[0]:
        raise ValueError("map is empty")

    cols = len(lines[0])
    costs = np.full((len(lines), cols), COST_MIN, dtype=np.int32)
    target = None

    for row, line in enumerate(lines):
        if len(line) != cols:
            raise ValueError(
                f"row {row} has {len(line)} columns, expected {cols}"
            )
        for col, char in enumerate(line):
            if char == WALL:
                costs[row, col] = COST_MAX
            elif char == TARGET:
                if target is not None:
                    raise ValueError(f"second target at row {row}, col {col}")
                target = row * cols + col
            elif char.isdigit():
                costs[row, col] = int(char)
            elif char != OPEN:
                raise ValueError(f"unknown map character {char!r} at row {row}, col {col}")

    return AsciiMap(costs=costs, target=target)


def load_ascii_map(path: str | Path) -> AsciiMap:
    """Read and parse a map file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Map file not found: {path}")
    return parse_ascii_map(path.read_text())


def format_ascii_map(costs: np.ndarray, target: int | None = None) -> str:
    """Inverse of parse_ascii_map. Costs above 9 (other than walls) print as 9."""
    rows, cols = costs.shape
    lines = []
    for row in range(rows):
        chars = []
        for col in range(cols):
            value = int(costs[row, col])
            if target is not None and row * cols + col == target:
                chars.append(TARGET)
            elif value == COST_MAX:
                chars.append(WALL)
            elif value == COST_MIN:
                chars.append(OPEN)
            else:
                chars.append(str(min(value, 9)))
        lines.append("".join(chars))
    return "\n".join(lines)


def arrow_for(fx: float, fy: float) -> str:
    """Glyph of the neighbor direction closest to (fx, fy); blank for zero."""
    if fx == 0.0 and fy == 0.0:
        return " "
    # World x runs along rows (down the page), y along columns
    best = max(
        range(len(NEIGHBOR_OFFSETS)),
        key=lambda k: (NEIGHBOR_OFFSETS[k][0] * fx + NEIGHBOR_OFFSETS[k][1] * fy)
        / hypot(*NEIGHBOR_OFFSETS[k]),
    )
    return ARROWS[best]


def format_flow(field) -> str:
    """Render a FlowField as arrows; walls '#', target 'T', unreached ' '."""
    cost = field.cost_array()
    integration = field.integration_array()
    flow = field.flow_array()

    lines = []
    for row in range(field.rows):
        chars = []
        for col in range(field.cols):
            i = row * field.cols + col
            if i == field.target:
                chars.append(TARGET)
            elif cost[i] == COST_MAX:
                chars.append(WALL)
            elif integration[i] == INTEGR_MAX:
                chars.append(" ")
            else:
                chars.append(arrow_for(float(flow[i, 0]), float(flow[i, 1])))
        lines.append("".join(chars))
    return "\n".join(lines)
