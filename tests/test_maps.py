"""Tests for ASCII map parsing and rendering."""

import numpy as np
import pytest

from flowfield.core.dtypes import COST_MAX
from flowfield.maps import (
    arrow_for,
    format_ascii_map,
    format_flow,
    load_ascii_map,
    parse_ascii_map,
)

ARENA = """
.....
.###.
..T..
.3#9.
"""


class TestParseAsciiMap:

    def test_shape_and_target(self):
        parsed = parse_ascii_map(ARENA)
        assert (parsed.rows, parsed.cols) == (4, 5)
        assert parsed.target == 2 * 5 + 2

    def test_costs(self):
        costs = parse_ascii_map(ARENA).costs
        assert costs[0].tolist() == [0, 0, 0, 0, 0]
        assert costs[1].tolist() == [0, COST_MAX, COST_MAX, COST_MAX, 0]
        assert costs[2, 2] == 0  # target is open terrain
        assert costs[3].tolist() == [0, 3, COST_MAX, 9, 0]

    def test_no_target(self):
        assert parse_ascii_map("..\n.#\n").target is None

    def test_ragged_rows(self):
        with pytest.raises(ValueError, match="row 1"):
            parse_ascii_map("...\n..\n")

    def test_two_targets(self):
        with pytest.raises(ValueError, match="second target"):
            parse_ascii_map("T.T\n")

    def test_unknown_character(self):
        with pytest.raises(ValueError, match="unknown map character"):
            parse_ascii_map("..x\n")

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            parse_ascii_map("\n\n")

    def test_windows_line_endings(self):
        parsed = parse_ascii_map("..\r\n.T\r\n")
        assert parsed.target == 3

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "arena.txt"
        path.write_text(ARENA)
        assert load_ascii_map(path).target == 12

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ascii_map(tmp_path / "absent.txt")


class TestFormatAsciiMap:

    def test_round_trip(self):
        parsed = parse_ascii_map(ARENA)
        assert format_ascii_map(parsed.costs, parsed.target) == ARENA.strip("\n")

    def test_high_costs_clamp_to_nine(self):
        costs = np.array([[15, COST_MAX]])
        assert format_ascii_map(costs) == "9#"


class TestFormatFlow:

    def test_arrow_for(self):
        assert arrow_for(0.0, 0.0) == " "
        assert arrow_for(0.0, 1.0) == ">"
        assert arrow_for(1.0, 0.0) == "v"
        assert arrow_for(-0.6, -0.8) == "\\"

    def test_three_by_three(self, three_by_three):
        assert format_flow(three_by_three) == "\\v/\n>T<\n/^\\"

    def test_walls_and_unreached(self, field_factory):
        parsed = parse_ascii_map("T#.\n.#.\n.#.\n")
        field = field_factory(3, 3)
        field.load_costs(parsed.costs)
        field.set_target(parsed.target)
        field.recompute()
        lines = format_flow(field).split("\n")
        assert lines[0] == "T# "
        assert lines[1][1:] == "# "
        assert lines[1][0] == "^"
