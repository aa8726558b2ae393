"""CLI entry point for the flow-field engine.

Builds a grid from a config file, an ASCII map or command-line sizes,
recomputes the field and prints a summary. Optionally renders the flow as
arrows and saves rasters and plots.
"""

import argparse
import time
from pathlib import Path

from flowfield.config import init_taichi
from flowfield.core.dtypes import COST_MAX
from flowfield.diagnostics import (
    check_flow_normalized,
    check_relaxation_support,
    check_walls_unreached,
    summarize,
)
from flowfield.engine import FlowField
from flowfield.maps import format_flow, load_ascii_map
from flowfield.params import EngineConfig, load_config_with_overrides, save_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowfield", description="Flow-field integration and synthesis"
    )
    parser.add_argument("--config", type=str, help="Path to YAML configuration file")
    parser.add_argument("--map", type=str, help="ASCII map file. Sets grid size and target.")
    parser.add_argument("--rows", type=int, help="Grid rows. Overrides config.")
    parser.add_argument("--cols", type=int, help="Grid columns. Overrides config.")
    parser.add_argument("--cell-size", type=float, help="World units per cell. Overrides config.")
    parser.add_argument(
        "--set", action="append", default=[], dest="assignments", metavar="GROUP.KEY=VALUE",
        help="Override one config value, e.g. recompute.min_interval=0.5 (repeatable)",
    )
    parser.add_argument("--target", type=int, help="Target cell index")
    parser.add_argument(
        "--target-pos", type=float, nargs=2, metavar=("X", "Y"),
        help="Target as a world position",
    )
    parser.add_argument(
        "--wall", type=int, action="append", default=[], metavar="INDEX",
        help="Mark a cell as wall (repeatable)",
    )
    parser.add_argument(
        "--variant", choices=("taichi", "naive", "priority"),
        help="Integration kernel variant. Overrides config.",
    )
    parser.add_argument("--raw", action="store_true", help="Uncentered flow weighting")
    parser.add_argument("--max-iterations", type=int, help="Integration pop cap")
    parser.add_argument("--repeat", type=int, default=1, help="Number of recomputes to time")
    parser.add_argument("--show", action="store_true", help="Print the flow as arrows")
    parser.add_argument("--check", action="store_true", help="Run consistency checks")
    parser.add_argument("--output", type=str, help="Output directory (optional)")
    parser.add_argument("--save-config", type=str, help="Write the effective config to YAML")
    parser.add_argument("--backend", choices=("cuda", "vulkan", "cpu"), help="Taichi backend")
    parser.add_argument("--debug", action="store_true", help="Taichi debug mode")
    return parser


def build_config(args: argparse.Namespace, map_shape: tuple[int, int] | None = None) -> EngineConfig:
    """Apply command-line overrides on top of the config file."""
    grid = {}
    if map_shape is not None:
        grid["rows"], grid["cols"] = map_shape
    if args.rows is not None:
        grid["rows"] = args.rows
    if args.cols is not None:
        grid["cols"] = args.cols
    if args.cell_size is not None:
        grid["cell_size"] = args.cell_size

    integration = {}
    if args.variant is not None:
        integration["variant"] = args.variant
    if args.max_iterations is not None:
        integration["max_iterations"] = args.max_iterations

    overrides = {}
    if grid:
        overrides["grid"] = grid
    if integration:
        overrides["integration"] = integration
    if args.raw:
        overrides["flow"] = {"centered": False}

    return load_config_with_overrides(args.config, overrides, args.assignments)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    ascii_map = None
    if args.map:
        print(f"Loading map from {args.map}")
        ascii_map = load_ascii_map(args.map)

    config = build_config(
        args, (ascii_map.rows, ascii_map.cols) if ascii_map is not None else None
    )
    if args.save_config:
        save_config(config, args.save_config)
        print(f"Config saved to {args.save_config}")

    backend = init_taichi(backend=args.backend, debug=args.debug or None)

    field = FlowField.from_config(config)
    if ascii_map is not None:
        field.load_costs(ascii_map.costs)
        field.set_target(ascii_map.target)
    for index in args.wall:
        field.set_cost(index, COST_MAX)
    if args.target_pos is not None:
        field.set_target(field.world_to_index(args.target_pos))
    if args.target is not None:
        field.set_target(args.target)

    print(
        f"Grid: {field.rows}x{field.cols}, cell_size={field.cell_size}, "
        f"backend={backend}, variant={config.integration.variant}"
    )

    if not field.has_valid_target:
        print(f"No valid target (got {field.target}); nothing to compute")
        return 1

    times = []
    result = None
    for _ in range(max(args.repeat, 1)):
        start = time.perf_counter()
        result = field.recompute()
        times.append(time.perf_counter() - start)

    summary = summarize(field)
    print(f"Target: {field.target}")
    print(
        f"Reached {result.reached}/{summary.size} cells "
        f"({summary.walls} walls, {summary.unreachable} unreachable) "
        f"in {result.iterations} iterations"
    )
    print(f"Max integration: {summary.max_integration}")
    print(f"Field memory: {summary.memory_bytes / 2**20:.3f} MB")
    if result.degraded:
        print("Warning: iteration cap reached, field is partial")
    if len(times) > 1:
        print(f"Recompute: first {times[0] * 1000:.2f} ms, best {min(times) * 1000:.2f} ms")
    else:
        print(f"Recompute: {times[0] * 1000:.2f} ms")

    if args.check:
        check_walls_unreached(field)
        check_flow_normalized(field)
        check_relaxation_support(field)
        print("Checks passed")

    if args.show:
        print(format_flow(field))

    if args.output:
        from flowfield.output import save_field_output

        outputs = save_field_output(field, Path(args.output))
        for name, path in outputs.items():
            print(f"Saved {name}: {path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
