"""
Base benchmark harness for flowfield.
"""
import abc
import time
from typing import Any

import numpy as np
import taichi as ti

from flowfield.config import init_taichi
from flowfield.engine import FlowField


class Benchmark(abc.ABC):
    """Abstract base class for all benchmarks."""

    def __init__(self, profile: bool = False, backend: str | None = None):
        self.profile = profile
        self.backend = backend
        self.init_taichi()

    def init_taichi(self):
        """Initialize Taichi backend."""
        print(f"Initializing Taichi (Profile: {self.profile})...")
        backend = init_taichi(
            backend=self.backend, debug=False, kernel_profiler=self.profile
        )
        print(f"Backend: {backend}")

    @abc.abstractmethod
    def run(self) -> Any:
        """Run the benchmark logic. Returns results."""
        pass

    def teardown(self):
        """Optional cleanup."""
        if self.profile:
            print("\nProfiler Output:")
            ti.profiler.print_kernel_profiler_info()
            ti.profiler.clear_kernel_profiler_info()

    def print_header(self, title: str):
        print("\n" + "=" * 80)
        print(f"{title:^80}")
        print("=" * 80)

    def print_footer(self):
        print("=" * 80)


def make_arena(field: FlowField, wall_fraction: float = 0.2, seed: int = 42) -> int:
    """Fill a field with random terrain and walls; return a central open target."""
    rng = np.random.default_rng(seed)
    costs = rng.integers(0, 4, size=field.geometry.shape).astype(np.int32)
    costs[rng.random(field.geometry.shape) < wall_fraction] = 20
    target = field.geometry.cell_to_index(field.rows // 2, field.cols // 2)
    costs.reshape(-1)[target] = 0
    field.load_costs(costs)
    field.set_target(target)
    return target


def time_recompute(field: FlowField, repeats: int, warmup: int = 2) -> list[float]:
    """Wall time of each recompute after JIT warmup [s]."""
    for _ in range(warmup):
        field.recompute()
    ti.sync()

    times = []
    for _ in range(repeats):
        start = time.perf_counter()
        field.recompute()
        ti.sync()
        times.append(time.perf_counter() - start)
    return times
