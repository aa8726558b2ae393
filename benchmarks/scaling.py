import gc
from dataclasses import dataclass

import taichi as ti

from benchmarks.harness import Benchmark, make_arena, time_recompute
from flowfield.engine import create_grid


@dataclass
class ScalingMetrics:
    grid_size: int
    n_cells: int
    reached: int
    memory_mb: float
    best_time_s: float
    mean_time_s: float

    @property
    def recomputes_per_second(self) -> float:
        return 1.0 / self.best_time_s

    @property
    def megacells_per_second(self) -> float:
        return self.reached / self.best_time_s / 1e6


class ScalingBenchmark(Benchmark):
    """Full recompute (integration + flow) across grid sizes."""

    sizes = [64, 128, 256, 512]
    repeats = 10

    def run(self) -> list[ScalingMetrics]:
        results = []

        self.print_header("SCALING BENCHMARK")

        for n in self.sizes:
            results.append(self._run_single(n))

        self._print_report(results)
        self.teardown()
        return results

    def _run_single(self, n: int) -> ScalingMetrics:
        print(f"\nBenchmarking {n}x{n} ({n**2/1e6:.2f} M cells)...", end=" ", flush=True)

        gc.collect()
        ti.sync()

        field = create_grid(n, n, 1.0)
        make_arena(field)
        times = time_recompute(field, self.repeats)
        print("Done.")

        return ScalingMetrics(
            grid_size=n,
            n_cells=n * n,
            reached=field.last_result.reached,
            memory_mb=field.fields.container.memory_mb,
            best_time_s=min(times),
            mean_time_s=sum(times) / len(times),
        )

    def _print_report(self, results: list[ScalingMetrics]):
        self.print_header("RESULTS SUMMARY")
        print(f"{'Grid':<10} {'Reached':<12} {'Mem (MB)':<10} {'Best (ms)':<12} {'Mean (ms)':<12} {'Recomp/s':<12} {'MC/s':<10}")
        print("-" * 80)

        for r in results:
            print(
                f"{r.grid_size:<10} "
                f"{r.reached:<12} "
                f"{r.memory_mb:>7.2f}   "
                f"{r.best_time_s * 1000:>9.2f}   "
                f"{r.mean_time_s * 1000:>9.2f}   "
                f"{r.recomputes_per_second:>9.1f}   "
                f"{r.megacells_per_second:>7.2f}"
            )
        self.print_footer()
