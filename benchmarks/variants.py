import numpy as np

from benchmarks.harness import Benchmark, make_arena, time_recompute
from flowfield.engine import FlowField
from flowfield.params import EngineConfig


class VariantBenchmark(Benchmark):
    """Compares integration variants on one arena: speed and excess cost."""

    n = 128
    repeats = 5

    def run(self):
        self.print_header("KERNEL VARIANT COMPARISON")
        print(f"Grid size: {self.n}x{self.n}")

        fields = {}
        for variant in ("taichi", "naive", "priority"):
            config = EngineConfig().with_updates(
                grid={"rows": self.n, "cols": self.n, "cell_size": 1.0},
                integration={"variant": variant},
                flow={"variant": "naive" if variant == "naive" else "taichi"},
            )
            field = FlowField.from_config(config)
            make_arena(field)
            times = time_recompute(field, self.repeats, warmup=1)
            fields[variant] = field
            print(f"  {variant:<10} best {min(times) * 1000:>9.2f} ms")

        # Excess of the FIFO wavefront over the exact costs
        fifo = fields["taichi"].integration_array().astype(np.int64)
        exact = fields["priority"].integration_array().astype(np.int64)
        reached = (fifo < 255) & (exact < 255)
        excess = fifo[reached] - exact[reached]

        print("\n" + "=" * 50)
        print(f"{'WAVEFRONT VS EXACT':^50}")
        print("=" * 50)
        print(f"Cells above exact cost: {np.count_nonzero(excess)}/{excess.size}")
        print(f"Max excess:  {excess.max() if excess.size else 0}")
        print(f"Mean excess: {excess.mean() if excess.size else 0.0:.3f}")
        self.print_footer()

        self.teardown()
        return fields
