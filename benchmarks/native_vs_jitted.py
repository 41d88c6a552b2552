"""
Benchmarks: native (numba) kernels vs JIT (JAX/XLA) kernels.

Scenarios mirror the kernel catalogue: Monte Carlo pi, Mandelbrot field,
prime sieve, matrix multiply, Fibonacci sequence and the mixing hash, plus the
comparator sort (engine merge sort vs the interpreter's sort).

Every scenario is warmed up once so compilation is excluded, then averaged
over RUNS calls. Results are printed and plotted.
"""

from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import matplotlib.pyplot as plt
import numpy as np

# Ensure we import the in-repo version
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import twinbench

RUNS = 5
SAVE_DIR = Path("benchmarks")

MONTE_CARLO_ITERATIONS = 1_000_000
MANDELBROT_SIZE = 200
MANDELBROT_MAX_ITERATIONS = 100
PRIME_LIMIT = 100_000
MATRIX_SIZE = 100
FIBONACCI_N = 90
HASH_ITERATIONS = 100_000
HASH_TEXT = "Hello, World! This is a test string for hash computation."
SORT_SIZE = 5_000


def _time_runs(fn: Callable[[], Any], runs: int = RUNS) -> float:
    """Run fn `runs` times and return average duration in seconds."""
    # Warm-up, pays for compilation
    fn()
    start = time.perf_counter()
    for _ in range(runs):
        fn()
    duration = time.perf_counter() - start
    return duration / runs


def _random_matrix(rows: int, cols: int, rng: random.Random) -> list[float]:
    return [rng.random() * 10 for _ in range(rows * cols)]


def kernel_scenarios(seed: int = 0) -> Dict[str, Callable[[str], Any]]:
    rng = random.Random(seed)
    matrix_a = _random_matrix(MATRIX_SIZE, MATRIX_SIZE, rng)
    matrix_b = _random_matrix(MATRIX_SIZE, MATRIX_SIZE, rng)
    return {
        "monte carlo pi": lambda backend: twinbench.monte_carlo_pi(
            MONTE_CARLO_ITERATIONS, seed=seed, backend=backend
        ),
        "mandelbrot": lambda backend: twinbench.mandelbrot_set(
            MANDELBROT_SIZE,
            MANDELBROT_SIZE,
            MANDELBROT_MAX_ITERATIONS,
            1.0,
            0.0,
            0.0,
            backend=backend,
        ),
        "prime sieve": lambda backend: twinbench.prime_sieve(
            PRIME_LIMIT, backend=backend
        ),
        "matrix multiply": lambda backend: twinbench.matrix_multiply(
            matrix_a, matrix_b, MATRIX_SIZE, MATRIX_SIZE, MATRIX_SIZE, backend=backend
        ),
        "fibonacci": lambda backend: twinbench.fibonacci_sequence(
            FIBONACCI_N, backend=backend
        ),
        "hash": lambda backend: twinbench.hash_computation(
            HASH_TEXT, HASH_ITERATIONS, backend=backend
        ),
    }


@dataclass
class BenchmarkResult:
    label: str
    native_avg: float
    jit_avg: float

    @property
    def speedup(self) -> float:
        """How many times faster the native run is than the jit run."""
        return self.jit_avg / self.native_avg if self.native_avg > 0 else 0.0


def run_kernels() -> Tuple[BenchmarkResult, ...]:
    results = []
    for label, scenario in kernel_scenarios().items():
        native_avg = _time_runs(lambda: scenario("native"))
        jit_avg = _time_runs(lambda: scenario("jit"))
        results.append(BenchmarkResult(label, native_avg, jit_avg))
    return tuple(results)


def run_sort() -> BenchmarkResult:
    """
    Comparator sort of records by a numeric field; the merge strategy plays
    the native column, the interpreter's sort the jit column.
    """
    rng = random.Random(1)
    records = [{"id": i, "score": rng.random()} for i in range(SORT_SIZE)]

    def by_score(a: dict, b: dict) -> float:
        return a["score"] - b["score"]

    merge_avg = _time_runs(lambda: twinbench.sort(records, by_score))
    builtin_avg = _time_runs(
        lambda: twinbench.sort(records, by_score, strategy="builtin")
    )
    return BenchmarkResult("comparator sort", merge_avg, builtin_avg)


def plot_results(results: Tuple[BenchmarkResult, ...]) -> None:
    labels = [r.label for r in results]
    native = [r.native_avg for r in results]
    jitted = [r.jit_avg for r in results]
    speedups = [r.speedup for r in results]

    x = np.arange(len(labels))
    width = 0.35

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax0 = axes[0]
    ax0.bar(x - width / 2, native, width, label="native")
    ax0.bar(x + width / 2, jitted, width, label="jit")
    ax0.set_ylabel("Avg runtime (s)")
    ax0.set_yscale("log")
    ax0.set_xticks(x)
    ax0.set_xticklabels(labels, rotation=20)
    ax0.legend()
    ax0.set_title(f"Average of {RUNS} runs")

    ax1 = axes[1]
    ax1.bar(labels, speedups, color="#4caf50")
    ax1.set_ylabel("Speedup (jit / native)")
    ax1.set_title("Speedup")
    ax1.tick_params(axis="x", rotation=20)
    for idx, val in enumerate(speedups):
        ax1.text(idx, val + 0.02, f"{val:.2f}x", ha="center", va="bottom")

    fig.tight_layout()
    SAVE_DIR.mkdir(parents=True, exist_ok=True)
    out_path = SAVE_DIR / "native_vs_jitted.png"
    plt.savefig(out_path, dpi=180)
    print(f"Saved plot to {out_path}")


def main() -> None:
    session = twinbench.init(seed=0, configure_logging=False)
    try:
        results = run_kernels() + (run_sort(),)
    finally:
        session.close()

    for r in results:
        print(
            f"{r.label:>16}: native {r.native_avg:.4f}s, "
            f"jit {r.jit_avg:.4f}s, speedup {r.speedup:.2f}x"
        )

    plot_results(results)


if __name__ == "__main__":
    main()
