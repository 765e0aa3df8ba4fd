"""
Benchmarks for CBMT core operations.

Run with: python -m cbmt.utils.benchmark
"""

import time
import statistics
from typing import Callable, List, Optional
from dataclasses import dataclass

from cbmt.core import CBMT, Merge, Sha256Merge, get_merge
from cbmt.crypto import sha256
from cbmt.utils.logger import get_logger

logger = get_logger("benchmark")


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    name: str
    iterations: int
    total_time_ms: float
    avg_time_ms: float
    min_time_ms: float
    max_time_ms: float
    ops_per_sec: float

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.0f} ops/s "
            f"(avg={self.avg_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(
    name: str,
    func: Callable,
    iterations: int = 1000,
    warmup: int = 100,
) -> BenchmarkResult:
    """
    Run a benchmark.

    Args:
        name: Benchmark name
        func: Function to benchmark (no args)
        iterations: Number of iterations
        warmup: Warmup iterations

    Returns:
        BenchmarkResult
    """
    if iterations < 1:
        raise ValueError("iterations must be >= 1")

    # Warmup
    for _ in range(warmup):
        func()

    # Collect timings
    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # ms

    total = sum(times)
    avg = statistics.mean(times)

    return BenchmarkResult(
        name=name,
        iterations=iterations,
        total_time_ms=total,
        avg_time_ms=avg,
        min_time_ms=min(times),
        max_time_ms=max(times),
        ops_per_sec=1000 / avg if avg > 0 else float("inf"),
    )


def make_leaves(count: int, merge: Optional[Merge] = None) -> List:
    """Deterministic leaves: 32-byte digests, or u64 integers for integer merges."""
    digests = [sha256(i.to_bytes(8, byteorder="big")) for i in range(count)]
    if merge is not None and isinstance(merge.default(), int):
        return [int.from_bytes(d[:8], byteorder="little") for d in digests]
    return digests


# =============================================================================
# Tree Benchmarks
# =============================================================================


def benchmark_build(
    merge: Optional[Merge] = None,
    sizes: tuple = (16, 1024),
    scale: int = 1,
) -> List[BenchmarkResult]:
    """Benchmark root and tree construction."""
    merge = merge or Sha256Merge()
    cbmt = CBMT(merge)
    results = []

    for size in sizes:
        leaves = make_leaves(size, merge)
        iterations = max(1, (10000 // size) // scale)

        results.append(benchmark(
            f"Build root ({size} leaves)",
            lambda: cbmt.build_merkle_root(leaves),
            iterations=iterations,
            warmup=1,
        ))

        results.append(benchmark(
            f"Build tree ({size} leaves)",
            lambda: cbmt.build_merkle_tree(leaves),
            iterations=iterations,
            warmup=1,
        ))

    return results


# =============================================================================
# Proof Benchmarks
# =============================================================================


def benchmark_proofs(
    merge: Optional[Merge] = None,
    size: int = 1024,
    scale: int = 1,
) -> List[BenchmarkResult]:
    """Benchmark proof generation and verification."""
    merge = merge or Sha256Merge()
    cbmt = CBMT(merge)
    leaves = make_leaves(size, merge)
    tree = cbmt.build_merkle_tree(leaves)
    root = tree.root()
    iterations = max(1, 1000 // scale)
    results = []

    single = [size // 2]
    multi = list(range(0, size, max(1, size // 16)))

    for label, positions in (("1 leaf", single), (f"{len(multi)} leaves", multi)):
        proof = tree.build_proof(positions)
        proof_leaves = [leaves[p] for p in positions]

        results.append(benchmark(
            f"Proof generation ({label})",
            lambda: tree.build_proof(positions),
            iterations=iterations,
            warmup=1,
        ))

        results.append(benchmark(
            f"Proof verification ({label})",
            lambda: proof.verify(root, proof_leaves),
            iterations=iterations,
            warmup=1,
        ))

    return results


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks(merge_name: str = "sha256", scale: int = 1) -> List[BenchmarkResult]:
    """Run all benchmarks and print results."""
    merge = get_merge(merge_name)
    print("=" * 60)
    print(f"CBMT Performance Benchmarks ({merge_name})")
    print("=" * 60)

    sections = [
        ("Construction", lambda: benchmark_build(merge, scale=scale)),
        ("Proofs", lambda: benchmark_proofs(merge, scale=scale)),
    ]

    all_results = []
    for section_name, bench_func in sections:
        print(f"\n{section_name}")
        print("-" * 40)
        results = bench_func()
        for r in results:
            print(f"  {r}")
        all_results.extend(results)

    print("\n" + "=" * 60)
    logger.debug(f"Ran {len(all_results)} benchmarks")
    return all_results


if __name__ == "__main__":
    run_all_benchmarks()
