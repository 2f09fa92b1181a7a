#!/usr/bin/env python3
"""
Benchmark Script for TreeCache

Measures the performance characteristics of the HierarchicalStore
implementation. Useful for profiling and optimization.

Usage:
    python scripts/benchmark.py                    # Run all benchmarks
    python scripts/benchmark.py --operations 10000 # Custom operation count
    python scripts/benchmark.py --depth 8          # Deeper key paths
    python scripts/benchmark.py --profile          # Enable cProfile
    python scripts/benchmark.py --debug            # Trace store operations (slow)
"""

import argparse
import random
import statistics
import string
import time
from typing import Any, Callable, Dict, List
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from treecache.cache.index import KeyIndex
from treecache.cache.scheduler import ExpirationScheduler
from treecache.cache.store import HierarchicalStore
from treecache.config.logging_setup import setup_logging


class NullHandle:
    def cancel(self) -> None:
        pass


class NullScheduler(ExpirationScheduler):
    """Records nothing and never fires; isolates store cost from timer threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> NullHandle:
        return NullHandle()


def random_segment(length: int) -> str:
    """Generate a random alphanumeric key segment."""
    return ''.join(random.choices(string.ascii_letters + string.digits, k=length))


def measure_time(func: Callable, iterations: int = 1) -> Dict[str, float]:
    """Measure execution time statistics."""
    times = []

    for _ in range(iterations):
        start = time.perf_counter()
        func()
        elapsed = (time.perf_counter() - start) * 1000  # Convert to ms
        times.append(elapsed)

    return {
        "min_ms": min(times),
        "max_ms": max(times),
        "mean_ms": statistics.mean(times),
        "median_ms": statistics.median(times),
        "total_ms": sum(times),
    }


class Benchmark:
    """Collection of benchmarks for TreeCache components."""

    def __init__(self, operations: int = 10000, depth: int = 4, fanout: int = 10, debug: bool = False):
        self.operations = operations
        self.depth = depth
        self.debug = debug

        # Pre-generate hierarchical keys sharing a small set of segments per level
        levels = [[random_segment(6) for _ in range(fanout)] for _ in range(depth - 1)]
        self.keys = [
            ":".join([random.choice(level) for level in levels] + [f"leaf{i}"])
            for i in range(operations)
        ]
        self.values = [random_segment(32) for _ in range(operations)]

    def new_store(self) -> HierarchicalStore:
        return HierarchicalStore(default_ttl=0, debug=self.debug, scheduler=NullScheduler())

    def _finish(self, stats: Dict[str, Any], operation: str, count: int) -> Dict[str, Any]:
        stats["ops_per_second"] = count / (stats["total_ms"] / 1000) if stats["total_ms"] else 0
        stats["operation"] = operation
        stats["count"] = count
        return stats

    def benchmark_set(self) -> Dict[str, Any]:
        """Benchmark SET operations."""
        store = self.new_store()

        def run():
            for i in range(self.operations):
                store.set(self.keys[i], self.values[i])

        return self._finish(measure_time(run), "SET", self.operations)

    def benchmark_set_ttl(self) -> Dict[str, Any]:
        """Benchmark SET operations that arm (and replace) timers."""
        store = self.new_store()

        def run():
            for i in range(self.operations):
                store.set(self.keys[i], self.values[i], ttl=60)

        return self._finish(measure_time(run), "SET (ttl)", self.operations)

    def benchmark_get(self) -> Dict[str, Any]:
        """Benchmark GET operations on leaves (cache hits)."""
        store = self.new_store()
        for i in range(self.operations):
            store.set(self.keys[i], self.values[i])

        def run():
            for i in range(self.operations):
                store.get(self.keys[i])

        return self._finish(measure_time(run), "GET (hit)", self.operations)

    def benchmark_get_miss(self) -> Dict[str, Any]:
        """Benchmark GET operations (cache misses)."""
        store = self.new_store()
        miss_keys = [f"miss:{random_segment(8)}" for _ in range(self.operations)]

        def run():
            for key in miss_keys:
                store.get(key)

        return self._finish(measure_time(run), "GET (miss)", self.operations)

    def benchmark_get_branch(self) -> Dict[str, Any]:
        """Benchmark GET on top-level branches (sub-tree copies)."""
        store = self.new_store()
        for i in range(self.operations):
            store.set(self.keys[i], self.values[i])
        roots = sorted({key.split(":")[0] for key in self.keys})

        def run():
            for root in roots:
                store.get(root)

        return self._finish(measure_time(run), "GET (branch)", len(roots))

    def benchmark_has(self) -> Dict[str, Any]:
        """Benchmark HAS operations."""
        store = self.new_store()
        for i in range(self.operations // 2):
            store.set(self.keys[i], self.values[i])

        def run():
            for i in range(self.operations):
                store.has(self.keys[i])

        return self._finish(measure_time(run), "HAS", self.operations)

    def benchmark_delete(self) -> Dict[str, Any]:
        """Benchmark DELETE operations on leaves."""
        store = self.new_store()
        count = min(self.operations, 2000)  # delete scans the index
        for i in range(self.operations):
            store.set(self.keys[i], self.values[i])

        def run():
            for i in range(count):
                store.delete(self.keys[i])

        return self._finish(measure_time(run), "DELETE", count)

    def benchmark_cascading_delete(self) -> Dict[str, Any]:
        """Benchmark deleting whole top-level sub-trees."""
        store = self.new_store()
        for i in range(self.operations):
            store.set(self.keys[i], self.values[i])
        roots = sorted({key.split(":")[0] for key in self.keys})

        def run():
            for root in roots:
                store.delete(root)

        return self._finish(measure_time(run), "DELETE (subtree)", len(roots))

    def benchmark_index(self) -> Dict[str, Any]:
        """Benchmark the standalone KeyIndex."""
        index = KeyIndex()

        def run():
            for key in self.keys:
                index.add(key)
            for key in self.keys:
                index.contains(key)

        return self._finish(measure_time(run), "KeyIndex add+contains", self.operations * 2)

    def run_all(self) -> List[Dict[str, Any]]:
        """Run all benchmarks and return results."""
        benchmarks = [
            self.benchmark_set,
            self.benchmark_set_ttl,
            self.benchmark_get,
            self.benchmark_get_miss,
            self.benchmark_get_branch,
            self.benchmark_has,
            self.benchmark_delete,
            self.benchmark_cascading_delete,
            self.benchmark_index,
        ]

        results = []
        for benchmark in benchmarks:
            print(f"Running {benchmark.__name__}...", end=" ", flush=True)
            result = benchmark()
            results.append(result)
            print(f"done ({result['ops_per_second']:,.0f} ops/sec)")

        return results


def print_results(results: List[Dict[str, Any]]):
    """Print benchmark results in a table."""
    print()
    print("=" * 70)
    print(f"{'Operation':<25} {'Count':>10} {'Total (ms)':>12} {'Ops/sec':>15}")
    print("-" * 70)

    for r in results:
        print(
            f"{r['operation']:<25} {r['count']:>10,} "
            f"{r['total_ms']:>12.2f} {r['ops_per_second']:>15,.0f}"
        )

    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark TreeCache store operations",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--operations",
        type=int,
        default=10000,
        help="Number of operations per benchmark"
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=4,
        help="Number of segments per key"
    )
    parser.add_argument(
        "--fanout",
        type=int,
        default=10,
        help="Distinct segments per intermediate level"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable cProfile profiling"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable store debug tracing"
    )

    args = parser.parse_args()
    if args.depth < 1:
        parser.error("--depth must be at least 1")

    setup_logging(debug=args.debug)

    print("TreeCache Benchmark")
    print("===================")
    print(f"Operations per test: {args.operations:,}")
    print(f"Key depth: {args.depth}")
    print(f"Fanout: {args.fanout}")
    print()

    benchmark = Benchmark(
        operations=args.operations,
        depth=args.depth,
        fanout=args.fanout,
        debug=args.debug,
    )

    if args.profile:
        import cProfile
        import pstats

        profiler = cProfile.Profile()
        profiler.enable()
        results = benchmark.run_all()
        profiler.disable()

        print_results(results)

        print()
        print("Profiling Results (top 20):")
        print("-" * 70)
        stats = pstats.Stats(profiler)
        stats.sort_stats('cumulative')
        stats.print_stats(20)
    else:
        results = benchmark.run_all()
        print_results(results)


if __name__ == "__main__":
    main()
