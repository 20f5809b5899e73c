"""
Benchmark for measuring B-tree operation time across minimum degrees.

This script measures, for every requested minimum degree:
1. Time per insert while building the tree from a shuffled key set
2. Time per search for every stored key and the same number of absent keys
3. Time per remove while draining the tree again

Usage:
    # Run with default parameters
    python benchmark/btree_benchmark.py

    # Compare several minimum degrees
    python benchmark/btree_benchmark.py --min-degree 2 3 8 32 --num-keys 50000

    # Output results to CSV
    python benchmark/btree_benchmark.py --output results.csv

Parameters:
    --min-degree: One or more minimum degrees to benchmark (default: 2 3 16)
    --num-keys: Number of distinct keys to insert (default: 10000)
    --seed: Random seed for reproducibility (default: None)
    --output: Output file for results (CSV format)
    --verbose: Log structural changes of the tree (very noisy)
"""

import argparse
import csv
import logging
import random
import statistics
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from btindex.dependency import BTree, Helper

OPERATIONS = ["insert", "search", "remove"]


@dataclass
class BenchmarkResult:
    """Aggregated benchmark results for an operation type at one minimum degree."""
    min_degree: int
    operation: str
    num_samples: int
    avg_time_us: float
    std_time_us: float
    min_time_us: float
    max_time_us: float


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark."""
    min_degrees: List[int] = field(default_factory=lambda: [2, 3, 16])
    num_keys: int = 10000
    seed: Optional[int] = None


class BTreeBenchmark:
    """Benchmark runner for B-tree operations."""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.rng = random.Random(config.seed)

    @staticmethod
    def _measure(func, *args) -> float:
        """Measure a single call in microseconds."""
        start_time = time.perf_counter()
        func(*args)
        end_time = time.perf_counter()
        return (end_time - start_time) * 1_000_000

    @staticmethod
    def _aggregate(min_degree: int, operation: str, times: List[float]) -> BenchmarkResult:
        """Aggregate timings for an operation type."""
        if not times:
            return BenchmarkResult(min_degree, operation, 0, 0, 0, 0, 0)

        return BenchmarkResult(
            min_degree=min_degree,
            operation=operation,
            num_samples=len(times),
            avg_time_us=statistics.mean(times),
            std_time_us=statistics.stdev(times) if len(times) > 1 else 0,
            min_time_us=min(times),
            max_time_us=max(times),
        )

    def run_degree(self, min_degree: int) -> Dict[str, BenchmarkResult]:
        """Build, probe and drain one tree of the given minimum degree."""
        tree = BTree(min_degree)
        keys = list(range(0, 2 * self.config.num_keys, 2))
        self.rng.shuffle(keys)

        insert_times = [self._measure(tree.insert, key) for key in keys]
        height = tree.height
        nodes = Helper.count_nodes(tree.root)

        # Odd numbers are never stored, so half of the probes miss.
        probes = keys + [key + 1 for key in keys]
        self.rng.shuffle(probes)
        search_times = [self._measure(tree.search, key) for key in probes]

        self.rng.shuffle(keys)
        remove_times = [self._measure(tree.remove, key) for key in keys]

        if len(tree) != 0 or tree.root is not None:
            raise RuntimeError(f"The tree with t={min_degree} was not empty after removing every key.")

        print(f"  t={min_degree}: height {height}, {nodes} nodes after {len(keys)} inserts")

        return {
            "insert": self._aggregate(min_degree, "insert", insert_times),
            "search": self._aggregate(min_degree, "search", search_times),
            "remove": self._aggregate(min_degree, "remove", remove_times),
        }

    def run_all(self) -> List[BenchmarkResult]:
        """Run the benchmark for every configured minimum degree."""
        results = []

        for min_degree in self.config.min_degrees:
            print(f"Benchmarking t={min_degree} ({self.config.num_keys} keys)...")
            results.extend(self.run_degree(min_degree).values())

        return results


def print_results(results: List[BenchmarkResult], config: BenchmarkConfig) -> None:
    """Print benchmark results in a formatted table."""
    print("\n" + "=" * 72)
    print("B-TREE BENCHMARK RESULTS")
    print("=" * 72)
    print(f"\nConfiguration:")
    print(f"  min_degrees: {config.min_degrees}")
    print(f"  num_keys: {config.num_keys}")
    print(f"  seed: {config.seed}")

    print("\n" + "-" * 72)
    print(f"{'t':>4} {'Operation':<10} {'Samples':>8} {'Avg (us)':>10} {'Std (us)':>10} "
          f"{'Min (us)':>10} {'Max (us)':>12}")
    print("-" * 72)

    for result in results:
        if result.num_samples > 0:
            print(f"{result.min_degree:>4} {result.operation:<10} {result.num_samples:>8} "
                  f"{result.avg_time_us:>10.3f} {result.std_time_us:>10.3f} "
                  f"{result.min_time_us:>10.3f} {result.max_time_us:>12.3f}")

    print("-" * 72)


def save_results_csv(results: List[BenchmarkResult], config: BenchmarkConfig, output_path: str) -> None:
    """Save benchmark results to CSV file."""
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)

        # Write config header
        writer.writerow(["# Configuration"])
        writer.writerow(["num_keys", config.num_keys])
        writer.writerow(["seed", config.seed])
        writer.writerow([])

        # Write results header
        writer.writerow([
            "min_degree", "operation", "num_samples",
            "avg_time_us", "std_time_us", "min_time_us", "max_time_us"
        ])

        # Write results
        for result in results:
            writer.writerow([
                result.min_degree, result.operation, result.num_samples,
                result.avg_time_us, result.std_time_us, result.min_time_us, result.max_time_us
            ])

    print(f"\nResults saved to: {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark B-tree insert, search and remove time")
    parser.add_argument("--min-degree", type=int, nargs="+", default=[2, 3, 16],
                        help="Minimum degrees to benchmark (default: 2 3 16)")
    parser.add_argument("--num-keys", type=int, default=10000,
                        help="Number of keys to insert (default: 10000)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--output", type=str, default=None,
                        help="Output file for results (CSV format)")
    parser.add_argument("--verbose", action="store_true",
                        help="Log structural changes of the tree")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = BenchmarkConfig(
        min_degrees=args.min_degree,
        num_keys=args.num_keys,
        seed=args.seed,
    )

    print("Starting B-tree benchmark...")

    benchmark = BTreeBenchmark(config)
    results = benchmark.run_all()

    print_results(results, config)

    if args.output:
        save_results_csv(results, config, args.output)


if __name__ == "__main__":
    main()
