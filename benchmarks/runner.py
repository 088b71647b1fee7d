#!/usr/bin/env python3
"""Benchmark Runner for loadstats.

Compares frequency-table statistics against a sorted-list baseline on
synthetic latency data and outputs results in JSON format.

Usage:
    python -m benchmarks.runner [--count N] [--seed S] [--output FILE]

Options:
    --count N       Number of synthetic request durations (default: 1000000)
    --seed S        Random seed (default: 42)
    --output FILE   Output JSON file (default: benchmark_output.json)
"""

from __future__ import annotations

import argparse
import json
import math
import random
import sys
import time
import tracemalloc
from collections.abc import Callable
from datetime import UTC, datetime
from fractions import Fraction
from pathlib import Path
from typing import Any

from loadstats.reporting.report import percentile_label
from loadstats.stats import DEFAULT_PERCENTILES, FrequencyTable, describe


def generate_durations(count: int, seed: int = 42, median_ms: float = 120.0) -> list[int]:
    """Generate log-normally distributed request durations in milliseconds.

    Args:
        count: Number of durations.
        seed: Random seed for reproducibility.
        median_ms: Median of the distribution.

    Returns:
        List of non-negative integer durations.
    """
    rng = random.Random(seed)
    mu = math.log(median_ms)
    return [int(rng.lognormvariate(mu, 0.6)) for _ in range(count)]


def sorted_list_statistics(
    durations: list[int],
    percentiles: tuple[float, ...] = DEFAULT_PERCENTILES,
) -> dict[str, Any]:
    """Baseline: the same statistics computed over a fully sorted list."""
    data = sorted(durations)
    n = len(data)
    if n == 0:
        return {"count": 0, "average": None, "median": None, "percentiles": {}}

    def percentile(k: float) -> float:
        if k == 100:
            return data[-1]
        exact = Fraction(repr(k)) if isinstance(k, float) else Fraction(k)
        idx = n * exact / 100
        if idx.denominator == 1:
            return (data[int(idx) - 1] + data[int(idx)]) / 2
        return data[math.floor(idx)]

    half = n // 2
    median = (data[half - 1] + data[half]) / 2 if n % 2 == 0 else data[half]
    return {
        "count": n,
        "average": sum(data) / n,
        "median": median,
        "percentiles": {k: percentile(k) for k in percentiles},
    }


def bucketed_statistics(
    durations: list[int],
    percentiles: tuple[float, ...] = DEFAULT_PERCENTILES,
) -> dict[str, Any]:
    """Frequency-table statistics in the same shape as the baseline."""
    table = FrequencyTable.from_durations(durations)
    stats = describe(table, percentiles)
    return {
        "count": stats.count,
        "average": stats.average,
        "median": stats.median,
        "percentiles": stats.percentiles,
        "distinct_durations": len(table),
    }


def measure(fn: Callable[[], dict[str, Any]]) -> tuple[dict[str, Any], float, float]:
    """Run ``fn`` and return its result, elapsed seconds and peak memory in MB."""
    tracemalloc.start()
    start = time.perf_counter()
    try:
        result = fn()
    finally:
        elapsed = time.perf_counter() - start
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    return result, elapsed, peak / (1024 * 1024)


def run_benchmark(
    count: int,
    seed: int = 42,
    percentiles: tuple[float, ...] = DEFAULT_PERCENTILES,
) -> dict[str, Any]:
    """Benchmark both approaches on the same synthetic durations.

    Returns:
        Dictionary with timings, peak memory and whether the results agree.
    """
    durations = generate_durations(count, seed)

    baseline, baseline_time, baseline_mem = measure(
        lambda: sorted_list_statistics(durations, percentiles)
    )
    bucketed, bucketed_time, bucketed_mem = measure(
        lambda: bucketed_statistics(durations, percentiles)
    )

    agree = all(baseline[key] == bucketed[key] for key in ("count", "average", "median", "percentiles"))

    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "requests": count,
        "distinct_durations": bucketed["distinct_durations"],
        "sorted_list": {"time_sec": baseline_time, "peak_memory_mb": baseline_mem},
        "frequency_table": {"time_sec": bucketed_time, "peak_memory_mb": bucketed_mem},
        "results_agree": agree,
        "statistics": {
            "average": bucketed["average"],
            "median": bucketed["median"],
            **{percentile_label(k): v for k, v in bucketed["percentiles"].items()},
        },
    }


def main() -> int:
    """Main entry point for benchmark runner.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    parser = argparse.ArgumentParser(
        description="Benchmark frequency-table statistics against a sorted-list baseline"
    )
    parser.add_argument(
        "--count",
        type=int,
        default=1_000_000,
        help="Number of synthetic durations (default: 1000000)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--output",
        type=str,
        default="benchmark_output.json",
        help="Output JSON file (default: benchmark_output.json)",
    )

    args = parser.parse_args()

    try:
        print(f"Benchmarking {args.count} durations...")
        results = run_benchmark(args.count, seed=args.seed)

        output_path = Path(args.output)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)

        print("=" * 50)
        print("BENCHMARK RESULTS")
        print("=" * 50)
        for label in ("sorted_list", "frequency_table"):
            entry = results[label]
            print(f"{label:16} {entry['time_sec']:.3f}s  peak {entry['peak_memory_mb']:.1f} MB")
        print(f"Distinct durations: {results['distinct_durations']}")
        print(f"Results agree: {results['results_agree']}")
        print(f"Results saved to: {output_path}")
        print("=" * 50)

        return 0 if results["results_agree"] else 1

    except Exception as e:
        print(f"Error running benchmark: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
