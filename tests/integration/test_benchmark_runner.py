"""Integration tests for the frequency-table benchmark runner."""

from __future__ import annotations

from benchmarks.runner import (
    bucketed_statistics,
    generate_durations,
    run_benchmark,
    sorted_list_statistics,
)


class TestBenchmarkRunner:
    """Test cases for the benchmark helpers."""

    def test_generate_durations_is_reproducible(self) -> None:
        """The same seed gives the same durations."""
        assert generate_durations(500, seed=7) == generate_durations(500, seed=7)
        assert all(d >= 0 for d in generate_durations(500, seed=7))

    def test_bucketed_matches_sorted_list(self) -> None:
        """Both approaches report identical statistics."""
        durations = generate_durations(10_000, seed=3)
        percentiles = (10, 50, 90, 95, 99, 100)
        baseline = sorted_list_statistics(durations, percentiles)
        bucketed = bucketed_statistics(durations, percentiles)
        for key in ("count", "average", "median", "percentiles"):
            assert baseline[key] == bucketed[key]

    def test_fractional_percentiles_agree(self) -> None:
        """Decimal percentiles landing on a whole rank average both neighbours."""
        durations = list(range(1000))
        percentiles = (99.9, 12.3)
        baseline = sorted_list_statistics(durations, percentiles)
        assert baseline["percentiles"] == {99.9: 998.5, 12.3: 122.5}
        assert baseline["percentiles"] == bucketed_statistics(durations, percentiles)["percentiles"]

    def test_distinct_durations_far_fewer_than_requests(self) -> None:
        """Latency data compresses into a small table."""
        bucketed = bucketed_statistics(generate_durations(20_000, seed=5))
        assert bucketed["distinct_durations"] < 2_000

    def test_run_benchmark_reports_agreement(self) -> None:
        """run_benchmark reports timings and that the results agree."""
        results = run_benchmark(5_000, seed=11)
        assert results["requests"] == 5_000
        assert results["results_agree"] is True
        assert results["frequency_table"]["time_sec"] >= 0
        assert set(results["statistics"]) == {"average", "median", "p50", "p90", "p95", "p99"}
