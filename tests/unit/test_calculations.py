"""Tests for average, median, percentile and describe."""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from loadstats.stats import (
    DurationStats,
    FrequencyTable,
    InvalidArgumentError,
    average,
    describe,
    kth_percentile,
    median,
    request_count,
)


def expand(table: FrequencyTable) -> list[int]:
    """Sorted list of every individual duration in the table."""
    return sorted(d for d, c in table.items() for _ in range(c))


class TestRequestCount:
    """Test cases for request_count."""

    def test_worked_example(self, odd_table: FrequencyTable) -> None:
        """{5: 2, 3: 2, 6: 1} should hold five requests."""
        assert request_count(odd_table) == 5

    def test_empty_table(self) -> None:
        """An empty table holds zero requests and is not an error."""
        assert request_count({}) == 0


class TestAverage:
    """Test cases for average."""

    def test_worked_example(self, odd_table: FrequencyTable) -> None:
        """(5*2 + 3*2 + 6*1) / 5 == 4.4."""
        assert average(odd_table) == pytest.approx(4.4)

    def test_result_is_float(self) -> None:
        """Integer division must not truncate."""
        result = average({1: 1, 2: 1})
        assert isinstance(result, float)
        assert result == 1.5

    def test_empty_table_is_absent(self) -> None:
        """The average of no requests is None, not an exception."""
        assert average({}) is None
        assert average(FrequencyTable()) is None

    def test_zero_counts_ignored(self) -> None:
        """Zero-count buckets in plain dicts should not affect the result."""
        assert average({1: 0, 4: 2}) == 4.0

    def test_within_min_and_max(self, random_tables: list[FrequencyTable]) -> None:
        """The average should lie between the smallest and largest duration."""
        for table in random_tables:
            assert min(table) <= average(table) <= max(table)

    def test_matches_expanded_mean(self, random_tables: list[FrequencyTable]) -> None:
        """The result should equal the mean of the expanded durations."""
        for table in random_tables:
            durations = expand(table)
            assert average(table) == pytest.approx(sum(durations) / len(durations))

    def test_large_counts(self) -> None:
        """Millions of requests should be averaged without expanding them."""
        table = FrequencyTable({100: 3_000_000, 200: 1_000_000})
        assert average(table) == 125.0


class TestMedian:
    """Test cases for median."""

    def test_odd_count(self, odd_table: FrequencyTable) -> None:
        """Odd count: the value at rank floor(5 / 2) == 2, which is 5."""
        assert median(odd_table) == 5

    def test_even_count_averages_straddling_values(self, even_table: FrequencyTable) -> None:
        """Even count: mean of ranks 1 and 2, (2 + 3) / 2 == 2.5."""
        assert median(even_table) == 2.5

    def test_even_count_same_bucket(self) -> None:
        """Straddling ranks in the same bucket average to that value."""
        assert median({5: 4}) == 5

    def test_single_request(self) -> None:
        """A single request is its own median."""
        assert median({42: 1}) == 42

    def test_empty_table_is_absent(self) -> None:
        """The median of no requests is None."""
        assert median({}) is None

    def test_within_min_and_max(self, random_tables: list[FrequencyTable]) -> None:
        """The median should lie between the smallest and largest duration."""
        for table in random_tables:
            assert min(table) <= median(table) <= max(table)

    def test_matches_expanded_median(self, random_tables: list[FrequencyTable]) -> None:
        """The result should equal the textbook median of the expanded durations."""
        for table in random_tables:
            durations = expand(table)
            n = len(durations)
            if n % 2:
                expected = durations[n // 2]
            else:
                expected = (durations[n // 2 - 1] + durations[n // 2]) / 2
            assert median(table) == expected


class TestKthPercentile:
    """Test cases for kth_percentile."""

    def test_hundredth_is_maximum(self, odd_table: FrequencyTable) -> None:
        """k == 100 should be the largest observed duration."""
        assert kth_percentile(odd_table, 100) == 6

    def test_hundredth_is_maximum_for_all_tables(self, random_tables: list[FrequencyTable]) -> None:
        """k == 100 is max(keys) regardless of counts."""
        for table in random_tables:
            assert kth_percentile(table, 100) == max(table)

    def test_fractional_index_takes_floor_rank(self, odd_table: FrequencyTable) -> None:
        """5 * 50 / 100 == 2.5, so the value at rank 2 (5)."""
        assert kth_percentile(odd_table, 50) == 5

    def test_whole_index_averages_neighbours(self, even_table: FrequencyTable) -> None:
        """4 * 50 / 100 == 2, so the mean of ranks 1 and 2 (2.5)."""
        assert kth_percentile(even_table, 50) == 2.5

    def test_whole_index_at_first_rank(self, even_table: FrequencyTable) -> None:
        """4 * 25 / 100 == 1, so the mean of ranks 0 and 1 (1.5)."""
        assert kth_percentile(even_table, 25) == 1.5

    def test_small_percentile(self, odd_table: FrequencyTable) -> None:
        """5 * 10 / 100 == 0.5, so the value at rank 0 (3)."""
        assert kth_percentile(odd_table, 10) == 3

    def test_ninetieth_on_hundred_requests(self) -> None:
        """100 * 90 / 100 == 90 is whole, so ranks 89 and 90 are averaged."""
        table = FrequencyTable.from_durations(range(1, 101))
        assert kth_percentile(table, 90) == 90.5

    def test_float_percentile_uses_decimal_value(self) -> None:
        """12.3 of 1000 requests is exactly rank 123, so ranks 122 and 123 are averaged."""
        table = FrequencyTable.from_durations(range(1000))
        assert kth_percentile(table, 12.3) == 122.5

    def test_fraction_and_decimal_percentiles(self, even_table: FrequencyTable) -> None:
        """Exact numeric types should be accepted."""
        assert kth_percentile(even_table, Fraction(1, 2) * 100) == 2.5
        assert kth_percentile(even_table, Decimal("75")) == 3.5

    def test_above_hundred_rejected(self, odd_table: FrequencyTable) -> None:
        """k > 100 is a caller error and must raise."""
        with pytest.raises(InvalidArgumentError, match="K > 100"):
            kth_percentile(odd_table, 101)

    def test_above_hundred_rejected_on_empty_table(self) -> None:
        """The k check happens before the empty-table check."""
        with pytest.raises(InvalidArgumentError):
            kth_percentile({}, 100.5)

    @pytest.mark.parametrize("k", [0, -5, -0.1])
    def test_non_positive_rejected(self, odd_table: FrequencyTable, k: float) -> None:
        """k <= 0 has no defined rank and must raise."""
        with pytest.raises(InvalidArgumentError, match="K <= 0"):
            kth_percentile(odd_table, k)

    @pytest.mark.parametrize("k", [math.nan, math.inf, "50", True])
    def test_non_numeric_rejected(self, odd_table: FrequencyTable, k: object) -> None:
        """Non-finite or non-numeric k must raise."""
        with pytest.raises(InvalidArgumentError):
            kth_percentile(odd_table, k)  # type: ignore[arg-type]

    def test_empty_table_is_absent(self) -> None:
        """A valid k over an empty table yields None."""
        assert kth_percentile({}, 50) is None
        assert kth_percentile({}, 100) is None

    def test_monotonic_in_k(self, random_tables: list[FrequencyTable]) -> None:
        """Percentiles should never decrease as k increases."""
        ks = [0.5, 1, 5, 10, 12.5, 25, 33.3, 50, 66.7, 75, 90, 95, 99, 99.9, 100]
        for table in random_tables:
            values = [kth_percentile(table, k) for k in ks]
            assert values == sorted(values)

    def test_within_min_and_max(self, random_tables: list[FrequencyTable]) -> None:
        """Every percentile lies between the smallest and largest duration."""
        for table in random_tables:
            for k in (1, 50, 99):
                assert min(table) <= kth_percentile(table, k) <= max(table)

    def test_matches_expanded_list(self, random_tables: list[FrequencyTable]) -> None:
        """The result should equal the same rule applied to the expanded durations."""
        for table in random_tables:
            durations = expand(table)
            n = len(durations)
            for k in (10, 25, 50, 90, 95, 99):
                idx = Fraction(n * k, 100)
                if idx.denominator == 1:
                    expected = (durations[int(idx) - 1] + durations[int(idx)]) / 2
                else:
                    expected = durations[math.floor(idx)]
                assert kth_percentile(table, k) == expected


class TestPurity:
    """Statistic functions must not modify their input and must be repeatable."""

    def test_repeated_calls_are_identical(self, random_tables: list[FrequencyTable]) -> None:
        """Calling twice on the same table should give identical results."""
        for table in random_tables:
            assert average(table) == average(table)
            assert median(table) == median(table)
            assert kth_percentile(table, 95) == kth_percentile(table, 95)

    def test_plain_dict_not_modified(self) -> None:
        """Plain dict inputs should be left as they were."""
        data = {3: 2, 1: 0, 7: 1}
        median(data)
        kth_percentile(data, 50)
        average(data)
        assert data == {3: 2, 1: 0, 7: 1}


class TestDescribe:
    """Test cases for describe."""

    def test_worked_example(self, odd_table: FrequencyTable) -> None:
        """describe should bundle every statistic of the table."""
        stats = describe(odd_table, percentiles=(50, 100))
        assert stats == DurationStats(
            count=5,
            min=3,
            max=6,
            average=pytest.approx(4.4),
            median=5,
            percentiles={50: 5, 100: 6},
        )

    def test_default_percentiles(self, even_table: FrequencyTable) -> None:
        """The default percentiles are 50, 90, 95 and 99."""
        stats = describe(even_table)
        assert list(stats.percentiles) == [50, 90, 95, 99]

    def test_empty_table(self) -> None:
        """Every statistic of an empty table is None."""
        stats = describe({})
        assert stats.count == 0
        assert stats.min is None
        assert stats.max is None
        assert stats.average is None
        assert stats.median is None
        assert all(value is None for value in stats.percentiles.values())

    def test_invalid_percentile_propagates(self, odd_table: FrequencyTable) -> None:
        """A bad percentile should raise rather than be skipped."""
        with pytest.raises(InvalidArgumentError):
            describe(odd_table, percentiles=(50, 150))
