"""Average, median and percentile over frequency tables.

All functions are pure: they read a table, never modify it, and build any
rank index they need per call. An empty table is a normal outcome of an
empty test run and yields ``None`` rather than an exception.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction

from loadstats.stats.errors import InvalidArgumentError
from loadstats.stats.frequency import Duration, FrequencyTable
from loadstats.stats.rank_index import RankIndex, build_rank_index, value_at_rank

DEFAULT_PERCENTILES: tuple[float, ...] = (50, 90, 95, 99)

Statistic = int | float | None


def _as_table(table: Mapping[Duration, int]) -> FrequencyTable:
    """Validate plain mappings so zero counts and bad keys never reach the math."""
    if isinstance(table, FrequencyTable):
        return table
    return FrequencyTable(table)


def _midpoint(index: RankIndex, upper_rank: int) -> float:
    """Average of the values at ``upper_rank - 1`` and ``upper_rank``."""
    lower = value_at_rank(index, upper_rank - 1)
    upper = value_at_rank(index, upper_rank)
    return (lower + upper) / 2


def _exact(k: int | float | Fraction | Decimal) -> Fraction:
    """Convert a percentile to an exact fraction.

    Floats are read through their shortest repr so that ``12.3`` means the
    decimal 12.3 rather than its nearest binary approximation.
    """
    if isinstance(k, (bool, str)):
        raise InvalidArgumentError(f"Percentile must be a number, got {k!r}")
    if isinstance(k, float):
        if not math.isfinite(k):
            raise InvalidArgumentError(f"Percentile must be finite, got {k!r}")
        return Fraction(repr(k))
    if isinstance(k, Decimal) and not k.is_finite():
        raise InvalidArgumentError(f"Percentile must be finite, got {k!r}")
    try:
        return Fraction(k)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Percentile must be a number, got {k!r}") from exc


def request_count(table: Mapping[Duration, int]) -> int:
    """Total number of requests in a frequency table (0 when empty)."""
    return sum(table.values())


def average(table: Mapping[Duration, int]) -> float | None:
    """Mean duration of a frequency table.

    The total duration is the sum of ``duration * count`` over every bucket
    and the request count is the sum of the counts.

    Args:
        table: Mapping of duration to count.

    Returns:
        The mean as a float, or None when the table holds no requests.
    """
    table = _as_table(table)
    count = table.total
    if count == 0:
        return None
    total_duration = sum(duration * n for duration, n in table.items())
    return total_duration / count


def median(table: Mapping[Duration, int]) -> Statistic:
    """Median duration of a frequency table.

    With an even request count the median is the mean of the two values
    closest to the middle of the sorted durations, so it may be fractional.

    Args:
        table: Mapping of duration to count.

    Returns:
        The median, or None when the table holds no requests.
    """
    table = _as_table(table)
    count = table.total
    if count == 0:
        return None

    index = build_rank_index(table)
    half = count // 2
    if count % 2 == 0:
        return _midpoint(index, half)
    return value_at_rank(index, half)


def kth_percentile(table: Mapping[Duration, int], k: int | float | Fraction | Decimal) -> Statistic:
    """K-th percentile of a frequency table.

    ``k == 100`` is the largest observed duration. Otherwise the rank is
    ``count * k / 100``: when it is a whole number the result is the mean of
    the values at ranks ``idx - 1`` and ``idx``, else the value at
    ``floor(idx)``.

    Args:
        table: Mapping of duration to count.
        k: Percentile in ``(0, 100]``.

    Returns:
        The percentile value, or None when the table holds no requests.

    Raises:
        InvalidArgumentError: If ``k`` is greater than 100, not positive, or
            not a finite number.
    """
    exact_k = _exact(k)
    if exact_k > 100:
        raise InvalidArgumentError(f"Can't calculate Kth percentile where K > 100 (got {k})")
    if exact_k <= 0:
        raise InvalidArgumentError(f"Can't calculate Kth percentile where K <= 0 (got {k})")

    table = _as_table(table)
    count = table.total
    if count == 0:
        return None
    if exact_k == 100:
        return max(table)

    index = build_rank_index(table)
    idx = count * exact_k / 100
    if idx.denominator == 1:
        return _midpoint(index, int(idx))
    return value_at_rank(index, math.floor(idx))


@dataclass(frozen=True, slots=True)
class DurationStats:
    """Summary statistics of one frequency table.

    Attributes:
        count: Number of requests.
        min: Smallest duration, None when empty.
        max: Largest duration, None when empty.
        average: Mean duration, None when empty.
        median: Median duration, None when empty.
        percentiles: Requested percentile -> value (None when empty).
    """

    count: int
    min: Duration | None
    max: Duration | None
    average: float | None
    median: Statistic
    percentiles: dict[float, Statistic] = field(default_factory=dict)


def describe(
    table: Mapping[Duration, int],
    percentiles: Iterable[float] = DEFAULT_PERCENTILES,
) -> DurationStats:
    """Compute every reported statistic of a table in one call.

    Args:
        table: Mapping of duration to count.
        percentiles: Percentiles to compute, each in ``(0, 100]``.

    Returns:
        A DurationStats bundle.

    Raises:
        InvalidArgumentError: If any requested percentile is out of range.
    """
    table = _as_table(table)
    return DurationStats(
        count=table.total,
        min=min(table) if table else None,
        max=max(table) if table else None,
        average=average(table),
        median=median(table),
        percentiles={k: kth_percentile(table, k) for k in percentiles},
    )
