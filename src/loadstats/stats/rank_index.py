"""Rank index over a frequency table.

Median and percentile calculations need the duration of the Nth request in
sorted order. A frequency table cannot be indexed like a list, so each
distinct duration is laid out as the range of positions it would occupy in a
sorted array of all durations. For ``{5: 2, 3: 2, 6: 1}`` the ranges are::

    RankRange(value=3, start_idx=0, end_idx=1)
    RankRange(value=5, start_idx=2, end_idx=3)
    RankRange(value=6, start_idx=4, end_idx=4)

and the value at rank 3 is 5. The index holds one entry per distinct
duration, so its size is independent of the number of requests.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from loadstats.stats.errors import InvalidArgumentError
from loadstats.stats.frequency import Duration


@dataclass(frozen=True, slots=True)
class RankRange:
    """Contiguous zero-based ranks ``[start_idx, end_idx]`` holding one duration.

    Attributes:
        value: The duration occupying these ranks.
        start_idx: First rank (inclusive).
        end_idx: Last rank (inclusive).
    """

    value: Duration
    start_idx: int
    end_idx: int

    def __contains__(self, rank: int) -> bool:
        return self.start_idx <= rank <= self.end_idx


@dataclass(frozen=True, slots=True)
class RankIndex:
    """Ordered, contiguous rank ranges covering ``[0, total - 1]`` exactly once."""

    ranges: tuple[RankRange, ...]

    @property
    def total(self) -> int:
        """Number of ranks covered (the request count of the source table)."""
        if not self.ranges:
            return 0
        return self.ranges[-1].end_idx + 1

    def value_at(self, rank: int) -> Duration:
        """Return the duration at ``rank``. See :func:`value_at_rank`."""
        return value_at_rank(self, rank)

    def __iter__(self) -> Iterator[RankRange]:
        return iter(self.ranges)

    def __len__(self) -> int:
        return len(self.ranges)

    def __getitem__(self, position: int) -> RankRange:
        return self.ranges[position]


def build_rank_index(table: Mapping[Duration, int]) -> RankIndex:
    """Lay out the table's durations as contiguous rank ranges.

    Durations are visited in ascending order with a running start rank
    beginning at 0; each emits ``[start, start + count - 1]`` and the next one
    starts right after it.

    Args:
        table: Mapping of duration to a positive count.

    Returns:
        The RankIndex for the table (empty for an empty table).
    """
    ranges: list[RankRange] = []
    start_idx = 0
    for value, count in sorted(table.items()):
        end_idx = start_idx + count - 1
        ranges.append(RankRange(value=value, start_idx=start_idx, end_idx=end_idx))
        start_idx = end_idx + 1
    return RankIndex(ranges=tuple(ranges))


def value_at_rank(index: RankIndex, rank: int) -> Duration:
    """Find the duration at a zero-based rank using binary search.

    Args:
        index: Rank index built from a frequency table.
        rank: Position in the sorted expansion of all durations.

    Returns:
        The duration whose range contains ``rank``.

    Raises:
        InvalidArgumentError: If ``rank`` is outside ``[0, index.total - 1]``.
    """
    if rank < 0 or rank >= index.total:
        raise InvalidArgumentError(
            f"Rank {rank} is out of range for {index.total} request(s)"
        )
    position = bisect_right(index.ranges, rank, key=lambda r: r.start_idx) - 1
    return index.ranges[position].value
