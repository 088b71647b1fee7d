"""Frequency tables: bucketed request durations.

Instead of keeping every duration of a load run, durations are stored as a
mapping of duration (milliseconds) to the number of requests that took that
long. Five requests taking 5ms, 3ms, 5ms, 6ms and 3ms become ``{5: 2, 3: 2, 6: 1}``.
Load runs produce millions of requests but only a bounded number of distinct
durations, so the table stays small.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from loadstats.stats.errors import InvalidArgumentError

Duration = int


def _validate_bucket(duration: object, count: object) -> None:
    """Reject keys and counts that cannot describe observed requests."""
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise InvalidArgumentError(f"Duration must be an integer, got {duration!r}")
    if duration < 0:
        raise InvalidArgumentError(f"Duration must be non-negative, got {duration}")
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError(f"Count for duration {duration} must be an integer, got {count!r}")
    if count < 0:
        raise InvalidArgumentError(f"Count for duration {duration} must be non-negative, got {count}")


class FrequencyTable(Mapping[Duration, int]):
    """Immutable mapping of duration to the number of requests with that duration.

    Every stored count is strictly positive: zero counts are dropped on
    construction. The table is read-only once built, so it can be shared
    between callers computing statistics concurrently.

    Example:
        >>> table = FrequencyTable.from_durations([5, 3, 5, 6, 3])
        >>> dict(sorted(table.items()))
        {3: 2, 5: 2, 6: 1}
        >>> table.total
        5
    """

    __slots__ = ("_buckets", "_total")

    def __init__(self, buckets: Mapping[Duration, int] | None = None) -> None:
        """Initialize the table.

        Args:
            buckets: Mapping of duration to count. Zero counts are dropped.

        Raises:
            InvalidArgumentError: If a duration is not a non-negative integer
                or a count is negative.
        """
        data: dict[Duration, int] = {}
        for duration, count in (buckets or {}).items():
            _validate_bucket(duration, count)
            if count:
                data[duration] = count
        self._buckets = MappingProxyType(data)
        self._total = sum(data.values())

    @classmethod
    def from_durations(cls, durations: Iterable[Duration]) -> FrequencyTable:
        """Build a table by counting occurrences of each duration.

        Args:
            durations: Individual request durations in milliseconds.

        Returns:
            A FrequencyTable summarizing the durations.
        """
        return cls(Counter(durations))

    @property
    def total(self) -> int:
        """Total number of requests summarized by the table."""
        return self._total

    def merge(self, *others: Mapping[Duration, int]) -> FrequencyTable:
        """Return a new table with the counts of ``others`` added in.

        Args:
            others: Tables (or plain mappings) to fold into this one.

        Returns:
            A new FrequencyTable; neither input is modified.
        """
        merged: Counter[Duration] = Counter(self._buckets)
        for other in others:
            for duration, count in other.items():
                _validate_bucket(duration, count)
                merged[duration] += count
        return FrequencyTable(merged)

    def __getitem__(self, duration: Duration) -> int:
        return self._buckets[duration]

    def __iter__(self) -> Iterator[Duration]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"FrequencyTable({dict(sorted(self._buckets.items()))!r})"
