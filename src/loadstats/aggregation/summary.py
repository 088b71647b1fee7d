"""Fold request records into per-request-name summaries.

A summary maps each request name to its success and failure counts and to a
frequency table of its durations::

    {"login": RequestSummary(ok_count=2, ko_count=1, durations={120: 2, 340: 1})}
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from loadstats.aggregation.records import Outcome, RequestRecord
from loadstats.stats.errors import InvalidArgumentError
from loadstats.stats.frequency import Duration, FrequencyTable


class DurationPolicy(str, Enum):
    """Which request outcomes contribute durations to the frequency table.

    Success and failure counts are tracked for every record regardless.

    Attributes:
        ALL: Record durations of every request.
        OK_ONLY: Record durations of successful requests only.
        KO_ONLY: Record durations of failed requests only.
    """

    ALL = "all"
    OK_ONLY = "ok"
    KO_ONLY = "ko"

    def accepts(self, outcome: Outcome) -> bool:
        """Check whether a request with ``outcome`` contributes its duration."""
        if self is DurationPolicy.ALL:
            return True
        return self.value == outcome.value


@dataclass(frozen=True, slots=True)
class RequestSummary:
    """Counts and durations for one request name.

    Attributes:
        ok_count: Number of successful requests.
        ko_count: Number of failed requests.
        durations: Frequency table of recorded durations.
    """

    ok_count: int = 0
    ko_count: int = 0
    durations: FrequencyTable = field(default_factory=FrequencyTable)

    @property
    def total_count(self) -> int:
        """Successful plus failed requests."""
        return self.ok_count + self.ko_count

    def merge(self, other: RequestSummary) -> RequestSummary:
        """Return a new summary with the counts and durations of both."""
        return RequestSummary(
            ok_count=self.ok_count + other.ok_count,
            ko_count=self.ko_count + other.ko_count,
            durations=self.durations.merge(other.durations),
        )


class Summary(Mapping[str, RequestSummary]):
    """Immutable mapping of request name to its RequestSummary."""

    __slots__ = ("_requests",)

    def __init__(self, requests: Mapping[str, RequestSummary] | None = None) -> None:
        self._requests = MappingProxyType(dict(requests or {}))

    def merge(self, other: Mapping[str, RequestSummary]) -> Summary:
        """Return a new summary combining both, merging shared request names."""
        merged = dict(self._requests)
        for name, request in other.items():
            merged[name] = merged[name].merge(request) if name in merged else request
        return Summary(merged)

    def __getitem__(self, name: str) -> RequestSummary:
        return self._requests[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __repr__(self) -> str:
        return f"Summary({dict(self._requests)!r})"


class SummaryBuilder:
    """Accumulates request records into a Summary.

    The builder is the only mutable piece of the aggregation step; ``build()``
    returns an immutable snapshot and the builder can keep folding records.

    Example:
        >>> builder = SummaryBuilder()
        >>> builder.add(RequestRecord(name="login", start=0, end=120, result=True))
        >>> builder.build()["login"].ok_count
        1
    """

    def __init__(self, policy: DurationPolicy = DurationPolicy.ALL) -> None:
        """Initialize the builder.

        Args:
            policy: Which outcomes contribute durations.
        """
        self._policy = policy
        self._ok: Counter[str] = Counter()
        self._ko: Counter[str] = Counter()
        self._durations: dict[str, Counter[Duration]] = {}
        self._record_count = 0

    @property
    def policy(self) -> DurationPolicy:
        return self._policy

    @property
    def record_count(self) -> int:
        """Number of records folded so far."""
        return self._record_count

    def add(self, record: RequestRecord) -> None:
        """Fold one record into the running counts.

        Raises:
            InvalidArgumentError: If the record's duration is not a
                non-negative integer. The builder is left unchanged.
        """
        duration = record.duration
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            raise InvalidArgumentError(
                f"Request {record.name!r} has invalid duration {duration!r}"
            )

        durations = self._durations.setdefault(record.name, Counter())
        if record.outcome is Outcome.OK:
            self._ok[record.name] += 1
        else:
            self._ko[record.name] += 1
        if self._policy.accepts(record.outcome):
            durations[duration] += 1
        self._record_count += 1

    def add_all(self, records: Iterable[RequestRecord]) -> int:
        """Fold many records. Returns the number added."""
        added = 0
        for record in records:
            self.add(record)
            added += 1
        return added

    def build(self) -> Summary:
        """Snapshot the accumulated counts as an immutable Summary."""
        return Summary(
            {
                name: RequestSummary(
                    ok_count=self._ok[name],
                    ko_count=self._ko[name],
                    durations=FrequencyTable(durations),
                )
                for name, durations in self._durations.items()
            }
        )


def summarize(
    records: Iterable[RequestRecord],
    policy: DurationPolicy = DurationPolicy.ALL,
) -> Summary:
    """Fold records into a Summary in one call.

    Args:
        records: Request records of a load run.
        policy: Which outcomes contribute durations.

    Returns:
        The per-request-name Summary.
    """
    builder = SummaryBuilder(policy)
    builder.add_all(records)
    return builder.build()


def merge_summaries(*summaries: Mapping[str, RequestSummary]) -> Summary:
    """Combine summaries from several reporting cycles or workers."""
    merged = Summary()
    for summary in summaries:
        merged = merged.merge(summary)
    return merged
