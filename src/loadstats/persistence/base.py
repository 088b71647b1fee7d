"""Base protocols for persistence layer."""

from collections.abc import AsyncIterator, Mapping
from typing import Protocol

from loadstats.aggregation.records import RequestRecord
from loadstats.aggregation.summary import RequestSummary, Summary
from loadstats.reporting.report import RequestReport


class RecordSource(Protocol):
    """Protocol for sources of raw request records."""

    def __aiter__(self) -> AsyncIterator[RequestRecord]:
        """Iterate over records in the order they are stored."""
        ...


class ReportWriter(Protocol):
    """Protocol for report output backends."""

    async def write(self, report: RequestReport) -> None:
        """Write a single report row."""
        ...

    async def write_batch(self, reports: list[RequestReport]) -> int:
        """Write multiple report rows. Returns count written."""
        ...

    async def flush(self) -> None:
        """Ensure all buffered data is persisted."""
        ...

    async def close(self) -> None:
        """Close the writer and release resources."""
        ...


class SummaryStore(Protocol):
    """Protocol for stores that accumulate summaries across reporting cycles."""

    async def save(self, summary: Mapping[str, RequestSummary]) -> None:
        """Add a summary's counts to the stored ones."""
        ...

    async def load(self) -> Summary:
        """Read back the accumulated summary."""
        ...

    async def close(self) -> None:
        """Close the store and release resources."""
        ...
