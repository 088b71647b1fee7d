"""Aggregation of raw request records into summaries."""

from loadstats.aggregation.records import Outcome, RequestRecord
from loadstats.aggregation.summary import (
    DurationPolicy,
    RequestSummary,
    Summary,
    SummaryBuilder,
    merge_summaries,
    summarize,
)

__all__ = [
    "DurationPolicy",
    "Outcome",
    "RequestRecord",
    "RequestSummary",
    "Summary",
    "SummaryBuilder",
    "merge_summaries",
    "summarize",
]
