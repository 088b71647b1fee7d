"""loadstats: exact latency statistics for load-test results.

Request durations are folded into frequency tables (duration -> count) so that
millions of requests can be summarized with memory proportional to the number
of distinct durations, and average, median and percentiles are computed
directly from those tables.
"""

from loadstats.aggregation import (
    DurationPolicy,
    Outcome,
    RequestRecord,
    RequestSummary,
    Summary,
    SummaryBuilder,
    merge_summaries,
    summarize,
)
from loadstats.stats import (
    DurationStats,
    FrequencyTable,
    InvalidArgumentError,
    RankIndex,
    RankRange,
    average,
    build_rank_index,
    describe,
    kth_percentile,
    median,
    request_count,
    value_at_rank,
)

__version__ = "0.1.0"

__all__ = [
    "DurationPolicy",
    "DurationStats",
    "FrequencyTable",
    "InvalidArgumentError",
    "Outcome",
    "RankIndex",
    "RankRange",
    "RequestRecord",
    "RequestSummary",
    "Summary",
    "SummaryBuilder",
    "average",
    "build_rank_index",
    "describe",
    "kth_percentile",
    "median",
    "merge_summaries",
    "request_count",
    "summarize",
    "value_at_rank",
]
