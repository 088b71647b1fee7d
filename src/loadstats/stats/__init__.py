"""Bucketed-frequency statistics engine."""

from loadstats.stats.calculations import (
    DEFAULT_PERCENTILES,
    DurationStats,
    average,
    describe,
    kth_percentile,
    median,
    request_count,
)
from loadstats.stats.errors import InvalidArgumentError
from loadstats.stats.frequency import Duration, FrequencyTable
from loadstats.stats.rank_index import RankIndex, RankRange, build_rank_index, value_at_rank

__all__ = [
    "DEFAULT_PERCENTILES",
    "Duration",
    "DurationStats",
    "FrequencyTable",
    "InvalidArgumentError",
    "RankIndex",
    "RankRange",
    "average",
    "build_rank_index",
    "describe",
    "kth_percentile",
    "median",
    "request_count",
    "value_at_rank",
]
