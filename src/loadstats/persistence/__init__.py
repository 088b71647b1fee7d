"""Record input, report output and summary storage."""

from loadstats.persistence.base import RecordSource, ReportWriter, SummaryStore
from loadstats.persistence.jsonl import (
    JsonlRecordReader,
    JsonlReportWriter,
    JsonlReportWriterConfig,
)
from loadstats.persistence.sqlite import SqliteSummaryStore, SqliteSummaryStoreConfig

__all__ = [
    "JsonlRecordReader",
    "JsonlReportWriter",
    "JsonlReportWriterConfig",
    "RecordSource",
    "ReportWriter",
    "SqliteSummaryStore",
    "SqliteSummaryStoreConfig",
    "SummaryStore",
]
