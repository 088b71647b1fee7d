"""Command line entry point: summarize a JSONL file of request records.

Usage:
    loadstats RECORDS [--percentiles LIST] [--policy all|ok|ko]
                      [--output FILE] [--store FILE] [--verbose]

Options:
    --percentiles LIST  Comma-separated percentiles (default: $LOADSTATS_PERCENTILES or 50,90,95,99)
    --policy NAME       Outcomes whose durations are recorded (default: $LOADSTATS_DURATION_POLICY or all)
    --output FILE       Write the report as JSONL
    --store FILE        Merge the summary into a SQLite store and report the accumulated totals
    --verbose, -v       Log progress to stderr
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from loadstats.aggregation.summary import Summary, SummaryBuilder
from loadstats.config import ReportConfig, parse_percentiles, parse_policy
from loadstats.persistence.jsonl import (
    JsonlRecordReader,
    JsonlReportWriter,
    JsonlReportWriterConfig,
)
from loadstats.persistence.sqlite import SqliteSummaryStore, SqliteSummaryStoreConfig
from loadstats.reporting.report import RequestReport, build_report, render_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loadstats",
        description="Summarize load-test request records into latency statistics",
    )
    parser.add_argument("records", type=Path, help="JSONL file of {name, start, end, result} records")
    parser.add_argument(
        "--percentiles",
        type=str,
        help="Comma-separated percentiles to report (default: 50,90,95,99)",
    )
    parser.add_argument(
        "--policy",
        type=str,
        help="Record durations of all, ok or ko requests (default: all)",
    )
    parser.add_argument("--output", type=Path, help="Write the report as JSONL to this file")
    parser.add_argument("--store", type=Path, help="SQLite file accumulating summaries across runs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


async def summarize_file(records_path: Path, config: ReportConfig) -> Summary:
    """Fold every record of a JSONL file into a Summary."""
    builder = SummaryBuilder(config.duration_policy)
    async for record in JsonlRecordReader(records_path):
        builder.add(record)
    return builder.build()


async def run(
    records_path: Path,
    config: ReportConfig,
    output_path: Path | None = None,
    store_path: Path | None = None,
) -> list[RequestReport]:
    """Summarize records, optionally persist, and return the report rows.

    Args:
        records_path: JSONL input file.
        config: Percentiles and duration policy.
        output_path: Optional JSONL report output.
        store_path: Optional SQLite store; when given, the report covers
            everything accumulated in the store.

    Returns:
        Report rows sorted by request name.
    """
    summary = await summarize_file(records_path, config)

    if store_path is not None:
        async with SqliteSummaryStore(SqliteSummaryStoreConfig(db_path=store_path)) as store:
            await store.save(summary)
            summary = await store.load()

    reports = build_report(summary, config.percentiles)

    if output_path is not None:
        async with JsonlReportWriter(JsonlReportWriterConfig(file_path=output_path)) as writer:
            await writer.write_batch(reports)

    return reports


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = ReportConfig.from_env(
            percentiles=parse_percentiles(args.percentiles) if args.percentiles else None,
            duration_policy=parse_policy(args.policy) if args.policy else None,
        )

        reports = asyncio.run(run(args.records, config, args.output, args.store))
    except Exception as e:
        logger.debug("loadstats failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render_table(reports))
    if args.output is not None:
        print(f"Report saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
