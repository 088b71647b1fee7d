"""JSONL record input and report output with async file I/O."""

import json
import logging
import os
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import aiofiles

from loadstats.aggregation.records import RequestRecord
from loadstats.persistence.base import RecordSource, ReportWriter
from loadstats.reporting.report import RequestReport
from loadstats.stats.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class JsonlRecordReader(RecordSource):
    """Async reader of ``{name, start, end, result}`` records, one per line.

    Blank lines are skipped. A line that is not valid UTF-8, not valid JSON or
    not a valid record raises InvalidArgumentError naming the file and line
    number.

    Example:
        ```python
        builder = SummaryBuilder()
        async for record in JsonlRecordReader(Path("records.jsonl")):
            builder.add(record)
        ```
    """

    def __init__(self, file_path: Path) -> None:
        """Initialize the reader.

        Args:
            file_path: Path to the JSONL input file.
        """
        self._file_path = Path(file_path)
        self._records_read = 0

    @property
    def records_read(self) -> int:
        """Number of records yielded so far."""
        return self._records_read

    async def __aiter__(self) -> AsyncIterator[RequestRecord]:
        async with aiofiles.open(self._file_path, mode="rb") as f:
            line_number = 0
            async for raw in f:
                line_number += 1
                line = self._decode(raw, line_number)
                if not line.strip():
                    continue
                record = self._parse(line, line_number)
                self._records_read += 1
                yield record

        logger.info(
            json.dumps(
                {
                    "event": "records_read",
                    "file": str(self._file_path),
                    "records": self._records_read,
                }
            )
        )

    def _decode(self, raw: bytes, line_number: int) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidArgumentError(
                f"{self._file_path}:{line_number}: invalid UTF-8 ({exc.reason})"
            ) from exc

    def _parse(self, line: str, line_number: int) -> RequestRecord:
        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(
                f"{self._file_path}:{line_number}: invalid JSON ({exc.msg})"
            ) from exc
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"{self._file_path}:{line_number}: expected a JSON object")
        try:
            return RequestRecord.from_dict(data)
        except InvalidArgumentError as exc:
            raise InvalidArgumentError(f"{self._file_path}:{line_number}: {exc}") from exc


@dataclass
class JsonlReportWriterConfig:
    """Configuration for JsonlReportWriter.

    Attributes:
        file_path: Path to the JSONL output file.
        buffer_size: Number of report rows to buffer before auto-flush.
    """

    file_path: Path
    buffer_size: int = 100


class JsonlReportWriter(ReportWriter):
    """JSONL report writer with buffered async writes.

    Each RequestReport becomes one JSON line (see ``RequestReport.to_dict``).
    Rows are buffered in memory and flushed when the buffer reaches
    `buffer_size` rows, on explicit flush, or on close.

    Example:
        ```python
        async with JsonlReportWriter(JsonlReportWriterConfig(Path("report.jsonl"))) as writer:
            await writer.write_batch(build_report(summary))
        ```
    """

    def __init__(self, config: JsonlReportWriterConfig) -> None:
        self._config = config
        self._buffer: list[str] = []
        self._file: Any = None
        self._closed = False
        self._file_descriptor: int | None = None

    async def __aenter__(self) -> Self:
        await self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _open(self) -> None:
        """Open the output file for writing."""
        self._file = await aiofiles.open(
            self._config.file_path,
            mode="w",
            encoding="utf-8",
            newline="\n",
        )
        self._file_descriptor = self._file.fileno()

    async def write(self, report: RequestReport) -> None:
        """Buffer one report row, flushing when the buffer is full.

        Args:
            report: Report row to write.

        Raises:
            RuntimeError: If the writer has been closed.
        """
        if self._closed:
            raise RuntimeError("Cannot write to closed writer")

        if self._file is None:
            await self._open()

        self._buffer.append(json.dumps(report.to_dict(), ensure_ascii=False))

        if len(self._buffer) >= self._config.buffer_size:
            await self.flush()

    async def write_batch(self, reports: list[RequestReport]) -> int:
        """Write multiple report rows.

        Returns:
            Number of rows written.
        """
        if self._closed:
            raise RuntimeError("Cannot write to closed writer")

        for report in reports:
            await self.write(report)

        return len(reports)

    async def flush(self) -> None:
        """Write buffered rows to disk and fsync."""
        if not self._file or not self._buffer:
            return

        await self._file.write("".join(line + "\n" for line in self._buffer))
        await self._file.flush()
        if self._file_descriptor is not None:
            os.fsync(self._file_descriptor)

        self._buffer.clear()

    async def close(self) -> None:
        """Flush remaining rows and close the file. Safe to call twice."""
        if self._closed:
            return

        await self.flush()

        self._closed = True

        if self._file:
            await self._file.close()
            self._file = None
            self._file_descriptor = None
