"""SQLite summary store using aiosqlite."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import aiosqlite

from loadstats.aggregation.summary import RequestSummary, Summary
from loadstats.persistence.base import SummaryStore
from loadstats.stats.frequency import FrequencyTable

logger = logging.getLogger(__name__)


@dataclass
class SqliteSummaryStoreConfig:
    """Configuration for SqliteSummaryStore.

    Attributes:
        db_path: Path to the SQLite database file.
        table_prefix: Prefix of the counts and buckets tables.
    """

    db_path: Path
    table_prefix: str = "loadstats"


class SqliteSummaryStore(SummaryStore):
    """Accumulates summaries in SQLite across reporting cycles.

    Two tables are kept: ``<prefix>_requests`` with ok/ko counts per request
    name and ``<prefix>_buckets`` with one row per (request name, duration).
    ``save`` adds counts into existing rows, so saving the summaries of two
    runs and loading yields their merge.

    Example:
        ```python
        async with SqliteSummaryStore(SqliteSummaryStoreConfig(Path("stats.db"))) as store:
            await store.save(summary)
            accumulated = await store.load()
        ```
    """

    def __init__(self, config: SqliteSummaryStoreConfig) -> None:
        self._config = config
        self._db: aiosqlite.Connection | None = None
        self._closed = False

    @property
    def _requests_table(self) -> str:
        return f"{self._config.table_prefix}_requests"

    @property
    def _buckets_table(self) -> str:
        return f"{self._config.table_prefix}_buckets"

    async def __aenter__(self) -> Self:
        await self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _open(self) -> None:
        """Open the SQLite database connection."""
        self._db = await aiosqlite.connect(
            self._config.db_path,
            isolation_level=None,
        )
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute("PRAGMA synchronous = NORMAL")
        await self._ensure_schema()

    async def _connection(self) -> aiosqlite.Connection:
        if self._closed:
            raise RuntimeError("Cannot use closed store")
        if self._db is None:
            await self._open()
        return self._db  # type: ignore[return-value]

    async def _ensure_schema(self) -> None:
        """Create the tables if they don't exist."""
        if self._db is None:
            raise RuntimeError("Database connection not open")

        await self._db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._requests_table} (
                name TEXT PRIMARY KEY,
                ok_count INTEGER NOT NULL DEFAULT 0,
                ko_count INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        await self._db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._buckets_table} (
                name TEXT NOT NULL,
                duration_ms INTEGER NOT NULL,
                count INTEGER NOT NULL CHECK (count > 0),
                PRIMARY KEY (name, duration_ms)
            )
            """
        )

    async def save(self, summary: Mapping[str, RequestSummary]) -> None:
        """Add the summary's counts to the stored ones in one transaction.

        Args:
            summary: Per-request-name summary to fold into the store.
        """
        db = await self._connection()

        await db.execute("BEGIN TRANSACTION")
        try:
            for name, request in summary.items():
                await db.execute(
                    f"""
                    INSERT INTO {self._requests_table} (name, ok_count, ko_count)
                    VALUES (?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET
                        ok_count = ok_count + excluded.ok_count,
                        ko_count = ko_count + excluded.ko_count
                    """,
                    (name, request.ok_count, request.ko_count),
                )
                await db.executemany(
                    f"""
                    INSERT INTO {self._buckets_table} (name, duration_ms, count)
                    VALUES (?, ?, ?)
                    ON CONFLICT(name, duration_ms) DO UPDATE SET
                        count = count + excluded.count
                    """,
                    [(name, duration, count) for duration, count in request.durations.items()],
                )
            await db.execute("COMMIT")
        except Exception:
            await db.execute("ROLLBACK")
            raise

        logger.info(
            json.dumps(
                {
                    "event": "summary_stored",
                    "db_path": str(self._config.db_path),
                    "request_names": len(summary),
                }
            )
        )

    async def load(self) -> Summary:
        """Read the accumulated summary back."""
        db = await self._connection()

        buckets: dict[str, dict[int, int]] = {}
        async with db.execute(
            f"SELECT name, duration_ms, count FROM {self._buckets_table}"
        ) as cursor:
            async for name, duration, count in cursor:
                buckets.setdefault(name, {})[duration] = count

        requests: dict[str, RequestSummary] = {}
        async with db.execute(
            f"SELECT name, ok_count, ko_count FROM {self._requests_table}"
        ) as cursor:
            async for name, ok_count, ko_count in cursor:
                requests[name] = RequestSummary(
                    ok_count=ok_count,
                    ko_count=ko_count,
                    durations=FrequencyTable(buckets.get(name, {})),
                )
        return Summary(requests)

    async def clear(self) -> None:
        """Delete every stored count."""
        db = await self._connection()
        await db.execute("BEGIN TRANSACTION")
        try:
            await db.execute(f"DELETE FROM {self._buckets_table}")
            await db.execute(f"DELETE FROM {self._requests_table}")
            await db.execute("COMMIT")
        except Exception:
            await db.execute("ROLLBACK")
            raise

    async def close(self) -> None:
        """Close the database connection. Safe to call twice."""
        if self._closed:
            return

        self._closed = True

        if self._db:
            await self._db.close()
            self._db = None
