"""Per-request-name reports built from a Summary."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Any

from loadstats.aggregation.summary import RequestSummary
from loadstats.stats.calculations import DEFAULT_PERCENTILES, Statistic, describe

logger = logging.getLogger(__name__)


def percentile_label(k: float) -> str:
    """Report key for a percentile: ``p50``, ``p99.9``.

    The key spells out every significant digit of ``k`` so distinct
    percentiles never share a key.
    """
    if isinstance(k, Fraction):
        value = Decimal(k.numerator) / Decimal(k.denominator)
    elif isinstance(k, float):
        value = Decimal(repr(k))
    else:
        value = Decimal(k)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"p{text}"


@dataclass(frozen=True, slots=True)
class RequestReport:
    """Statistics reported for one request name.

    Attributes:
        name: Request name.
        ok_count: Number of successful requests.
        ko_count: Number of failed requests.
        count: Number of recorded durations.
        min_ms: Fastest recorded duration.
        max_ms: Slowest recorded duration.
        average_ms: Mean duration.
        median_ms: Median duration.
        percentiles_ms: Percentile label (``p95``) -> duration.
    """

    name: str
    ok_count: int
    ko_count: int
    count: int
    min_ms: int | None
    max_ms: int | None
    average_ms: float | None
    median_ms: Statistic
    percentiles_ms: dict[str, Statistic] = field(default_factory=dict)

    @classmethod
    def from_summary(
        cls,
        name: str,
        request: RequestSummary,
        percentiles: Iterable[float] = DEFAULT_PERCENTILES,
    ) -> RequestReport:
        stats = describe(request.durations, percentiles)
        return cls(
            name=name,
            ok_count=request.ok_count,
            ko_count=request.ko_count,
            count=stats.count,
            min_ms=stats.min,
            max_ms=stats.max,
            average_ms=stats.average,
            median_ms=stats.median,
            percentiles_ms={percentile_label(k): v for k, v in stats.percentiles.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "ok_count": self.ok_count,
            "ko_count": self.ko_count,
            "count": self.count,
            "min_ms": self.min_ms,
            "max_ms": self.max_ms,
            "average_ms": self.average_ms,
            "median_ms": self.median_ms,
            **self.percentiles_ms,
        }


def build_report(
    summary: Mapping[str, RequestSummary],
    percentiles: Iterable[float] = DEFAULT_PERCENTILES,
) -> list[RequestReport]:
    """Compute a report row for every request name, sorted by name.

    Args:
        summary: Per-request-name summary.
        percentiles: Percentiles to include, each in ``(0, 100]``.

    Returns:
        One RequestReport per request name.

    Raises:
        InvalidArgumentError: If a percentile is out of range.
    """
    percentiles = tuple(percentiles)
    reports = [
        RequestReport.from_summary(name, summary[name], percentiles) for name in sorted(summary)
    ]
    logger.info(
        json.dumps(
            {
                "event": "report_built",
                "request_names": len(reports),
                "requests": sum(r.ok_count + r.ko_count for r in reports),
                "percentiles": [percentile_label(k) for k in percentiles],
            }
        )
    )
    return reports


def _format_cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def render_table(reports: Iterable[RequestReport]) -> str:
    """Render reports as a fixed-width text table; absent values show as ``-``."""
    rows = [r.to_dict() for r in reports]
    if not rows:
        return "No requests recorded."

    headers = list(rows[0].keys())
    cells = [[_format_cell(row.get(h)) for h in headers] for row in rows]
    widths = [max(len(h), *(len(c[i]) for c in cells)) for i, h in enumerate(headers)]

    lines = [
        "  ".join(h.ljust(w) if i == 0 else h.rjust(w) for i, (h, w) in enumerate(zip(headers, widths))),
        "  ".join("-" * w for w in widths),
    ]
    for row in cells:
        lines.append(
            "  ".join(c.ljust(w) if i == 0 else c.rjust(w) for i, (c, w) in enumerate(zip(row, widths)))
        )
    return "\n".join(lines)
