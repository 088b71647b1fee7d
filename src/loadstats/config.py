"""Report configuration with environment variable defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

from loadstats.aggregation.summary import DurationPolicy
from loadstats.stats.calculations import DEFAULT_PERCENTILES
from loadstats.stats.errors import InvalidArgumentError


def parse_percentiles(raw: str) -> tuple[float, ...]:
    """Parse a comma-separated percentile list such as ``"50,95,99.9"``.

    Whole numbers are kept as ints so report keys read ``p50`` rather than
    ``p50.0``.

    Raises:
        InvalidArgumentError: If an entry is not a number in ``(0, 100]``.
    """
    percentiles: list[float] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = float(part)
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid percentile {part!r}") from exc
        if not 0 < value <= 100:
            raise InvalidArgumentError(f"Percentile must be in (0, 100], got {part}")
        percentiles.append(int(value) if value.is_integer() else value)
    if not percentiles:
        raise InvalidArgumentError("At least one percentile is required")
    return tuple(percentiles)


def parse_policy(raw: str) -> DurationPolicy:
    """Parse a duration policy name (``all``, ``ok`` or ``ko``)."""
    try:
        return DurationPolicy(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(p.value for p in DurationPolicy)
        raise InvalidArgumentError(f"Unknown duration policy {raw!r} (expected {choices})") from exc


@dataclass(frozen=True, slots=True)
class ReportConfig:
    """Configuration for building reports.

    Attributes:
        percentiles: Percentiles reported for every request name
            (env: LOADSTATS_PERCENTILES, default: 50,90,95,99).
        duration_policy: Which outcomes contribute durations
            (env: LOADSTATS_DURATION_POLICY, default: all).
    """

    percentiles: tuple[float, ...] = DEFAULT_PERCENTILES
    duration_policy: DurationPolicy = DurationPolicy.ALL

    @classmethod
    def from_env(
        cls,
        percentiles: tuple[float, ...] | None = None,
        duration_policy: DurationPolicy | None = None,
    ) -> ReportConfig:
        """Build a configuration from LOADSTATS_* environment variables.

        Args:
            percentiles: Explicit percentiles. LOADSTATS_PERCENTILES is not
                read when given.
            duration_policy: Explicit policy. LOADSTATS_DURATION_POLICY is
                not read when given.
        """
        if percentiles is None:
            percentiles = parse_percentiles(
                os.getenv("LOADSTATS_PERCENTILES", ",".join(str(p) for p in DEFAULT_PERCENTILES))
            )
        if duration_policy is None:
            duration_policy = parse_policy(os.getenv("LOADSTATS_DURATION_POLICY", "all"))
        return cls(percentiles=percentiles, duration_policy=duration_policy)
