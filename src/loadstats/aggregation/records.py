"""Raw request records produced by a load run."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loadstats.stats.errors import InvalidArgumentError
from loadstats.stats.frequency import Duration


class Outcome(str, Enum):
    """Outcome of a single request.

    Attributes:
        OK: The request succeeded.
        KO: The request failed.
    """

    OK = "ok"
    KO = "ko"


@dataclass(frozen=True, slots=True)
class RequestRecord:
    """One request observed during a load run.

    This dataclass is immutable (frozen=True) and uses slots for memory efficiency.

    Attributes:
        name: Name of the request (the scenario step it belongs to).
        start: Start time in milliseconds.
        end: End time in milliseconds.
        result: True if the request succeeded.
    """

    name: str
    start: int
    end: int
    result: bool

    @property
    def duration(self) -> Duration:
        """Elapsed time in milliseconds."""
        return self.end - self.start

    @property
    def outcome(self) -> Outcome:
        """OK or KO depending on ``result``."""
        return Outcome.OK if self.result else Outcome.KO

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RequestRecord:
        """Build a record from a ``{name, start, end, result}`` mapping.

        Args:
            data: Decoded record, e.g. one JSONL line.

        Returns:
            The RequestRecord.

        Raises:
            InvalidArgumentError: If a key is missing, the name is not a
                string, a time is not an integer, the result is not a boolean,
                or the request ends before it starts.
        """
        missing = [key for key in ("name", "start", "end", "result") if key not in data]
        if missing:
            raise InvalidArgumentError(f"Request record is missing {', '.join(missing)}")

        name, result = data["name"], data["result"]
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Request name must be a string, got {name!r}")
        if not isinstance(result, bool):
            raise InvalidArgumentError(f"Request result must be a boolean, got {result!r}")

        start, end = data["start"], data["end"]
        for label, value in (("start", start), ("end", end)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"Request {label} must be an integer, got {value!r}")
        if end < start:
            raise InvalidArgumentError(
                f"Request {name!r} ends before it starts ({end} < {start})"
            )

        return cls(name=name, start=start, end=end, result=result)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "start": self.start, "end": self.end, "result": self.result}
