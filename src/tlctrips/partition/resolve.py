"""Module to map a query timestamp to its monthly partition."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

from .units import millis_to_datetime


@dataclass(frozen=True, order=True)
class PartitionKey:
    """
    Identifies a monthly partition of the trip dataset.

    Attributes:
        year: the UTC calendar year.
        month: the UTC calendar month (1-12).
    """

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be within 1..12, got {self.month}")

    @property
    def name(self) -> str:
        """Return the file-system friendly `YYYY-MM` name."""
        return f"{self.year:04d}-{self.month:02d}"

    def start_time(self) -> datetime:
        """Return the first instant of the month (included)."""
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    def end_time(self) -> datetime:
        """Return the first instant of the next month (excluded)."""
        return self.start_time() + relativedelta(months=1)

    def __str__(self) -> str:
        return self.name


def resolve_partition(from_ms: int) -> PartitionKey:
    """
    Return the partition containing the given epoch milliseconds.

    The mapping is computed in UTC, so timestamps in the same calendar
    month always resolve to the same key.

    Raises:
        ResolutionError if the timestamp is outside the datetime range.
    """
    instant = millis_to_datetime(from_ms)
    return PartitionKey(year=instant.year, month=instant.month)


def parse_partition(value: str) -> PartitionKey:
    """
    Parse a `YYYY-MM` string into a PartitionKey.

    Raises:
        ValueError if the value is not a valid month.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError as exc:
        raise ValueError(f"Invalid partition format: {value} (expected YYYY-MM)") from exc
    return PartitionKey(year=parsed.year, month=parsed.month)
