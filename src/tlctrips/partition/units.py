"""Module to convert between epoch milliseconds and parquet timestamp units."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

import pyarrow as pa

from ..errors import ResolutionError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class TimeUnit(str, Enum):
    """Enumerate the resolutions of a parquet timestamp column."""

    SECOND = "s"
    MILLI = "ms"
    MICRO = "us"
    NANO = "ns"

    @property
    def per_second(self) -> int:
        """Number of ticks of this unit in one second."""
        return _PER_SECOND[self]

    @classmethod
    def of(cls, arrow_type: pa.DataType) -> TimeUnit:
        """
        Return the unit of a PyArrow timestamp type.

        Raises:
            TypeError if the type is not a timestamp.
        """
        if not pa.types.is_timestamp(arrow_type):
            raise TypeError(f"not a timestamp type: {arrow_type}")
        return cls(arrow_type.unit)


_PER_SECOND = {
    TimeUnit.SECOND: 1,
    TimeUnit.MILLI: 1_000,
    TimeUnit.MICRO: 1_000_000,
    TimeUnit.NANO: 1_000_000_000,
}


def millis_to_unit(from_ms: int, unit: TimeUnit) -> int:
    """
    Convert a lower bound in epoch milliseconds to the given unit.

    When the unit is coarser than milliseconds we round up, so that
    `column >= result` selects exactly the instants `>= from_ms`.
    """
    per_second = unit.per_second
    if per_second >= 1_000:
        return from_ms * (per_second // 1_000)
    divisor = 1_000 // per_second
    return -(-from_ms // divisor)


def lower_bound_in_unit(from_ms: int, unit: TimeUnit) -> int | None:
    """
    Convert a lower bound in epoch milliseconds to a column value of the given unit.

    Timestamp columns hold int64 values. Returns None when the bound is
    after the largest representable instant, so nothing can match, and
    clamps to the smallest value when the bound is before it.
    """
    value = millis_to_unit(from_ms, unit)
    if value > INT64_MAX:
        return None
    return max(value, INT64_MIN)


def unit_to_datetime(value: int, unit: TimeUnit) -> datetime:
    """
    Convert a raw timestamp column value to a UTC-aware datetime.

    Nanoseconds are floored to microseconds, the datetime resolution.
    """
    micros = value * 1_000_000 // unit.per_second
    try:
        return EPOCH + timedelta(microseconds=micros)
    except OverflowError as exc:
        raise ResolutionError(f"timestamp out of range: {value}{unit.value}") from exc


def millis_to_datetime(value_ms: int) -> datetime:
    """
    Convert epoch milliseconds to a UTC-aware datetime.

    Raises:
        ResolutionError if the instant is outside the datetime range.
    """
    try:
        return EPOCH + timedelta(milliseconds=value_ms)
    except OverflowError as exc:
        raise ResolutionError(f"timestamp out of range: {value_ms}ms") from exc
