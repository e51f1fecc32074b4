"""Shared pytest fixtures for tlctrips tests."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

YELLOW_COLUMNS = (
    "tpep_pickup_datetime",
    "tpep_dropoff_datetime",
    "trip_distance",
    "fare_amount",
)


def utc(*args: int) -> datetime:
    """Shorthand for building UTC datetimes."""
    return datetime(*args, tzinfo=timezone.utc)


def epoch_ms(value: datetime) -> int:
    """Return the epoch milliseconds of an aware datetime."""
    return int(value.timestamp() * 1000)


def trips_table(
    rows: list[tuple[datetime, datetime, float | None, float | None]],
    *,
    unit: str = "us",
    columns: tuple[str, str, str, str] = YELLOW_COLUMNS,
    extra: bool = True,
) -> pa.Table:
    """
    Build a table shaped like a TLC partition file.

    The timestamps are stored naive, like in the published files.
    """
    pickup, dropoff, distance, fare = columns
    data = {
        "VendorID": pa.array([1] * len(rows), type=pa.int32()),
        pickup: pa.array([r[0].replace(tzinfo=None) for r in rows], type=pa.timestamp(unit)),
        dropoff: pa.array([r[1].replace(tzinfo=None) for r in rows], type=pa.timestamp(unit)),
        distance: pa.array([r[2] for r in rows], type=pa.float64()),
        fare: pa.array([r[3] for r in rows], type=pa.float64()),
        "tip_amount": pa.array([1.0] * len(rows), type=pa.float64()),
    }
    if not extra:
        data.pop("VendorID")
        data.pop("tip_amount")
    return pa.table(data)


@pytest.fixture
def write_partition() -> Callable[..., Path]:
    """Return a helper writing a TLC-like parquet file at the given path."""

    def _write(path: Path, rows, *, row_group_size: int | None = None, **kwargs) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        pq.write_table(trips_table(rows, **kwargs), path, row_group_size=row_group_size)
        return path

    return _write


@pytest.fixture
def january_rows() -> list[tuple[datetime, datetime, float, float]]:
    """Five January 2024 trips, deliberately not sorted by pickup time."""
    return [
        (utc(2024, 1, 10, 8, 0, 0), utc(2024, 1, 10, 8, 20, 0), 3.2, 15.0),
        (utc(2024, 1, 1, 0, 5, 0), utc(2024, 1, 1, 0, 25, 0), 1.1, 7.5),
        (utc(2024, 1, 20, 12, 30, 0), utc(2024, 1, 20, 13, 0, 0), 8.4, 32.0),
        (utc(2024, 1, 5, 18, 45, 0), utc(2024, 1, 5, 19, 5, 0), 2.0, 0.0),
        (utc(2024, 1, 31, 23, 59, 59), utc(2024, 2, 1, 0, 15, 0), 5.5, -3.0),
    ]
