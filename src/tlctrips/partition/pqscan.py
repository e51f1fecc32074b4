"""Module to efficiently scan trips out of a partition parquet file."""

from __future__ import annotations

import logging
from pathlib import Path

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from ..errors import CacheIOError, ScanError, SchemaError, ValidationError
from ..trips import Trip
from .dataset import TripColumns, TripDataset
from .units import TimeUnit, lower_bound_in_unit, unit_to_datetime

log = logging.getLogger("partition/pqscan")


def scan_trips(
    filepath: Path,
    from_ms: int,
    limit: int,
    *,
    dataset: TripDataset = TripDataset.YELLOW,
) -> list[Trip]:
    """
    Return the first `limit` trips picked up at or after `from_ms`.

    The scan is efficient because filtering and projection happen while
    reading the physical parquet file from disk using PyArrow filter
    pushdown, so row groups that cannot match are skipped.

    Arguments:
        filepath: path to the parquet file
        from_ms: inclusive lower bound on the pickup time, epoch milliseconds
        limit: maximum number of trips to return
        dataset: the dataset describing the column names

    Returns:
        Trips ordered by ascending pickup time.

    Raises:
        ValidationError if limit is negative.
        SchemaError if a required column is missing or has the wrong type.
        ScanError if the file content is corrupt or unsupported.
        CacheIOError if the file is missing or unreadable.
    """
    if limit < 0:
        raise ValidationError(f"limit must be non-negative, got {limit}")

    columns = dataset.columns
    filepath = Path(filepath)

    # 1. make sure the schema has what we need before reading rows
    schema = _read_schema(filepath)
    time_type = _check_schema(schema, columns, filepath.name)
    if limit == 0:
        return []

    # 2. load in memory using the filters and cutting the columns
    unit = TimeUnit.of(time_type)
    bound = lower_bound_in_unit(from_ms, unit)
    if bound is None:
        log.debug("scanning %s from %d... after the column range", filepath.name, from_ms)
        return []
    lower = _timestamp_scalar(bound, time_type)
    table = _read_table(filepath, columns, _scan_filter(columns, lower))

    # 3. keep the earliest `limit` rows sorted by pickup time
    if table.num_rows > limit:
        indices = pc.select_k_unstable(
            table, k=limit, sort_keys=[(columns.pickup, "ascending")]
        )
        table = table.take(indices)
    table = table.sort_by([(columns.pickup, "ascending")])

    # 4. materialize the trips
    trips = _materialize(table, columns, unit)
    log.debug("scanning %s from %d... %d trips", filepath.name, from_ms, len(trips))
    return trips


def _read_schema(filepath: Path) -> pa.Schema:
    try:
        return pq.read_schema(filepath)
    except (FileNotFoundError, PermissionError) as exc:
        raise CacheIOError(f"cannot open partition file {filepath.name}", path=filepath) from exc
    except pa.ArrowException as exc:
        log.warning("reading schema of %s... failure: %s", filepath, exc)
        raise ScanError(f"corrupt or unreadable partition file {filepath.name}") from exc
    except OSError as exc:
        raise CacheIOError(f"cannot read partition file {filepath.name}", path=filepath) from exc


def _check_schema(schema: pa.Schema, columns: TripColumns, filename: str) -> pa.DataType:
    """Ensure the required columns exist with the right types and return the time type."""
    missing = [name for name in columns.names() if schema.get_field_index(name) < 0]
    if missing:
        raise SchemaError(f"partition file {filename} is missing columns: {', '.join(missing)}")

    for name in (columns.pickup, columns.dropoff):
        if not pa.types.is_timestamp(schema.field(name).type):
            raise SchemaError(
                f"column {name} in {filename} must be a timestamp, got {schema.field(name).type}"
            )
    pickup_type = schema.field(columns.pickup).type
    dropoff_type = schema.field(columns.dropoff).type
    if pickup_type != dropoff_type:
        raise SchemaError(
            f"columns {columns.pickup} and {columns.dropoff} in {filename} have "
            f"different types: {pickup_type} != {dropoff_type}"
        )

    for name in (columns.distance, columns.fare):
        if not pa.types.is_floating(schema.field(name).type):
            raise SchemaError(
                f"column {name} in {filename} must be floating point, got {schema.field(name).type}"
            )
    return pickup_type


def _timestamp_scalar(value: int, time_type: pa.DataType) -> pa.Scalar:
    """Build a scalar with exactly the column type so the comparison cannot mix units."""
    return pa.array([value], type=pa.int64()).cast(time_type)[0]


def _scan_filter(columns: TripColumns, lower: pa.Scalar) -> pc.Expression:
    pickup = pc.field(columns.pickup)
    return (
        (pickup >= lower)
        & (pc.field(columns.dropoff) >= pickup)
        & (pc.field(columns.distance) >= 0.0)
        & pc.field(columns.fare).is_valid()
    )


def _read_table(filepath: Path, columns: TripColumns, filters: pc.Expression) -> pa.Table:
    try:
        return pq.read_table(filepath, columns=columns.names(), filters=filters)
    except (FileNotFoundError, PermissionError) as exc:
        raise CacheIOError(f"cannot open partition file {filepath.name}", path=filepath) from exc
    except pa.ArrowException as exc:
        log.warning("scanning %s... failure: %s", filepath, exc)
        raise ScanError(f"corrupt or unreadable partition file {filepath.name}") from exc
    except OSError as exc:
        raise CacheIOError(f"cannot read partition file {filepath.name}", path=filepath) from exc


def _materialize(table: pa.Table, columns: TripColumns, unit: TimeUnit) -> list[Trip]:
    pickups = pc.cast(table[columns.pickup], pa.int64()).to_pylist()
    dropoffs = pc.cast(table[columns.dropoff], pa.int64()).to_pylist()
    distances = table[columns.distance].to_pylist()
    fares = table[columns.fare].to_pylist()
    return [
        Trip(
            pickup_time=unit_to_datetime(pickup, unit),
            dropoff_time=unit_to_datetime(dropoff, unit),
            distance=distance,
            fare=fare,
        )
        for pickup, dropoff, distance, fare in zip(pickups, dropoffs, distances, fares)
    ]
