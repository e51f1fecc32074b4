"""Module describing the TLC trip datasets we know how to query."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .resolve import PartitionKey


@dataclass(frozen=True)
class TripColumns:
    """Names of the four columns a trip scan projects."""

    pickup: str
    dropoff: str
    distance: str
    fare: str

    def names(self) -> list[str]:
        return [self.pickup, self.dropoff, self.distance, self.fare]


class TripDataset(str, Enum):
    """Enumerate the available TLC trip datasets."""

    YELLOW = "yellow"
    GREEN = "green"

    @property
    def prefix(self) -> str:
        """Return the remote file name prefix (e.g., `yellow_tripdata`)."""
        return f"{self.value}_tripdata"

    @property
    def columns(self) -> TripColumns:
        return _COLUMNS[self]

    def file_name(self, key: PartitionKey) -> str:
        """Return the parquet file name for the given partition."""
        return f"{self.prefix}_{key.name}.parquet"


_COLUMNS = {
    TripDataset.YELLOW: TripColumns(
        pickup="tpep_pickup_datetime",
        dropoff="tpep_dropoff_datetime",
        distance="trip_distance",
        fare="fare_amount",
    ),
    TripDataset.GREEN: TripColumns(
        pickup="lpep_pickup_datetime",
        dropoff="lpep_dropoff_datetime",
        distance="trip_distance",
        fare="fare_amount",
    ),
}


def parse_dataset(value: str) -> TripDataset:
    """
    Parse a dataset name into a valid dataset enum.

    Raises:
        ValueError if the value is invalid.
    """
    try:
        return TripDataset(value)
    except ValueError as exc:
        valid = ", ".join(sorted(d.value for d in TripDataset))
        raise ValueError(f"invalid dataset value {value}; valid values: {valid}") from exc
