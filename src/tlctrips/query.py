"""Module implementing the TripQuery type."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import TripsConfig
from .errors import ValidationError
from .generator import SyntheticTripSource
from .partition import (
    PartitionCacheManager,
    PartitionRemoteSource,
    TLCRemoteSource,
    TripDataset,
    resolve_partition,
    scan_trips,
)
from .source import TripSource
from .trips import Trip

log = logging.getLogger("query")


class TripQuery:
    """Component for answering trip queries using the monthly partitions."""

    def __init__(
        self,
        *,
        data_dir: str | Path | None = None,
        remote: PartitionRemoteSource | None = None,
        dataset: TripDataset = TripDataset.YELLOW,
    ):
        """
        Initialize the query with the cache configuration.

        Parameters:
            data_dir: Path to directory containing cached data files.
                If None, defaults to .tlctrips/ in current working directory.
            remote: Optional remote source for fetching missing partitions.
                If None, only already cached partitions can be queried.
            dataset: The trip dataset to query.
        """
        self.manager = PartitionCacheManager(data_dir, remote=remote, dataset=dataset)

    @classmethod
    def from_config(cls, config: TripsConfig) -> TripQuery:
        """Create a TripQuery fetching from the configured remote location."""
        return cls(
            data_dir=config.data_dir,
            remote=TLCRemoteSource(base_url=config.base_url, timeout=config.timeout),
            dataset=config.trip_dataset(),
        )

    @property
    def data_dir(self) -> Path:
        """Return the data directory used by the cache."""
        return self.manager.data_dir

    def get_trips(self, from_ms: int, n_results: int) -> list[Trip]:
        """
        Return up to n_results trips picked up at or after from_ms.

        We only read the partition containing from_ms: when it has fewer
        matching trips than requested, the result is shorter. Request an
        earlier from_ms to read an earlier partition.

        Raises:
            ValidationError if n_results is negative.
            ResolutionError if from_ms is out of range.
            FetchError, CacheIOError if the partition cannot be made local.
            SchemaError, ScanError if the partition cannot be scanned.
        """
        if n_results < 0:
            raise ValidationError(f"n_results must be non-negative, got {n_results}")

        # 1. resolve the partition
        key = resolve_partition(from_ms)
        log.info("querying %d trips from %d... partition %s", n_results, from_ms, key)

        # 2. make sure the partition file is on disk
        filepath = self.manager.ensure_local(key)

        # 3. scan the partition file
        trips = scan_trips(filepath, from_ms, n_results, dataset=self.manager.dataset)
        log.info("querying %d trips from %d... returned %d", n_results, from_ms, len(trips))
        return trips


def source_from_config(config: TripsConfig) -> TripSource:
    """Return the TripSource selected by the given configuration."""
    if config.synthetic:
        return SyntheticTripSource()
    return TripQuery.from_config(config)
