"""NYC TLC taxi trips query library.

This library answers "N trips at or after T" queries over the monthly
parquet files published by the NYC Taxi & Limousine Commission, caching
each month locally the first time it is needed.
"""

from importlib.metadata import PackageNotFoundError, version

from .config import TripsConfig, load_config
from .errors import (
    CacheIOError,
    FetchError,
    ResolutionError,
    ScanError,
    SchemaError,
    TripsError,
    ValidationError,
)
from .generator import SyntheticTripSource
from .partition import (
    PartitionCacheManager,
    PartitionKey,
    TLCRemoteSource,
    TripDataset,
    resolve_partition,
    scan_trips,
)
from .query import TripQuery, source_from_config
from .source import TripSource
from .trips import Trip

try:
    __version__ = version("tlctrips")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    __version__ = "0.0.0"

__all__ = [
    "CacheIOError",
    "FetchError",
    "PartitionCacheManager",
    "PartitionKey",
    "ResolutionError",
    "ScanError",
    "SchemaError",
    "SyntheticTripSource",
    "TLCRemoteSource",
    "Trip",
    "TripDataset",
    "TripQuery",
    "TripSource",
    "TripsConfig",
    "TripsError",
    "ValidationError",
    "load_config",
    "resolve_partition",
    "scan_trips",
    "source_from_config",
    "__version__",
]
