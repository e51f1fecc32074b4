"""Package for resolving, caching and scanning monthly trip partitions.

The `resolve_partition` function maps a query timestamp to the
`PartitionKey` of the month containing it.

The `PartitionCacheManager` class ensures the parquet file backing a
partition is available locally, fetching it through a remote source
(`TLCRemoteSource` by default) when missing.

The `scan_trips` function efficiently reads, filters, sorts and limits
the trips stored inside a partition parquet file.

Remote Source Support
---------------------

The remote source is implemented as a Protocol (see
`cache.PartitionRemoteSource`) requiring `url_for(entry)` and
`fetch(entry)`. The TLC publishes one file per month and dataset at:

    https://d37ci6vzurychx.cloudfront.net/trip-data/{dataset}_tripdata_{YYYY-MM}.parquet

Lookup order:
1. Local disk cache (fast, free)
2. Remote source (slow, done at most once per partition and machine)

Data Directory Convention
-------------------------

If a data directory is specified, we use it. Otherwise, we use `.tlctrips`
in the current directory. This is similar to git, that uses `.git`.

On-Disk Format
--------------

We store files named after the following pattern:

    $datadir/cache/v1/{YYYY-MM}/{dataset}_tripdata_{YYYY-MM}.parquet
    $datadir/cache/v1/{YYYY-MM}/.lock

The `.lock` file serializes fetches of the same partition, across threads
and processes, so at most one download per partition runs at a time.

Downloads are written into a temporary directory beside the final file and
then moved in place with `os.replace`, so a file under the canonical name is
always complete. A non-empty file is trusted as-is: we never revalidate its
content and we never delete it.

Timestamp Units
---------------

TLC files store pickup and dropoff times as parquet timestamps whose unit
varies across the years (microseconds or nanoseconds). Queries express the
lower bound in epoch milliseconds. The `units` module converts the bound into
the column unit before building the filter, and converts raw column values
back into UTC-aware datetimes.
"""

from .cache import PartitionCacheEntry, PartitionCacheManager, PartitionRemoteSource
from .dataset import TripDataset, parse_dataset
from .pqscan import scan_trips
from .remote import DEFAULT_BASE_URL, TLCRemoteSource
from .resolve import PartitionKey, parse_partition, resolve_partition

__all__ = [
    "DEFAULT_BASE_URL",
    "PartitionCacheEntry",
    "PartitionCacheManager",
    "PartitionKey",
    "PartitionRemoteSource",
    "TLCRemoteSource",
    "TripDataset",
    "parse_dataset",
    "parse_partition",
    "resolve_partition",
    "scan_trips",
]
