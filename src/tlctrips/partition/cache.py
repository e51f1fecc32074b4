"""Module to manage the on-disk cache of partition files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from filelock import BaseFileLock, FileLock

from ..errors import FetchError
from .dataset import TripDataset
from .resolve import PartitionKey, parse_partition

# Cache file names
PARTITION_CACHE_DOTLOCK_FILENAME: Final[str] = ".lock"

log = logging.getLogger("partition/cache")


@dataclass(frozen=True, kw_only=True)
class PartitionCacheEntry:
    """
    Reference to a cached partition file.

    Attributes:
        data_dir: the Path that points to the data dir
        dataset: the trip dataset the partition belongs to
        key: the partition key
    """

    data_dir: Path
    dataset: TripDataset
    key: PartitionKey

    def dir_path(self) -> Path:
        """Returns the directory path where to write files."""
        return self.data_dir / "cache" / "v1" / self.key.name

    def data_parquet_file_path(self) -> Path:
        """Returns the path to the partition parquet file."""
        return self.dir_path() / self.dataset.file_name(self.key)

    def lock(self) -> BaseFileLock:
        """Return a FileLock locking the entry."""
        lock_file_path = self.dir_path() / PARTITION_CACHE_DOTLOCK_FILENAME
        lock_file_path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(lock_file_path)

    def exists(self) -> bool:
        """Return True if the parquet file exists and is not empty."""
        path = self.data_parquet_file_path()
        return path.is_file() and path.stat().st_size > 0

    def __str__(self) -> str:
        return f"{self.dataset.prefix}/{self.key.name}"


class PartitionRemoteSource(Protocol):
    """
    Represent the possibility of fetching a partition file from a
    remote location (e.g. the TLC CloudFront distribution).

    Methods:
        url_for: return the remote address of the entry.
        fetch: download the entry and store it at its canonical path,
            raising FetchError on failure.
    """

    def url_for(self, entry: PartitionCacheEntry) -> str: ...

    def fetch(self, entry: PartitionCacheEntry) -> None: ...


class PartitionCacheManager:
    """Manages the local cache of partition files."""

    def __init__(
        self,
        data_dir: str | Path | None = None,
        remote: PartitionRemoteSource | None = None,
        dataset: TripDataset = TripDataset.YELLOW,
    ):
        """
        Initialize cache with data directory path.

        Parameters:
            data_dir: Path to directory containing cached data files.
                If None, defaults to .tlctrips/ in current working directory.
            remote: Optional remote source for fetching missing partitions.
            dataset: The trip dataset whose partitions we cache.
        """
        self.data_dir = data_dir_or_default(data_dir)
        self.remote = remote
        self.dataset = dataset

    def get_cache_entry(self, key: PartitionKey) -> PartitionCacheEntry:
        """
        Get the cache entry for the given partition.

        The entry is lazy and may not exist on disk until you
        call `ensure_local`.
        """
        return PartitionCacheEntry(data_dir=self.data_dir, dataset=self.dataset, key=key)

    def ensure_local(self, key: PartitionKey) -> Path:
        """
        Return the path of the cached partition file, fetching it if needed.

        An existing non-empty file is returned without touching the network
        and without validating its content. Otherwise we fetch the file while
        holding the entry lock, so at most one fetch per partition runs at
        any given time on this machine.

        Raises:
            FetchError if the file is missing and cannot be downloaded.
            CacheIOError if the file cannot be written.
        """
        entry = self.get_cache_entry(key)
        if entry.exists():
            log.info("fetching %s... skipped (cached)", entry)
            return entry.data_parquet_file_path()

        with entry.lock():
            # Someone else may have fetched it while we were waiting.
            if entry.exists():
                log.info("fetching %s... skipped (fetched concurrently)", entry)
                return entry.data_parquet_file_path()

            if self.remote is None:
                raise FetchError(f"partition {entry} is not cached", url="")

            self.remote.fetch(entry)

        return entry.data_parquet_file_path()

    def list_entries(self) -> list[PartitionCacheEntry]:
        """Return the entries of the configured dataset present on disk."""
        cache_dir = self.data_dir / "cache" / "v1"
        if not cache_dir.exists():
            return []
        entries: list[PartitionCacheEntry] = []
        for child in sorted(cache_dir.iterdir()):
            if not child.is_dir():
                continue
            try:
                key = parse_partition(child.name)
            except ValueError:
                continue
            entry = self.get_cache_entry(key)
            if entry.exists():
                entries.append(entry)
        return entries


def data_dir_or_default(data_dir: str | Path | None) -> Path:
    """
    Return data_dir as a Path if not empty. Otherwise return the
    default value for the data_dir (i.e., `./.tlctrips` like git).
    """
    return Path.cwd() / ".tlctrips" if data_dir is None else Path(data_dir)
