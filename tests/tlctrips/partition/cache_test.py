"""Tests for the tlctrips.partition.cache module."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import Mock

import pytest
from filelock import BaseFileLock

from tlctrips.errors import FetchError
from tlctrips.partition.cache import (
    PartitionCacheEntry,
    PartitionCacheManager,
    data_dir_or_default,
)
from tlctrips.partition.dataset import TripDataset
from tlctrips.partition.resolve import PartitionKey

_KEY = PartitionKey(2024, 1)


class _FakeRemote:
    """Remote source writing fixed content and counting the fetches."""

    def __init__(self, content: bytes = b"PAR1 fake parquet", delay: float = 0.0):
        self.content = content
        self.delay = delay
        self.fetches: list[PartitionCacheEntry] = []
        self._mu = threading.Lock()

    def url_for(self, entry: PartitionCacheEntry) -> str:
        return f"https://example.com/{entry.dataset.file_name(entry.key)}"

    def fetch(self, entry: PartitionCacheEntry) -> None:
        with self._mu:
            self.fetches.append(entry)
        time.sleep(self.delay)
        path = entry.data_parquet_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.content)


class TestDataDirOrDefault:
    """Test for data_dir_or_default function."""

    def test_data_dir_or_default_with_none(self):
        assert data_dir_or_default(None) == Path.cwd() / ".tlctrips"

    def test_data_dir_or_default_with_string(self, tmp_path):
        test_path = str(tmp_path / "test")
        assert data_dir_or_default(test_path) == Path(test_path)

    def test_data_dir_or_default_with_path(self, tmp_path):
        assert data_dir_or_default(tmp_path) == tmp_path


class TestPartitionCacheEntry:
    """Test for PartitionCacheEntry class."""

    def _entry(self, data_dir: Path, dataset=TripDataset.YELLOW) -> PartitionCacheEntry:
        return PartitionCacheEntry(data_dir=data_dir, dataset=dataset, key=_KEY)

    def test_paths(self, tmp_path):
        entry = self._entry(tmp_path)
        assert entry.dir_path() == tmp_path / "cache" / "v1" / "2024-01"
        assert (
            entry.data_parquet_file_path()
            == tmp_path / "cache" / "v1" / "2024-01" / "yellow_tripdata_2024-01.parquet"
        )

    def test_paths_depend_on_dataset(self, tmp_path):
        entry = self._entry(tmp_path, dataset=TripDataset.GREEN)
        assert entry.data_parquet_file_path().name == "green_tripdata_2024-01.parquet"

    def test_same_key_same_path(self, tmp_path):
        assert (
            self._entry(tmp_path).data_parquet_file_path()
            == self._entry(tmp_path).data_parquet_file_path()
        )

    def test_lock_creates_filelock(self, tmp_path):
        entry = self._entry(tmp_path)
        lock = entry.lock()
        assert isinstance(lock, BaseFileLock)
        assert lock.lock_file == str(entry.dir_path() / ".lock")

    def test_exists_false_when_missing(self, tmp_path):
        assert not self._entry(tmp_path).exists()

    def test_exists_false_when_empty(self, tmp_path):
        entry = self._entry(tmp_path)
        entry.data_parquet_file_path().parent.mkdir(parents=True)
        entry.data_parquet_file_path().touch()
        assert not entry.exists()

    def test_exists_true_when_non_empty(self, tmp_path):
        entry = self._entry(tmp_path)
        entry.data_parquet_file_path().parent.mkdir(parents=True)
        entry.data_parquet_file_path().write_bytes(b"x")
        assert entry.exists()

    def test_str(self, tmp_path):
        assert str(self._entry(tmp_path)) == "yellow_tripdata/2024-01"


class TestPartitionCacheManager:
    """Test for PartitionCacheManager class."""

    def test_init_default_data_dir(self):
        manager = PartitionCacheManager()
        assert manager.data_dir == Path.cwd() / ".tlctrips"
        assert manager.dataset == TripDataset.YELLOW
        assert manager.remote is None

    def test_get_cache_entry_is_lazy(self, tmp_path):
        manager = PartitionCacheManager(data_dir=tmp_path)
        entry = manager.get_cache_entry(_KEY)
        assert entry.key == _KEY
        assert entry.data_dir == tmp_path
        assert not entry.exists()
        assert not (tmp_path / "cache").exists()

    def test_ensure_local_fetches_missing(self, tmp_path):
        remote = _FakeRemote()
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)

        path = manager.ensure_local(_KEY)

        assert path == manager.get_cache_entry(_KEY).data_parquet_file_path()
        assert path.read_bytes() == remote.content
        assert len(remote.fetches) == 1

    def test_ensure_local_fetches_at_most_once(self, tmp_path):
        remote = _FakeRemote()
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)

        first = manager.ensure_local(_KEY)
        second = manager.ensure_local(_KEY)

        assert first == second
        assert second.read_bytes() == remote.content
        assert len(remote.fetches) == 1

    def test_ensure_local_reuses_existing_without_network(self, tmp_path):
        remote = Mock()
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)
        path = manager.get_cache_entry(_KEY).data_parquet_file_path()
        path.parent.mkdir(parents=True)
        path.write_bytes(b"already here")

        assert manager.ensure_local(_KEY) == path
        assert path.read_bytes() == b"already here"
        remote.fetch.assert_not_called()

    def test_ensure_local_refetches_empty_file(self, tmp_path):
        remote = _FakeRemote()
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)
        path = manager.get_cache_entry(_KEY).data_parquet_file_path()
        path.parent.mkdir(parents=True)
        path.touch()

        manager.ensure_local(_KEY)

        assert len(remote.fetches) == 1
        assert path.read_bytes() == remote.content

    def test_ensure_local_without_remote_throws(self, tmp_path):
        manager = PartitionCacheManager(data_dir=tmp_path)
        with pytest.raises(FetchError, match="is not cached"):
            manager.ensure_local(_KEY)

    def test_ensure_local_propagates_fetch_error(self, tmp_path):
        remote = Mock()
        remote.fetch.side_effect = FetchError("boom", url="https://example.com/x", status=404)
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)

        with pytest.raises(FetchError) as excinfo:
            manager.ensure_local(_KEY)

        assert excinfo.value.status == 404
        assert not manager.get_cache_entry(_KEY).exists()

    def test_concurrent_ensure_local_fetches_once(self, tmp_path):
        """Concurrent queries for the same uncached month share one download."""
        remote = _FakeRemote(delay=0.2)
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)

        with ThreadPoolExecutor(max_workers=4) as pool:
            paths = list(pool.map(lambda _: manager.ensure_local(_KEY), range(4)))

        assert len(set(paths)) == 1
        assert paths[0].read_bytes() == remote.content
        assert len(remote.fetches) == 1

    def test_concurrent_ensure_local_different_keys(self, tmp_path):
        remote = _FakeRemote(delay=0.05)
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)
        keys = [PartitionKey(2024, month) for month in (1, 2, 3)]

        with ThreadPoolExecutor(max_workers=3) as pool:
            paths = list(pool.map(manager.ensure_local, keys))

        assert len(set(paths)) == 3
        assert sorted(entry.key for entry in remote.fetches) == keys

    def test_list_entries(self, tmp_path):
        remote = _FakeRemote()
        manager = PartitionCacheManager(data_dir=tmp_path, remote=remote)
        manager.ensure_local(PartitionKey(2024, 2))
        manager.ensure_local(PartitionKey(2023, 12))
        # noise that must be ignored
        (tmp_path / "cache" / "v1" / "not-a-month").mkdir()
        (tmp_path / "cache" / "v1" / "2024-03").mkdir()

        keys = [entry.key for entry in manager.list_entries()]

        assert keys == [PartitionKey(2023, 12), PartitionKey(2024, 2)]

    def test_list_entries_filters_dataset(self, tmp_path):
        PartitionCacheManager(data_dir=tmp_path, remote=_FakeRemote()).ensure_local(_KEY)
        green = PartitionCacheManager(data_dir=tmp_path, dataset=TripDataset.GREEN)
        assert green.list_entries() == []

    def test_list_entries_empty_dir(self, tmp_path):
        assert PartitionCacheManager(data_dir=tmp_path).list_entries() == []
