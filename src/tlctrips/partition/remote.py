"""Module containing the TLC CloudFront PartitionRemoteSource."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Final

import requests

from ..errors import CacheIOError, FetchError
from .cache import PartitionCacheEntry

DEFAULT_BASE_URL: Final[str] = "https://d37ci6vzurychx.cloudfront.net/trip-data"
"""Where the TLC publishes the monthly trip parquet files."""

DEFAULT_TIMEOUT: Final[float] = 300.0
"""Overall download deadline, in seconds."""

_CHUNK_SIZE: Final[int] = 1 << 16

log = logging.getLogger("partition/remote")


class TLCRemoteSource:
    """
    Remote source for partition files published by the NYC TLC.

    This class implements the cache.PartitionRemoteSource protocol.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def url_for(self, entry: PartitionCacheEntry) -> str:
        """Return the remote address of the given entry."""
        return f"{self.base_url}/{entry.dataset.file_name(entry.key)}"

    def fetch(self, entry: PartitionCacheEntry) -> None:
        """
        Download the entry and atomically store it at its canonical path.

        Raises:
            FetchError on transport failures, non-success statuses,
                and when the download exceeds the timeout.
            CacheIOError if we cannot write the local file.
        """
        url = self.url_for(entry)
        dest_path = entry.data_parquet_file_path()
        log.info("fetching %s from %s... start", entry, url)
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            # Operate inside a temporary directory in the destination directory so
            # `os.replace()` is atomic and we avoid cross-filesystem moves.
            with TemporaryDirectory(dir=dest_path.parent) as tmp_dir:
                tmp_file = Path(tmp_dir) / dest_path.name
                self._download(url, tmp_file)
                os.replace(tmp_file, dest_path)
        except FetchError as exc:
            log.warning("fetching %s from %s... failure: %s", entry, url, exc)
            raise
        except OSError as exc:
            log.warning("fetching %s from %s... failure: %s", entry, url, exc)
            raise CacheIOError(
                f"cannot write cached partition {dest_path.name}", path=dest_path
            ) from exc
        log.info("fetching %s from %s... ok", entry, url)

    def _download(self, url: str, tmp_file: Path) -> None:
        deadline = time.monotonic() + self.timeout
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                if not resp.ok:
                    raise FetchError(
                        f"cannot fetch {url}: HTTP {resp.status_code}",
                        url=url,
                        status=resp.status_code,
                    )
                with open(tmp_file, "wb") as filep:
                    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                        if time.monotonic() > deadline:
                            raise FetchError(
                                f"cannot fetch {url}: timed out after {self.timeout}s",
                                url=url,
                                status=resp.status_code,
                            )
                        filep.write(chunk)
        except requests.Timeout as exc:
            raise FetchError(f"cannot fetch {url}: timed out", url=url) from exc
        except requests.RequestException as exc:
            raise FetchError(f"cannot fetch {url}: {exc}", url=url) from exc
