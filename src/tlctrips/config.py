"""Module to load the tlctrips configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import dacite
import yaml

from .partition.dataset import TripDataset, parse_dataset
from .partition.remote import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


@dataclass(frozen=True, kw_only=True)
class TripsConfig:
    """
    Configuration shared by the API server and the CLI.

    Attributes:
        data_dir: directory containing the cache (None means `.tlctrips`).
        base_url: remote location publishing the partition files.
        dataset: the trip dataset to query (`yellow` or `green`).
        timeout: overall download deadline in seconds.
        synthetic: serve synthetic trips instead of the real dataset.
        host: address the API server binds to.
        port: port the API server listens on.
    """

    data_dir: str | None = None
    base_url: str = DEFAULT_BASE_URL
    dataset: str = TripDataset.YELLOW.value
    timeout: float = DEFAULT_TIMEOUT
    synthetic: bool = False
    host: str = "127.0.0.1"
    port: int = 8080

    def __post_init__(self):
        parse_dataset(self.dataset)
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def trip_dataset(self) -> TripDataset:
        return parse_dataset(self.dataset)


def load_config(config_path: Path | None) -> TripsConfig:
    """
    Load the configuration from a YAML file.

    A None path or a missing file yields the default configuration.

    Raises:
        ValueError if the file is not valid YAML or has invalid fields.
    """
    if config_path is None or not config_path.exists():
        return TripsConfig()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config in {config_path} must be a mapping.")

    try:
        return dacite.from_dict(
            TripsConfig,
            data,
            config=dacite.Config(strict=True, type_hooks={float: float}),
        )
    except (dacite.DaciteError, TypeError) as exc:
        raise ValueError(f"Invalid config in {config_path}: {exc}") from exc
