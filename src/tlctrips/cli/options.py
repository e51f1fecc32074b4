"""Options shared by the tlctrips subcommands."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from ..config import TripsConfig, load_config
from ..partition.cache import data_dir_or_default

DEFAULT_CONFIG_FILENAME = "tlctrips.yaml"


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorate a command with the `--config` and `--dir` options."""
    func = click.option(
        "-c",
        "--config",
        "config_file",
        default=None,
        metavar="FILE",
        help=f"Path to YAML config file (default: <dir>/{DEFAULT_CONFIG_FILENAME})",
    )(func)
    func = click.option(
        "-d", "--dir", "data_dir", default=None, help="Data directory (default: .tlctrips)"
    )(func)
    return func


def resolve_config(
    config_file: str | None,
    data_dir: str | None,
    **overrides: Any,
) -> TripsConfig:
    """
    Load the configuration and apply the command line overrides.

    The config file defaults to `<dir>/tlctrips.yaml` and may be absent.
    Overrides whose value is None are ignored.
    """
    if config_file is not None:
        config_path = Path(config_file)
        if not config_path.exists():
            raise click.ClickException(f"Config file not found: {config_path}")
    else:
        config_path = data_dir_or_default(data_dir) / DEFAULT_CONFIG_FILENAME

    try:
        config = load_config(config_path)
        if data_dir is not None:
            overrides["data_dir"] = data_dir
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(config, **changes)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
