"""Cache status command."""

import click
from rich.console import Console
from rich.table import Table

from ..partition import PartitionCacheManager
from .cache import cache
from .options import config_options, resolve_config


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


@cache.command()
@config_options
def status(config_file: str | None, data_dir: str | None) -> None:
    """Show the partitions available in the local cache."""
    config = resolve_config(config_file, data_dir)
    manager = PartitionCacheManager(config.data_dir, dataset=config.trip_dataset())
    entries = manager.list_entries()

    if not entries:
        click.echo("No cached partitions.")
        return

    table = Table(title=f"Cached {config.dataset} partitions in {manager.data_dir}")
    table.add_column("Partition")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for entry in entries:
        path = entry.data_parquet_file_path()
        table.add_row(entry.key.name, path.name, _format_size(path.stat().st_size))
    Console().print(table)
