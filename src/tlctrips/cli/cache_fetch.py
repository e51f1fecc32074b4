"""Cache fetch command."""

import time

import click

from ..partition import PartitionCacheManager, TLCRemoteSource, parse_partition
from .cache import cache
from .interceptor import Interceptor
from .logger import configure_logging
from .options import config_options, resolve_config


@cache.command()
@config_options
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
@click.argument("months", nargs=-1, required=True, metavar="YYYY-MM...")
def fetch(
    config_file: str | None,
    data_dir: str | None,
    verbose: bool,
    months: tuple[str, ...],
) -> None:
    """Download the partition files for the given months."""
    configure_logging(verbose)
    config = resolve_config(config_file, data_dir)

    try:
        keys = [parse_partition(month) for month in months]
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="MONTHS") from exc

    manager = PartitionCacheManager(
        config.data_dir,
        remote=TLCRemoteSource(base_url=config.base_url, timeout=config.timeout),
        dataset=config.trip_dataset(),
    )
    interceptor = Interceptor()
    t0 = time.monotonic()
    for key in keys:
        with interceptor:
            manager.ensure_local(key)
    elapsed = time.monotonic() - t0

    ok = len(keys) - interceptor.failures
    click.echo(f"Fetched {ok}/{len(keys)} partition(s) in {elapsed:.1f}s.")
    raise SystemExit(interceptor.exitcode())
