"""Query command."""

import json

import click
from rich.console import Console
from rich.table import Table

from ..errors import TripsError
from ..query import source_from_config
from ..trips import format_timestamp
from . import cli
from .logger import configure_logging
from .options import config_options, resolve_config


@cli.command()
@config_options
@click.option(
    "--from-ms", "from_ms", type=int, required=True, help="Epoch milliseconds (inclusive)."
)
@click.option("-n", "--n-results", "n_results", type=int, default=10, show_default=True)
@click.option("--synthetic", is_flag=True, default=False, help="Use synthetic trips.")
@click.option(
    "--json", "as_json", is_flag=True, default=False, help="Print JSON instead of a table."
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
def query(
    config_file: str | None,
    data_dir: str | None,
    from_ms: int,
    n_results: int,
    synthetic: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Print the first trips picked up at or after FROM_MS."""
    configure_logging(verbose)
    config = resolve_config(config_file, data_dir, synthetic=True if synthetic else None)
    source = source_from_config(config)

    try:
        trips = source.get_trips(from_ms, n_results)
    except TripsError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps({"trips": [trip.to_dict() for trip in trips]}, indent=2))
        return

    table = Table(title=f"{len(trips)} trip(s)")
    table.add_column("Pickup")
    table.add_column("Dropoff")
    table.add_column("Distance", justify="right")
    table.add_column("Fare", justify="right")
    for trip in trips:
        table.add_row(
            format_timestamp(trip.pickup_time),
            format_timestamp(trip.dropoff_time),
            f"{trip.distance:.2f}",
            f"{trip.fare:.2f}",
        )
    Console().print(table)
