"""Serve command."""

import logging

import click
import uvicorn

from ..api import create_app
from ..query import source_from_config
from . import cli
from .logger import configure_logging
from .options import config_options, resolve_config

log = logging.getLogger("cli")


@cli.command()
@config_options
@click.option("--host", default=None, help="Bind address (default: 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Listen port (default: 8080)")
@click.option("--synthetic", is_flag=True, default=False, help="Serve synthetic trips.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
def serve(
    config_file: str | None,
    data_dir: str | None,
    host: str | None,
    port: int | None,
    synthetic: bool,
    verbose: bool,
) -> None:
    """Run the HTTP API server."""
    configure_logging(verbose)
    config = resolve_config(
        config_file,
        data_dir,
        host=host,
        port=port,
        synthetic=True if synthetic else None,
    )
    app = create_app(source_from_config(config))
    log.info(
        "starting server on %s:%d (dataset=%s, synthetic=%s)",
        config.host,
        config.port,
        config.dataset,
        config.synthetic,
    )
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
