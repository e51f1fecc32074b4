"""tlctrips command-line interface."""

import click

from .. import __version__


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, message="%(version)s")
def cli() -> None:
    """Query NYC TLC taxi trips by time.

    Partition files are downloaded on demand and cached under the data
    directory (default: .tlctrips).
    """


@cli.command(hidden=True)
@click.pass_context
def help(ctx: click.Context) -> None:
    """Show usage information."""
    click.echo(ctx.find_root().get_help())
    click.echo()
    click.echo('Use "tlctrips <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(__version__)


# Subcommands register themselves on import
from . import cache as _cache  # noqa: E402, F401
from . import cache_fetch as _cache_fetch  # noqa: E402, F401
from . import cache_status as _cache_status  # noqa: E402, F401
from . import query as _query  # noqa: E402, F401
from . import serve as _serve  # noqa: E402, F401
