"""
parqpeek CLI - browse and query Parquet files from the terminal

Usage:
    parqpeek peek <file> [--batch-size N]   # read-only browser
    parqpeek edit <file> [--batch-size N]   # browse, run SQL, save results
"""

import logging
import sys
from typing import Optional

import click

from parqpeek import __version__
from parqpeek.config import Settings
from parqpeek.core.errors import SourceError, UnsupportedExtensionError
from parqpeek.core.session import Session
from parqpeek.logging_utils import setup_logging
from parqpeek.readers.parquet_reader import is_parquet_path

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="parqpeek")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to settings file (default: ~/.parqpeek_config)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the debug log here instead of the configured log file",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_file: Optional[str]):
    """
    parqpeek - Browse large Parquet files without loading them into memory
    """
    ctx.obj = Settings.load(config_file).override(log_file=log_file)


def _open_session(settings: Settings, file: str, batch_size: Optional[int], read_only: bool) -> Session:
    """Validate the file and open a session, exiting on startup errors."""
    if not is_parquet_path(file):
        click.echo(f"ERROR: {UnsupportedExtensionError(file)}", err=True)
        sys.exit(1)

    settings.override(batch_size=batch_size)
    setup_logging(settings.log_file, settings.log_level)
    logger.info("Opening %s (batch size %d, read_only=%s)", file, settings.batch_size, read_only)

    try:
        return Session.open(
            file,
            settings.batch_size,
            read_only=read_only,
            visible_columns=settings.visible_columns,
            preview_limit=settings.preview_limit,
            default_query=settings.default_query,
            default_save_path=settings.default_save_path,
        )
    except SourceError as e:
        logger.error("Could not open %s: %s", file, e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _run(session: Session) -> None:
    try:
        from parqpeek.cli.shell import launch_shell
    except ImportError as e:
        click.echo(f"Error: {e}\nThe terminal UI requires the textual library.", err=True)
        sys.exit(1)

    launch_shell(session)


batch_size_option = click.option(
    "--batch-size",
    "-b",
    type=click.IntRange(min=1),
    default=None,
    help="Number of rows to load per batch (default: 100)",
)


@cli.command()
@click.argument("file", type=str)
@batch_size_option
@click.pass_obj
def peek(settings: Settings, file: str, batch_size: Optional[int]):
    """
    Browse a Parquet file read-only

    Examples:

        \b
        $ parqpeek peek events.parquet
        $ parqpeek peek events.parquet --batch-size 500
    """
    _run(_open_session(settings, file, batch_size, read_only=True))


@cli.command()
@click.argument("file", type=str)
@batch_size_option
@click.pass_obj
def edit(settings: Settings, file: str, batch_size: Optional[int]):
    """
    Browse a Parquet file, query it with SQL and save the results

    The file is available as the table ``data``.

    Examples:

        \b
        $ parqpeek edit events.parquet
        # then, in the editor:
        SELECT user_id, count(*) AS n FROM data GROUP BY user_id
    """
    _run(_open_session(settings, file, batch_size, read_only=False))


if __name__ == "__main__":
    cli()
