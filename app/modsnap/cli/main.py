"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import locale
import logging
from typing import Annotated

import typer

from modsnap import __version__
from modsnap.cli.commands import config, snapshot

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="modsnap",
    help="Detect files changed outside of mod deployment.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"modsnap version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """modsnap - Detect files changed outside of mod deployment.

    Snapshots the files in a game's deployment directories that no mod
    deploys, and reports what changed between deployments.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")

    # entries are collated with locale.strxfrm
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Using default collation: %s", e)


app.add_typer(snapshot.app, name="snapshot")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
