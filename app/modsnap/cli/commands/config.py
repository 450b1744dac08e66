"""Configuration commands.

Shows the effective configuration and writes a default config file.
"""

from typing import Annotated

import typer

from modsnap.core.config import ConfigError, SnapConfig, load_config, save_config
from modsnap.core.paths import get_config_path
from modsnap.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the modsnap configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    try:
        config = load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e

    path = get_config_path()
    origin = str(path) if path.exists() else f"{path} (not created, using defaults)"
    print_info(f"Config file: {origin}")
    console.print(f"data_dir   = {config.effective_data_dir}", markup=False)
    console.print(f"case       = {config.case}", markup=False)
    console.print(f"unicode    = {str(config.unicode).lower()}", markup=False)
    console.print(f"separators = {str(config.separators).lower()}", markup=False)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(SnapConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
