"""CLI package for modsnap.

This package contains the Typer application and all subcommands.
"""

from modsnap.cli.main import app

__all__ = ["app"]
