"""CLI commands for modsnap.

This package contains all subcommand implementations.
"""

from modsnap.cli.commands import config, snapshot

__all__ = ["config", "snapshot"]
