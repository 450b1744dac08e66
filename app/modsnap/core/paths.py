"""XDG-compliant path management for modsnap.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and snapshot storage.

XDG defaults:
- Config: ~/.config/modsnap/
- Data: ~/.local/share/modsnap/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "modsnap"

SNAPSHOT_DIRNAME = "snapshots"
SNAPSHOT_FILENAME = "snapshot.json"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/modsnap/ (or XDG_CONFIG_HOME/modsnap/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """Get the data directory path.

    Snapshot documents live here, one subdirectory per game.

    Returns:
        Path to ~/.local/share/modsnap/ (or XDG_DATA_HOME/modsnap/).
    """
    return _get_xdg_dir("XDG_DATA_HOME", ".local/share")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/modsnap/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_snapshot_path(game_id: str, data_dir: Path | None = None) -> Path:
    """Get the snapshot document path for a game.

    Args:
        game_id: Opaque identifier of the game.
        data_dir: Optional override for the data directory.

    Returns:
        Path to <data-dir>/<game_id>/snapshots/snapshot.json.

    Raises:
        ValueError: If game_id is empty or would escape the data directory.
    """
    if not game_id or game_id in (".", "..") or "/" in game_id or "\\" in game_id:
        msg = f"Invalid game id: {game_id!r}"
        raise ValueError(msg)
    base = data_dir if data_dir is not None else get_data_dir()
    return base / game_id / SNAPSHOT_DIRNAME / SNAPSHOT_FILENAME
