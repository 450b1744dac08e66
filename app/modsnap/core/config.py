"""User configuration for modsnap.

Configuration is stored in ~/.config/modsnap/config.toml and controls
where snapshots are kept and how file names are normalized before
snapshots are compared.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modsnap.core.paths import get_config_path, get_data_dir

logger = logging.getLogger(__name__)

CasePolicy = Literal["auto", "sensitive", "insensitive"]

DATA_DIR_ENV = "MODSNAP_DATA_DIR"


class SnapConfig(BaseModel):
    """Configuration for snapshot storage and name normalization.

    Attributes:
        data_dir: Directory holding per-game snapshot documents.
            None means the XDG data directory.
        case: Case handling when comparing names. "auto" checks the
            filesystem of each base path.
        unicode: Apply NFC normalization before comparing names.
        separators: Treat backslashes as path separators.
    """

    model_config = ConfigDict(extra="forbid")

    data_dir: Annotated[
        Path | None,
        Field(description="Snapshot storage directory (None = XDG data dir)"),
    ] = None
    case: Annotated[
        CasePolicy,
        Field(description="Case policy for name comparison"),
    ] = "auto"
    unicode: Annotated[
        bool,
        Field(description="Apply Unicode NFC normalization"),
    ] = False
    separators: Annotated[
        bool,
        Field(description="Normalize backslashes to forward slashes"),
    ] = False

    @property
    def effective_data_dir(self) -> Path:
        """Get the snapshot storage directory.

        Returns:
            The configured data directory, or the XDG default.
        """
        if self.data_dir is not None:
            return self.data_dir.expanduser()
        return get_data_dir()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SnapConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if the file doesn't exist. The MODSNAP_DATA_DIR
    environment variable overrides data_dir.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated SnapConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    data: dict[str, object] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config: {e}") from e
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    if env_dir := os.environ.get(DATA_DIR_ENV):
        data["data_dir"] = env_dir

    try:
        return SnapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: SnapConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    Args:
        config: Configuration to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    # TOML has no null, drop unset optionals
    data = config.model_dump(mode="json", exclude_none=True)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "wb") as f:
            tomli_w.dump(data, f)
    except OSError as e:
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
