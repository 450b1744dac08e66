"""Report colors for the modsnap CLI.

The palette ships in data/theme.toml; any subset of it can be replaced
in ~/.config/modsnap/theme.toml.
"""

import functools
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from modsnap.core.paths import get_config_dir

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str, StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")
]


class ReportColors(BaseModel):
    """Colors of the drift report and status messages, as #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid")

    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    added: HexColor = "#c1ff62"
    removed: HexColor = "#f53263"
    candidate: HexColor = "#0e8ac8"


def user_theme_path() -> Path:
    return get_config_dir() / "theme.toml"


def _read_colors(source: Path) -> dict[str, object]:
    # A broken theme file is ignored rather than failing the command
    try:
        with open(source, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", source, e)
        return {}
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", source)
        return {}
    return colors


def load_colors() -> ReportColors:
    """Merge the bundled palette with the user's overrides.

    Invalid values discard the whole merged palette in favor of the
    built-in defaults.
    """
    bundled = Path(str(resources.files("modsnap.data").joinpath("theme.toml")))
    merged = {**_read_colors(bundled), **_read_colors(user_theme_path())}
    try:
        return ReportColors.model_validate(merged)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ReportColors()


def build_theme(colors: ReportColors) -> Theme:
    """Map report colors to the Rich style names used in markup."""
    styles = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["bold_header"] = f"bold {colors.header}"
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return build_theme(load_colors())
