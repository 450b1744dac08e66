"""Unit tests for theme module.

Tests for report color validation, theme file merging and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import pytest
from modsnap.core.theme import (
    ReportColors,
    _read_colors,
    build_theme,
    get_theme,
    load_colors,
    user_theme_path,
)
from pydantic import ValidationError
from rich.style import Style


def _write_user_theme(content: str) -> None:
    path = user_theme_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestReportColors:
    """Tests for the ReportColors model."""

    def test_accepts_short_and_long_hex(self) -> None:
        """Both #RGB and #RRGGBB are valid."""
        colors = ReportColors(added="#abc", removed="#AABBCC")

        assert colors.added == "#abc"
        assert colors.removed == "#AABBCC"

    def test_surrounding_whitespace_is_stripped(self) -> None:
        """Whitespace around a value is ignored."""
        assert ReportColors(candidate=" #123456 ").candidate == "#123456"

    @pytest.mark.parametrize("value", ["ffffff", "#ff", "#gggggg", "#1234567", "green"])
    def test_rejects_invalid_colors(self, value: str) -> None:
        """Anything but a hex color is rejected."""
        with pytest.raises(ValidationError):
            ReportColors(added=value)

    def test_unknown_color_names_are_rejected(self) -> None:
        """Typos in color names aren't silently ignored."""
        with pytest.raises(ValidationError):
            ReportColors.model_validate({"addded": "#ffffff"})


class TestReadColors:
    """Tests for _read_colors."""

    def test_reads_colors_table(self, tmp_path: Path) -> None:
        """Values of the [colors] table are returned."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nadded = "#aabbcc"\n')

        assert _read_colors(theme_file) == {"added": "#aabbcc"}

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        """A missing file contributes nothing."""
        assert _read_colors(tmp_path / "nonexistent.toml") == {}

    def test_malformed_toml_is_empty(self, tmp_path: Path) -> None:
        """A file that isn't TOML is ignored."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _read_colors(theme_file) == {}

    def test_colors_must_be_a_table(self, tmp_path: Path) -> None:
        """A scalar colors key is ignored."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')

        assert _read_colors(theme_file) == {}


class TestLoadColors:
    """Tests for load_colors."""

    def test_bundled_palette_matches_defaults(self) -> None:
        """The shipped theme file agrees with the model defaults."""
        assert load_colors() == ReportColors()

    def test_user_overrides_single_color(self) -> None:
        """A user theme replaces only the colors it names."""
        _write_user_theme('[colors]\nadded = "#00ff00"\n')

        colors = load_colors()

        assert colors.added == "#00ff00"
        assert colors.removed == ReportColors().removed

    def test_malformed_user_theme_is_ignored(self) -> None:
        """A broken user file leaves the bundled palette in place."""
        _write_user_theme("invalid toml [[[")

        assert load_colors() == ReportColors()

    def test_invalid_user_color_uses_defaults(self) -> None:
        """A bad color value falls back to the default palette."""
        _write_user_theme('[colors]\nadded = "green"\ncandidate = "#000000"\n')

        assert load_colors() == ReportColors()


class TestBuildTheme:
    """Tests for build_theme."""

    def test_report_styles(self) -> None:
        """Every style used in report markup is defined."""
        theme = build_theme(ReportColors())

        for name in ("added", "removed", "candidate", "border", "info", "success"):
            assert name in theme.styles

    def test_emphasized_styles_are_bold(self) -> None:
        """Errors and section headers are bold in the header and error colors."""
        colors = ReportColors(header="#111111", error="#222222")

        theme = build_theme(colors)

        assert theme.styles["bold_header"] == Style.parse("bold #111111")
        assert theme.styles["error"] == Style.parse("bold #222222")


class TestGetTheme:
    """Tests for get_theme."""

    def test_theme_is_loaded_once(self) -> None:
        """Repeated calls share one Theme."""
        get_theme.cache_clear()

        assert get_theme() is get_theme()


class TestUserThemePath:
    """Tests for user_theme_path."""

    def test_returns_config_dir_path(self, isolated_xdg: Path) -> None:
        """theme.toml lives in the modsnap config directory."""
        assert user_theme_path() == isolated_xdg / "config" / "modsnap" / "theme.toml"
