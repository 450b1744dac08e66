"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import locale
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and data directories into the test's tmp_path."""
    xdg_root = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_root / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(xdg_root / "data"))
    monkeypatch.delenv("MODSNAP_DATA_DIR", raising=False)
    return xdg_root


@pytest.fixture(autouse=True)
def restore_collation() -> Iterator[None]:
    """Undo LC_COLLATE changes made by the CLI callback."""
    previous = locale.setlocale(locale.LC_COLLATE)
    yield
    locale.setlocale(locale.LC_COLLATE, previous)


@pytest.fixture
def make_files() -> Callable[..., list[Path]]:
    """Create empty files below a directory from relative paths."""

    def _make(root: Path, *rel_paths: str) -> list[Path]:
        created: list[Path] = []
        for rel_path in rel_paths:
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("content")
            created.append(path)
        return created

    return _make


@pytest.fixture
def game_dir(tmp_path: Path) -> Path:
    """A deployment directory with two mod subdirectories and vanilla files.

    Layout:
        game/data/base.esm            (vanilla)
        game/data/textures/a.dds      (deployed by modA)
        game/data/meshes/b.nif        (deployed by modB)
        game/data/meshes/vanilla.nif  (vanilla)
    """
    base = tmp_path / "game" / "data"
    for rel_path in ("base.esm", "textures/a.dds", "meshes/b.nif", "meshes/vanilla.nif"):
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("content")
    return base
