"""Tests for snapshot capture and the filesystem walk."""

import asyncio
import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from modsnap.snapshot.capture import TreeLookupError, snapshot, walk_files
from modsnap.snapshot.models import DeployedFile
from modsnap.snapshot.tree import PathTree, consolidate

MakeFiles = Callable[..., list[Path]]


def _tree_for(base: Path, *deployed: tuple[str, str]) -> PathTree:
    """Build a tree with files deployed below base, as (source, rel_path) pairs."""
    files = [DeployedFile(source=source, rel_path=rel_path) for source, rel_path in deployed]
    return consolidate({"": files}, {"": str(base)})


class TestWalkFiles:
    """Tests for walk_files."""

    def test_yields_files_only(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """Directories are traversed but not yielded."""
        make_files(tmp_path, "a.txt", "sub/b.txt", "sub/deeper/c.txt")
        (tmp_path / "empty").mkdir()

        result = {str(path.relative_to(tmp_path)) for path in walk_files(tmp_path)}

        assert result == {"a.txt", os.path.join("sub", "b.txt"), os.path.join("sub", "deeper", "c.txt")}

    def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        """A root that doesn't exist is an empty walk."""
        assert list(walk_files(tmp_path / "missing")) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_are_leaves(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """A link to a directory is yielded itself, its target is not walked."""
        outside = tmp_path / "outside"
        make_files(outside, "hidden.txt")
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        result = [path.name for path in walk_files(root)]

        assert result == ["link"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_loop_terminates(self, tmp_path: Path) -> None:
        """A link pointing back to its own directory is not followed."""
        root = tmp_path / "root"
        root.mkdir()
        (root / "loop").symlink_to(root, target_is_directory=True)

        assert [path.name for path in walk_files(root)] == ["loop"]

    def test_unreadable_directory_is_skipped(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """Directories that raise PermissionError are logged and skipped."""
        make_files(tmp_path, "a.txt", "locked/b.txt")
        real_scandir = os.scandir

        def fake_scandir(path: Path) -> object:
            if Path(path).name == "locked":
                raise PermissionError("denied")
            return real_scandir(path)

        with patch("modsnap.snapshot.capture.os.scandir", side_effect=fake_scandir):
            result = [path.name for path in walk_files(tmp_path)]

        assert result == ["a.txt"]


class TestSnapshot:
    """Tests for snapshot."""

    def test_returns_unclaimed_files(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """Files no mod deploys remain, deployed ones are subtracted."""
        base = tmp_path / "mods"
        make_files(base, "readme.txt", "extra.txt")
        tree = _tree_for(base, ("modA", "readme.txt"))

        result = asyncio.run(snapshot(str(base), tree))

        assert result == ["extra.txt"]

    def test_nested_paths_are_relative_to_base(
        self, tmp_path: Path, make_files: MakeFiles
    ) -> None:
        """Entries are relative to the base path, including subdirectories."""
        base = tmp_path / "data"
        make_files(base, "textures/a.dds", "textures/vanilla.dds", "base.esm")
        tree = _tree_for(base, ("modA", os.path.join("textures", "a.dds")))

        result = asyncio.run(snapshot(str(base), tree))

        assert result == ["base.esm", os.path.join("textures", "vanilla.dds")]

    def test_result_is_sorted(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """Entries come back in sorted order regardless of walk order."""
        base = tmp_path / "data"
        make_files(base, "z.txt", "m.txt", "a.txt", "k/b.txt")
        tree = _tree_for(base)

        result = asyncio.run(snapshot(str(base), tree))

        assert result == sorted(result)
        assert len(result) == 4

    def test_capture_is_idempotent(self, tmp_path: Path, make_files: MakeFiles) -> None:
        """Two captures of an unchanged directory are identical."""
        base = tmp_path / "data"
        make_files(base, "b.txt", "a/c.txt", "deployed.txt")
        tree = _tree_for(base, ("modA", "deployed.txt"))

        first = asyncio.run(snapshot(str(base), tree))
        second = asyncio.run(snapshot(str(base), tree))

        assert first == second

    def test_deployed_files_missing_on_disk_are_ignored(
        self, tmp_path: Path, make_files: MakeFiles
    ) -> None:
        """Claimed files that don't exist simply don't show up."""
        base = tmp_path / "data"
        make_files(base, "vanilla.txt")
        tree = _tree_for(base, ("modA", "gone.txt"))

        assert asyncio.run(snapshot(str(base), tree)) == ["vanilla.txt"]

    def test_missing_base_directory_is_empty(self, tmp_path: Path) -> None:
        """A base path that doesn't exist on disk has no entries."""
        base = tmp_path / "not-created"
        tree = _tree_for(base, ("modA", "x.txt"))

        assert asyncio.run(snapshot(str(base), tree)) == []

    def test_base_path_outside_tree_raises(self, tmp_path: Path) -> None:
        """A base path the tree doesn't contain is a lookup error."""
        tree = _tree_for(tmp_path / "data")

        with pytest.raises(TreeLookupError, match="not in deployment tree"):
            asyncio.run(snapshot(str(tmp_path / "other"), tree))

    def test_normalization_applies_to_claimed_files(
        self, tmp_path: Path, make_files: MakeFiles
    ) -> None:
        """A deployed file matches its on-disk name under the normalization."""
        base = tmp_path / "data"
        make_files(base, "readme.txt", "extra.txt")
        tree = _tree_for(base, ("modA", "README.TXT"))

        result = asyncio.run(snapshot(str(base), tree, str.casefold))

        assert result == ["extra.txt"]

    def test_only_files_below_base_node_are_subtracted(
        self, tmp_path: Path, make_files: MakeFiles
    ) -> None:
        """Files deployed elsewhere in the tree don't hide files below the base."""
        base = tmp_path / "data"
        make_files(base, "x.txt")
        files = {
            "": [DeployedFile(source="modA", rel_path="y.txt")],
            "root": [DeployedFile(source="modB", rel_path="x.txt")],
        }
        tree = consolidate(files, {"": str(base), "root": str(tmp_path / "root")})

        assert asyncio.run(snapshot(str(base), tree)) == ["x.txt"]
