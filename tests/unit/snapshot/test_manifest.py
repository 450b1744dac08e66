"""Tests for deployment manifest loading."""

import json
from pathlib import Path

import pytest
from modsnap.snapshot.manifest import (
    DeploymentManifest,
    ManifestError,
    load_deployment_manifest,
)
from modsnap.snapshot.models import DeployedFile


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadDeploymentManifest:
    """Tests for load_deployment_manifest."""

    def test_load_valid_manifest(self, tmp_path: Path) -> None:
        """A complete manifest loads with its aliases resolved."""
        path = _write(
            tmp_path / "deploy.json",
            {
                "game": "skyrimse",
                "modPaths": {"": "/games/skyrim/Data"},
                "deployment": {"": [{"source": "SkyUI", "relPath": "interface/skyui.swf"}]},
            },
        )

        manifest = load_deployment_manifest(path)

        assert manifest.game == "skyrimse"
        assert manifest.mod_paths == {"": "/games/skyrim/Data"}
        assert manifest.deployment[""][0].rel_path == "interface/skyui.swf"

    def test_deployment_defaults_to_empty(self, tmp_path: Path) -> None:
        """Only the game is required."""
        manifest = load_deployment_manifest(_write(tmp_path / "d.json", {"game": "fallout4"}))

        assert manifest.mod_paths == {}
        assert manifest.deployment == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing manifest is a ManifestError."""
        with pytest.raises(ManifestError, match="not found"):
            load_deployment_manifest(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON is a ManifestError."""
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ManifestError, match="Invalid JSON"):
            load_deployment_manifest(path)

    def test_unknown_fields_rejected(self, tmp_path: Path) -> None:
        """Typos in field names are reported instead of ignored."""
        path = _write(tmp_path / "d.json", {"game": "x", "modpaths": {}})

        with pytest.raises(ManifestError, match="Invalid deployment manifest"):
            load_deployment_manifest(path)

    def test_empty_rel_path_rejected(self, tmp_path: Path) -> None:
        """Deployed files need a path."""
        path = _write(
            tmp_path / "d.json",
            {"game": "x", "deployment": {"": [{"source": "modA", "relPath": ""}]}},
        )

        with pytest.raises(ManifestError):
            load_deployment_manifest(path)


class TestDeployedFiles:
    """Tests for DeploymentManifest.deployed_files."""

    def test_converts_entries(self) -> None:
        """Entries become DeployedFile records grouped by mod type."""
        manifest = DeploymentManifest.model_validate(
            {
                "game": "skyrimse",
                "deployment": {
                    "": [{"source": "modA", "relPath": "a.esp"}],
                    "saves": [{"source": "modB", "relPath": "b.ess"}],
                },
            }
        )

        assert manifest.deployed_files() == {
            "": [DeployedFile(source="modA", rel_path="a.esp")],
            "saves": [DeployedFile(source="modB", rel_path="b.ess")],
        }
