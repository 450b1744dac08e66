"""Deployment manifest files.

A deployment manifest describes one game's deployment as a JSON file,
for running the snapshot hooks from the command line:

    {
      "game": "skyrimse",
      "modPaths": {"": "/games/skyrim/Data"},
      "deployment": {"": [{"source": "SkyUI", "relPath": "interface/skyui.swf"}]}
    }
"""

import json
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modsnap.snapshot.models import DeployedFile


class DeployedFileEntry(BaseModel):
    """One deployed file as written in a manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    source: Annotated[str, Field(min_length=1, description="Mod deploying the file")]
    rel_path: Annotated[
        str,
        Field(alias="relPath", min_length=1, description="Path relative to the mod type base path"),
    ]


class DeploymentManifest(BaseModel):
    """A game's deployment.

    Attributes:
        game: Game identifier, used to locate the snapshot document.
        mod_paths: Base path per mod type.
        deployment: Deployed files per mod type.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    game: Annotated[str, Field(min_length=1)]
    mod_paths: Annotated[dict[str, str], Field(alias="modPaths", default_factory=dict)]
    deployment: Annotated[
        dict[str, list[DeployedFileEntry]],
        Field(default_factory=dict),
    ]

    def deployed_files(self) -> dict[str, list[DeployedFile]]:
        """Convert the deployment to DeployedFile records per mod type."""
        return {
            type_id: [DeployedFile(source=entry.source, rel_path=entry.rel_path) for entry in entries]
            for type_id, entries in self.deployment.items()
        }


class ManifestError(Exception):
    """Raised when a deployment manifest cannot be loaded."""


def load_deployment_manifest(path: Path) -> DeploymentManifest:
    """Load and validate a deployment manifest.

    Args:
        path: Path to the JSON manifest.

    Returns:
        Validated DeploymentManifest.

    Raises:
        ManifestError: If the file is missing, unreadable or invalid.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestError(f"Deployment manifest not found: {path}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read deployment manifest: {e}") from e

    try:
        return DeploymentManifest.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e
    except ValidationError as e:
        raise ManifestError(f"Invalid deployment manifest: {e}") from e
