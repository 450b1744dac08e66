"""Snapshot domain models.

This module defines the data structures shared by tree building,
snapshot capture, snapshot comparison and change reporting.
"""

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class DeployedFile:
    """A file one mod places into the deployment directory.

    Attributes:
        source: Identifier of the mod that deploys the file.
        rel_path: Path of the file relative to its mod type's base path.
    """

    source: str
    rel_path: str

    def __post_init__(self) -> None:
        """Validate deployed file data after initialization."""
        if not self.source:
            msg = "Deployed file source cannot be empty"
            raise ValueError(msg)
        if not self.rel_path:
            msg = "Deployed file path cannot be empty"
            raise ValueError(msg)


class SnapshotRoot(BaseModel):
    """Unmanaged files found under one base path at one point in time.

    Serialized as ``{"basePath": ..., "entries": [...]}``.

    Attributes:
        base_path: Directory the snapshot was taken of.
        entries: Sorted paths, relative to base_path, of files no mod claims.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_path: Annotated[str, Field(alias="basePath", min_length=1)]
    entries: Annotated[list[str], Field(default_factory=list)]


@dataclass(frozen=True, slots=True)
class EntryDiff:
    """Result of comparing two snapshots of the same base path.

    Attributes:
        added: Entries present only in the later snapshot.
        removed: Entries present only in the earlier snapshot.
    """

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def has_changes(self) -> bool:
        """Check if either side has entries."""
        return bool(self.added or self.removed)

    @property
    def total_changes(self) -> int:
        """Total number of added and removed entries."""
        return len(self.added) + len(self.removed)

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to dictionary for JSON serialization."""
        return {"added": list(self.added), "removed": list(self.removed)}


@dataclass(frozen=True, slots=True)
class ChangedFile:
    """A file changed outside of deployment, with its likely owners.

    Attributes:
        file_path: Absolute path of the changed file.
        candidates: Mods deploying into the nearest known ancestor
            directory, any of which may be responsible.
    """

    file_path: str
    candidates: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the notification payload shape."""
        return {"filePath": self.file_path, "candidates": list(self.candidates)}
