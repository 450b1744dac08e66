"""Snapshot document persistence.

A snapshot document is a JSON list of ``{"basePath", "entries"}``
records, one per base path, rewritten in full after every deployment.
"""

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import TypeAdapter, ValidationError

from modsnap.snapshot.models import SnapshotRoot

logger = logging.getLogger(__name__)

_ROOTS_ADAPTER = TypeAdapter(list[SnapshotRoot])


class SnapshotStoreError(Exception):
    """Base exception for snapshot document errors."""


class SnapshotNotFoundError(SnapshotStoreError):
    """Raised when no snapshot document exists yet."""


class SnapshotParseError(SnapshotStoreError):
    """Raised when a snapshot document cannot be parsed."""


class SnapshotStore:
    """Reads and writes the snapshot document of one game.

    Attributes:
        path: Location of the snapshot document.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if a snapshot document has been written."""
        return self.path.exists()

    def load(self) -> list[SnapshotRoot]:
        """Load the stored snapshot.

        Returns:
            Snapshot roots in stored order.

        Raises:
            SnapshotNotFoundError: If no snapshot has been stored yet.
            SnapshotParseError: If the document is not valid.
            SnapshotStoreError: If the document cannot be read.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SnapshotNotFoundError(f"Snapshot not found: {self.path}") from e
        except OSError as e:
            raise SnapshotStoreError(f"Failed to read snapshot: {e}") from e

        try:
            return _ROOTS_ADAPTER.validate_python(json.loads(raw))
        except json.JSONDecodeError as e:
            raise SnapshotParseError(f"Invalid JSON in {self.path}: {e}") from e
        except ValidationError as e:
            raise SnapshotParseError(f"Invalid snapshot content in {self.path}: {e}") from e

    def save(self, roots: Sequence[SnapshotRoot]) -> Path:
        """Replace the stored snapshot.

        The document is written to a temporary file next to the target and
        moved into place with os.replace(). Non-ASCII characters are
        escaped, so names the filesystem returned with surrogate escapes
        (undecodable bytes on POSIX) survive a round trip unchanged.

        Args:
            roots: Snapshot roots to store.

        Returns:
            Path the snapshot was written to.

        Raises:
            SnapshotStoreError: If the document cannot be written.
        """
        data = _ROOTS_ADAPTER.dump_python(list(roots), by_alias=True)

        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, ValueError) as e:
            raise SnapshotStoreError(f"Failed to write snapshot: {e}") from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.debug("Saved snapshot of %d base path(s) to %s", len(data), self.path)
        return self.path


def find_root(roots: Sequence[SnapshotRoot], base_path: str) -> SnapshotRoot | None:
    """Find the snapshot root recorded for a base path."""
    for root in roots:
        if root.base_path == base_path:
            return root
    return None
