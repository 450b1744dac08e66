"""Ownership-annotated directory tree of a deployment.

The tree merges the declared deployment of every mod type into one
structure. Each directory node records which mods deploy anything at or
below it, which is what later lets a changed file be attributed to a set
of candidate mods.
"""

import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

from modsnap.snapshot.models import DeployedFile

logger = logging.getLogger(__name__)

Deployment = Mapping[str, Sequence[DeployedFile]]


class PathConflictError(ValueError):
    """Raised when a name would be both a file and a directory."""


@dataclass
class PathTree:
    """A directory node in the deployment tree.

    Attributes:
        owners: Mods deploying files at or below this directory.
        directories: Subdirectories by name.
        files: Deployed files directly in this directory, by name.
    """

    owners: set[str] = field(default_factory=set)
    directories: dict[str, "PathTree"] = field(default_factory=dict)
    files: dict[str, DeployedFile] = field(default_factory=dict)


def split_path(path: str) -> tuple[str, ...]:
    """Split a path into its components.

    An absolute root or drive is kept as a single leading component so
    that joining the components again yields the original path.
    """
    return PurePath(path).parts


def add_to_tree(tree: PathTree, path: str, record: DeployedFile | None = None) -> PathTree:
    """Insert a path below a tree node.

    Missing directories are created. With a record, the last component is
    stored as a file and the record's source is added to the owners of
    every directory on the way, the starting node included. Without one,
    the whole path is inserted as directories.

    Args:
        tree: Node to insert below.
        path: Path relative to that node.
        record: The deployed file to store at the end of the path.

    Returns:
        The deepest directory node of the inserted path.

    Raises:
        PathConflictError: If a component exists with the other kind.
        ValueError: If a file is inserted with an empty path.
    """
    parts = split_path(path)
    if record is not None:
        if not parts:
            msg = f"Cannot place {record.source}'s file at an empty path"
            raise ValueError(msg)
        tree.owners.add(record.source)
        dir_parts = parts[:-1]
    else:
        dir_parts = parts

    node = tree
    for name in dir_parts:
        if name in node.files:
            msg = f"'{name}' in '{path}' is already a file"
            raise PathConflictError(msg)
        child = node.directories.get(name)
        if child is None:
            child = node.directories[name] = PathTree()
        node = child
        if record is not None:
            node.owners.add(record.source)

    if record is not None:
        file_name = parts[-1]
        if file_name in node.directories:
            msg = f"'{path}' is already a directory"
            raise PathConflictError(msg)
        node.files[file_name] = record

    return node


def _find_directory(
    node: PathTree,
    name: str,
    normalize: Callable[[str], str] | None,
) -> PathTree | None:
    child = node.directories.get(name)
    if child is not None or normalize is None:
        return child
    key = normalize(name)
    for dir_name, candidate in node.directories.items():
        if normalize(dir_name) == key:
            return candidate
    return None


def get_tree(
    tree: PathTree,
    path: str,
    required: bool,
    normalize: Callable[[str], str] | None = None,
) -> PathTree | None:
    """Look up the directory node for a path.

    Args:
        tree: Node to start from.
        path: Directory path relative to that node.
        required: If True, a missing component means no result. If False,
            the deepest node reached is returned instead.
        normalize: Optional name normalization used to match components
            that differ only in, e.g., case.

    Returns:
        The node for the path, the deepest matching ancestor when not
        required, or None.
    """
    node = tree
    for name in split_path(path):
        child = _find_directory(node, name, normalize)
        if child is None:
            return None if required else node
        node = child
    return node


def get_file_list(base_path: str, tree: PathTree) -> list[str]:
    """List every file a node claims, recursively, joined onto base_path."""
    result = [os.path.join(base_path, name) for name in tree.files]
    for dir_name, child in tree.directories.items():
        result.extend(get_file_list(os.path.join(base_path, dir_name), child))
    return result


def consolidate(deployment: Deployment, mod_paths: Mapping[str, str]) -> PathTree:
    """Build the merged tree for all mod types.

    Each mod type's base path is inserted as a directory chain first, so
    it is anchored even without files, followed by its deployed files.

    Args:
        deployment: Deployed files per mod type.
        mod_paths: Base path per mod type.

    Returns:
        Root node of the merged tree.
    """
    tree = PathTree()

    for type_id, base_path in mod_paths.items():
        add_to_tree(tree, base_path)
        files = deployment.get(type_id, ())
        for deployed in files:
            add_to_tree(tree, os.path.join(base_path, deployed.rel_path), deployed)
        logger.debug("Added %d file(s) of mod type '%s' at %s", len(files), type_id, base_path)

    for type_id in deployment.keys() - mod_paths.keys():
        logger.debug("Ignoring deployment for mod type '%s' without a base path", type_id)

    return tree


def figure_out_base_paths(tree: PathTree) -> list[str]:
    """Choose the directories to snapshot.

    For each top-level directory, descends while the current directory
    has no files and exactly one subdirectory. The directory where that
    stops becomes a base path.

    Args:
        tree: Root node of the merged tree.

    Returns:
        One base path per top-level directory.
    """
    bases: list[str] = []
    for name, child in tree.directories.items():
        parts = [name]
        node = child
        while not node.files and len(node.directories) == 1:
            ((dir_name, node),) = node.directories.items()
            parts.append(dir_name)
        bases.append(os.path.join(*parts))
    return bases
