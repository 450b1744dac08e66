"""Snapshot capture of unmanaged files.

Walks a base path on disk and keeps every file the deployment tree does
not claim. What remains are the "vanilla" files: the game's own files
plus anything added by other tools or by hand.
"""

import asyncio
import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from modsnap.snapshot.diff import collation_key
from modsnap.snapshot.normalize import identity
from modsnap.snapshot.tree import PathTree, get_file_list, get_tree

logger = logging.getLogger(__name__)


class TreeLookupError(LookupError):
    """Raised when a base path is missing from the tree it was derived from."""


def walk_files(root: Path) -> Iterator[Path]:
    """Recursively yield the files below a directory.

    Directories are descended into but not yielded. Symbolic links are
    yielded like files and never followed. Order is unspecified.
    Directories that cannot be read are logged and skipped.

    Args:
        root: Directory to walk.

    Yields:
        Path of each file or link below root.
    """
    pending = [root]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                    except OSError:
                        logger.warning("Cannot determine type of: %s", entry.path)
                        continue
                    if is_dir:
                        pending.append(Path(entry.path))
                    else:
                        yield Path(entry.path)
        except FileNotFoundError:
            if directory == root:
                logger.info("Snapshot root does not exist: %s", root)
            else:
                logger.warning("Directory vanished during walk: %s", directory)
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", directory)
        except NotADirectoryError:
            logger.warning("Not a directory: %s", directory)


def _collect_unclaimed(
    base_path: str,
    claimed: set[str],
    normalize: Callable[[str], str],
) -> list[str]:
    root = Path(base_path)
    vanilla = [
        rel_path
        for rel_path in (str(path.relative_to(root)) for path in walk_files(root))
        if normalize(rel_path) not in claimed
    ]
    # walk order is arbitrary, comparisons need collation order
    vanilla.sort(key=collation_key(normalize))
    return vanilla


async def snapshot(
    base_path: str,
    tree: PathTree,
    normalize: Callable[[str], str] = identity,
) -> list[str]:
    """Capture the unmanaged files below a base path.

    Args:
        base_path: Directory to snapshot, as produced by figure_out_base_paths.
        tree: Deployment tree the base path was derived from.
        normalize: Name normalization for matching against deployed files
            and for ordering the result.

    Returns:
        Sorted paths, relative to base_path, of files no mod deploys.

    Raises:
        TreeLookupError: If base_path is not a directory of the tree.
    """
    node = get_tree(tree, base_path, required=True)
    if node is None:
        msg = f"Base path not in deployment tree: {base_path}"
        raise TreeLookupError(msg)

    claimed = {normalize(path) for path in get_file_list("", node)}
    entries = await asyncio.to_thread(_collect_unclaimed, base_path, claimed, normalize)
    logger.debug(
        "Snapshot of %s: %d unmanaged, %d deployed",
        base_path,
        len(entries),
        len(claimed),
    )
    return entries
