"""Snapshot engine.

This module provides the deployment tree, base path selection, snapshot
capture and comparison, snapshot persistence and the deployment cycle
hooks built on them.
"""

from modsnap.snapshot.capture import TreeLookupError, snapshot, walk_files
from modsnap.snapshot.cycle import CycleReport, DeploymentHost, SnapshotCycle, register
from modsnap.snapshot.diff import collation_key, compare_entries
from modsnap.snapshot.models import ChangedFile, DeployedFile, EntryDiff, SnapshotRoot
from modsnap.snapshot.normalize import identity, make_normalize_func
from modsnap.snapshot.store import (
    SnapshotNotFoundError,
    SnapshotParseError,
    SnapshotStore,
    SnapshotStoreError,
)
from modsnap.snapshot.tree import (
    PathConflictError,
    PathTree,
    add_to_tree,
    consolidate,
    figure_out_base_paths,
    get_file_list,
    get_tree,
)

__all__ = [
    "ChangedFile",
    "CycleReport",
    "DeployedFile",
    "DeploymentHost",
    "EntryDiff",
    "PathConflictError",
    "PathTree",
    "SnapshotCycle",
    "SnapshotNotFoundError",
    "SnapshotParseError",
    "SnapshotRoot",
    "SnapshotStore",
    "SnapshotStoreError",
    "TreeLookupError",
    "add_to_tree",
    "collation_key",
    "compare_entries",
    "consolidate",
    "figure_out_base_paths",
    "get_file_list",
    "get_tree",
    "identity",
    "make_normalize_func",
    "register",
    "snapshot",
    "walk_files",
]
