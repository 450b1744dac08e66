"""Deployment cycle hooks.

Before a deployment, the files under every base path are compared with
the snapshot stored after the previous deployment; files that appeared
or disappeared in between were changed by something other than the mod
manager and are reported together with the mods most likely involved.
After a deployment, a fresh snapshot is stored for the next comparison.

Everything outside snapshotting (profiles, games, notifications, event
registration) is provided by a DeploymentHost.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from modsnap.snapshot.capture import snapshot
from modsnap.snapshot.diff import Normalize, compare_entries
from modsnap.snapshot.models import ChangedFile, SnapshotRoot
from modsnap.snapshot.store import (
    SnapshotNotFoundError,
    SnapshotStore,
    SnapshotStoreError,
    find_root,
)
from modsnap.snapshot.tree import (
    Deployment,
    PathTree,
    consolidate,
    figure_out_base_paths,
    get_tree,
)

logger = logging.getLogger(__name__)

WILL_DEPLOY_EVENT = "will-deploy"
DID_DEPLOY_EVENT = "did-deploy"
ADDED_FILES_EVENT = "added-files"
REMOVED_FILES_EVENT = "removed-files"

SNAPSHOT_PROGRESS_TITLE = "Creating snapshots"


class DeploymentHost(Protocol):
    """Services the deployment manager provides to the snapshot hooks."""

    def game_id(self, profile_id: str) -> str:
        """Identifier of the game a profile belongs to."""
        ...

    def mod_paths(self, profile_id: str) -> Mapping[str, str]:
        """Deployment base path for each mod type of the profile's game."""
        ...

    def snapshot_path(self, game_id: str) -> Path:
        """Location of the game's snapshot document."""
        ...

    async def normalize_func(self, base_path: str) -> Normalize:
        """Name normalization matching the filesystem at base_path."""
        ...

    async def emit(self, event: str, profile_id: str, changes: list[ChangedFile]) -> None:
        """Deliver a batch of changed files to listeners."""
        ...

    def show_error(self, message: str, error: BaseException) -> None:
        """Show a non-blocking error notification."""
        ...

    def on_async(self, event: str, handler: Callable[..., Awaitable[Any]]) -> None:
        """Register a coroutine handler for a host event."""
        ...


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Outcome of one snapshot hook run.

    Attributes:
        profile_id: Profile that was deployed.
        base_paths: Directories that were snapshotted.
        baseline_found: Whether a previous snapshot was available.
        added: Files added since the previous snapshot.
        removed: Files removed since the previous snapshot.
        saved_to: Where the new snapshot was written, None if saving failed.
    """

    profile_id: str
    base_paths: tuple[str, ...]
    baseline_found: bool = False
    added: tuple[ChangedFile, ...] = ()
    removed: tuple[ChangedFile, ...] = ()
    saved_to: Path | None = None


@dataclass(frozen=True, slots=True)
class _BaseResult:
    root: SnapshotRoot
    added: tuple[ChangedFile, ...] = ()
    removed: tuple[ChangedFile, ...] = ()


def _attribute(
    base_path: str,
    base_tree: PathTree,
    entries: Sequence[str],
    normalize: Normalize,
) -> tuple[ChangedFile, ...]:
    changes: list[ChangedFile] = []
    for entry in entries:
        # falls back to the deepest known ancestor
        node = get_tree(base_tree, os.path.dirname(entry), False, normalize)
        owners = node.owners if node is not None else set()
        changes.append(
            ChangedFile(
                file_path=os.path.join(base_path, entry),
                candidates=tuple(sorted(owners)),
            )
        )
    return tuple(changes)


class SnapshotCycle:
    """Snapshot hooks for one deployment host.

    Args:
        host: Provider of game, profile and notification services.
    """

    def __init__(self, host: DeploymentHost) -> None:
        self._host = host

    async def before_deploy(self, profile_id: str, deployment: Deployment) -> CycleReport | None:
        """Report files changed since the last deployment.

        Failures are logged and shown through the host; they never
        propagate, so deployment can proceed regardless.

        Args:
            profile_id: Profile about to be deployed.
            deployment: Currently deployed files per mod type.

        Returns:
            The report, or None if the check failed.
        """
        try:
            return await self._check(profile_id, deployment)
        except Exception as e:
            logger.exception("Failed to check for added files")
            self._host.show_error("Failed to check for added files", e)
            return None

    async def after_deploy(
        self,
        profile_id: str,
        deployment: Deployment,
        set_title: Callable[[str], None],
    ) -> CycleReport | None:
        """Store a fresh snapshot for the next deployment to compare against.

        Args:
            profile_id: Profile that was deployed.
            deployment: Newly deployed files per mod type.
            set_title: Updates the host's progress title.

        Returns:
            The report, or None if capturing failed.
        """
        try:
            set_title(SNAPSHOT_PROGRESS_TITLE)
            store, tree, base_paths = self._prepare(profile_id, deployment)
            results = await self._capture(tree, base_paths, baseline=None)
            saved_to = self._save(store, [result.root for result in results])
        except Exception as e:
            logger.exception("Failed to create snapshots")
            self._host.show_error("Failed to create snapshots", e)
            return None
        return CycleReport(profile_id=profile_id, base_paths=tuple(base_paths), saved_to=saved_to)

    async def _check(self, profile_id: str, deployment: Deployment) -> CycleReport:
        store, tree, base_paths = self._prepare(profile_id, deployment)
        baseline = self._load_baseline(store)

        results = await self._capture(tree, base_paths, baseline)
        added = tuple(change for result in results for change in result.added)
        removed = tuple(change for result in results for change in result.removed)

        if added:
            await self._host.emit(ADDED_FILES_EVENT, profile_id, list(added))
        if removed:
            await self._host.emit(REMOVED_FILES_EVENT, profile_id, list(removed))

        saved_to = self._save(store, [result.root for result in results])
        return CycleReport(
            profile_id=profile_id,
            base_paths=tuple(base_paths),
            baseline_found=baseline is not None,
            added=added,
            removed=removed,
            saved_to=saved_to,
        )

    def _prepare(
        self, profile_id: str, deployment: Deployment
    ) -> tuple[SnapshotStore, PathTree, list[str]]:
        game_id = self._host.game_id(profile_id)
        store = SnapshotStore(self._host.snapshot_path(game_id))
        tree = consolidate(deployment, self._host.mod_paths(profile_id))
        base_paths = figure_out_base_paths(tree)
        logger.debug("Base paths for %s: %s", game_id, base_paths)
        return store, tree, base_paths

    def _load_baseline(self, store: SnapshotStore) -> list[SnapshotRoot] | None:
        try:
            return store.load()
        except SnapshotNotFoundError:
            logger.info("No previous snapshot at %s", store.path)
        except SnapshotStoreError as e:
            logger.warning("Ignoring unreadable snapshot: %s", e)
            self._host.show_error("Failed to read the previous snapshot", e)
        return None

    def _save(self, store: SnapshotStore, roots: list[SnapshotRoot]) -> Path | None:
        try:
            return store.save(roots)
        except SnapshotStoreError as e:
            logger.warning("Snapshot not saved: %s", e)
            self._host.show_error("Failed to save snapshot", e)
            return None

    async def _capture(
        self,
        tree: PathTree,
        base_paths: Sequence[str],
        baseline: list[SnapshotRoot] | None,
    ) -> list[_BaseResult]:
        # every walk finishes before the first failure is raised
        outcomes = await asyncio.gather(
            *(self._capture_base(tree, base_path, baseline) for base_path in base_paths),
            return_exceptions=True,
        )
        results: list[_BaseResult] = []
        for base_path, outcome in zip(base_paths, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.debug("Capturing %s failed: %r", base_path, outcome)
                raise outcome
            results.append(outcome)
        return results

    async def _capture_base(
        self,
        tree: PathTree,
        base_path: str,
        baseline: list[SnapshotRoot] | None,
    ) -> _BaseResult:
        normalize = await self._host.normalize_func(base_path)
        entries = await snapshot(base_path, tree, normalize)
        root = SnapshotRoot(base_path=base_path, entries=entries)

        if baseline is None:
            return _BaseResult(root=root)
        previous = find_root(baseline, base_path)
        if previous is None:
            logger.info("No old entries for path %s", base_path)
            return _BaseResult(root=root)

        diff = compare_entries(normalize, previous.entries, entries)
        if not diff.has_changes:
            return _BaseResult(root=root)

        base_tree = get_tree(tree, base_path, True, normalize)
        if base_tree is None:
            base_tree = PathTree()
        logger.info(
            "%s: %d file(s) added, %d removed outside of deployment",
            base_path,
            len(diff.added),
            len(diff.removed),
        )
        return _BaseResult(
            root=root,
            added=_attribute(base_path, base_tree, diff.added, normalize),
            removed=_attribute(base_path, base_tree, diff.removed, normalize),
        )


def register(host: DeploymentHost) -> SnapshotCycle:
    """Attach the snapshot hooks to a host's deployment events.

    Args:
        host: The deployment host.

    Returns:
        The SnapshotCycle handling the events.
    """
    cycle = SnapshotCycle(host)
    host.on_async(WILL_DEPLOY_EVENT, cycle.before_deploy)
    host.on_async(DID_DEPLOY_EVENT, cycle.after_deploy)
    return cycle
