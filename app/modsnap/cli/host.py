"""Command-line deployment host.

Provides the services the snapshot hooks need from a deployment manager,
backed by a deployment manifest file and the user configuration.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

from rich.markup import escape

from modsnap.core.config import SnapConfig
from modsnap.core.paths import get_snapshot_path
from modsnap.snapshot.diff import Normalize
from modsnap.snapshot.manifest import DeploymentManifest
from modsnap.snapshot.models import ChangedFile
from modsnap.snapshot.normalize import make_normalize_func
from modsnap.utils.formatting import print_warning


class ManifestHost:
    """DeploymentHost for a single game described by a manifest.

    Emitted changes are collected per event instead of being sent
    anywhere, and errors are printed as warnings.

    Attributes:
        events: Changed files received per event name.
        errors: Errors shown, as (message, error) pairs.
        handlers: Registered event handlers.
    """

    def __init__(self, manifest: DeploymentManifest, config: SnapConfig) -> None:
        self._manifest = manifest
        self._config = config
        self.events: dict[str, list[ChangedFile]] = {}
        self.errors: list[tuple[str, BaseException]] = []
        self.handlers: dict[str, Callable[..., Awaitable[Any]]] = {}

    def game_id(self, profile_id: str) -> str:
        return self._manifest.game

    def mod_paths(self, profile_id: str) -> Mapping[str, str]:
        return self._manifest.mod_paths

    def snapshot_path(self, game_id: str) -> Path:
        return get_snapshot_path(game_id, self._config.effective_data_dir)

    async def normalize_func(self, base_path: str) -> Normalize:
        # probing case sensitivity touches the filesystem
        return await asyncio.to_thread(
            make_normalize_func,
            base_path,
            case=self._config.case,
            unicode=self._config.unicode,
            separators=self._config.separators,
        )

    async def emit(self, event: str, profile_id: str, changes: list[ChangedFile]) -> None:
        self.events.setdefault(event, []).extend(changes)

    def show_error(self, message: str, error: BaseException) -> None:
        self.errors.append((message, error))
        print_warning(f"{message}: {escape(str(error))}")

    def on_async(self, event: str, handler: Callable[..., Awaitable[Any]]) -> None:
        self.handlers[event] = handler
