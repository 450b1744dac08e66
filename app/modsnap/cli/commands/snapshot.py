"""Snapshot commands.

Runs the deployment snapshot hooks for a game described by a deployment
manifest, and inspects stored snapshots.
"""

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from modsnap.cli.display import print_report
from modsnap.cli.host import ManifestHost
from modsnap.core.config import ConfigError, SnapConfig, load_config
from modsnap.core.paths import get_snapshot_path
from modsnap.snapshot.cycle import SnapshotCycle
from modsnap.snapshot.manifest import DeploymentManifest, ManifestError, load_deployment_manifest
from modsnap.snapshot.store import SnapshotNotFoundError, SnapshotStore, SnapshotStoreError
from modsnap.snapshot.tree import PathConflictError, consolidate, figure_out_base_paths
from modsnap.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Detect files changed outside of deployment.",
    invoke_without_command=True,
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Output format options for snapshot reports."""

    TABLE = "table"
    JSON = "json"


ManifestArgument = Annotated[
    Path,
    typer.Argument(help="Deployment manifest (JSON).", show_default=False),
]

ProfileOption = Annotated[
    str,
    typer.Option("--profile", "-p", help="Profile identifier to report against."),
]


@app.command()
def check(
    manifest_path: ManifestArgument,
    profile: ProfileOption = "default",
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Report files changed since the last snapshot, then store a new one."""
    manifest, config = _load_inputs(manifest_path)
    host = ManifestHost(manifest, config)

    report = asyncio.run(
        SnapshotCycle(host).before_deploy(profile, manifest.deployed_files())
    )
    if report is None:
        raise typer.Exit(code=1)

    if output_format == OutputFormat.JSON:
        data = {
            "baseline_found": report.baseline_found,
            "base_paths": list(report.base_paths),
            "added": [change.to_dict() for change in report.added],
            "removed": [change.to_dict() for change in report.removed],
        }
        console.print_json(json.dumps(data))
        return

    if not report.baseline_found:
        print_info("No previous snapshot to compare against.")
    else:
        print_report(report)

    if report.saved_to is not None:
        print_info(f"Snapshot saved to {report.saved_to}")


@app.command()
def capture(
    manifest_path: ManifestArgument,
    profile: ProfileOption = "default",
) -> None:
    """Store a snapshot of the current deployment state."""
    manifest, config = _load_inputs(manifest_path)
    host = ManifestHost(manifest, config)

    report = asyncio.run(
        SnapshotCycle(host).after_deploy(profile, manifest.deployed_files(), print_info)
    )
    if report is None or report.saved_to is None:
        raise typer.Exit(code=1)

    print_success(
        f"Snapshot of {len(report.base_paths)} base path(s) saved to {report.saved_to}"
    )


@app.command()
def bases(manifest_path: ManifestArgument) -> None:
    """List the directories a snapshot would cover."""
    manifest, _config = _load_inputs(manifest_path)

    try:
        tree = consolidate(manifest.deployed_files(), manifest.mod_paths)
    except PathConflictError as e:
        print_error(f"Invalid deployment: {e}")
        raise typer.Exit(code=1) from e

    base_paths = figure_out_base_paths(tree)
    if not base_paths:
        print_info("Deployment has no base paths.")
        return
    for base_path in base_paths:
        console.print(base_path, markup=False)


@app.command()
def show(
    game: Annotated[str, typer.Argument(help="Game identifier.", show_default=False)],
    entries: Annotated[
        bool,
        typer.Option("--entries", "-e", help="List every unmanaged file."),
    ] = False,
) -> None:
    """Show the stored snapshot of a game."""
    config = _load_config()
    try:
        store = SnapshotStore(get_snapshot_path(game, config.effective_data_dir))
        roots = store.load()
    except SnapshotNotFoundError:
        print_info(f"No snapshot stored for '{game}'.")
        raise typer.Exit(code=1) from None
    except (SnapshotStoreError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title=f"Snapshot: {game}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Base Path", no_wrap=True)
    table.add_column("Unmanaged Files", justify="right")
    for root in roots:
        table.add_row(escape(root.base_path), str(len(root.entries)))
    console.print(table)

    if entries:
        for root in roots:
            console.print(f"\n[bold_header]{escape(root.base_path)}[/bold_header]")
            for entry in root.entries:
                console.print(f"  {entry}", markup=False)


# === Private helper functions ===


def _load_config() -> SnapConfig:
    """Load the user configuration or exit."""
    try:
        return load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def _load_inputs(manifest_path: Path) -> tuple[DeploymentManifest, SnapConfig]:
    """Load the deployment manifest and user configuration or exit."""
    try:
        manifest = load_deployment_manifest(manifest_path)
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    return manifest, _load_config()
