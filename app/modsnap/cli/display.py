"""Shared Rich display functions for drift reports.

Provides table builders and summary printers for files changed outside
of deployment.
"""

from rich.markup import escape
from rich.table import Table

from modsnap.snapshot.cycle import CycleReport
from modsnap.snapshot.models import ChangedFile
from modsnap.utils.formatting import console, print_success


def create_changes_table(title: str, changes: list[ChangedFile], style: str) -> Table:
    """Create a Rich table listing changed files and their candidate mods.

    Args:
        title: Table title.
        changes: Changed files to list.
        style: Theme style for the file column ("added" or "removed").

    Returns:
        Rich Table configured for change display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("File", no_wrap=True)
    table.add_column("Candidate Mods")

    for change in changes:
        candidates = ", ".join(change.candidates) if change.candidates else "-"
        # mod and file names often contain brackets
        table.add_row(
            f"[{style}]{escape(change.file_path)}[/{style}]",
            f"[candidate]{escape(candidates)}[/candidate]",
        )

    return table


def print_report(report: CycleReport) -> None:
    """Print the added and removed files of a report with a summary line.

    Args:
        report: Report of a before-deploy check.
    """
    if not (report.added or report.removed):
        print_success("No files were changed outside of deployment.")
        return

    if report.added:
        console.print(create_changes_table("Files Added Externally", list(report.added), "added"))
    if report.removed:
        console.print(
            create_changes_table("Files Removed Externally", list(report.removed), "removed")
        )

    parts: list[str] = []
    if report.added:
        parts.append(f"[added]{len(report.added)} added[/added]")
    if report.removed:
        parts.append(f"[removed]{len(report.removed)} removed[/removed]")
    console.print(f"\nSummary: {', '.join(parts)}")
