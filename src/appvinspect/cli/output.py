#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/cli/output.py
"""Console output for the appvinspect CLI."""

import argparse
import sys
from typing import IO, Iterable, Optional

from appvinspect.archive import ArchiveEntry
from appvinspect.models import PackageSummary
from appvinspect.utils.text import format_size


def should_use_rich_output(args: argparse.Namespace, stream: Optional[IO[str]] = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the ``--rich`` flag is set and either
    ``--force-rich`` is set or the output stream is a TTY.

    """
    if not getattr(args, "rich", False):
        return False

    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except ValueError:
            return False
    return False


def _summary_rows(summary: PackageSummary) -> list[tuple[str, str]]:
    return [
        ("Name", summary.name),
        ("Display name", summary.display_name),
        ("Description", summary.description),
        ("Publisher", summary.publisher_display_name or summary.publisher),
        ("Version", summary.version),
        ("Package ID", summary.package_id),
        ("Version ID", summary.version_id),
        ("Minimum OS version", summary.os_min_version),
        ("Maximum OS version tested", summary.os_max_version_tested),
        ("Sequencer architecture", summary.sequencer_architecture),
        ("Primary feature block load all", summary.primary_feature_block_load_all),
        ("File system root", summary.file_system_root),
        ("File system short path", summary.file_system_short),
        ("Files", str(summary.file_count)),
        ("Uncompressed size", format_size(summary.uncompressed_size)),
        ("Applications", ", ".join(app.name or app.id for app in summary.applications)),
        ("History entries", str(len(summary.package_history))),
    ]


def print_summary_plain(summary: PackageSummary, stream: Optional[IO[str]] = None) -> None:
    out = stream or sys.stdout
    rows = _summary_rows(summary)
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        print(f"{label.ljust(width)}  {value}", file=out)


def print_summary_rich(summary: PackageSummary) -> None:
    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(title=summary.display_name or summary.name or "App-V Package", show_header=False)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for label, value in _summary_rows(summary):
        table.add_row(label, value)
    console.print(table)

    if summary.applications:
        apps = Table(title="Applications")
        apps.add_column("Name", style="cyan")
        apps.add_column("Version", style="yellow")
        apps.add_column("Target", style="white")
        for app in summary.applications:
            apps.add_row(app.name or app.id, app.version, app.target or app.id)
        console.print(apps)


def print_entries_plain(entries: Iterable[ArchiveEntry], stream: Optional[IO[str]] = None) -> None:
    out = stream or sys.stdout
    for entry in entries:
        modified = entry.last_write_time.strftime("%Y-%m-%d %H:%M:%S")
        print(f"{entry.uncompressed_length:>12}  {entry.compressed_length:>12}  {modified}  {entry.full_path}", file=out)


def print_entries_rich(entries: Iterable[ArchiveEntry]) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Package Files")
    table.add_column("Path", style="cyan", no_wrap=False)
    table.add_column("Size", style="yellow", justify="right")
    table.add_column("Compressed", style="magenta", justify="right")
    table.add_column("Modified", style="white")
    for entry in entries:
        table.add_row(
            entry.full_path,
            format_size(entry.uncompressed_length),
            format_size(entry.compressed_length),
            entry.last_write_time.strftime("%Y-%m-%d %H:%M:%S"),
        )
    Console().print(table)
