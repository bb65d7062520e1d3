#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/appvinspect/cli/commands.py
"""Subcommand handlers for the appvinspect CLI.

Each handler receives the parsed arguments and the version descriptor built
at startup, performs one operation and returns an exit code. Library
exceptions propagate to :func:`appvinspect.cli.main`, which maps them to exit
codes.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict

from appvinspect.about import VersionInfo
from appvinspect.aggregator import aggregate, load_merged_document
from appvinspect.archive import AppvArchive
from appvinspect.cli.builder import EXIT_SUCCESS
from appvinspect.cli.output import (
    print_entries_plain,
    print_entries_rich,
    print_summary_plain,
    print_summary_rich,
    should_use_rich_output,
)
from appvinspect.cli.validation import validate_package_path
from appvinspect.extract import extract_member, extract_well_known
from appvinspect.options import ReportOptions
from appvinspect.renderers.html import HtmlReportRenderer
from appvinspect.utils.io_utils import write_content
from appvinspect.well_known import is_well_known_kind

logger = logging.getLogger(__name__)

CommandHandler = Callable[[argparse.Namespace, VersionInfo], int]


def _report_path(args: argparse.Namespace, package: Path) -> Path:
    if args.out:
        return Path(args.out)
    directory = Path(args.output_dir) if args.output_dir else package.parent
    return directory / f"{package.stem}.html"


def handle_report(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """Write the HTML report for a package."""
    package = validate_package_path(args.package)
    summary = aggregate(package)

    options = ReportOptions(detailed=bool(args.detailed), title=args.title, css_file=args.css)
    renderer = HtmlReportRenderer(options, version_info=version_info)
    target = _report_path(args, package)
    renderer.render(summary, target)

    print(f"Report written to {target}")
    return EXIT_SUCCESS


def handle_info(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """Print the package summary as JSON or as a table."""
    package = validate_package_path(args.package)
    summary = aggregate(package)

    if args.json:
        print(summary.to_json())
    elif should_use_rich_output(args):
        print_summary_rich(summary)
    else:
        print_summary_plain(summary)
    return EXIT_SUCCESS


def handle_xml(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """Write the merged XML metadata document."""
    package = validate_package_path(args.package)
    content = load_merged_document(package).to_bytes()

    if args.out:
        write_content(content, args.out)
        print(f"Merged XML written to {args.out}")
    else:
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.write(b"\n")
        sys.stdout.flush()
    return EXIT_SUCCESS


def handle_extract(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """Extract a well-known metadata file or an arbitrary member."""
    package = validate_package_path(args.package)

    if is_well_known_kind(args.member):
        saved = extract_well_known(package, args.member, args.output_dir, overwrite=bool(args.overwrite))
    else:
        saved = extract_member(package, args.member, args.output_dir, overwrite=bool(args.overwrite))

    print(f"Saved {saved}")
    return EXIT_SUCCESS


def handle_list(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """List archive entries with their sizes."""
    package = validate_package_path(args.package)
    with AppvArchive(package) as archive:
        entries = archive.list_entries()

    if should_use_rich_output(args):
        print_entries_rich(entries)
    else:
        print_entries_plain(entries)
    return EXIT_SUCCESS


COMMANDS: Dict[str, CommandHandler] = {
    "report": handle_report,
    "info": handle_info,
    "xml": handle_xml,
    "extract": handle_extract,
    "list": handle_list,
}


def dispatch_command(args: argparse.Namespace, version_info: VersionInfo) -> int:
    """Run the handler registered for ``args.command``."""
    handler = COMMANDS[args.command]
    logger.debug("Running command %s", args.command)
    return handler(args, version_info)
