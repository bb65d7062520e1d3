#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/appvinspect/cli/builder.py
"""Argument parser construction for the appvinspect CLI.

The parser has one subcommand per operation (``report``, ``info``, ``xml``,
``extract`` and ``list``). Defaults can come from a configuration file or
from ``APPVINSPECT_<OPTION>`` environment variables; explicit flags win.
"""

import argparse
import logging
import os
from dataclasses import fields
from typing import Any, Dict, Iterator, get_args

from appvinspect.constants import ENV_PREFIX, LogLevel
from appvinspect.exceptions import (
    FileError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from appvinspect.options import ReportOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7

_TRUE_VALUES = ("true", "1", "yes", "on")


def _add_package_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("package", help="Path of the .appv package")


def _option_help(name: str) -> str:
    """Return the help text stored in a :class:`ReportOptions` field's metadata."""
    for option_field in fields(ReportOptions):
        if option_field.name == name:
            return option_field.metadata["help"]
    raise KeyError(name)


def create_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="appvinspect",
        description="Inspect Microsoft App-V 5.0 packages and report on their metadata.",
    )
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    parser.add_argument("--config", help="Configuration file (TOML, YAML or JSON)")
    parser.add_argument("--no-config", action="store_true", help="Ignore configuration files")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=list(get_args(LogLevel)),
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level DEBUG")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    report = subparsers.add_parser("report", help="Write an HTML report for a package")
    _add_package_argument(report)
    report.add_argument("-o", "--out", help="Output HTML file (default: <package>.html)")
    report.add_argument("--output-dir", help="Directory for the report when --out is not given")
    report.add_argument("--detailed", action="store_true", help=_option_help("detailed"))
    report.add_argument("--css", help=_option_help("css_file"))
    report.add_argument("--title", help=_option_help("title"))

    info = subparsers.add_parser("info", help="Print the package summary")
    _add_package_argument(info)
    info.add_argument("--json", action="store_true", help="Print the summary as JSON")
    info.add_argument("--rich", action="store_true", help="Use rich tables when printing to a terminal")
    info.add_argument("--force-rich", action="store_true", help="Use rich tables even when not on a terminal")

    xml = subparsers.add_parser("xml", help="Write the merged XML metadata document")
    _add_package_argument(xml)
    xml.add_argument("-o", "--out", help="Output XML file (default: stdout)")

    extract = subparsers.add_parser("extract", help="Extract one file from a package")
    _add_package_argument(extract)
    extract.add_argument(
        "member",
        help="Well-known file kind (AppxManifest, AppxBlockMap, FilesystemMetadata, PackageHistory, "
        "StreamMap; any case) or an exact archive member path",
    )
    extract.add_argument("-d", "--output-dir", default=".", help="Destination directory (default: cwd)")
    extract.add_argument("--overwrite", action="store_true", help="Replace an existing file")

    listing = subparsers.add_parser("list", help="List the files inside a package")
    _add_package_argument(listing)
    listing.add_argument("--rich", action="store_true", help="Use rich tables when printing to a terminal")
    listing.add_argument("--force-rich", action="store_true", help="Use rich tables even when not on a terminal")

    return parser


def iter_parsers(parser: argparse.ArgumentParser) -> Iterator[argparse.ArgumentParser]:
    """Yield ``parser`` followed by each of its subcommand parsers."""
    yield parser
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            yield from action.choices.values()


def apply_defaults(parser: argparse.ArgumentParser, defaults: Dict[str, Any]) -> None:
    """Set defaults on every parser that defines the matching destination."""
    for sub in iter_parsers(parser):
        known = {action.dest for action in sub._actions}
        matching = {dest: value for dest, value in defaults.items() if dest in known}
        if matching:
            sub.set_defaults(**matching)


def get_env_var_value(dest: str) -> str | None:
    """Return ``APPVINSPECT_<DEST>`` from the environment, if set."""
    return os.environ.get(f"{ENV_PREFIX}{dest.upper().replace('-', '_')}")


def apply_env_vars_to_parser(parser: argparse.ArgumentParser) -> None:
    """Apply environment variables as defaults to parser arguments.

    CLI arguments still take precedence over environment variables.
    """
    for sub in iter_parsers(parser):
        for action in sub._actions:
            if not action.dest or action.dest in ("help", "command", "package", "member", "config"):
                continue
            env_value = get_env_var_value(action.dest)
            if env_value is None:
                continue

            if isinstance(action, argparse._StoreTrueAction):
                action.default = env_value.lower() in _TRUE_VALUES
            elif action.choices:
                candidate = action.type(env_value) if callable(action.type) else env_value
                if candidate in action.choices:
                    action.default = candidate
                else:
                    logger.warning(
                        "Invalid choice for %s%s: %s. Choices: %s",
                        ENV_PREFIX,
                        action.dest.upper(),
                        env_value,
                        list(action.choices),
                    )
            else:
                action.default = env_value


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR

    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR

    return EXIT_ERROR
