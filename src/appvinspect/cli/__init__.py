"""Command-line interface for the appvinspect App-V package inspector.

Environment Variable Support
----------------------------
All options support environment variable defaults using the pattern
APPVINSPECT_<OPTION_NAME> where option names are converted to uppercase with
hyphens replaced by underscores. Configuration files are located through
``--config``, the APPVINSPECT_CONFIG variable or discovery of
``.appvinspect.toml`` / ``.yaml`` / ``.json`` or ``[tool.appvinspect]`` in
``pyproject.toml``. CLI arguments always override both.

Examples
--------
Write an HTML report next to the package::

    $ appvinspect report Notepad++.appv

Detailed report with a custom style sheet::

    $ appvinspect report Notepad++.appv --detailed --css corporate.css -o report.html

Print the summary as JSON::

    $ appvinspect info Notepad++.appv --json

Extract the manifest::

    $ appvinspect extract Notepad++.appv appxmanifest -d ./out

"""

import argparse
import logging
import os
import sys

from appvinspect.about import VersionInfo
from appvinspect.cli.builder import (
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    apply_defaults,
    apply_env_vars_to_parser,
    create_parser,
    get_exit_code_for_exception,
)
from appvinspect.cli.commands import dispatch_command
from appvinspect.cli.config import config_to_defaults, load_config_with_priority
from appvinspect.constants import CONFIG_ENV_VAR
from appvinspect.exceptions import AppvInspectError
from appvinspect.logging_utils import configure_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    ``--trace`` takes highest precedence, then ``--verbose``, then
    ``--log-level``.
    """
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper(), logging.WARNING)

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _apply_configuration(parser: argparse.ArgumentParser, args: list[str] | None) -> None:
    """Load configuration file and environment defaults into ``parser``."""
    preliminary, _ = parser.parse_known_args(args)
    if not preliminary.no_config:
        config = load_config_with_priority(preliminary.config, os.environ.get(CONFIG_ENV_VAR))
        if config:
            apply_defaults(parser, config_to_defaults(config))
    apply_env_vars_to_parser(parser)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return a process exit code."""
    parser = create_parser()

    try:
        _apply_configuration(parser, args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    parsed_args = parser.parse_args(args)
    version_info = VersionInfo.current()

    if parsed_args.version:
        print(version_info.describe())
        return EXIT_SUCCESS

    if not parsed_args.command:
        parser.print_help(sys.stderr)
        return EXIT_VALIDATION_ERROR

    _setup_logging_level(parsed_args)

    try:
        return dispatch_command(parsed_args, version_info)
    except AppvInspectError as e:
        logger.debug("Command %s failed", parsed_args.command, exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return get_exit_code_for_exception(e)


if __name__ == "__main__":
    sys.exit(main())
