#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/appvinspect/cli/validation.py
"""Input validation for the appvinspect CLI."""

from pathlib import Path

from appvinspect.constants import APPV_EXTENSION
from appvinspect.exceptions import ArchiveOpenError, ValidationError


def validate_package_path(package: str) -> Path:
    """Check that ``package`` names an existing ``.appv`` file.

    Parameters
    ----------
    package : str
        Path given on the command line

    Returns
    -------
    Path
        The validated path

    Raises
    ------
    ValidationError
        If the extension is not ``.appv`` (compared case-insensitively)
    ArchiveOpenError
        If the file does not exist or is not a regular file

    """
    path = Path(package)
    if path.suffix.lower() != APPV_EXTENSION:
        raise ValidationError(
            f"Input must be an App-V package ({APPV_EXTENSION}): {package}",
            parameter_name="package",
            parameter_value=package,
        )
    if not path.exists():
        raise ArchiveOpenError(package, f"App-V package not found: {package}")
    if not path.is_file():
        raise ArchiveOpenError(package, f"App-V package is not a file: {package}")
    return path
