#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/extract.py
"""Single-member extraction from App-V packages.

Extraction saves one archive member under its leaf filename in a
destination directory. Nothing is written when the member is missing, and an
existing target is only replaced when ``overwrite`` is set. Content is
written to a temporary sibling first and moved into place, so an interrupted
write never leaves a truncated file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Union

from appvinspect.archive import AppvArchive
from appvinspect.exceptions import OutputWriteError, TargetExistsError, ValidationError
from appvinspect.well_known import WellKnownXml

logger = logging.getLogger(__name__)


def _target_name(internal_path: str) -> str:
    normalized = internal_path.replace("\\", "/")
    name = PurePosixPath(normalized).name
    if not name or name in (".", "..") or normalized.endswith("/"):
        raise ValidationError(
            f"Archive member path does not name a file: {internal_path!r}",
            parameter_name="internal_path",
            parameter_value=internal_path,
        )
    return name


def extract_member(
    archive_path: Union[str, Path],
    internal_path: str,
    destination_dir: Union[str, Path],
    overwrite: bool = False,
) -> Path:
    """Save one archive member into ``destination_dir``.

    Parameters
    ----------
    archive_path : str or Path
        Path of the ``.appv`` package
    internal_path : str
        Exact, case-sensitive internal path of the member
    destination_dir : str or Path
        Directory to write into; created if it does not exist
    overwrite : bool, default False
        Replace an existing file of the same name

    Returns
    -------
    Path
        Path of the saved file

    Raises
    ------
    ArchiveOpenError
        If the package cannot be opened or the member data is corrupt
    MemberNotFoundError
        If the member does not exist (the destination is left untouched)
    TargetExistsError
        If the target exists and ``overwrite`` is False (the existing file
        is left untouched)
    OutputWriteError
        If writing the target fails

    """
    target_name = _target_name(internal_path)
    destination = Path(destination_dir)
    target = destination / target_name

    with AppvArchive(archive_path) as archive:
        entry = archive.get_entry(internal_path)

        if target.exists() and not overwrite:
            raise TargetExistsError(str(target))

        try:
            destination.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=f".{target_name}.", suffix=".part", dir=destination)
        except OSError as e:
            raise OutputWriteError(str(target), original_error=e) from e

        try:
            with os.fdopen(fd, "wb") as out:
                archive.copy_member(entry, out)
            os.replace(temp_name, target)
        except OSError as e:
            raise OutputWriteError(str(target), original_error=e) from e
        finally:
            if os.path.exists(temp_name):
                os.unlink(temp_name)

    logger.info("Extracted %s from %s to %s", internal_path, archive_path, target)
    return target


def extract_well_known(
    archive_path: Union[str, Path],
    kind: Union[str, WellKnownXml],
    destination_dir: Union[str, Path],
    overwrite: bool = False,
) -> Path:
    """Extract one of the five well-known metadata files.

    ``kind`` is matched case-insensitively (``"streammap"``, ``"StreamMap"``).
    Raises :class:`UnknownKindError` for anything else.
    """
    filename = WellKnownXml.parse(kind).filename
    return extract_member(archive_path, filename, destination_dir, overwrite=overwrite)
