#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/well_known.py
"""Well-known App-V metadata files.

An App-V 5.0 package carries five XML metadata files at the archive root.
This module maps their identifiers to the fixed in-archive filenames.
Identifiers are matched case-insensitively; filenames are returned with
their exact case.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from appvinspect.constants import WELL_KNOWN_XML_FILES
from appvinspect.exceptions import UnknownKindError


class WellKnownXml(str, Enum):
    """Identifiers of the App-V metadata files."""

    APPX_MANIFEST = "AppxManifest"
    APPX_BLOCK_MAP = "AppxBlockMap"
    FILESYSTEM_METADATA = "FilesystemMetadata"
    PACKAGE_HISTORY = "PackageHistory"
    STREAM_MAP = "StreamMap"

    @property
    def filename(self) -> str:
        """In-archive filename of this metadata file."""
        return WELL_KNOWN_XML_FILES[self.value]

    @classmethod
    def parse(cls, value: Union[str, "WellKnownXml"]) -> "WellKnownXml":
        """Resolve an identifier string to a member, ignoring case.

        Parameters
        ----------
        value : str or WellKnownXml
            Identifier such as ``"appxmanifest"`` or ``"StreamMap"``

        Returns
        -------
        WellKnownXml
            Matching member

        Raises
        ------
        UnknownKindError
            If the identifier does not name one of the five files

        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownKindError(repr(value))

        wanted = value.lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise UnknownKindError(value)

    def __str__(self) -> str:
        return self.value


def resolve_filename(kind: Union[str, WellKnownXml]) -> str:
    """Return the fixed archive filename for a well-known metadata file.

    >>> resolve_filename("appxmanifest")
    'AppxManifest.xml'

    """
    return WellKnownXml.parse(kind).filename


def is_well_known_kind(value: str) -> bool:
    """Check whether a string names one of the well-known metadata files."""
    try:
        WellKnownXml.parse(value)
    except UnknownKindError:
        return False
    return True
