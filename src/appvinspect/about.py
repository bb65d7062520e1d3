#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/about.py
"""Version information for appvinspect.

:class:`VersionInfo` is an immutable descriptor. The CLI builds one at
startup with :meth:`VersionInfo.current` and hands it to whatever needs it
(the report footer, ``--version`` output) instead of consulting globals.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "appvinspect"


@dataclass(frozen=True)
class VersionInfo:
    """Immutable description of the running tool."""

    name: str
    version: str
    python_version: str
    platform: str

    @classmethod
    def current(cls) -> VersionInfo:
        """Describe the installed distribution and interpreter."""
        try:
            installed = version(DISTRIBUTION_NAME)
        except PackageNotFoundError:
            installed = "0.0.0+unknown"
        return cls(
            name=DISTRIBUTION_NAME,
            version=installed,
            python_version=platform.python_version(),
            platform=sys.platform,
        )

    @property
    def label(self) -> str:
        return f"{self.name} {self.version}"

    def describe(self) -> str:
        """Multi-line text used by ``--version``."""
        return f"{self.label}\nPython {self.python_version} on {self.platform}"
