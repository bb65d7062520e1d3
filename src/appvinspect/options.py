#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/options.py
"""Configuration options for report rendering.

Options are frozen dataclasses. Use :meth:`CloneFrozenMixin.create_updated`
to derive a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from appvinspect.constants import DEFAULT_REPORT_DETAILED, DEFAULT_REPORT_LANGUAGE, DEFAULT_REPORT_TITLE


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ReportOptions(CloneFrozenMixin):
    """Configuration options for the HTML package report.

    Parameters
    ----------
    detailed : bool, default False
        Add the asset-intelligence table and the full file listing.
    title : str or None, default None
        Page title. Defaults to ``"App-V Package Report"`` followed by the
        package display name.
    css : str or None, default None
        Style sheet text that replaces the built-in style sheet.
    css_file : str or None, default None
        Path of a style sheet file that replaces the built-in style sheet.
        Ignored when ``css`` is given.
    language : str, default "en"
        Value of the ``lang`` attribute on the ``<html>`` element.

    """

    detailed: bool = field(
        default=DEFAULT_REPORT_DETAILED,
        metadata={"help": "Include asset intelligence and the full file listing"},
    )
    title: Optional[str] = field(
        default=None,
        metadata={"help": "Report title (defaults to the package display name)"},
    )
    css: Optional[str] = None
    css_file: Optional[str] = field(
        default=None,
        metadata={"help": "Style sheet file replacing the built-in styles"},
    )
    language: str = DEFAULT_REPORT_LANGUAGE

    def resolved_title(self, display_name: str) -> str:
        if self.title:
            return self.title
        if display_name:
            return f"{DEFAULT_REPORT_TITLE}: {display_name}"
        return DEFAULT_REPORT_TITLE
