"""appvinspect - inspect Microsoft App-V 5.0 packages.

An App-V 5.0 package (``.appv``) is a ZIP archive holding a fixed set of XML
metadata files next to the virtualized payload. appvinspect reads those files
and produces a structured summary of the package: identity, prerequisites,
published applications, streaming configuration, sequencing history and
asset-intelligence data. The summary can be exported as JSON, as a merged XML
document or as a self-contained HTML report.

Key Features
------------
- Read-only access to package archives with exact member lookup
- Safe XML parsing through defusedxml
- Immutable, fully typed summary records
- HTML reports with an optional detailed mode and custom style sheets
- Single-file extraction of any archive member

Examples
--------
Summarize a package:

    >>> from appvinspect import aggregate
    >>> summary = aggregate("Notepad++.appv")  # doctest: +SKIP
    >>> [app.name for app in summary.applications]  # doctest: +SKIP
    ['Notepad++']

Write a detailed HTML report:

    >>> from appvinspect import HtmlReportRenderer, ReportOptions
    >>> renderer = HtmlReportRenderer(ReportOptions(detailed=True))
    >>> renderer.render(summary, "Notepad++.html")  # doctest: +SKIP

Extract the manifest:

    >>> from appvinspect import extract_well_known
    >>> extract_well_known("Notepad++.appv", "appxmanifest", "./out")  # doctest: +SKIP
    PosixPath('out/AppxManifest.xml')

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import logging

from appvinspect.aggregator import PackageAggregator, aggregate, load_merged_document
from appvinspect.archive import AppvArchive, ArchiveEntry
from appvinspect.exceptions import (
    AppvInspectError,
    ArchiveOpenError,
    InvalidTimestampError,
    MalformedStreamMapError,
    MalformedXmlError,
    MemberNotFoundError,
    RequiredFileMissingError,
    TargetExistsError,
    UnknownKindError,
)
from appvinspect.extract import extract_member, extract_well_known
from appvinspect.models import Application, AssetRecord, PackageHistoryEntry, PackageSummary
from appvinspect.options import ReportOptions
from appvinspect.renderers.html import HtmlReportRenderer
from appvinspect.well_known import WellKnownXml, resolve_filename
from appvinspect.xml_loader import XmlDocument, load_xml

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "aggregate",
    "load_merged_document",
    "PackageAggregator",
    "AppvArchive",
    "ArchiveEntry",
    "XmlDocument",
    "load_xml",
    "WellKnownXml",
    "resolve_filename",
    "extract_member",
    "extract_well_known",
    "Application",
    "AssetRecord",
    "PackageHistoryEntry",
    "PackageSummary",
    "ReportOptions",
    "HtmlReportRenderer",
    "AppvInspectError",
    "ArchiveOpenError",
    "InvalidTimestampError",
    "MalformedStreamMapError",
    "MalformedXmlError",
    "MemberNotFoundError",
    "RequiredFileMissingError",
    "TargetExistsError",
    "UnknownKindError",
]
