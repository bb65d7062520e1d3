#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the appvinspect library.

This module centralizes the fixed names, formats and defaults used across
appvinspect. Constants are organized by category:

1. Type Definitions - Literal types and type aliases
2. Package Layout - Well-known App-V metadata files and XML names
3. Date and Time Formats - Accepted timestamp layouts
4. Report Defaults - HTML report settings
5. CLI Defaults - Environment and configuration file names
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

WellKnownXmlName = Literal["AppxManifest", "AppxBlockMap", "FilesystemMetadata", "PackageHistory", "StreamMap"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# =============================================================================
# Package Layout
# =============================================================================

APPV_EXTENSION = ".appv"

# Identifier -> fixed in-archive filename (root level, exact case)
WELL_KNOWN_XML_FILES: dict[str, str] = {
    "AppxManifest": "AppxManifest.xml",
    "AppxBlockMap": "AppxBlockMap.xml",
    "FilesystemMetadata": "FilesystemMetadata.xml",
    "PackageHistory": "PackageHistory.xml",
    "StreamMap": "StreamMap.xml",
}

# Order in which metadata roots are merged under the synthetic root
AGGREGATED_XML_KINDS: tuple[WellKnownXmlName, ...] = (
    "AppxManifest",
    "PackageHistory",
    "StreamMap",
    "FilesystemMetadata",
)

MERGED_ROOT_TAG = "AppVPackage"

PRIMARY_FEATURE_BLOCK_ID = "PrimaryFeatureBlock"

# =============================================================================
# Date and Time Formats
# =============================================================================

# Non-ISO layouts accepted for package history <Time> values (ISO-8601 is
# always tried first)
PACKAGE_HISTORY_TIME_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
)

ASSET_INSTALL_DATE_FORMAT = "%Y%m%d"
ASSET_INSTALL_DATE_LENGTH = 8

# =============================================================================
# Report Defaults
# =============================================================================

DEFAULT_REPORT_TITLE = "App-V Package Report"
DEFAULT_REPORT_LANGUAGE = "en"
DEFAULT_REPORT_DETAILED = False

# =============================================================================
# CLI Defaults
# =============================================================================

ENV_PREFIX = "APPVINSPECT_"
CONFIG_ENV_VAR = "APPVINSPECT_CONFIG"
CONFIG_FILENAMES: tuple[str, ...] = (
    ".appvinspect.toml",
    ".appvinspect.yaml",
    ".appvinspect.yml",
    ".appvinspect.json",
)
PYPROJECT_TOOL_SECTION = "appvinspect"
