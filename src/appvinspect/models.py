#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/models.py
"""Structured records describing an App-V package.

All records are frozen dataclasses created once per aggregation and never
mutated afterwards. String fields default to ``""`` rather than ``None`` and
collection fields are tuples that preserve source-document order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, Optional

from appvinspect.archive import ArchiveEntry


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, tuple):
        return [_serialize(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _RecordMixin:
    """Shared ``to_dict`` for the record dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}  # type: ignore[arg-type]


@dataclass(frozen=True)
class Application(_RecordMixin):
    """An application published by the package.

    Parameters
    ----------
    id : str
        Application identifier, usually the tokenized executable path
    origin : str
        Origin of the application entry (``"User"`` or ``"System"``)
    target_in_package : str
        Whether the target lives inside the package
    target : str
        Tokenized target path
    name : str
        Display name from the visual elements
    version : str
        Version from the visual elements

    """

    id: str = ""
    origin: str = ""
    target_in_package: str = ""
    target: str = ""
    name: str = ""
    version: str = ""


@dataclass(frozen=True)
class PackageHistoryEntry(_RecordMixin):
    """One sequencing (or upgrade) session recorded in the package history."""

    time: datetime
    package_version: str = ""
    sequencer_version: str = ""
    sequencer_user: str = ""
    sequencing_station: str = ""
    windows_version: str = ""
    windows_folder: str = ""
    user_folder: str = ""
    system_type: str = ""
    processor: str = ""
    last_reboot_normal: str = ""
    terminal_services: str = ""
    remote_session: str = ""
    net_framework_version: str = ""
    ie_version: str = ""
    package_os_bitness: str = ""
    packaging_engine: str = ""
    locale: str = ""
    in_upgrade: str = ""


@dataclass(frozen=True)
class AssetRecord(_RecordMixin):
    """Asset-intelligence data for one product captured while sequencing.

    ``install_date`` is None when the source value was empty or did not
    match the eight-digit ``yyyyMMdd`` layout.
    """

    software_code: str = ""
    product_name: str = ""
    product_version: str = ""
    publisher: str = ""
    product_id: str = ""
    language: str = ""
    channel_code: str = ""
    install_date: Optional[date] = None
    registered_user: str = ""
    installed_location: str = ""
    cm_dsl_id: str = ""
    version_major: str = ""
    version_minor: str = ""
    service_pack: str = ""
    upgrade_code: str = ""
    os_component: str = ""


@dataclass(frozen=True)
class PackageSummary(_RecordMixin):
    """Flat summary of an App-V package.

    Identity and prerequisite fields come from ``AppxManifest.xml``,
    ``primary_feature_block_load_all`` from ``StreamMap.xml``, the
    file-system fields from ``FilesystemMetadata.xml`` and the history from
    ``PackageHistory.xml``. ``files`` lists every archive entry in archive
    order and the size totals are sums over it.
    """

    # Identity
    name: str = ""
    package_id: str = ""
    version_id: str = ""
    display_name: str = ""
    description: str = ""
    version: str = ""
    publisher: str = ""
    publisher_display_name: str = ""

    # Prerequisites
    os_min_version: str = ""
    os_max_version_tested: str = ""
    sequencer_architecture: str = ""

    # Derived
    uncompressed_size: int = 0
    compressed_size: int = 0
    primary_feature_block_load_all: str = ""
    file_system_root: str = ""
    file_system_short: str = ""

    # Collections
    applications: tuple[Application, ...] = field(default_factory=tuple)
    package_history: tuple[PackageHistoryEntry, ...] = field(default_factory=tuple)
    asset_intelligence: tuple[AssetRecord, ...] = field(default_factory=tuple)
    files: tuple[ArchiveEntry, ...] = field(default_factory=tuple)

    source_path: str = ""

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the summary as a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
