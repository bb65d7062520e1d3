#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/aggregator.py
"""Aggregate App-V package metadata into a :class:`PackageSummary`.

The aggregator opens a package, loads the four metadata files it needs
(``AppxManifest.xml``, ``PackageHistory.xml``, ``StreamMap.xml`` and
``FilesystemMetadata.xml``), merges their root elements under a single
synthetic ``<AppVPackage>`` root and reads a flat summary out of the merged
tree. ``AppxBlockMap.xml`` is not part of the summary; it is only reachable
through single-file extraction.

Examples
--------
>>> from appvinspect import aggregate
>>> summary = aggregate("package.appv")  # doctest: +SKIP
>>> summary.display_name  # doctest: +SKIP
'Notepad++'

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union
from xml.etree.ElementTree import Element

from appvinspect.archive import AppvArchive, ArchiveEntry
from appvinspect.constants import AGGREGATED_XML_KINDS, MERGED_ROOT_TAG, PRIMARY_FEATURE_BLOCK_ID
from appvinspect.exceptions import MalformedStreamMapError, MalformedXmlError, RequiredFileMissingError
from appvinspect.models import Application, AssetRecord, PackageHistoryEntry, PackageSummary
from appvinspect.utils.dates import parse_history_time, parse_install_date
from appvinspect.well_known import WellKnownXml
from appvinspect.xml_loader import (
    XmlDocument,
    child_text,
    find_child,
    find_path,
    get_attribute,
    iter_children,
    load_xml,
)

logger = logging.getLogger(__name__)

# PackageHistoryItem child element -> PackageHistoryEntry field
_HISTORY_FIELDS: dict[str, str] = {
    "PackageVersion": "package_version",
    "SequencerVersion": "sequencer_version",
    "SequencerUser": "sequencer_user",
    "SequencingStation": "sequencing_station",
    "WindowsVersion": "windows_version",
    "WindowsFolder": "windows_folder",
    "UserFolder": "user_folder",
    "SystemType": "system_type",
    "Processor": "processor",
    "LastRebootNormal": "last_reboot_normal",
    "TerminalServices": "terminal_services",
    "RemoteSession": "remote_session",
    "NetFrameworkVersion": "net_framework_version",
    "IEVersion": "ie_version",
    "PackageOSBitness": "package_os_bitness",
    "PackagingEngine": "packaging_engine",
    "Locale": "locale",
    "InUpgrade": "in_upgrade",
}

# AssetIntelligenceProperties child element -> AssetRecord field
_ASSET_FIELDS: dict[str, str] = {
    "SoftwareCode": "software_code",
    "ProductName": "product_name",
    "ProductVersion": "product_version",
    "Publisher": "publisher",
    "ProductID": "product_id",
    "Language": "language",
    "ChannelCode": "channel_code",
    "RegisteredUser": "registered_user",
    "InstalledLocation": "installed_location",
    "CM_DSLID": "cm_dsl_id",
    "VersionMajor": "version_major",
    "VersionMinor": "version_minor",
    "ServicePack": "service_pack",
    "UpgradeCode": "upgrade_code",
    "OsComponent": "os_component",
}


def _attribute_or_child(element: Element, name: str) -> str:
    value = get_attribute(element, name)
    if value:
        return value
    return child_text(element, name)


class PackageAggregator:
    """Build a :class:`PackageSummary` from an App-V package.

    Each call works on its own archive handle and keeps no state between
    calls, so one aggregator may serve several threads as long as they work
    on different packages.
    """

    def aggregate(self, archive_path: Union[str, Path]) -> PackageSummary:
        """Load, merge and summarize the package at ``archive_path``.

        Parameters
        ----------
        archive_path : str or Path
            Path of the ``.appv`` package

        Returns
        -------
        PackageSummary
            The fully populated summary

        Raises
        ------
        ArchiveOpenError
            If the package cannot be opened as a ZIP archive or a member is corrupt
        RequiredFileMissingError
            If one of the four mandatory metadata files is absent
        MalformedXmlError
            If a metadata file is not well-formed XML
        MalformedStreamMapError
            If the stream map feature blocks cannot be interpreted
        InvalidTimestampError
            If a package history timestamp cannot be parsed

        """
        logger.info("Aggregating App-V package %s", archive_path)
        with AppvArchive(archive_path) as archive:
            merged = self._merge(archive)
            entries = archive.list_entries()
        summary = self._summarize(merged, entries, str(archive_path))
        logger.debug(
            "Package %s: %d applications, %d history entries, %d files",
            summary.name,
            len(summary.applications),
            len(summary.package_history),
            summary.file_count,
        )
        return summary

    def build_merged_document(self, archive_path: Union[str, Path]) -> XmlDocument:
        """Return the merged ``<AppVPackage>`` document for a package."""
        with AppvArchive(archive_path) as archive:
            return self._merge(archive)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @staticmethod
    def _load_member(archive: AppvArchive, kind: WellKnownXml) -> XmlDocument:
        filename = kind.filename
        entry = archive.find_entry(filename)
        if entry is None:
            raise RequiredFileMissingError(kind.value, filename, file_path=str(archive.path))
        logger.debug("Loading %s from %s", filename, archive.path)
        data = archive.read_bytes(entry)
        try:
            return load_xml(data, kind=kind.value)
        except MalformedXmlError as e:
            raise MalformedXmlError(
                f"{filename} in {archive.path} is not well-formed XML: {e.original_error or e}",
                kind=kind.value,
                original_error=e.original_error,
            ) from e

    def _merge(self, archive: AppvArchive) -> XmlDocument:
        documents = [self._load_member(archive, WellKnownXml.parse(kind)) for kind in AGGREGATED_XML_KINDS]
        merged = XmlDocument.create(MERGED_ROOT_TAG)
        for document in documents:
            merged.append_imported(document.root)
        return merged

    # ------------------------------------------------------------------
    # Field extraction
    # ------------------------------------------------------------------
    def _summarize(self, merged: XmlDocument, entries: list[ArchiveEntry], source_path: str) -> PackageSummary:
        root = merged.root
        manifest = find_child(root, "Package")
        history_root = find_child(root, "PackageHistory")
        stream_map = find_child(root, "StreamMap")
        fs_metadata = find_child(root, "Metadata")

        identity = find_child(manifest, "Identity")
        properties = find_child(manifest, "Properties")
        prerequisites = find_child(manifest, "Prerequisites")

        sequencer_architecture = child_text(properties, "SequencingStationProcessorArchitecture")
        if not sequencer_architecture:
            sequencer_architecture = get_attribute(
                find_child(prerequisites, "TargetOSes"), "SequencingStationProcessorArchitecture"
            )

        filesystem = find_child(fs_metadata, "Filesystem")

        return PackageSummary(
            name=get_attribute(identity, "Name"),
            package_id=get_attribute(identity, "PackageId"),
            version_id=get_attribute(identity, "VersionId"),
            display_name=child_text(properties, "DisplayName"),
            description=child_text(properties, "Description"),
            version=get_attribute(identity, "Version"),
            publisher=get_attribute(identity, "Publisher"),
            publisher_display_name=child_text(properties, "PublisherDisplayName"),
            os_min_version=child_text(prerequisites, "OSMinVersion"),
            os_max_version_tested=child_text(prerequisites, "OSMaxVersionTested"),
            sequencer_architecture=sequencer_architecture,
            uncompressed_size=sum(entry.uncompressed_length for entry in entries),
            compressed_size=sum(entry.compressed_length for entry in entries),
            primary_feature_block_load_all=self._primary_feature_block_load_all(stream_map),
            file_system_root=get_attribute(filesystem, "Root"),
            file_system_short=get_attribute(filesystem, "Short"),
            applications=self._applications(manifest),
            package_history=self._package_history(history_root),
            asset_intelligence=self._asset_intelligence(manifest),
            files=tuple(entries),
            source_path=source_path,
        )

    @staticmethod
    def _applications(manifest: Element | None) -> tuple[Application, ...]:
        applications = []
        for app in iter_children(find_child(manifest, "Applications"), "Application"):
            visual = find_child(app, "VisualElements")
            applications.append(
                Application(
                    id=_attribute_or_child(app, "Id"),
                    origin=_attribute_or_child(app, "Origin"),
                    target_in_package=_attribute_or_child(app, "TargetInPackage"),
                    target=_attribute_or_child(app, "Target"),
                    name=child_text(visual, "Name"),
                    version=child_text(visual, "Version"),
                )
            )
        return tuple(applications)

    @staticmethod
    def _package_history(history_root: Element | None) -> tuple[PackageHistoryEntry, ...]:
        history = []
        for item in iter_children(history_root):
            values = {field_name: child_text(item, tag) for tag, field_name in _HISTORY_FIELDS.items()}
            history.append(PackageHistoryEntry(time=parse_history_time(child_text(item, "Time")), **values))
        return tuple(history)

    @staticmethod
    def _asset_intelligence(manifest: Element | None) -> tuple[AssetRecord, ...]:
        records = []
        for item in iter_children(find_child(manifest, "AssetIntelligence")):
            values = {field_name: child_text(item, tag) for tag, field_name in _ASSET_FIELDS.items()}
            install_date_text = child_text(item, "InstallDate")
            install_date = parse_install_date(install_date_text)
            if install_date is None and install_date_text:
                logger.debug("Asset %r: install date %r not recognized", values["product_name"], install_date_text)
            records.append(AssetRecord(install_date=install_date, **values))
        return tuple(records)

    @staticmethod
    def _primary_feature_block_load_all(stream_map: Element | None) -> str:
        blocks = list(iter_children(stream_map, "FeatureBlock"))
        if blocks and get_attribute(blocks[0], "Id") == PRIMARY_FEATURE_BLOCK_ID:
            return get_attribute(blocks[0], "LoadAll")
        if len(blocks) < 2:
            raise MalformedStreamMapError(
                f"StreamMap has {len(blocks)} feature block(s) and the first is not '{PRIMARY_FEATURE_BLOCK_ID}'"
            )
        return get_attribute(blocks[1], "LoadAll")


def aggregate(archive_path: Union[str, Path]) -> PackageSummary:
    """Summarize the App-V package at ``archive_path``.

    Convenience wrapper around :meth:`PackageAggregator.aggregate`.
    """
    return PackageAggregator().aggregate(archive_path)


def load_merged_document(archive_path: Union[str, Path]) -> XmlDocument:
    """Return the merged XML summary document of a package."""
    return PackageAggregator().build_merged_document(archive_path)
