"""Test utilities for appvinspect.

Helpers that build synthetic App-V packages. Each ``create_*_xml`` function
returns the text of one metadata file shaped like the output of the App-V 5.0
sequencer (real namespaces, ``appv:`` prefixed extension elements), and
:func:`create_test_appv` writes a complete ``.appv`` archive from them.
"""

import io
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

APPX_NS = "http://schemas.microsoft.com/appx/2010/manifest"
APPV_NS = "http://schemas.microsoft.com/appv/2010/manifest"
HISTORY_NS = "http://schemas.microsoft.com/appv/2010/PackageHistory"
STREAM_MAP_NS = "http://schemas.microsoft.com/appv/2010/streammap"
FS_METADATA_NS = "http://schemas.microsoft.com/appv/2010/FilesystemMetadata"

NOTEPAD_TARGET = r"[{ProgramFilesX64}]\Notepad++\notepad++.exe"

DEFAULT_APPLICATIONS: tuple[tuple[str, str], ...] = (
    ("Notepad++", "7.9.1"),
    ("Notepad++ Updater", "1.0"),
)

DEFAULT_PAYLOAD: dict[str, bytes] = {
    "Root/VFS/ProgramFilesX64/Notepad++/notepad++.exe": b"MZ" + b"\x00" * 4094,
    "Root/VFS/ProgramFilesX64/Notepad++/readme.txt": b"Notepad++ readme\n" * 64,
    "[Content_Types].xml": b'<?xml version="1.0"?><Types/>',
}


def create_manifest_xml(
    applications: Sequence[tuple[str, str]] = DEFAULT_APPLICATIONS,
    install_dates: Sequence[str] = ("20150615",),
    architecture: Optional[str] = "x64",
) -> str:
    """Build an ``AppxManifest.xml`` document.

    Parameters
    ----------
    applications : sequence of (name, version)
        Published applications in document order
    install_dates : sequence of str
        One asset-intelligence record is written per install date string
    architecture : str or None
        ``SequencingStationProcessorArchitecture`` property; omitted when None

    """
    arch_xml = ""
    if architecture is not None:
        arch_xml = (
            f"<appv:SequencingStationProcessorArchitecture>{architecture}"
            "</appv:SequencingStationProcessorArchitecture>"
        )

    app_xml = "".join(
        f"""
    <Application Id="{NOTEPAD_TARGET}.{index}" appv:Origin="User">
      <appv:TargetInPackage>true</appv:TargetInPackage>
      <appv:Target>{NOTEPAD_TARGET}</appv:Target>
      <appv:VisualElements>
        <appv:Name>{name}</appv:Name>
        <appv:Version>{version}</appv:Version>
      </appv:VisualElements>
    </Application>"""
        for index, (name, version) in enumerate(applications)
    )

    asset_xml = "".join(
        f"""
    <appv:AssetIntelligenceProperties>
      <appv:SoftwareCode>{{CF1E1CB7-7B2A-4BD5-9C0A-1A2B3C4D5E{index:02d}}}</appv:SoftwareCode>
      <appv:ProductName>Notepad++ (64-bit x64)</appv:ProductName>
      <appv:ProductVersion>7.9.1</appv:ProductVersion>
      <appv:Publisher>Notepad++ Team</appv:Publisher>
      <appv:ProductID />
      <appv:Language>1033</appv:Language>
      <appv:ChannelCode />
      <appv:InstallDate>{install_date}</appv:InstallDate>
      <appv:RegisteredUser>sequencer</appv:RegisteredUser>
      <appv:InstalledLocation>C:\\Program Files\\Notepad++</appv:InstalledLocation>
      <appv:CM_DSLID />
      <appv:VersionMajor>7</appv:VersionMajor>
      <appv:VersionMinor>9</appv:VersionMinor>
      <appv:ServicePack />
      <appv:UpgradeCode />
      <appv:OsComponent>0</appv:OsComponent>
    </appv:AssetIntelligenceProperties>"""
        for index, install_date in enumerate(install_dates)
    )

    return f"""<?xml version="1.0" encoding="utf-8"?>
<Package xmlns="{APPX_NS}" xmlns:appv="{APPV_NS}" IgnorableNamespaces="appv">
  <Identity Name="Reserved" Publisher="CN=Reserved" Version="0.0.0.1"
            appv:PackageId="4b7d1c2e-1c54-4e0a-9a1b-6d2f0e8a7c11"
            appv:VersionId="0f3d92ab-7a52-4f6e-8d71-2c9e5b4a1d07" />
  <Properties>
    <DisplayName>Notepad++ 7.9.1</DisplayName>
    <PublisherDisplayName>Notepad++ Team</PublisherDisplayName>
    <Description>Free source code editor</Description>
    <Logo>Reserved.jpeg</Logo>
    <appv:AppVPackageDescription>No description entered</appv:AppVPackageDescription>
    {arch_xml}
  </Properties>
  <Resources>
    <Resource Language="en-us" />
  </Resources>
  <Prerequisites>
    <OSMinVersion>6.1</OSMinVersion>
    <OSMaxVersionTested>10.0</OSMaxVersionTested>
    <appv:TargetOSes SequencingStationProcessorArchitecture="x86" />
  </Prerequisites>
  <appv:AssetIntelligence>{asset_xml}
  </appv:AssetIntelligence>
  <Applications>{app_xml}
  </Applications>
</Package>
"""


def create_package_history_xml(times: Sequence[str] = ("2015-06-15T10:30:00",)) -> str:
    """Build a ``PackageHistory.xml`` document with one item per time value."""
    items = "".join(
        f"""
  <PackageHistoryItem>
    <Time>{time}</Time>
    <PackageVersion>{index + 1}</PackageVersion>
    <SequencerVersion>5.0.1104.0</SequencerVersion>
    <SequencerUser>CONTOSO\\sequencer</SequencerUser>
    <SequencingStation>SEQ-W7-X64</SequencingStation>
    <WindowsVersion>6.1.7601</WindowsVersion>
    <WindowsFolder>C:\\Windows</WindowsFolder>
    <UserFolder>C:\\Users\\sequencer</UserFolder>
    <SystemType>x64</SystemType>
    <Processor>Intel64 Family 6</Processor>
    <LastRebootNormal>true</LastRebootNormal>
    <TerminalServices>false</TerminalServices>
    <RemoteSession>false</RemoteSession>
    <NetFrameworkVersion>4.0.30319</NetFrameworkVersion>
    <IEVersion>9.11.9600</IEVersion>
    <PackageOSBitness>x64</PackageOSBitness>
    <PackagingEngine>Sequencer</PackagingEngine>
    <Locale>en-US</Locale>
    <InUpgrade>{"true" if index else "false"}</InUpgrade>
  </PackageHistoryItem>"""
        for index, time in enumerate(times)
    )
    return f"""<?xml version="1.0" encoding="utf-8"?>
<PackageHistory xmlns="{HISTORY_NS}">{items}
</PackageHistory>
"""


def create_stream_map_xml(
    blocks: Sequence[tuple[str, str]] = (("PrimaryFeatureBlock", "true"), ("FeatureBlock1", "false")),
) -> str:
    """Build a ``StreamMap.xml`` document from ``(Id, LoadAll)`` pairs."""
    block_xml = "".join(f'\n  <FeatureBlock Id="{block_id}" LoadAll="{load_all}" />' for block_id, load_all in blocks)
    return f"""<?xml version="1.0" encoding="utf-8"?>
<StreamMap xmlns="{STREAM_MAP_NS}">{block_xml}
</StreamMap>
"""


def create_filesystem_metadata_xml(
    root: str = r"C:\Program Files\Notepad++", short: str = r"C:\PROGRA~1\NOTEPA~1"
) -> str:
    """Build a ``FilesystemMetadata.xml`` document."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<Metadata xmlns="{FS_METADATA_NS}">
  <Filesystem Root="{root}" Short="{short}" />
</Metadata>
"""


def create_block_map_xml() -> str:
    """Build a minimal ``AppxBlockMap.xml`` document."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<BlockMap xmlns="{APPX_NS}/blockmap" HashMethod="http://www.w3.org/2001/04/xmlenc#sha256">
  <File Name="Root\\VFS\\ProgramFilesX64\\Notepad++\\notepad++.exe" Size="4096" LfhSize="82" />
</BlockMap>
"""


def create_appv_members(**overrides: str) -> dict[str, bytes]:
    """Return the metadata and payload members of a well-formed package.

    Keyword arguments replace the content of a metadata member, keyed by its
    filename without ``.xml`` (for example ``StreamMap="<broken"``).
    """
    metadata = {
        "AppxManifest": create_manifest_xml(),
        "AppxBlockMap": create_block_map_xml(),
        "FilesystemMetadata": create_filesystem_metadata_xml(),
        "PackageHistory": create_package_history_xml(),
        "StreamMap": create_stream_map_xml(),
    }
    metadata.update(overrides)

    members = {f"{name}.xml": text.encode("utf-8") for name, text in metadata.items()}
    members.update(DEFAULT_PAYLOAD)
    return members


def create_test_zip(files: Mapping[str, bytes]) -> bytes:
    """Create a ZIP archive in memory from a mapping of member paths to bytes."""
    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for file_path, content in files.items():
            zf.writestr(file_path, content)
    return zip_buffer.getvalue()


def create_test_appv(
    path: Path,
    members: Optional[Mapping[str, bytes]] = None,
    omit: Iterable[str] = (),
) -> Path:
    """Write an ``.appv`` package to ``path``.

    Parameters
    ----------
    path : Path
        Destination file
    members : mapping, optional
        Archive members; defaults to :func:`create_appv_members`
    omit : iterable of str
        Member paths to leave out

    """
    files = dict(members if members is not None else create_appv_members())
    for name in omit:
        files.pop(name, None)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(create_test_zip(files))
    return path


def corrupt_member_data(path: Path, member: str) -> None:
    """Flip one byte in the middle of a member's compressed data in place.

    The central directory is left intact, so the archive still opens and
    lists normally; only reading the member fails.
    """
    with zipfile.ZipFile(path) as zf:
        info = zf.getinfo(member)
    data = bytearray(path.read_bytes())
    offset = info.header_offset
    # Local file header: 30 fixed bytes, then the name and extra field
    name_length = int.from_bytes(data[offset + 26 : offset + 28], "little")
    extra_length = int.from_bytes(data[offset + 28 : offset + 30], "little")
    payload_start = offset + 30 + name_length + extra_length
    data[payload_start + info.compress_size // 2] ^= 0xFF
    path.write_bytes(bytes(data))


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
