#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/archive.py
"""Read-only access to App-V package archives.

An ``.appv`` file is a plain ZIP container. :class:`AppvArchive` opens it
read-only, resolves members by exact internal path and reports per-entry
metadata as :class:`ArchiveEntry` snapshots. The archive handle is a scoped
resource: use it as a context manager so the underlying file is released on
every exit path.

Examples
--------
>>> with AppvArchive("package.appv") as archive:  # doctest: +SKIP
...     entry = archive.get_entry("AppxManifest.xml")
...     data = archive.read_bytes(entry)

"""

from __future__ import annotations

import logging
import shutil
import zipfile
import zlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from types import TracebackType
from typing import IO, Any, Dict, Optional, Type, Union

from appvinspect.exceptions import ArchiveOpenError, MemberNotFoundError

logger = logging.getLogger(__name__)

# Raised by zipfile for corrupt, encrypted or unsupported member data
_MEMBER_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)


@dataclass(frozen=True)
class ArchiveEntry:
    """Snapshot of one archive member taken when the archive was read.

    Parameters
    ----------
    name : str
        Leaf filename of the member
    full_path : str
        Archive-internal path, forward-slash separated
    compressed_length : int
        Stored (compressed) size in bytes
    uncompressed_length : int
        Decompressed size in bytes
    last_write_time : datetime
        Modification time recorded in the archive

    """

    name: str
    full_path: str
    compressed_length: int
    uncompressed_length: int
    last_write_time: datetime

    @classmethod
    def from_zipinfo(cls, info: zipfile.ZipInfo) -> ArchiveEntry:
        """Build an entry from a :class:`zipfile.ZipInfo` record."""
        full_path = info.filename.replace("\\", "/")
        name = PurePosixPath(full_path.rstrip("/")).name
        try:
            last_write_time = datetime(*info.date_time)
        except ValueError:
            # Some packagers store an all-zero DOS timestamp
            last_write_time = datetime(1980, 1, 1)
        return cls(
            name=name,
            full_path=full_path,
            compressed_length=info.compress_size,
            uncompressed_length=info.file_size,
            last_write_time=last_write_time,
        )

    @property
    def is_directory(self) -> bool:
        return self.full_path.endswith("/")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "full_path": self.full_path,
            "compressed_length": self.compressed_length,
            "uncompressed_length": self.uncompressed_length,
            "last_write_time": self.last_write_time.isoformat(),
        }


class AppvArchive:
    """Read-only handle on an App-V package archive.

    Parameters
    ----------
    path : str or Path
        Filesystem path of the ``.appv`` file

    Raises
    ------
    ArchiveOpenError
        If the file is missing, unreadable or not a ZIP archive

    Notes
    -----
    A handle is owned by a single caller; it is not meant to be shared
    between threads. Separate handles on separate files are independent.

    """

    def __init__(self, path: Union[str, Path]):
        """Open the archive at ``path``."""
        self.path = Path(path)
        self._zip: Optional[zipfile.ZipFile] = None
        try:
            self._zip = zipfile.ZipFile(self.path, "r")
        except FileNotFoundError as e:
            raise ArchiveOpenError(str(self.path), f"App-V package not found: {self.path}", original_error=e) from e
        except zipfile.BadZipFile as e:
            raise ArchiveOpenError(
                str(self.path), f"Not a valid App-V package (bad ZIP archive): {self.path}", original_error=e
            ) from e
        except OSError as e:
            raise ArchiveOpenError(
                str(self.path), f"Could not read App-V package {self.path}: {e}", original_error=e
            ) from e
        logger.debug("Opened archive %s (%d entries)", self.path, len(self._zip.infolist()))

    @classmethod
    def open(cls, path: Union[str, Path]) -> AppvArchive:
        return cls(path)

    def __enter__(self) -> AppvArchive:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._zip is None

    def close(self) -> None:
        """Release the underlying file handle. Safe to call more than once."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            logger.debug("Closed archive %s", self.path)

    def _require_open(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise ValueError(f"Archive is closed: {self.path}")
        return self._zip

    def _find_info(self, exact_path: str) -> Optional[zipfile.ZipInfo]:
        zf = self._require_open()
        for info in zf.infolist():
            if info.filename.replace("\\", "/") == exact_path:
                return info
        return None

    def _unreadable(self, member: str, error: Exception) -> ArchiveOpenError:
        return ArchiveOpenError(
            str(self.path), f"Could not read {member} from {self.path}: {error}", original_error=error
        )

    def find_entry(self, exact_path: str) -> Optional[ArchiveEntry]:
        """Look up a member by exact, case-sensitive internal path.

        Stored names are compared after rewriting ``\\`` to ``/``, so
        ``"Root/a.dll"`` also finds a member stored as ``Root\\a.dll``.

        Returns
        -------
        ArchiveEntry or None
            The entry, or None when no member has that path

        """
        info = self._find_info(exact_path)
        return ArchiveEntry.from_zipinfo(info) if info is not None else None

    def get_entry(self, exact_path: str) -> ArchiveEntry:
        """Look up a member by exact, case-sensitive internal path.

        Separators are normalized as in :meth:`find_entry`.

        Raises
        ------
        MemberNotFoundError
            If no member has that path

        """
        entry = self.find_entry(exact_path)
        if entry is None:
            raise MemberNotFoundError(exact_path, file_path=str(self.path))
        return entry

    def contains(self, exact_path: str) -> bool:
        return self._find_info(exact_path) is not None

    def open_stream(self, entry: Union[ArchiveEntry, str]) -> IO[bytes]:
        """Open the decompressed byte stream of a member.

        The caller is responsible for closing the returned stream. Reads from
        the raw stream surface :mod:`zipfile` errors on corrupt data; use
        :meth:`read_bytes` or :meth:`copy_member` to get
        :class:`ArchiveOpenError` instead.
        """
        member = entry.full_path if isinstance(entry, ArchiveEntry) else entry
        info = self._find_info(member)
        if info is None:
            raise MemberNotFoundError(member, file_path=str(self.path))
        try:
            return self._require_open().open(info, "r")
        except _MEMBER_READ_ERRORS as e:
            raise self._unreadable(member, e) from e

    def read_bytes(self, entry: Union[ArchiveEntry, str]) -> bytes:
        """Return the decompressed content of a member.

        Raises
        ------
        ArchiveOpenError
            If the member data is corrupt, encrypted or uses an unsupported
            compression method

        """
        member = entry.full_path if isinstance(entry, ArchiveEntry) else entry
        with self.open_stream(entry) as stream:
            try:
                return stream.read()
            except _MEMBER_READ_ERRORS as e:
                raise self._unreadable(member, e) from e

    def copy_member(self, entry: Union[ArchiveEntry, str], output: IO[bytes]) -> None:
        """Stream the decompressed content of a member into ``output``."""
        member = entry.full_path if isinstance(entry, ArchiveEntry) else entry
        with self.open_stream(entry) as stream:
            try:
                shutil.copyfileobj(stream, output)
            except _MEMBER_READ_ERRORS as e:
                raise self._unreadable(member, e) from e

    def list_entries(self) -> list[ArchiveEntry]:
        """Return every member in archive order, directories included."""
        return [ArchiveEntry.from_zipinfo(info) for info in self._require_open().infolist()]

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<AppvArchive {str(self.path)!r} ({state})>"
