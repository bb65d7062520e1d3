#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the appvinspect library.

This module defines specialized exception classes for the error conditions
that can occur while opening App-V packages, parsing their XML metadata and
rendering reports. Every error is fatal for the call that raised it: the
archive handle is released before the exception reaches the caller and no
partial result is ever returned.

Exception Hierarchy
-------------------
- AppvInspectError (base exception)

  - ValidationError (parameter/argument validation)
    - UnknownKindError (unrecognized well-known XML identifier)

  - FileError (file access and I/O)
    - ArchiveOpenError (missing, unreadable or non-ZIP package)
    - MemberNotFoundError (archive member absent)
      - RequiredFileMissingError (one of the mandatory metadata files absent)
    - TargetExistsError (extraction target exists and overwrite is off)

  - ParsingError (package metadata parsing failures)
    - MalformedXmlError (member is not well-formed XML)
    - MalformedStreamMapError (feature block layout not understood)
    - InvalidTimestampError (package history time not parseable)

  - RenderingError (output generation failures)
    - OutputWriteError (file write failures)

"""

from typing import Any


class AppvInspectError(Exception):
    """Base exception class for all appvinspect-specific errors.

    Catching this will catch all library-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AppvInspectError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class UnknownKindError(ValidationError):
    """Exception raised when a well-known XML identifier is not recognized.

    Parameters
    ----------
    kind : str
        The identifier that could not be resolved
    message : str, optional
        Custom error message. If not provided, lists the accepted identifiers

    """

    def __init__(self, kind: str, message: str | None = None):
        """Initialize the unknown kind error."""
        if message is None:
            from appvinspect.constants import WELL_KNOWN_XML_FILES

            accepted = ", ".join(WELL_KNOWN_XML_FILES)
            message = f"Unknown App-V XML file kind: '{kind}'. Expected one of: {accepted}"
        super().__init__(message, parameter_name="kind", parameter_value=kind)
        self.kind = kind


class FileError(AppvInspectError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class ArchiveOpenError(FileError):
    """Exception raised when a package cannot be opened as a ZIP archive.

    This covers missing files, permission problems and files that are not
    valid ZIP containers.

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the archive open error."""
        if message is None:
            message = f"Cannot open App-V package: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class MemberNotFoundError(FileError):
    """Exception raised when an archive member does not exist.

    Member lookup is exact and case-sensitive on the full internal path.

    Parameters
    ----------
    member : str
        Internal archive path that was requested
    file_path : str, optional
        Path of the archive that was searched
    message : str, optional
        Custom error message

    """

    def __init__(self, member: str, file_path: str | None = None, message: str | None = None):
        """Initialize the member not found error."""
        if message is None:
            message = f"Archive member not found: {member}"
            if file_path:
                message += f" (in {file_path})"
        super().__init__(message, file_path=file_path)
        self.member = member


class RequiredFileMissingError(MemberNotFoundError):
    """Exception raised when a mandatory App-V metadata file is absent.

    Parameters
    ----------
    kind : str
        Well-known identifier of the missing file (e.g. ``"StreamMap"``)
    member : str
        Filename that was looked up
    file_path : str, optional
        Path of the archive that was searched

    """

    def __init__(self, kind: str, member: str, file_path: str | None = None):
        """Initialize the required file missing error."""
        message = f"Required App-V metadata file '{member}' ({kind}) is missing"
        if file_path:
            message += f" from {file_path}"
        super().__init__(member, file_path=file_path, message=message)
        self.kind = kind


class TargetExistsError(FileError):
    """Exception raised when an extraction target already exists.

    The existing file is left untouched.

    """

    def __init__(self, file_path: str, message: str | None = None):
        """Initialize the target exists error."""
        if message is None:
            message = f"Target file already exists (use overwrite to replace it): {file_path}"
        super().__init__(message, file_path=file_path)


class ParsingError(AppvInspectError):
    """Exception raised when package metadata parsing fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class MalformedXmlError(ParsingError):
    """Exception raised when an archive member is not well-formed XML.

    Parameters
    ----------
    message : str
        Description of the XML problem
    kind : str, optional
        Well-known identifier of the file being parsed, when known
    original_error : Exception, optional
        The underlying parser exception

    """

    def __init__(self, message: str, kind: str | None = None, original_error: Exception | None = None):
        """Initialize the malformed XML error."""
        super().__init__(message, parsing_stage="xml_parsing", original_error=original_error)
        self.kind = kind


class MalformedStreamMapError(ParsingError):
    """Exception raised when the stream map feature blocks cannot be interpreted."""

    def __init__(self, message: str):
        """Initialize the malformed stream map error."""
        super().__init__(message, parsing_stage="stream_map")


class InvalidTimestampError(ParsingError):
    """Exception raised when a package history time value cannot be parsed.

    Parameters
    ----------
    value : str
        The raw text that failed to parse
    message : str, optional
        Custom error message

    """

    def __init__(self, value: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the invalid timestamp error."""
        if message is None:
            message = f"Invalid package history timestamp: {value!r}"
        super().__init__(message, parsing_stage="package_history", original_error=original_error)
        self.value = value


class RenderingError(AppvInspectError):
    """Exception raised when report rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class OutputWriteError(RenderingError):
    """Exception raised when writing an output file fails.

    Parameters
    ----------
    file_path : str
        Path to the output file that failed to write
    message : str, optional
        Custom error message. If not provided, uses default message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, rendering_stage="file_write", original_error=original_error)
        self.file_path = file_path
