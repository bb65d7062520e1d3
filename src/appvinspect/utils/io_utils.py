#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/utils/io_utils.py
"""I/O utilities for handling output destinations.

Reports, JSON summaries and merged XML documents all go through
:func:`write_content`, which accepts a file path or an open stream.

"""

from __future__ import annotations

import io
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Union, cast


def _is_binary_stream(output: object) -> bool:
    if isinstance(output, BytesIO):
        return True
    if isinstance(output, StringIO):
        return False
    if isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def write_content(content: Union[str, bytes], output: Union[str, Path, IO[bytes], IO[str]]) -> None:
    """Write content to a file path or file-like object.

    Parameters
    ----------
    content : str or bytes
        Content to write. Text is encoded as UTF-8 when the destination is
        binary, bytes are decoded as UTF-8 when it is textual.
    output : str, Path, IO[bytes] or IO[str]
        Destination path (parent directories are created) or open stream

    Raises
    ------
    TypeError
        If the content or output type is not supported
    OSError
        If writing to the filesystem fails

    Examples
    --------
    >>> buffer = StringIO()
    >>> write_content("<html></html>", buffer)
    >>> buffer.getvalue()
    '<html></html>'

    """
    if not isinstance(content, (str, bytes)):
        raise TypeError(f"Content must be str or bytes, got {type(content)}")

    if isinstance(output, (str, Path)):
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            output_path.write_text(content, encoding="utf-8")
        else:
            output_path.write_bytes(content)
        return

    if hasattr(output, "write"):
        if _is_binary_stream(output):
            binary_output = cast(IO[bytes], output)
            binary_output.write(content.encode("utf-8") if isinstance(content, str) else content)
        else:
            text_output = cast(IO[str], output)
            text_output.write(content.decode("utf-8") if isinstance(content, bytes) else content)
        return

    raise TypeError(f"Unsupported output type: {type(output)}")


__all__ = ["write_content"]
