#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/utils/text.py
"""Text formatting helpers shared by the report renderer and the CLI."""

from __future__ import annotations


def format_size(size_bytes: int | float) -> str:
    """Format a byte count in human-readable form.

    Parameters
    ----------
    size_bytes : int or float
        Size in bytes

    Returns
    -------
    str
        Formatted size such as ``"1.5 MB"``; plain bytes carry no decimals

    Examples
    --------
    >>> format_size(512)
    '512 B'
    >>> format_size(1536)
    '1.5 KB'

    """
    size: float = float(size_bytes)
    if size < 1024.0:
        return f"{int(size)} B"
    for unit in ["KB", "MB", "GB"]:
        size /= 1024.0
        if size < 1024.0:
            return f"{size:.1f} {unit}"
    return f"{size / 1024.0:.1f} TB"
