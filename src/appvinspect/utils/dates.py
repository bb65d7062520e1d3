#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/utils/dates.py
"""Date and time parsing for App-V metadata values.

Two policies live here side by side:

- :func:`parse_history_time` is strict. A package history ``<Time>`` value
  that cannot be parsed raises :class:`InvalidTimestampError`.
- :func:`parse_install_date` is tolerant. Asset-intelligence install dates
  are frequently written in the sequencing machine's locale, so anything
  that is not exactly ``yyyyMMdd`` yields None.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from appvinspect.constants import (
    ASSET_INSTALL_DATE_FORMAT,
    ASSET_INSTALL_DATE_LENGTH,
    PACKAGE_HISTORY_TIME_FORMATS,
)
from appvinspect.exceptions import InvalidTimestampError

logger = logging.getLogger(__name__)

# yyyy-MM-ddTHH:mm:ss with optional fraction (up to seven digits, as in .NET
# round-trip values) and an optional Z or +HH:MM offset
_ISO_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,7}))?(Z|[+-]\d{2}:\d{2})?",
    re.IGNORECASE | re.ASCII,
)


def _parse_iso(text: str) -> Optional[datetime]:
    match = _ISO_PATTERN.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))

    tzinfo = None
    if offset is not None:
        if offset.upper() == "Z":
            tzinfo = timezone.utc
        else:
            sign = -1 if offset[0] == "-" else 1
            delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
            try:
                tzinfo = timezone(sign * delta)
            except ValueError:
                return None

    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tzinfo
        )
    except ValueError:
        return None


def parse_history_time(text: str) -> datetime:
    """Parse a package history timestamp.

    The ISO-8601 date-time form ``yyyy-MM-ddTHH:mm:ss[.fffffff][Z|+HH:MM]`` is
    tried first, then the layouts in
    ``PACKAGE_HISTORY_TIME_FORMATS``.

    Parameters
    ----------
    text : str
        Raw element text

    Returns
    -------
    datetime
        Parsed timestamp (timezone-aware only if the source carried an offset)

    Raises
    ------
    InvalidTimestampError
        If the text is empty or matches none of the accepted layouts

    """
    value = (text or "").strip()
    if not value:
        raise InvalidTimestampError(text or "", "Package history entry has an empty timestamp")

    parsed = _parse_iso(value)
    if parsed is not None:
        return parsed

    for fmt in PACKAGE_HISTORY_TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    raise InvalidTimestampError(value)


def parse_install_date(text: str) -> Optional[date]:
    """Parse an asset-intelligence install date, returning None on any failure.

    >>> parse_install_date("20150615")
    datetime.date(2015, 6, 15)
    >>> parse_install_date("maandag 15 juni 2015") is None
    True

    """
    value = (text or "").strip()
    if not value:
        return None
    if len(value) != ASSET_INSTALL_DATE_LENGTH or not value.isdigit():
        logger.debug("Ignoring install date not in yyyyMMdd form: %r", value)
        return None
    try:
        return datetime.strptime(value, ASSET_INSTALL_DATE_FORMAT).date()
    except ValueError:
        logger.debug("Ignoring invalid install date: %r", value)
        return None
