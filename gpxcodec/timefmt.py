"""Timestamps: GPX text encoding and the measure (M) coordinate encoding.

A missing timestamp is ``None`` throughout gpxcodec. As a measure it is
``0.0``, and a measure of ``0.0`` always decodes back to ``None``, even
though the Unix epoch itself also has a measure of ``0.0``.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone

from .errors import GPXParseError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RFC3339_NANO = "%Y-%m-%dT%H:%M:%S.%f%z"
RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
LOCAL_NANO = "%Y-%m-%dT%H:%M:%S.%f"
LOCAL = "%Y-%m-%dT%H:%M:%S"

DEFAULT_TIME_LAYOUTS = (RFC3339_NANO, RFC3339, LOCAL_NANO, LOCAL)

# <copyright><year> is an xsd:gYear, which may carry a zone
YEAR_LAYOUTS = ("%Y", "%YZ", "%Y%z")

# strptime's %f stops at microseconds
_EXTRA_FRACTION_DIGITS = re.compile(r"(\.\d{6})\d+")


def _as_utc(t: datetime) -> datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def time_to_measure(t: datetime | None) -> float:
    """Return ``t`` as signed seconds since the Unix epoch, or 0 for None."""
    if t is None:
        return 0.0
    delta = _as_utc(t) - EPOCH
    nanos = (delta.days * 86400 + delta.seconds) * 10**9 + delta.microseconds * 1000
    return nanos / 1e9


def measure_to_time(m: float) -> datetime | None:
    """Inverse of :func:`time_to_measure`. ``0`` gives None, not the epoch."""
    if m == 0:
        return None
    frac, whole = math.modf(m)
    nanos = round(frac * 1e9)
    return EPOCH + timedelta(seconds=int(whole), microseconds=nanos / 1000)


def format_time(t: datetime) -> str:
    """Format ``t`` in UTC with as many fractional digits as it needs."""
    t = _as_utc(t)
    text = (f"{t.year:04d}-{t.month:02d}-{t.day:02d}"
            f"T{t.hour:02d}:{t.minute:02d}:{t.second:02d}")
    if t.microsecond:
        text += "." + f"{t.microsecond:06d}".rstrip("0")
    return text + "Z"


def parse_time(text: str, layouts=DEFAULT_TIME_LAYOUTS) -> datetime:
    """Parse ``text`` with the first matching strptime layout.

    Zone-less layouts are read as UTC. The result is always UTC.
    """
    value = _EXTRA_FRACTION_DIGITS.sub(r"\1", text.strip())
    for layout in layouts:
        try:
            t = datetime.strptime(value, layout)
        except ValueError:
            continue
        return _as_utc(t)
    raise GPXParseError(f"{text!r}: no matching time layout", text=text)


def parse_year(text: str) -> int:
    value = text.strip()
    for layout in YEAR_LAYOUTS:
        try:
            return datetime.strptime(value, layout).year
        except ValueError:
            continue
    raise GPXParseError(f"{text!r}: cannot parse copyright year", text=text)
