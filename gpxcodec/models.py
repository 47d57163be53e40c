"""GPX document tree.

Every field has a default so that records can be built incrementally.
A field holding its zero value (``0``, ``0.0``, ``""``, ``[]`` or ``None``)
is treated as absent and is not written out; ``lat``, ``lon``, the bounds
attributes and DGPS station IDs are the exceptions and are always written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Extensions:
    """Raw inner XML of an ``<extensions>`` element, kept byte for byte."""
    xml: bytes = b""


@dataclass
class Link:
    href: str = ""
    text: str = ""
    type: str = ""


@dataclass
class Person:
    name: str = ""
    email: str = ""
    link: Link | None = None


@dataclass
class Copyright:
    author: str = ""
    year: int = 0
    license: str = ""


@dataclass
class Bounds:
    minlat: float = 0.0
    minlon: float = 0.0
    maxlat: float = 0.0
    maxlon: float = 0.0


@dataclass
class Metadata:
    name: str = ""
    desc: str = ""
    author: Person | None = None
    copyright: Copyright | None = None
    link: list[Link] = field(default_factory=list)
    time: datetime | None = None
    keywords: str = ""
    bounds: Bounds | None = None
    extensions: Extensions | None = None


@dataclass
class Waypoint:
    """A ``wpt``, ``rtept`` or ``trkpt``."""
    lat: float = 0.0
    lon: float = 0.0
    ele: float = 0.0
    speed: float = 0.0
    course: float = 0.0
    time: datetime | None = None
    magvar: float = 0.0
    geoid_height: float = 0.0
    name: str = ""
    cmt: str = ""
    desc: str = ""
    src: str = ""
    link: list[Link] = field(default_factory=list)
    sym: str = ""
    type: str = ""
    fix: str = ""
    sat: int = 0
    hdop: float = 0.0
    vdop: float = 0.0
    pdop: float = 0.0
    age_of_dgps_data: float = 0.0
    dgpsid: list[int] = field(default_factory=list)
    extensions: Extensions | None = None


@dataclass
class Route:
    name: str = ""
    cmt: str = ""
    desc: str = ""
    src: str = ""
    link: list[Link] = field(default_factory=list)
    number: int = 0
    type: str = ""
    extensions: Extensions | None = None
    rtept: list[Waypoint] = field(default_factory=list)


@dataclass
class TrackSegment:
    trkpt: list[Waypoint] = field(default_factory=list)
    extensions: Extensions | None = None


@dataclass
class Track:
    name: str = ""
    cmt: str = ""
    desc: str = ""
    src: str = ""
    link: list[Link] = field(default_factory=list)
    number: int = 0
    type: str = ""
    extensions: Extensions | None = None
    trkseg: list[TrackSegment] = field(default_factory=list)


@dataclass
class GPX:
    """Root of a GPX document.

    ``attrs`` holds extra root attributes (typically ``xmlns:*`` declarations
    used by extension payloads) keyed by qualified name. ``schema_locations``
    holds the ``xsi:schemaLocation`` tokens that follow the two GPX ones.
    """
    version: str = "1.1"
    creator: str = ""
    metadata: Metadata | None = None
    wpt: list[Waypoint] = field(default_factory=list)
    rte: list[Route] = field(default_factory=list)
    trk: list[Track] = field(default_factory=list)
    extensions: Extensions | None = None
    attrs: dict[str, str] = field(default_factory=dict)
    schema_locations: list[str] = field(default_factory=list)

    def write(self, stream, header: bool = False):
        from .codec import write
        write(self, stream, header=header)

    def write_indent(self, stream, prefix: str, indent: str, header: bool = False):
        from .codec import write_indent
        write_indent(self, stream, prefix, indent, header=header)
