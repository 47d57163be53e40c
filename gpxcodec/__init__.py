"""gpxcodec: typed GPX 1.0/1.1 documents with an XML codec and geometry mapping.

The codec lives in :mod:`gpxcodec.codec`, the waypoint/route/track to
geometry mapping in :mod:`gpxcodec.geometry`.
"""

from .codec import marshal, read, unmarshal, write, write_indent
from .config import ReadOptions
from .errors import GPXError, GPXParseError, GPXSyntaxError
from .geometry import (
    NO_LAYOUT,
    XY,
    XYM,
    XYZ,
    XYZM,
    Layout,
    LineString,
    MultiLineString,
    Point,
    route_from_geom,
    route_geom,
    track_from_geom,
    track_geom,
    track_segment_from_geom,
    track_segment_geom,
    waypoint_from_geom,
    waypoint_geom,
    waypoints_from_geom,
)
from .models import (
    GPX,
    Bounds,
    Copyright,
    Extensions,
    Link,
    Metadata,
    Person,
    Route,
    Track,
    TrackSegment,
    Waypoint,
)
from .xmlio import XML_HEADER

__all__ = [
    "GPX", "Bounds", "Copyright", "Extensions", "Link", "Metadata", "Person",
    "Route", "Track", "TrackSegment", "Waypoint",
    "ReadOptions", "GPXError", "GPXParseError", "GPXSyntaxError", "XML_HEADER",
    "marshal", "read", "unmarshal", "write", "write_indent",
    "Layout", "NO_LAYOUT", "XY", "XYZ", "XYM", "XYZM",
    "Point", "LineString", "MultiLineString",
    "waypoint_geom", "route_geom", "track_segment_geom", "track_geom",
    "waypoint_from_geom", "waypoints_from_geom", "route_from_geom",
    "track_segment_from_geom", "track_from_geom",
]
