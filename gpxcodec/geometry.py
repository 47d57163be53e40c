"""Flat-coordinate geometries and their mapping to GPX records.

A geometry stores all of its coordinates in one flat list, ``stride``
values per point, in the order given by its :class:`Layout`. X is
longitude, Y latitude, Z elevation and M the point's time as seconds since
the Unix epoch (see :mod:`gpxcodec.timefmt`).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shapely import geometry as shapely_geometry

from .models import Route, Track, TrackSegment, Waypoint
from .timefmt import measure_to_time, time_to_measure


@dataclass(frozen=True)
class Layout:
    """Which dimensions a geometry carries and where they sit in a point."""
    stride: int
    z_index: int = -1
    m_index: int = -1
    name: str = field(default="", compare=False)

    def __repr__(self):
        return self.name or f"Layout({self.stride})"

    @classmethod
    def custom(cls, stride: int) -> Layout:
        """A layout with extra dimensions after X, Y, Z and M."""
        if stride <= 4:
            raise ValueError(f"custom layouts need a stride above 4, got {stride}")
        return cls(stride, 2, 3)


NO_LAYOUT = Layout(0, name="NoLayout")
XY = Layout(2, name="XY")
XYZ = Layout(3, z_index=2, name="XYZ")
XYM = Layout(3, m_index=2, name="XYM")
XYZM = Layout(4, z_index=2, m_index=3, name="XYZM")


class _Geometry:
    def __init__(self, layout: Layout, flat_coords=()):
        flat_coords = [float(v) for v in flat_coords]
        if not layout.stride and flat_coords:
            raise ValueError("a geometry without a layout holds no coordinates")
        if layout.stride and len(flat_coords) % layout.stride:
            raise ValueError(
                f"{len(flat_coords)} values do not divide into points of {layout.stride}")
        self.layout = layout
        self.flat_coords = flat_coords

    @property
    def stride(self) -> int:
        return self.layout.stride

    def _point_coords(self, start: int, end: int) -> list[list[float]]:
        stride = self.stride
        if not stride:
            return []
        return [self.flat_coords[i:i + stride] for i in range(start, end, stride)]

    def _shapely_coords(self, start: int, end: int) -> list[tuple[float, ...]]:
        z = self.layout.z_index
        return [tuple(c[:2]) + ((c[z],) if z != -1 else ())
                for c in self._point_coords(start, end)]

    def __eq__(self, other):
        return (type(other) is type(self)
                and other.layout == self.layout
                and other.flat_coords == self.flat_coords
                and getattr(other, "ends", None) == getattr(self, "ends", None))

    def __repr__(self):
        return f"{type(self).__name__}({self.layout!r}, {self.flat_coords!r})"


class Point(_Geometry):
    def __init__(self, layout: Layout, flat_coords=None):
        if flat_coords is None:
            flat_coords = [0.0] * layout.stride
        super().__init__(layout, flat_coords)
        if len(self.flat_coords) != layout.stride:
            raise ValueError(f"a {layout!r} point needs {layout.stride} values")

    @property
    def x(self) -> float:
        return self.flat_coords[0]

    @property
    def y(self) -> float:
        return self.flat_coords[1]

    def coords(self) -> list[float]:
        return list(self.flat_coords)

    def to_shapely(self):
        """Shapely point with X, Y and, if the layout has one, Z. M is dropped."""
        return shapely_geometry.Point(self._shapely_coords(0, len(self.flat_coords))[0])


class LineString(_Geometry):
    @classmethod
    def from_coords(cls, layout: Layout, coords) -> LineString:
        return cls(layout, [v for coord in coords for v in coord])

    @property
    def num_points(self) -> int:
        return len(self.flat_coords) // self.stride if self.stride else 0

    def coords(self) -> list[list[float]]:
        return self._point_coords(0, len(self.flat_coords))

    def to_shapely(self):
        return shapely_geometry.LineString(self._shapely_coords(0, len(self.flat_coords)))


class MultiLineString(_Geometry):
    """Several line strings sharing one flat list; ``ends[i]`` is the index
    in ``flat_coords`` just past line ``i``."""

    def __init__(self, layout: Layout, flat_coords=(), ends=()):
        super().__init__(layout, flat_coords)
        self.ends = list(ends)
        if self.ends and self.ends[-1] != len(self.flat_coords):
            raise ValueError("the last end must match the number of coordinates")

    @classmethod
    def from_coords(cls, layout: Layout, lines) -> MultiLineString:
        flat_coords, ends = [], []
        for line in lines:
            flat_coords.extend(v for coord in line for v in coord)
            ends.append(len(flat_coords))
        return cls(layout, flat_coords, ends)

    @property
    def num_line_strings(self) -> int:
        return len(self.ends)

    def line_string(self, i: int) -> LineString:
        start = self.ends[i - 1] if i else 0
        return LineString(self.layout, self.flat_coords[start:self.ends[i]])

    def line_strings(self) -> list[LineString]:
        return [self.line_string(i) for i in range(self.num_line_strings)]

    def coords(self) -> list[list[list[float]]]:
        return [line.coords() for line in self.line_strings()]

    def to_shapely(self):
        return shapely_geometry.MultiLineString(
            [line._shapely_coords(0, len(line.flat_coords)) for line in self.line_strings()])


def from_shapely(geom):
    """Convert a shapely Point, LineString or MultiLineString (XY or XYZ)."""
    layout = XYZ if geom.has_z else XY
    if geom.geom_type == "Point":
        return Point(layout, geom.coords[0] if not geom.is_empty else None)
    if geom.geom_type == "LineString":
        return LineString.from_coords(layout, geom.coords)
    if geom.geom_type == "MultiLineString":
        return MultiLineString.from_coords(layout, [g.coords for g in geom.geoms])
    raise TypeError(f"unsupported geometry type {geom.geom_type}")


# --- GPX records -> geometry -----------------------------------------------

def _append_coords(flat_coords: list[float], w: Waypoint, layout: Layout) -> list[float]:
    if layout.stride < 2:
        return flat_coords
    coord = [0.0] * layout.stride
    coord[0], coord[1] = w.lon, w.lat
    if layout.z_index != -1:
        coord[layout.z_index] = w.ele
    if layout.m_index != -1:
        coord[layout.m_index] = time_to_measure(w.time)
    flat_coords.extend(coord)
    return flat_coords


def waypoint_geom(w: Waypoint, layout: Layout) -> Point:
    return Point(layout, _append_coords([], w, layout))


def _waypoints_flat(points: list[Waypoint], layout: Layout) -> list[float]:
    flat_coords: list[float] = []
    for point in points:
        _append_coords(flat_coords, point, layout)
    return flat_coords


def route_geom(route: Route, layout: Layout) -> LineString:
    return LineString(layout, _waypoints_flat(route.rtept, layout))


def track_segment_geom(segment: TrackSegment, layout: Layout) -> LineString:
    return LineString(layout, _waypoints_flat(segment.trkpt, layout))


def track_geom(track: Track, layout: Layout) -> MultiLineString:
    flat_coords: list[float] = []
    ends = []
    for segment in track.trkseg:
        flat_coords.extend(_waypoints_flat(segment.trkpt, layout))
        ends.append(len(flat_coords))
    return MultiLineString(layout, flat_coords, ends)


# --- geometry -> GPX records -------------------------------------------------

def _waypoint(coord: list[float], layout: Layout) -> Waypoint:
    if layout.stride < 2:
        return Waypoint()
    w = Waypoint(lon=coord[0], lat=coord[1])
    if layout.z_index != -1:
        w.ele = coord[layout.z_index]
    if layout.m_index != -1:
        w.time = measure_to_time(coord[layout.m_index])
    return w


def waypoint_from_geom(point: Point) -> Waypoint:
    return _waypoint(point.coords(), point.layout)


def waypoints_from_geom(line: LineString) -> list[Waypoint]:
    """One waypoint per point of ``line``, in order."""
    return [_waypoint(coord, line.layout) for coord in line.coords()]


def route_from_geom(line: LineString) -> Route:
    return Route(rtept=waypoints_from_geom(line))


def track_segment_from_geom(line: LineString) -> TrackSegment:
    return TrackSegment(trkpt=waypoints_from_geom(line))


def track_from_geom(multi_line: MultiLineString) -> Track:
    """One track segment per component line, in order."""
    return Track(trkseg=[track_segment_from_geom(line)
                         for line in multi_line.line_strings()])
