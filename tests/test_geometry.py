"""Tests for mapping waypoints, routes and tracks to flat-coordinate geometry."""

from datetime import datetime, timezone

import pytest
from shapely import geometry as shapely_geometry

from gpxcodec.geometry import (
    NO_LAYOUT,
    XY,
    XYM,
    XYZ,
    XYZM,
    Layout,
    LineString,
    MultiLineString,
    Point,
    from_shapely,
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
from gpxcodec.models import Route, Track, TrackSegment, Waypoint


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


WPT = Waypoint(lat=42.438878, lon=-71.119277, ele=44.586548,
               time=_utc(2001, 11, 28, 21, 5, 28), name="5066")


class TestWaypointGeom:

    @pytest.mark.parametrize("layout, coords", [
        (XY, [-71.119277, 42.438878]),
        (XYZ, [-71.119277, 42.438878, 44.586548]),
        (XYM, [-71.119277, 42.438878, 1006981528.0]),
        (XYZM, [-71.119277, 42.438878, 44.586548, 1006981528.0]),
    ])
    def test_layouts(self, layout, coords):
        p = waypoint_geom(WPT, layout)
        assert p.layout == layout
        assert p.coords() == coords

    def test_custom_layout_pads_with_zeros(self):
        p = waypoint_geom(WPT, Layout.custom(6))
        assert p.coords() == [-71.119277, 42.438878, 44.586548, 1006981528.0, 0.0, 0.0]

    def test_unnamed_layouts_match_named_ones(self):
        assert Layout(3, z_index=2) == XYZ
        assert Layout(4, z_index=2, m_index=3) == XYZM

    @pytest.mark.parametrize("layout, coords, back", [
        (Layout(3, z_index=2),
         [-71.119277, 42.438878, 44.586548],
         Waypoint(lat=WPT.lat, lon=WPT.lon, ele=WPT.ele)),
        (Layout(3, m_index=2),
         [-71.119277, 42.438878, 1006981528.0],
         Waypoint(lat=WPT.lat, lon=WPT.lon, time=WPT.time)),
        (Layout(4, z_index=3, m_index=2),
         [-71.119277, 42.438878, 1006981528.0, 44.586548],
         Waypoint(lat=WPT.lat, lon=WPT.lon, ele=WPT.ele, time=WPT.time)),
    ])
    def test_unnamed_layouts(self, layout, coords, back):
        p = waypoint_geom(WPT, layout)
        assert p.coords() == coords
        assert waypoint_from_geom(p) == back

    def test_no_layout(self):
        p = waypoint_geom(WPT, NO_LAYOUT)
        assert p.coords() == []
        assert waypoint_from_geom(p) == Waypoint()

    def test_missing_time_is_zero_measure(self):
        p = waypoint_geom(Waypoint(lat=1, lon=2), XYM)
        assert p.coords() == [2.0, 1.0, 0.0]

    def test_round_trip_keeps_position_elevation_and_time(self):
        w = waypoint_from_geom(waypoint_geom(WPT, XYZM))
        assert w == Waypoint(lat=WPT.lat, lon=WPT.lon, ele=WPT.ele, time=WPT.time)

    def test_fractional_seconds_survive(self):
        t = _utc(2006, 1, 2, 15, 4, 5, 500000)
        p = waypoint_geom(Waypoint(lat=1, lon=2, time=t), XYM)
        assert p.coords()[2] == 1136214245.5
        assert waypoint_from_geom(p).time == t

    def test_xy_drops_elevation_and_time(self):
        w = waypoint_from_geom(waypoint_geom(WPT, XY))
        assert w == Waypoint(lat=WPT.lat, lon=WPT.lon)

    def test_zero_measure_means_no_time(self):
        w = waypoint_from_geom(Point(XYM, [2, 1, 0]))
        assert w.time is None

    def test_custom_layout_extra_dimensions_ignored(self):
        w = waypoint_from_geom(Point(Layout.custom(5), [2, 1, 3, 946684800, 99]))
        assert w == Waypoint(lat=1, lon=2, ele=3, time=_utc(2000, 1, 1))


class TestRouteGeom:

    ROUTE = Route(name="BELLEVUE", rtept=[
        Waypoint(lat=42.43095, lon=-71.107628, ele=23.4696, time=_utc(2001, 6, 2, 0, 18, 15)),
        Waypoint(lat=42.43124, lon=-71.109236, ele=26.56189, time=_utc(2001, 11, 7, 23, 53, 41)),
    ])

    def test_route_geom(self):
        g = route_geom(self.ROUTE, XYZM)
        assert g == LineString.from_coords(XYZM, [
            [-71.107628, 42.43095, 23.4696, 991441095],
            [-71.109236, 42.43124, 26.56189, 1005177221],
        ])
        assert g.num_points == 2

    def test_route_from_geom(self):
        route = route_from_geom(route_geom(self.ROUTE, XYZM))
        assert route == Route(rtept=[
            Waypoint(lat=p.lat, lon=p.lon, ele=p.ele, time=p.time) for p in self.ROUTE.rtept
        ])

    def test_empty_route(self):
        g = route_geom(Route(), XYZ)
        assert g.num_points == 0
        assert route_from_geom(g) == Route()

    def test_waypoints_keep_order(self):
        line = LineString.from_coords(XY, [[1, 2], [3, 4], [5, 6]])
        assert [w.lon for w in waypoints_from_geom(line)] == [1, 3, 5]


class TestTrackGeom:

    TRACK = Track(name="run", trkseg=[
        TrackSegment(trkpt=[
            Waypoint(lat=47.644548, lon=-122.326897, ele=4.46, time=_utc(2009, 10, 17, 18, 37, 26)),
            Waypoint(lat=47.644548, lon=-122.326897, ele=4.94, time=_utc(2009, 10, 17, 18, 37, 31)),
            Waypoint(lat=47.644548, lon=-122.326897, ele=6.87, time=_utc(2009, 10, 17, 18, 37, 34)),
        ]),
    ])

    def test_track_geom(self):
        g = track_geom(self.TRACK, XYZM)
        assert g == MultiLineString.from_coords(XYZM, [[
            [-122.326897, 47.644548, 4.46, 1255804646],
            [-122.326897, 47.644548, 4.94, 1255804651],
            [-122.326897, 47.644548, 6.87, 1255804654],
        ]])
        assert g.ends == [12]

    def test_segments_of_three_one_and_two_points(self):
        track = Track(trkseg=[
            TrackSegment(trkpt=[Waypoint(lat=1, lon=1), Waypoint(lat=2, lon=2), Waypoint(lat=3, lon=3)]),
            TrackSegment(trkpt=[Waypoint(lat=4, lon=4)]),
            TrackSegment(trkpt=[Waypoint(lat=5, lon=5), Waypoint(lat=6, lon=6)]),
        ])
        g = track_geom(track, XY)
        assert g.ends == [6, 8, 12]
        assert track_from_geom(g) == track

    def test_empty_segment_kept(self):
        track = Track(trkseg=[TrackSegment(), TrackSegment(trkpt=[Waypoint(lat=1, lon=2)])])
        g = track_geom(track, XY)
        assert g.ends == [0, 2]
        assert track_from_geom(g) == track

    def test_track_from_geom_drops_descriptions(self):
        track = track_from_geom(track_geom(self.TRACK, XYZM))
        assert track.name == ""
        assert [p.ele for p in track.trkseg[0].trkpt] == [4.46, 4.94, 6.87]

    def test_track_segment(self):
        segment = self.TRACK.trkseg[0]
        line = track_segment_geom(segment, XYZM)
        assert line.num_points == 3
        assert track_segment_from_geom(line) == segment


class TestGeometryValidation:

    def test_custom_layout_needs_extra_dimensions(self):
        with pytest.raises(ValueError):
            Layout.custom(4)

    def test_coords_must_fill_whole_points(self):
        with pytest.raises(ValueError):
            LineString(XYZ, [1, 2, 3, 4])

    def test_no_layout_holds_nothing(self):
        with pytest.raises(ValueError):
            LineString(NO_LAYOUT, [1, 2])

    def test_point_needs_exactly_one_coordinate(self):
        with pytest.raises(ValueError):
            Point(XY, [1, 2, 3, 4])

    def test_ends_must_match_coords(self):
        with pytest.raises(ValueError):
            MultiLineString(XY, [1, 2, 3, 4], [2])

    def test_line_string_access(self):
        g = MultiLineString.from_coords(XY, [[[1, 2]], [[3, 4], [5, 6]]])
        assert g.num_line_strings == 2
        assert g.line_string(1).coords() == [[3, 4], [5, 6]]


class TestShapely:

    def test_point(self):
        p = waypoint_geom(WPT, XYZM).to_shapely()
        assert isinstance(p, shapely_geometry.Point)
        assert p.coords[0] == (-71.119277, 42.438878, 44.586548)

    def test_line_string_xy(self):
        line = LineString.from_coords(XYM, [[1, 2, 100], [3, 4, 200]]).to_shapely()
        assert not line.has_z
        assert list(line.coords) == [(1, 2), (3, 4)]

    def test_multi_line_string(self):
        g = MultiLineString.from_coords(XYZ, [[[1, 2, 3], [4, 5, 6]], [[7, 8, 9], [10, 11, 12]]])
        s = g.to_shapely()
        assert len(s.geoms) == 2
        assert from_shapely(s) == g

    def test_from_shapely_line_string(self):
        g = from_shapely(shapely_geometry.LineString([(19.0, 47.5), (19.1, 47.6)]))
        assert g.layout == XY
        assert waypoints_from_geom(g) == [Waypoint(lat=47.5, lon=19.0), Waypoint(lat=47.6, lon=19.1)]

    def test_from_shapely_unsupported(self):
        with pytest.raises(TypeError):
            from_shapely(shapely_geometry.Polygon([(0, 0), (1, 0), (1, 1)]))
