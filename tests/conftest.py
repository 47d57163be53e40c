"""Shared fixtures for gpxcodec tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from gpxcodec.models import (
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

DATA_DIR = Path(__file__).resolve().parent / "data"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def data_dir():
    return DATA_DIR


@pytest.fixture(scope="session")
def fells_loop_bytes(data_dir):
    return (data_dir / "fells_loop.gpx").read_bytes()


@pytest.fixture
def full_gpx():
    """A GPX 1.1 document that sets every field at least once."""
    return GPX(
        version="1.1",
        creator="gpxcodec tests",
        attrs={"xmlns:gpxtpx": "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"},
        schema_locations=[
            "http://www.garmin.com/xmlschemas/TrackPointExtension/v1",
            "http://www.garmin.com/xmlschemas/TrackPointExtensionv1.xsd",
        ],
        metadata=Metadata(
            name="Fells Loop",
            desc="Middlesex Fells reservation",
            author=Person(
                name="Jane Doe",
                email="jane@example.com",
                link=Link(href="http://example.com/jane", text="Jane", type="text/html"),
            ),
            copyright=Copyright(author="Jane Doe", year=2019, license="CC-BY-4.0"),
            link=[Link(href="http://example.com/fells")],
            time=utc(2002, 2, 27, 17, 18, 33),
            keywords="hiking, loop",
            bounds=Bounds(minlat=42.401051, minlon=-71.126602, maxlat=42.468655, maxlon=-71.102973),
            extensions=Extensions(xml=b"<x:source>survey</x:source>"),
        ),
        wpt=[
            Waypoint(
                lat=42.438878,
                lon=-71.119277,
                ele=44.586548,
                speed=1.25,
                course=270.5,
                time=utc(2001, 11, 28, 21, 5, 28),
                magvar=14.5,
                geoid_height=-28.3,
                name="5066",
                cmt="Crossing <A> & B",
                desc="5066",
                src="GPS",
                link=[Link(href="http://example.com/5066", text="5066")],
                sym="Crossing",
                type="Crossing",
                fix="3d",
                sat=7,
                hdop=1.1,
                vdop=2.2,
                pdop=3.3,
                age_of_dgps_data=4.5,
                dgpsid=[0, 12],
                extensions=Extensions(xml=b'<x:note lang="en">first</x:note>'),
            ),
            Waypoint(lat=42.439227, lon=-71.119689, name="5067"),
        ],
        rte=[
            Route(
                name="BELLEVUE",
                desc="Bike Loop Bellevue",
                number=1,
                type="bike",
                rtept=[
                    Waypoint(lat=42.43095, lon=-71.107628, ele=23.4696,
                             time=utc(2001, 6, 2, 0, 18, 15)),
                    Waypoint(lat=42.43124, lon=-71.109236, ele=26.56189,
                             time=utc(2001, 11, 7, 23, 53, 41)),
                ],
            ),
        ],
        trk=[
            Track(
                name="Morning run",
                number=3,
                trkseg=[
                    TrackSegment(trkpt=[
                        Waypoint(lat=47.644548, lon=-122.326897, ele=4.46,
                                 time=utc(2009, 10, 17, 18, 37, 26)),
                        Waypoint(lat=47.644549, lon=-122.326898, ele=4.94,
                                 time=utc(2009, 10, 17, 18, 37, 31, 500000)),
                    ]),
                    TrackSegment(
                        trkpt=[Waypoint(lat=47.64455, lon=-122.326896, ele=6.87,
                                        time=utc(2009, 10, 17, 18, 37, 34))],
                        extensions=Extensions(xml=b"<gpxtpx:TrackPointExtension>"
                                                  b"<gpxtpx:hr>140</gpxtpx:hr>"
                                                  b"</gpxtpx:TrackPointExtension>"),
                    ),
                ],
            ),
        ],
        extensions=Extensions(xml=b"\n  <x:app version=\"2\"/>\n"),
    )
