"""GPX encoding and decoding.

Each record type has an explicit encoder that writes its children in the
order the GPX schema requires, skipping zero values, and a decoder that
accepts children in any order and ignores elements it does not know.
"""

from __future__ import annotations

from decimal import Decimal
from io import BytesIO

from .config import ReadOptions
from .errors import GPXParseError, GPXSyntaxError
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
from .timefmt import format_time, parse_time, parse_year
from .xmlio import Element, Encoder, parse

XMLNS_XSI = "http://www.w3.org/2001/XMLSchema-instance"
GPX_NAMESPACE_BASE = "http://www.topografix.com/GPX/"

_SYNTHESIZED_ROOT_ATTRS = ("version", "creator", "xmlns:xsi", "xmlns", "xsi:schemaLocation")


def namespace(version: str) -> str:
    """GPX namespace URI for ``version``, e.g. ``.../GPX/1/1`` for "1.1"."""
    return GPX_NAMESPACE_BASE + version.replace(".", "/")


def default_schema_locations(version: str) -> list[str]:
    ns = namespace(version)
    return [ns, ns + "/gpx.xsd"]


def format_float(value: float) -> str:
    """Shortest decimal that reads back as ``value``, never in exponent form."""
    text = repr(float(value))
    if "e" in text:
        return format(Decimal(text), "f")
    if text.endswith(".0"):
        return text[:-2]
    return text


# --- Encoding -------------------------------------------------------------

def _emit_float(e: Encoder, name: str, value: float):
    if value == 0.0:
        return
    e.element(name, format_float(value))


def _emit_int(e: Encoder, name: str, value: int):
    if value == 0:
        return
    e.element(name, str(value))


def _emit_str(e: Encoder, name: str, value: str):
    if value == "":
        return
    e.element(name, value)


def _emit_time(e: Encoder, name: str, value):
    if value is None:
        return
    e.element(name, format_time(value))


def _emit_links(e: Encoder, links: list[Link]):
    for link in links:
        _encode_link(e, link)


def _encode_extensions(e: Encoder, extensions: Extensions | None, tag="extensions"):
    if extensions is None:
        return
    e.start(tag)
    e.raw(extensions.xml)
    e.end()


def _encode_link(e: Encoder, link: Link, tag="link"):
    e.start(tag, [("href", link.href)])
    _emit_str(e, "text", link.text)
    _emit_str(e, "type", link.type)
    e.end()


def _encode_person(e: Encoder, person: Person, tag="author"):
    e.start(tag)
    _emit_str(e, "name", person.name)
    _emit_str(e, "email", person.email)
    if person.link is not None:
        _encode_link(e, person.link)
    e.end()


def _encode_copyright(e: Encoder, copyright: Copyright, tag="copyright"):
    e.start(tag, [("author", copyright.author)])
    _emit_int(e, "year", copyright.year)
    _emit_str(e, "license", copyright.license)
    e.end()


def _encode_bounds(e: Encoder, bounds: Bounds, tag="bounds"):
    e.start(tag, [
        ("minlat", format_float(bounds.minlat)),
        ("minlon", format_float(bounds.minlon)),
        ("maxlat", format_float(bounds.maxlat)),
        ("maxlon", format_float(bounds.maxlon)),
    ])
    e.end()


def _encode_metadata(e: Encoder, metadata: Metadata, tag="metadata"):
    e.start(tag)
    _emit_str(e, "name", metadata.name)
    _emit_str(e, "desc", metadata.desc)
    if metadata.author is not None:
        _encode_person(e, metadata.author)
    if metadata.copyright is not None:
        _encode_copyright(e, metadata.copyright)
    _emit_links(e, metadata.link)
    _emit_time(e, "time", metadata.time)
    _emit_str(e, "keywords", metadata.keywords)
    if metadata.bounds is not None:
        _encode_bounds(e, metadata.bounds)
    _encode_extensions(e, metadata.extensions)
    e.end()


def _encode_waypoint(e: Encoder, w: Waypoint, tag="wpt", attrs=()):
    e.start(tag, [*attrs, ("lat", format_float(w.lat)), ("lon", format_float(w.lon))])
    _emit_float(e, "ele", w.ele)
    _emit_float(e, "speed", w.speed)
    _emit_float(e, "course", w.course)
    _emit_time(e, "time", w.time)
    _emit_float(e, "magvar", w.magvar)
    _emit_float(e, "geoidheight", w.geoid_height)
    _emit_str(e, "name", w.name)
    _emit_str(e, "cmt", w.cmt)
    _emit_str(e, "desc", w.desc)
    _emit_str(e, "src", w.src)
    _emit_links(e, w.link)
    _emit_str(e, "sym", w.sym)
    _emit_str(e, "type", w.type)
    _emit_str(e, "fix", w.fix)
    _emit_int(e, "sat", w.sat)
    _emit_float(e, "hdop", w.hdop)
    _emit_float(e, "vdop", w.vdop)
    _emit_float(e, "pdop", w.pdop)
    _emit_float(e, "ageofdgpsdata", w.age_of_dgps_data)
    # station 0 is a real station
    for station in w.dgpsid:
        e.element("dgpsid", str(station))
    _encode_extensions(e, w.extensions)
    e.end()


def _encode_route(e: Encoder, route: Route, tag="rte"):
    e.start(tag)
    _emit_str(e, "name", route.name)
    _emit_str(e, "cmt", route.cmt)
    _emit_str(e, "desc", route.desc)
    _emit_str(e, "src", route.src)
    _emit_links(e, route.link)
    _emit_int(e, "number", route.number)
    _emit_str(e, "type", route.type)
    _encode_extensions(e, route.extensions)
    for point in route.rtept:
        _encode_waypoint(e, point, "rtept")
    e.end()


def _encode_track_segment(e: Encoder, segment: TrackSegment, tag="trkseg"):
    e.start(tag)
    for point in segment.trkpt:
        _encode_waypoint(e, point, "trkpt")
    _encode_extensions(e, segment.extensions)
    e.end()


def _encode_track(e: Encoder, track: Track, tag="trk"):
    e.start(tag)
    _emit_str(e, "name", track.name)
    _emit_str(e, "cmt", track.cmt)
    _emit_str(e, "desc", track.desc)
    _emit_str(e, "src", track.src)
    _emit_links(e, track.link)
    _emit_int(e, "number", track.number)
    _emit_str(e, "type", track.type)
    _encode_extensions(e, track.extensions)
    for segment in track.trkseg:
        _encode_track_segment(e, segment)
    e.end()


def _encode_gpx(e: Encoder, g: GPX, tag="gpx"):
    locations = default_schema_locations(g.version) + list(g.schema_locations)
    attrs = [
        ("version", g.version),
        ("creator", g.creator),
        ("xmlns:xsi", XMLNS_XSI),
        ("xmlns", namespace(g.version)),
        ("xsi:schemaLocation", " ".join(locations)),
    ]
    attrs.extend((name, value) for name, value in g.attrs.items()
                 if name not in _SYNTHESIZED_ROOT_ATTRS)
    e.start(tag, attrs)
    if g.metadata is not None:
        _encode_metadata(e, g.metadata)
    for waypoint in g.wpt:
        _encode_waypoint(e, waypoint, "wpt")
    for route in g.rte:
        _encode_route(e, route)
    for track in g.trk:
        _encode_track(e, track)
    _encode_extensions(e, g.extensions)
    e.end()


_ENCODERS = {
    GPX: _encode_gpx,
    Metadata: _encode_metadata,
    Waypoint: _encode_waypoint,
    Route: _encode_route,
    Track: _encode_track,
    TrackSegment: _encode_track_segment,
    Link: _encode_link,
    Person: _encode_person,
    Copyright: _encode_copyright,
    Bounds: _encode_bounds,
    Extensions: _encode_extensions,
}


# --- Decoding -------------------------------------------------------------

def _number(element: Element, convert, text: str | None = None):
    if text is None:
        text = element.text
    value = text.strip()
    if not value:
        return convert(0)
    try:
        return convert(value)
    except ValueError:
        raise GPXParseError(f"<{element.name}>: invalid number {text!r}", text=text) from None


def _float(element: Element) -> float:
    return _number(element, float)


def _int(element: Element) -> int:
    return _number(element, int)


def _required_float_attr(element: Element, name: str) -> float:
    try:
        text = element.attrs[name]
    except KeyError:
        raise GPXParseError(f"<{element.name}>: missing required attribute {name!r}") from None
    return _number(element, float, text)


_WAYPOINT_FLOATS = {
    "ele": "ele",
    "speed": "speed",
    "course": "course",
    "magvar": "magvar",
    "geoidheight": "geoid_height",
    "hdop": "hdop",
    "vdop": "vdop",
    "pdop": "pdop",
    "ageofdgpsdata": "age_of_dgps_data",
}
_WAYPOINT_STRINGS = ("name", "cmt", "desc", "src", "sym", "type", "fix")
_ROUTE_STRINGS = ("name", "cmt", "desc", "src", "type")


class _Decoder:
    def __init__(self, options: ReadOptions):
        self.options = options

    def time(self, element: Element):
        text = element.text.strip()
        if not text:
            return None
        return parse_time(text, self.options.time_layouts)

    def extensions(self, element: Element) -> Extensions:
        return Extensions(xml=element.inner_xml())

    def link(self, element: Element) -> Link:
        if "href" not in element.attrs:
            raise GPXParseError(f"<{element.name}>: missing required attribute 'href'")
        link = Link(href=element.attrs["href"])
        for child in element.children:
            if child.local == "text":
                link.text = child.text
            elif child.local == "type":
                link.type = child.text
        return link

    def person(self, element: Element) -> Person:
        person = Person()
        for child in element.children:
            tag = child.local
            if tag == "name":
                person.name = child.text
            elif tag == "email":
                person.email = child.text
            elif tag == "link":
                person.link = self.link(child)
        return person

    def copyright(self, element: Element) -> Copyright:
        copyright = Copyright(author=element.attrs.get("author", ""))
        for child in element.children:
            if child.local == "year":
                copyright.year = parse_year(child.text)
            elif child.local == "license":
                copyright.license = child.text
        return copyright

    def bounds(self, element: Element) -> Bounds:
        return Bounds(
            minlat=_required_float_attr(element, "minlat"),
            minlon=_required_float_attr(element, "minlon"),
            maxlat=_required_float_attr(element, "maxlat"),
            maxlon=_required_float_attr(element, "maxlon"),
        )

    def metadata(self, element: Element) -> Metadata:
        metadata = Metadata()
        for child in element.children:
            tag = child.local
            if tag in ("name", "desc", "keywords"):
                setattr(metadata, tag, child.text)
            elif tag == "author":
                metadata.author = self.person(child)
            elif tag == "copyright":
                metadata.copyright = self.copyright(child)
            elif tag == "link":
                metadata.link.append(self.link(child))
            elif tag == "time":
                metadata.time = self.time(child)
            elif tag == "bounds":
                metadata.bounds = self.bounds(child)
            elif tag == "extensions":
                metadata.extensions = self.extensions(child)
        return metadata

    def waypoint(self, element: Element) -> Waypoint:
        w = Waypoint(
            lat=_required_float_attr(element, "lat"),
            lon=_required_float_attr(element, "lon"),
        )
        for child in element.children:
            tag = child.local
            if tag in _WAYPOINT_FLOATS:
                setattr(w, _WAYPOINT_FLOATS[tag], _float(child))
            elif tag in _WAYPOINT_STRINGS:
                setattr(w, tag, child.text)
            elif tag == "time":
                w.time = self.time(child)
            elif tag == "link":
                w.link.append(self.link(child))
            elif tag == "sat":
                w.sat = _int(child)
            elif tag == "dgpsid":
                w.dgpsid.append(_int(child))
            elif tag == "extensions":
                w.extensions = self.extensions(child)
        return w

    def _describe(self, record, child: Element) -> bool:
        """Decode a child shared by routes and tracks. False if not one."""
        tag = child.local
        if tag in _ROUTE_STRINGS:
            setattr(record, tag, child.text)
        elif tag == "link":
            record.link.append(self.link(child))
        elif tag == "number":
            record.number = _int(child)
        elif tag == "extensions":
            record.extensions = self.extensions(child)
        else:
            return False
        return True

    def route(self, element: Element) -> Route:
        route = Route()
        for child in element.children:
            if self._describe(route, child):
                continue
            if child.local == "rtept":
                route.rtept.append(self.waypoint(child))
        return route

    def track_segment(self, element: Element) -> TrackSegment:
        segment = TrackSegment()
        for child in element.children:
            if child.local == "trkpt":
                segment.trkpt.append(self.waypoint(child))
            elif child.local == "extensions":
                segment.extensions = self.extensions(child)
        return segment

    def track(self, element: Element) -> Track:
        track = Track()
        for child in element.children:
            if self._describe(track, child):
                continue
            if child.local == "trkseg":
                track.trkseg.append(self.track_segment(child))
        return track

    def gpx(self, element: Element) -> GPX:
        if element.local != "gpx":
            raise GPXSyntaxError(f"expected element <gpx>, found <{element.name}>")
        g = GPX(
            version=element.attrs.get("version", ""),
            creator=element.attrs.get("creator", ""),
        )
        defaults = default_schema_locations(g.version)
        for name, value in element.attrs.items():
            if name.rpartition(":")[2] == "schemaLocation":
                g.schema_locations = [token for token in value.split()
                                      if token not in defaults]
            elif name not in _SYNTHESIZED_ROOT_ATTRS:
                g.attrs[name] = value
        for child in element.children:
            tag = child.local
            if tag == "metadata":
                g.metadata = self.metadata(child)
            elif tag == "wpt":
                g.wpt.append(self.waypoint(child))
            elif tag == "rte":
                g.rte.append(self.route(child))
            elif tag == "trk":
                g.trk.append(self.track(child))
            elif tag == "extensions":
                g.extensions = self.extensions(child)
        return g


_DECODERS = {
    GPX: _Decoder.gpx,
    Metadata: _Decoder.metadata,
    Waypoint: _Decoder.waypoint,
    Route: _Decoder.route,
    Track: _Decoder.track,
    TrackSegment: _Decoder.track_segment,
    Link: _Decoder.link,
    Person: _Decoder.person,
    Copyright: _Decoder.copyright,
    Bounds: _Decoder.bounds,
    Extensions: _Decoder.extensions,
}


# --- Entry points ---------------------------------------------------------

def _read_bytes(source) -> tuple[bytes, str | None]:
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, str):
        return source.encode("utf-8"), "utf-8"
    return bytes(source), None


def read(source, options: ReadOptions | None = None) -> GPX:
    """Decode a GPX document from bytes, text, or a file-like object.

    Raises :class:`GPXSyntaxError` for malformed XML or an unknown encoding
    and :class:`GPXParseError` for values that cannot be decoded.
    """
    return unmarshal(source, GPX, options)


def write(gpx: GPX, stream, header: bool = False):
    """Write ``gpx`` to the binary ``stream`` without any indentation."""
    write_indent(gpx, stream, "", "", header=header)


def write_indent(gpx: GPX, stream, prefix: str, indent: str, header: bool = False):
    """Write ``gpx`` to ``stream``, one element per line, each line starting
    with ``prefix`` followed by one ``indent`` per nesting level."""
    e = Encoder(stream, prefix, indent)
    if header:
        e.declaration()
    _encode_gpx(e, gpx)
    e.flush()


def marshal(record, tag: str | None = None, prefix: str = "", indent: str = "",
            attrs=()) -> bytes:
    """Encode any document record as a standalone XML fragment.

    ``tag`` overrides the element name, e.g. ``"rtept"`` for a waypoint.
    ``attrs`` are (name, value) pairs a waypoint's start tag carries ahead
    of ``lat`` and ``lon``.
    """
    try:
        encode = _ENCODERS[type(record)]
    except KeyError:
        raise TypeError(f"cannot encode {type(record).__name__} as GPX") from None
    kwargs = {}
    if tag is not None:
        kwargs["tag"] = tag
    if attrs:
        if not isinstance(record, Waypoint):
            raise TypeError(f"{type(record).__name__} takes no extra start-tag attributes")
        kwargs["attrs"] = list(attrs)
    buffer = BytesIO()
    e = Encoder(buffer, prefix, indent)
    encode(e, record, **kwargs)
    e.flush()
    return buffer.getvalue()


def unmarshal(source, cls, options: ReadOptions | None = None):
    """Decode an XML fragment whose root element is a ``cls`` record."""
    try:
        decode = _DECODERS[cls]
    except KeyError:
        raise TypeError(f"cannot decode GPX into {cls.__name__}") from None
    data, encoding = _read_bytes(source)
    options = options or ReadOptions()
    root = parse(data, encoding or options.encoding)
    return decode(_Decoder(options), root)
