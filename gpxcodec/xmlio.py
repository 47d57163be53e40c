"""Low-level XML reading and writing.

Reading goes through expat after a charset pre-pass that transcodes the
input to UTF-8, so every encoding Python has a codec for is accepted.
Each parsed element remembers where its content sits in the UTF-8 buffer,
which lets callers take the inner XML of an element byte for byte.

Writing is a small streaming encoder. With an indent configured, start
tags go on their own line, and end tags too unless the element only
holds text (``<ele>1.5</ele>`` stays on one line).
"""

from __future__ import annotations

import codecs
import re
from xml.parsers import expat
from xml.sax.saxutils import escape

from .errors import GPXSyntaxError

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

_DECLARED_ENCODING = re.compile(
    rb"""^\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z][\w.:-]*)["']""")

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
# characters XML 1.0 cannot carry, even as character references
_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _escape(text: str, entities: dict[str, str]) -> str:
    return escape(_INVALID_CHARS.sub("\ufffd", text), entities)


def sniff_encoding(data: bytes) -> str:
    """Guess the encoding label of an XML document from its first bytes."""
    for bom, label in _BOMS:
        if data.startswith(bom):
            return label
    if data.startswith(b"\x00<\x00?"):
        return "utf-16-be"
    if data.startswith(b"<\x00?\x00"):
        return "utf-16-le"
    m = _DECLARED_ENCODING.match(data[:1024])
    if m:
        return m.group(1).decode("ascii")
    return "utf-8"


def to_utf8(data: bytes, encoding: str | None = None) -> bytes:
    """Transcode an XML document to UTF-8 without a byte order mark."""
    label = encoding or sniff_encoding(data)
    try:
        codec = codecs.lookup(label)
    except LookupError as e:
        raise GPXSyntaxError(f"unsupported character encoding {label!r}") from e
    try:
        text = data.decode(codec.name)
    except UnicodeDecodeError as e:
        raise GPXSyntaxError(
            f"input is not valid {label} at byte {e.start}") from e
    return text.lstrip("\ufeff").encode("utf-8")


class Element:
    """A parsed element: qualified name, attributes in document order,
    child elements, and its own character data."""

    def __init__(self, name: str, attrs: dict[str, str], source: bytes):
        self.name = name
        self.attrs = attrs
        self.children: list[Element] = []
        self._text: list[str] = []
        self._source = source
        self._inner_start = 0
        self._inner_end = 0

    def __repr__(self):
        return f"<Element {self.name} attrs={self.attrs!r} children={len(self.children)}>"

    @property
    def local(self) -> str:
        return self.name.rpartition(":")[2]

    @property
    def text(self) -> str:
        return "".join(self._text)

    def inner_xml(self) -> bytes:
        """Everything between the start and end tag, exactly as read."""
        return self._source[self._inner_start:self._inner_end]


class _TreeBuilder:
    def __init__(self, source: bytes, parser):
        self._source = source
        self._parser = parser
        self._stack: list[Element] = []
        self.root: Element | None = None

    def start(self, name, attrs):
        element = Element(name, dict(zip(attrs[::2], attrs[1::2])), self._source)
        element._inner_start = self._end_of_start_tag(self._parser.CurrentByteIndex)
        if self._stack:
            self._stack[-1].children.append(element)
        else:
            self.root = element
        self._stack.append(element)

    def end(self, name):
        element = self._stack.pop()
        # an empty-element tag reports its end at its own start
        element._inner_end = max(element._inner_start, self._parser.CurrentByteIndex)

    def data(self, text):
        if self._stack:
            self._stack[-1]._text.append(text)

    def _end_of_start_tag(self, pos: int) -> int:
        quote = None
        source = self._source
        for i in range(pos, len(source)):
            c = source[i]
            if quote is not None:
                if c == quote:
                    quote = None
            elif c in (0x22, 0x27):
                quote = c
            elif c == 0x3E:
                return i + 1
        return len(source)


def parse(data: bytes, encoding: str | None = None) -> Element:
    """Parse a complete XML document and return its root element."""
    source = to_utf8(data, encoding)
    parser = expat.ParserCreate("utf-8")
    parser.ordered_attributes = True
    builder = _TreeBuilder(source, parser)
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    try:
        parser.Parse(source, True)
    except expat.ExpatError as e:
        raise GPXSyntaxError(
            f"malformed XML: {expat.ErrorString(e.code)}: line {e.lineno}, column {e.offset}",
            line=e.lineno, column=e.offset) from e
    return builder.root


class Encoder:
    """Streaming XML writer.

    ``prefix`` starts every indented line and ``indent`` is repeated once
    per nesting level. With both empty no whitespace is added at all.
    Output is buffered until :meth:`flush`.
    """

    def __init__(self, stream, prefix: str = "", indent: str = ""):
        self._stream = stream
        self._prefix = prefix
        self._indent = indent
        self._buffer: list[bytes] = []
        self._open: list[str] = []
        self._depth = 0
        self._indented_in = False
        self._put_newline = False

    def _write(self, text: str):
        self._buffer.append(text.encode("utf-8"))

    def _write_indent(self, depth_delta: int):
        if not self._prefix and not self._indent:
            return
        if depth_delta < 0:
            self._depth -= 1
            if self._indented_in:
                # closing an element that only held text
                self._indented_in = False
                return
        self._indented_in = False
        if self._put_newline:
            self._write("\n")
        else:
            self._put_newline = True
        self._write(self._prefix + self._indent * self._depth)
        if depth_delta > 0:
            self._depth += 1
            self._indented_in = True

    def start(self, name: str, attrs=()):
        """Open ``name``. ``attrs`` is a sequence of (name, value) pairs."""
        self._write_indent(1)
        parts = [f"<{name}"]
        for key, value in attrs:
            parts.append(f' {key}="{_escape(value, _ATTR_ENTITIES)}"')
        parts.append(">")
        self._write("".join(parts))
        self._open.append(name)

    def end(self):
        name = self._open.pop()
        self._write_indent(-1)
        self._write(f"</{name}>")

    def text(self, text: str):
        self._write(_escape(text, _TEXT_ENTITIES))

    def element(self, name: str, text: str, attrs=()):
        self.start(name, attrs)
        self.text(text)
        self.end()

    def raw(self, data: bytes):
        """Write ``data`` unescaped, e.g. an extensions payload."""
        self._buffer.append(bytes(data))

    def declaration(self):
        self._write(XML_HEADER)

    def flush(self):
        if self._open:
            raise RuntimeError(f"unclosed element <{self._open[-1]}>")
        self._stream.write(b"".join(self._buffer))
        self._buffer.clear()
