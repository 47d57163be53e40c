"""Exceptions raised while reading or writing GPX documents."""

from __future__ import annotations


class GPXError(Exception):
    """Base class for every error raised by gpxcodec."""


class GPXSyntaxError(GPXError):
    """The input is not well-formed XML, is not a GPX document, or its
    character encoding cannot be resolved.

    The underlying expat or codec exception is available as ``__cause__``.
    """

    def __init__(self, message: str, line: int | None = None,
                 column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


class GPXParseError(GPXError, ValueError):
    """The XML is well-formed but a value in it cannot be decoded, e.g. a
    timestamp that matches none of the configured layouts."""

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message)
        self.text = text
