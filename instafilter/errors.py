"""Exception types raised by instafilter.

Each error refines the builtin exception it corresponds to, so callers that
already catch ``ValueError`` or ``IndexError`` keep working.
"""

from __future__ import annotations


class FilterError(Exception):
    """Base class for all instafilter errors."""


class InvalidDimensions(FilterError, ValueError):
    """Buffer data length does not match width * height * 4."""


class IndexOutOfRange(FilterError, IndexError):
    """Pixel accessor called outside the buffer bounds."""


class DimensionMismatch(FilterError, ValueError):
    """Two buffers that must be the same size are not."""


class InvalidBlendMode(FilterError, ValueError):
    """Unrecognized blend-mode name."""
